# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""In-memory arena store.

Suitable for development, tests and single-process deployments. Everything
is lost on restart. Expiring records (finish votes, invitations) are checked
lazily against ``clock`` when read.
"""

from __future__ import annotations

import threading
import time
from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager

from ..core.models import (
    Claim,
    Debate,
    DebateStatus,
    FinishVote,
    Invitation,
    LeaderboardEntry,
    Message,
    Stats,
    User,
)
from .backend import ArenaStore


class MemoryArenaStore(ArenaStore):
    """Dict-backed store guarded by a re-entrant lock."""

    backend_name = "memory"

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._mutex = threading.RLock()
        self._named_locks: dict[str, threading.RLock] = {}

        self._users: dict[str, User] = {}
        self._inactive: set[str] = set()
        self._claims: dict[str, list[Claim]] = {}
        self._inbox: dict[str, list[str]] = defaultdict(list)
        self._invitations: dict[str, tuple[Invitation, float]] = {}
        self._pending: dict[str, list[str]] = defaultdict(list)
        self._debates: dict[str, Debate] = {}
        self._memberships: dict[str, list[str]] = defaultdict(list)
        self._history: dict[str, list[Message]] = defaultdict(list)
        self._summaries: dict[str, str] = {}
        self._votes: dict[tuple[str, str], tuple[FinishVote, float]] = {}
        self._stats: dict[str, Stats] = {}
        self._leaderboard: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Coordination
    # ------------------------------------------------------------------

    def lock(self, name: str) -> AbstractContextManager[None]:
        with self._mutex:
            named = self._named_locks.get(name)
            if named is None:
                named = threading.RLock()
                self._named_locks[name] = named
        return named  # type: ignore[return-value]

    def ping(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        with self._mutex:
            user = self._users.get(user_id)
            return User(**vars(user)) if user is not None else None

    def put_user(self, user: User) -> None:
        with self._mutex:
            self._users[user.id] = user

    def user_exists(self, user_id: str) -> bool:
        with self._mutex:
            return user_id in self._users

    def mark_inactive(self, user_id: str, inactive: bool) -> None:
        with self._mutex:
            if inactive:
                self._inactive.add(user_id)
            else:
                self._inactive.discard(user_id)

    def inactive_users(self) -> list[str]:
        with self._mutex:
            return sorted(self._inactive)

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    def append_claim(self, claim: Claim) -> None:
        with self._mutex:
            self._claims.setdefault(claim.owner_id, []).append(claim)

    def list_claims(self, owner_id: str) -> list[Claim]:
        with self._mutex:
            return list(self._claims.get(owner_id, []))

    def remove_claim(self, owner_id: str, claim_id: str) -> bool:
        with self._mutex:
            log = self._claims.get(owner_id, [])
            for index, claim in enumerate(log):
                if claim.id == claim_id:
                    del log[index]
                    if not log:
                        del self._claims[owner_id]
                    return True
            return False

    def claim_owners(self) -> Iterator[str]:
        with self._mutex:
            owners = list(self._claims)
        yield from owners

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    def push_inbox(self, user_id: str, text: str) -> None:
        with self._mutex:
            self._inbox[user_id].append(text)

    def drain_inbox(self, user_id: str) -> list[str]:
        with self._mutex:
            return self._inbox.pop(user_id, [])

    # ------------------------------------------------------------------
    # Invitations
    # ------------------------------------------------------------------

    def save_invitation(self, invitation: Invitation, ttl_seconds: int) -> None:
        with self._mutex:
            self._invitations[invitation.id] = (invitation, self._clock() + ttl_seconds)
            self._pending[invitation.to_user].append(invitation.id)

    def get_invitation(self, invitation_id: str) -> Invitation | None:
        with self._mutex:
            entry = self._invitations.get(invitation_id)
            if entry is None:
                return None
            invitation, deadline = entry
            if self._clock() >= deadline:
                del self._invitations[invitation_id]
                return None
            return invitation

    def pending_invitation_ids(self, user_id: str) -> list[str]:
        with self._mutex:
            return list(self._pending.get(user_id, []))

    def discard_invitation(self, invitation_id: str, recipient: str) -> None:
        with self._mutex:
            self._invitations.pop(invitation_id, None)
            pending = self._pending.get(recipient, [])
            self._pending[recipient] = [i for i in pending if i != invitation_id]

    # ------------------------------------------------------------------
    # Debates
    # ------------------------------------------------------------------

    def open_debate(self, debate: Debate, invitation: Invitation) -> None:
        with self._mutex:
            self._debates[debate.id] = debate
            self._memberships[debate.user_a].append(debate.id)
            self._memberships[debate.user_b].append(debate.id)
            self.discard_invitation(invitation.id, invitation.to_user)

    def get_debate(self, debate_id: str) -> Debate | None:
        with self._mutex:
            debate = self._debates.get(debate_id)
            if debate is None:
                return None
            # Callers mutate what they get back; hand out a copy
            return Debate(**vars(debate))

    def debate_ids(self, user_id: str) -> list[str]:
        with self._mutex:
            return list(self._memberships.get(user_id, []))

    def append_message(self, debate_id: str, message: Message, next_turn: str) -> None:
        with self._mutex:
            self._history[debate_id].append(message)
            debate = self._debates.get(debate_id)
            if debate is not None:
                debate.turn = next_turn

    def history(self, debate_id: str) -> list[Message]:
        with self._mutex:
            return list(self._history.get(debate_id, []))

    def last_message(self, debate_id: str) -> Message | None:
        with self._mutex:
            log = self._history.get(debate_id)
            return log[-1] if log else None

    def end_debate(
        self,
        debate_id: str,
        ended_at: int,
        winner: str | None,
        participants: tuple[str, str],
    ) -> None:
        with self._mutex:
            debate = self._debates.get(debate_id)
            if debate is not None:
                debate.status = DebateStatus.ENDED
                debate.ended_at = ended_at
                if winner:
                    debate.winner = winner
            for user_id in participants:
                self._votes.pop((debate_id, user_id), None)

    def get_summary(self, debate_id: str) -> str | None:
        with self._mutex:
            return self._summaries.get(debate_id)

    def set_summary(self, debate_id: str, summary: str) -> None:
        with self._mutex:
            self._summaries[debate_id] = summary

    # ------------------------------------------------------------------
    # Finish votes
    # ------------------------------------------------------------------

    def set_vote(self, debate_id: str, user_id: str, vote: FinishVote, ttl_seconds: int) -> None:
        with self._mutex:
            self._votes[(debate_id, user_id)] = (vote, self._clock() + ttl_seconds)

    def get_vote(self, debate_id: str, user_id: str) -> FinishVote | None:
        with self._mutex:
            entry = self._votes.get((debate_id, user_id))
            if entry is None:
                return None
            vote, deadline = entry
            if self._clock() >= deadline:
                del self._votes[(debate_id, user_id)]
                return None
            return vote

    # ------------------------------------------------------------------
    # Stats and leaderboard
    # ------------------------------------------------------------------

    def get_stats(self, user_id: str) -> Stats:
        with self._mutex:
            stats = self._stats.get(user_id)
            if stats is None:
                return Stats(user_id=user_id)
            return Stats(user_id=user_id, wins=stats.wins, losses=stats.losses)

    def has_stats(self, user_id: str) -> bool:
        with self._mutex:
            return user_id in self._stats

    def increment_stats(self, winner: str, loser: str) -> tuple[Stats, Stats]:
        with self._mutex:
            self._stats.setdefault(winner, Stats(user_id=winner)).wins += 1
            self._stats.setdefault(loser, Stats(user_id=loser)).losses += 1
            return self.get_stats(winner), self.get_stats(loser)

    def set_scores(self, scores: dict[str, int]) -> None:
        with self._mutex:
            self._leaderboard.update(scores)

    def get_score(self, user_id: str) -> int | None:
        with self._mutex:
            return self._leaderboard.get(user_id)

    def top_scores(self, limit: int) -> list[LeaderboardEntry]:
        with self._mutex:
            # Same order as Redis ZREVRANGE: score desc, then member desc
            ranked = sorted(self._leaderboard.items(), key=lambda item: (item[1], item[0]), reverse=True)
            return [LeaderboardEntry(user=user, score=score) for user, score in ranked[:limit]]

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def purge_user(self, user_id: str) -> None:
        with self._mutex:
            self._users.pop(user_id, None)
            self._inactive.discard(user_id)
            self._claims.pop(user_id, None)
            self._memberships.pop(user_id, None)
            self._stats.pop(user_id, None)
            self._leaderboard.pop(user_id, None)
            self._inbox.pop(user_id, None)
            for invitation_id in self._pending.pop(user_id, []):
                self._invitations.pop(invitation_id, None)
            sent = [
                invitation
                for invitation, _ in self._invitations.values()
                if invitation.from_user == user_id
            ]
            for invitation in sent:
                self._invitations.pop(invitation.id, None)
                if invitation.id in self._pending.get(invitation.to_user, []):
                    self._pending[invitation.to_user].remove(invitation.id)

    def wipe(self) -> int:
        with self._mutex:
            collections = (
                self._users,
                self._claims,
                self._inbox,
                self._invitations,
                self._pending,
                self._debates,
                self._memberships,
                self._history,
                self._summaries,
                self._votes,
                self._stats,
            )
            removed = sum(len(c) for c in collections)
            removed += (1 if self._inactive else 0) + (1 if self._leaderboard else 0)
            for c in collections:
                c.clear()
            self._inactive.clear()
            self._leaderboard.clear()
            self._named_locks.clear()
            return removed
