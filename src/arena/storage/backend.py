# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Store abstraction for arena state.

All arena state lives in a shared key-value store. Two backends implement
the interface:

- ``MemoryArenaStore``: in-process dicts, for tests and single-process runs
- ``RedisArenaStore``: redis-py, for deployments where several workers share state

Methods that write more than one record commit atomically (a single
MULTI/EXEC in Redis, one critical section in memory). Multi-step state
transitions that also need to *read* before they write are serialized with
``lock(name)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager

from ..core.models import (
    Claim,
    Debate,
    FinishVote,
    Invitation,
    LeaderboardEntry,
    Message,
    Stats,
    User,
)


class ArenaStore(ABC):
    """Abstract interface for arena persistence."""

    backend_name: str = "abstract"

    # ------------------------------------------------------------------
    # Coordination
    # ------------------------------------------------------------------

    @abstractmethod
    def lock(self, name: str) -> AbstractContextManager[None]:
        """Return a context manager holding an exclusive lock on ``name``."""
        ...

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the store is reachable."""
        ...

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @abstractmethod
    def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    def put_user(self, user: User) -> None: ...

    @abstractmethod
    def user_exists(self, user_id: str) -> bool: ...

    @abstractmethod
    def mark_inactive(self, user_id: str, inactive: bool) -> None:
        """Add or remove ``user_id`` from the awaiting-activation set."""
        ...

    @abstractmethod
    def inactive_users(self) -> list[str]: ...

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    @abstractmethod
    def append_claim(self, claim: Claim) -> None: ...

    @abstractmethod
    def list_claims(self, owner_id: str) -> list[Claim]: ...

    @abstractmethod
    def remove_claim(self, owner_id: str, claim_id: str) -> bool:
        """Remove one claim by id. Returns False if the owner has no such claim."""
        ...

    @abstractmethod
    def claim_owners(self) -> Iterator[str]:
        """Yield every user id that has a claim log."""
        ...

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    @abstractmethod
    def push_inbox(self, user_id: str, text: str) -> None: ...

    @abstractmethod
    def drain_inbox(self, user_id: str) -> list[str]:
        """Return and clear the user's inbox in one step."""
        ...

    # ------------------------------------------------------------------
    # Invitations
    # ------------------------------------------------------------------

    @abstractmethod
    def save_invitation(self, invitation: Invitation, ttl_seconds: int) -> None:
        """Store the invitation and append it to the recipient's pending list."""
        ...

    @abstractmethod
    def get_invitation(self, invitation_id: str) -> Invitation | None:
        """Return the invitation, or None if it is missing or expired."""
        ...

    @abstractmethod
    def pending_invitation_ids(self, user_id: str) -> list[str]: ...

    @abstractmethod
    def discard_invitation(self, invitation_id: str, recipient: str) -> None:
        """Delete the invitation record and drop it from the recipient's pending list."""
        ...

    # ------------------------------------------------------------------
    # Debates
    # ------------------------------------------------------------------

    @abstractmethod
    def open_debate(self, debate: Debate, invitation: Invitation) -> None:
        """Create ``debate`` from ``invitation`` in one commit.

        Writes the debate record, registers it under both participants and
        removes the invitation.
        """
        ...

    @abstractmethod
    def get_debate(self, debate_id: str) -> Debate | None: ...

    @abstractmethod
    def debate_ids(self, user_id: str) -> list[str]: ...

    @abstractmethod
    def append_message(self, debate_id: str, message: Message, next_turn: str) -> None:
        """Append to the message log and hand the turn over in one commit."""
        ...

    @abstractmethod
    def history(self, debate_id: str) -> list[Message]: ...

    @abstractmethod
    def last_message(self, debate_id: str) -> Message | None: ...

    @abstractmethod
    def end_debate(
        self,
        debate_id: str,
        ended_at: int,
        winner: str | None,
        participants: tuple[str, str],
    ) -> None:
        """Mark the debate ended and clear both participants' finish votes."""
        ...

    @abstractmethod
    def get_summary(self, debate_id: str) -> str | None: ...

    @abstractmethod
    def set_summary(self, debate_id: str, summary: str) -> None: ...

    # ------------------------------------------------------------------
    # Finish votes
    # ------------------------------------------------------------------

    @abstractmethod
    def set_vote(self, debate_id: str, user_id: str, vote: FinishVote, ttl_seconds: int) -> None: ...

    @abstractmethod
    def get_vote(self, debate_id: str, user_id: str) -> FinishVote | None:
        """Return the participant's unexpired vote, if any."""
        ...

    # ------------------------------------------------------------------
    # Stats and leaderboard
    # ------------------------------------------------------------------

    @abstractmethod
    def get_stats(self, user_id: str) -> Stats: ...

    @abstractmethod
    def has_stats(self, user_id: str) -> bool: ...

    @abstractmethod
    def increment_stats(self, winner: str, loser: str) -> tuple[Stats, Stats]:
        """Atomically add a win and a loss; return both users' new totals."""
        ...

    @abstractmethod
    def set_scores(self, scores: dict[str, int]) -> None:
        """Overwrite leaderboard scores."""
        ...

    @abstractmethod
    def get_score(self, user_id: str) -> int | None: ...

    @abstractmethod
    def top_scores(self, limit: int) -> list[LeaderboardEntry]:
        """Highest scores first."""
        ...

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    @abstractmethod
    def purge_user(self, user_id: str) -> None:
        """Delete the profile and everything keyed by the user.

        Covers claims, debate memberships, stats, leaderboard entry, inbox
        and every live invitation the user sent or received. Debate records
        themselves are kept.
        """
        ...

    @abstractmethod
    def wipe(self) -> int:
        """Delete all arena data. Returns the number of records removed."""
        ...
