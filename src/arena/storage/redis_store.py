# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Redis-backed arena store.

Key layout (``<p>`` is the configured prefix, ``arena`` by default)::

    <p>:user:<id>              hash    profile
    <p>:users:inactive         set     users awaiting activation
    <p>:claims:<id>            list    JSON claims, append-only
    <p>:inbox:<id>             list    notification strings
    <p>:invitation:<id>        hash    invitation (expires with the invitation TTL)
    <p>:invitations:<id>       list    pending invitation ids for a recipient
    <p>:debate:<id>            hash    debate record
    <p>:debates:<id>           list    debate ids a user takes part in
    <p>:history:<id>           list    JSON messages, append-only
    <p>:summary:<id>           string  debate summary
    <p>:finish:<id>:<user>     string  finish vote, with TTL
    <p>:stats:<id>             hash    wins / losses
    <p>:leaderboard            zset    score = wins - losses
    <p>:lock:<name>            string  redis-py Lock

Every redis-py error is re-raised as ``DependencyFailure``.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import redis

from ..core.exceptions import DependencyFailure
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

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _translate_errors(method: F) -> F:
    """Re-raise redis-py errors from ``method`` as DependencyFailure."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.RedisError as exc:
            logger.error("Redis %s failed: %s", method.__name__, exc)
            raise DependencyFailure(f"Store operation '{method.__name__}' failed: {exc}", backend="redis") from exc

    return wrapper  # type: ignore[return-value]


def _to_int(value: str | None) -> int:
    return int(value) if value else 0


class RedisArenaStore(ArenaStore):
    """Store backed by a shared Redis instance."""

    backend_name = "redis"

    def __init__(
        self,
        redis_url: str | None = None,
        *,
        prefix: str = "arena",
        lock_timeout: float = 5.0,
        client: redis.Redis | None = None,
    ) -> None:
        self._prefix = prefix
        self._lock_timeout = lock_timeout
        if client is not None:
            self._client = client
        else:
            url = redis_url or "redis://localhost:6379/0"
            self._client = redis.Redis.from_url(url, decode_responses=True)
            try:
                self._client.ping()
            except redis.ConnectionError:
                logger.warning("Redis connection failed at init, will retry on use")

    def _key(self, *parts: str) -> str:
        return ":".join((self._prefix, *parts))

    # ------------------------------------------------------------------
    # Coordination
    # ------------------------------------------------------------------

    @contextmanager
    def lock(self, name: str) -> Iterator[None]:
        try:
            held = self._client.lock(
                self._key("lock", name),
                timeout=self._lock_timeout,
                blocking_timeout=self._lock_timeout,
            )
            acquired = held.acquire()
        except redis.RedisError as exc:
            raise DependencyFailure(f"Could not lock {name}: {exc}", backend="redis") from exc
        if not acquired:
            raise DependencyFailure(f"Timed out waiting for lock on {name}", backend="redis")
        try:
            yield
        finally:
            try:
                held.release()
            except redis.exceptions.LockError:
                logger.warning("Lock %s expired before it was released", name)

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @_translate_errors
    def get_user(self, user_id: str) -> User | None:
        record = self._client.hgetall(self._key("user", user_id))
        if not record.get("name"):
            return None
        return User.from_record(user_id, record)

    @_translate_errors
    def put_user(self, user: User) -> None:
        self._client.hset(self._key("user", user.id), mapping=user.to_record())

    @_translate_errors
    def user_exists(self, user_id: str) -> bool:
        return bool(self._client.exists(self._key("user", user_id)))

    @_translate_errors
    def mark_inactive(self, user_id: str, inactive: bool) -> None:
        if inactive:
            self._client.sadd(self._key("users", "inactive"), user_id)
        else:
            self._client.srem(self._key("users", "inactive"), user_id)

    @_translate_errors
    def inactive_users(self) -> list[str]:
        return sorted(self._client.smembers(self._key("users", "inactive")))

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    @_translate_errors
    def append_claim(self, claim: Claim) -> None:
        self._client.rpush(self._key("claims", claim.owner_id), claim.to_json())

    @_translate_errors
    def list_claims(self, owner_id: str) -> list[Claim]:
        raw = self._client.lrange(self._key("claims", owner_id), 0, -1)
        return [Claim.from_json(item) for item in raw]

    @_translate_errors
    def remove_claim(self, owner_id: str, claim_id: str) -> bool:
        key = self._key("claims", owner_id)
        for item in self._client.lrange(key, 0, -1):
            if Claim.from_json(item).id == claim_id:
                self._client.lrem(key, 0, item)
                return True
        return False

    @_translate_errors
    def claim_owners(self) -> Iterator[str]:
        prefix = self._key("claims", "")
        owners: list[str] = []
        cursor = 0
        while True:
            cursor, keys = self._client.scan(cursor, match=f"{prefix}*", count=100)
            owners.extend(key[len(prefix) :] for key in keys)
            if cursor == 0:
                break
        return iter(owners)

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    @_translate_errors
    def push_inbox(self, user_id: str, text: str) -> None:
        self._client.rpush(self._key("inbox", user_id), text)

    @_translate_errors
    def drain_inbox(self, user_id: str) -> list[str]:
        key = self._key("inbox", user_id)
        pipe = self._client.pipeline(transaction=True)
        pipe.lrange(key, 0, -1)
        pipe.delete(key)
        messages, _ = pipe.execute()
        return list(messages)

    # ------------------------------------------------------------------
    # Invitations
    # ------------------------------------------------------------------

    @_translate_errors
    def save_invitation(self, invitation: Invitation, ttl_seconds: int) -> None:
        key = self._key("invitation", invitation.id)
        pipe = self._client.pipeline(transaction=True)
        pipe.hset(key, mapping=invitation.to_record())
        pipe.expire(key, ttl_seconds)
        pipe.rpush(self._key("invitations", invitation.to_user), invitation.id)
        pipe.execute()

    @_translate_errors
    def get_invitation(self, invitation_id: str) -> Invitation | None:
        record = self._client.hgetall(self._key("invitation", invitation_id))
        if not record.get("fromUser"):
            return None
        invitation = Invitation.from_record(invitation_id, record)
        if invitation.is_expired():
            return None
        return invitation

    @_translate_errors
    def pending_invitation_ids(self, user_id: str) -> list[str]:
        return list(self._client.lrange(self._key("invitations", user_id), 0, -1))

    @_translate_errors
    def discard_invitation(self, invitation_id: str, recipient: str) -> None:
        pipe = self._client.pipeline(transaction=True)
        pipe.delete(self._key("invitation", invitation_id))
        pipe.lrem(self._key("invitations", recipient), 0, invitation_id)
        pipe.execute()

    # ------------------------------------------------------------------
    # Debates
    # ------------------------------------------------------------------

    @_translate_errors
    def open_debate(self, debate: Debate, invitation: Invitation) -> None:
        pipe = self._client.pipeline(transaction=True)
        pipe.hset(self._key("debate", debate.id), mapping=debate.to_record())
        pipe.rpush(self._key("debates", debate.user_a), debate.id)
        pipe.rpush(self._key("debates", debate.user_b), debate.id)
        pipe.delete(self._key("invitation", invitation.id))
        pipe.lrem(self._key("invitations", invitation.to_user), 0, invitation.id)
        pipe.execute()

    @_translate_errors
    def get_debate(self, debate_id: str) -> Debate | None:
        record = self._client.hgetall(self._key("debate", debate_id))
        if not record.get("userA"):
            return None
        return Debate.from_record(debate_id, record)

    @_translate_errors
    def debate_ids(self, user_id: str) -> list[str]:
        return list(self._client.lrange(self._key("debates", user_id), 0, -1))

    @_translate_errors
    def append_message(self, debate_id: str, message: Message, next_turn: str) -> None:
        pipe = self._client.pipeline(transaction=True)
        pipe.rpush(self._key("history", debate_id), message.to_json())
        pipe.hset(self._key("debate", debate_id), "turn", next_turn)
        pipe.execute()

    @_translate_errors
    def history(self, debate_id: str) -> list[Message]:
        raw = self._client.lrange(self._key("history", debate_id), 0, -1)
        return [Message.from_json(item) for item in raw]

    @_translate_errors
    def last_message(self, debate_id: str) -> Message | None:
        raw = self._client.lrange(self._key("history", debate_id), -1, -1)
        return Message.from_json(raw[0]) if raw else None

    @_translate_errors
    def end_debate(
        self,
        debate_id: str,
        ended_at: int,
        winner: str | None,
        participants: tuple[str, str],
    ) -> None:
        fields = {"status": DebateStatus.ENDED.value, "endedAt": str(ended_at)}
        if winner:
            fields["winner"] = winner
        pipe = self._client.pipeline(transaction=True)
        pipe.hset(self._key("debate", debate_id), mapping=fields)
        pipe.delete(*(self._key("finish", debate_id, user_id) for user_id in participants))
        pipe.execute()

    @_translate_errors
    def get_summary(self, debate_id: str) -> str | None:
        return self._client.get(self._key("summary", debate_id))

    @_translate_errors
    def set_summary(self, debate_id: str, summary: str) -> None:
        self._client.set(self._key("summary", debate_id), summary)

    # ------------------------------------------------------------------
    # Finish votes
    # ------------------------------------------------------------------

    @_translate_errors
    def set_vote(self, debate_id: str, user_id: str, vote: FinishVote, ttl_seconds: int) -> None:
        self._client.setex(self._key("finish", debate_id, user_id), ttl_seconds, vote.value)

    @_translate_errors
    def get_vote(self, debate_id: str, user_id: str) -> FinishVote | None:
        raw = self._client.get(self._key("finish", debate_id, user_id))
        return FinishVote(raw) if raw else None

    # ------------------------------------------------------------------
    # Stats and leaderboard
    # ------------------------------------------------------------------

    @_translate_errors
    def get_stats(self, user_id: str) -> Stats:
        wins, losses = self._client.hmget(self._key("stats", user_id), ["wins", "losses"])
        return Stats(user_id=user_id, wins=_to_int(wins), losses=_to_int(losses))

    @_translate_errors
    def has_stats(self, user_id: str) -> bool:
        return bool(self._client.exists(self._key("stats", user_id)))

    @_translate_errors
    def increment_stats(self, winner: str, loser: str) -> tuple[Stats, Stats]:
        winner_key = self._key("stats", winner)
        loser_key = self._key("stats", loser)
        pipe = self._client.pipeline(transaction=True)
        pipe.hincrby(winner_key, "wins", 1)
        pipe.hincrby(loser_key, "losses", 1)
        pipe.hmget(winner_key, ["wins", "losses"])
        pipe.hmget(loser_key, ["wins", "losses"])
        _, _, winner_totals, loser_totals = pipe.execute()
        return (
            Stats(user_id=winner, wins=_to_int(winner_totals[0]), losses=_to_int(winner_totals[1])),
            Stats(user_id=loser, wins=_to_int(loser_totals[0]), losses=_to_int(loser_totals[1])),
        )

    @_translate_errors
    def set_scores(self, scores: dict[str, int]) -> None:
        if scores:
            self._client.zadd(self._key("leaderboard"), scores)

    @_translate_errors
    def get_score(self, user_id: str) -> int | None:
        score = self._client.zscore(self._key("leaderboard"), user_id)
        return None if score is None else int(score)

    @_translate_errors
    def top_scores(self, limit: int) -> list[LeaderboardEntry]:
        rows = self._client.zrevrange(self._key("leaderboard"), 0, limit - 1, withscores=True)
        return [LeaderboardEntry(user=member, score=int(score)) for member, score in rows]

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def _sent_invitations(self, user_id: str) -> list[tuple[str, str]]:
        """(invitation id, recipient) for every live invitation ``user_id`` sent."""
        prefix = self._key("invitation", "")
        sent: list[tuple[str, str]] = []
        cursor = 0
        while True:
            cursor, keys = self._client.scan(cursor, match=f"{prefix}*", count=100)
            for key in keys:
                from_user, to_user = self._client.hmget(key, ["fromUser", "toUser"])
                if from_user == user_id:
                    sent.append((key[len(prefix) :], to_user))
            if cursor == 0:
                break
        return sent

    @_translate_errors
    def purge_user(self, user_id: str) -> None:
        pending = self._client.lrange(self._key("invitations", user_id), 0, -1)
        sent = self._sent_invitations(user_id)
        pipe = self._client.pipeline(transaction=True)
        pipe.delete(
            self._key("user", user_id),
            self._key("claims", user_id),
            self._key("debates", user_id),
            self._key("stats", user_id),
            self._key("inbox", user_id),
            self._key("invitations", user_id),
            *(self._key("invitation", invitation_id) for invitation_id in pending),
        )
        for invitation_id, recipient in sent:
            pipe.delete(self._key("invitation", invitation_id))
            if recipient:
                pipe.lrem(self._key("invitations", recipient), 0, invitation_id)
        pipe.srem(self._key("users", "inactive"), user_id)
        pipe.zrem(self._key("leaderboard"), user_id)
        pipe.execute()

    @_translate_errors
    def wipe(self) -> int:
        removed = 0
        cursor = 0
        while True:
            cursor, keys = self._client.scan(cursor, match=self._key("*"), count=500)
            if keys:
                removed += self._client.delete(*keys)
            if cursor == 0:
                break
        return removed
