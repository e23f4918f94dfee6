# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Data models for the debate arena.

The models are plain dataclasses. Each one knows how to render itself for
the REST API (``to_dict``, camelCase keys) and how to round-trip through the
flat string mappings a key-value store holds (``to_record`` / ``from_record``).
Timestamps are epoch milliseconds.
"""

from __future__ import annotations

import json
import time
import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

DEFAULT_BIO = "No information provided."


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    """Opaque unique identifier for claims, invitations and debates."""
    return str(uuid.uuid4())


class UserStatus(StrEnum):
    """Lifecycle status of a user account."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    BANNED = "banned"


class DebateStatus(StrEnum):
    """Status of a debate."""

    ACTIVE = "active"
    ENDED = "ended"


class FinishVote(StrEnum):
    """A participant's vote in finish negotiation."""

    WANT = "want"
    NO = "no"


@dataclass
class User:
    """A registered user. The id doubles as the display name."""

    id: str
    bio: str = DEFAULT_BIO
    status: UserStatus = UserStatus.INACTIVE
    created_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.id,
            "name": self.id,
            "bio": self.bio,
            "status": self.status.value,
            "createdAt": self.created_at,
        }

    def to_record(self) -> dict[str, str]:
        return {
            "name": self.id,
            "bio": self.bio,
            "status": self.status.value,
            "createdAt": str(self.created_at),
        }

    @classmethod
    def from_record(cls, user_id: str, record: dict[str, str]) -> User:
        return cls(
            id=user_id,
            bio=record.get("bio", DEFAULT_BIO),
            status=UserStatus(record.get("status", UserStatus.INACTIVE.value)),
            created_at=int(record.get("createdAt", 0)),
        )


@dataclass
class Claim:
    """A short statement in one user's append-only claim log."""

    id: str
    owner_id: str
    text: str
    created_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "text": self.text,
            "createdAt": self.created_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> Claim:
        data = json.loads(raw)
        return cls(
            id=data["id"],
            owner_id=data.get("ownerId", ""),
            text=data.get("text", ""),
            created_at=int(data.get("createdAt", 0)),
        )


@dataclass
class Invitation:
    """A pending request from one user to another to debate a topic."""

    id: str
    from_user: str
    to_user: str
    topic: str
    created_at: int
    expires_at: int | None = None

    def is_expired(self, at_ms: int | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (at_ms if at_ms is not None else now_ms()) >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "invitationId": self.id,
            "fromUser": self.from_user,
            "toUser": self.to_user,
            "topic": self.topic,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
        }

    def to_record(self) -> dict[str, str]:
        record = {
            "fromUser": self.from_user,
            "toUser": self.to_user,
            "topic": self.topic,
            "createdAt": str(self.created_at),
        }
        if self.expires_at is not None:
            record["expiresAt"] = str(self.expires_at)
        return record

    @classmethod
    def from_record(cls, invitation_id: str, record: dict[str, str]) -> Invitation:
        expires = record.get("expiresAt")
        return cls(
            id=invitation_id,
            from_user=record["fromUser"],
            to_user=record["toUser"],
            topic=record.get("topic", ""),
            created_at=int(record.get("createdAt", 0)),
            expires_at=int(expires) if expires else None,
        )


@dataclass
class Message:
    """One immutable entry in a debate's message log."""

    sender: str
    text: str
    ts: int

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.sender, "text": self.text, "ts": self.ts}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> Message:
        data = json.loads(raw)
        return cls(sender=data["from"], text=data.get("text", ""), ts=int(data.get("ts", 0)))


@dataclass
class Debate:
    """A turn-based exchange between exactly two users.

    ``user_a`` is the inviter and ``user_b`` the recipient of the invitation
    the debate was created from.
    """

    id: str
    user_a: str
    user_b: str
    topic: str
    status: DebateStatus = DebateStatus.ACTIVE
    turn: str = ""
    winner: str | None = None
    created_at: int = 0
    ended_at: int | None = None

    @property
    def participants(self) -> tuple[str, str]:
        return (self.user_a, self.user_b)

    @property
    def is_active(self) -> bool:
        return self.status == DebateStatus.ACTIVE

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def other(self, user_id: str) -> str:
        """The participant who is not ``user_id``."""
        return self.user_b if user_id == self.user_a else self.user_a

    def to_dict(self) -> dict[str, Any]:
        return {
            "debateId": self.id,
            "userA": self.user_a,
            "userB": self.user_b,
            "topic": self.topic,
            "status": self.status.value,
            "turn": self.turn,
            "winner": self.winner,
            "createdAt": self.created_at,
            "endedAt": self.ended_at,
        }

    def to_record(self) -> dict[str, str]:
        record = {
            "userA": self.user_a,
            "userB": self.user_b,
            "topic": self.topic,
            "status": self.status.value,
            "turn": self.turn,
            "createdAt": str(self.created_at),
        }
        if self.winner:
            record["winner"] = self.winner
        if self.ended_at is not None:
            record["endedAt"] = str(self.ended_at)
        return record

    @classmethod
    def from_record(cls, debate_id: str, record: dict[str, str]) -> Debate:
        ended_at = record.get("endedAt")
        return cls(
            id=debate_id,
            user_a=record["userA"],
            user_b=record["userB"],
            topic=record.get("topic", ""),
            status=DebateStatus(record.get("status", DebateStatus.ACTIVE.value)),
            turn=record.get("turn") or record["userA"],
            winner=record.get("winner") or None,
            created_at=int(record.get("createdAt", 0)),
            ended_at=int(ended_at) if ended_at else None,
        )


@dataclass
class Stats:
    """Win/loss counters for one user."""

    user_id: str
    wins: int = 0
    losses: int = 0

    @property
    def score(self) -> int:
        return self.wins - self.losses

    def to_dict(self) -> dict[str, Any]:
        return {"wins": self.wins, "losses": self.losses}


@dataclass
class LeaderboardEntry:
    user: str
    score: int

    def to_dict(self) -> dict[str, Any]:
        return {"user": self.user, "score": self.score}


@dataclass
class Opponent:
    """A contradiction candidate flattened for client consumption."""

    opponent: str
    claim_id: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"opponent": self.opponent, "claimId": self.claim_id, "text": self.text}


@dataclass
class FinishResult:
    """Outcome of one finish call.

    Either the debate ended (``ended`` True, ``winner`` possibly None) or the
    caller's vote is recorded and the other participant must confirm.
    """

    ended: bool
    winner: str | None = None

    @property
    def awaiting_confirmation(self) -> bool:
        return not self.ended

    def to_dict(self) -> dict[str, Any]:
        if self.ended:
            return {"ended": True, "winner": self.winner}
        return {"awaitingConfirmation": True}
