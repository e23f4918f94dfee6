"""Tests for arena.core.models."""

from __future__ import annotations

from arena.core.models import (
    DEFAULT_BIO,
    Claim,
    Debate,
    DebateStatus,
    FinishResult,
    Invitation,
    Message,
    Opponent,
    Stats,
    User,
    UserStatus,
)


class TestUser:
    def test_defaults(self):
        user = User(id="alice")
        assert user.bio == DEFAULT_BIO
        assert user.status == UserStatus.INACTIVE

    def test_to_dict_uses_id_as_name(self):
        data = User(id="alice", bio="hi", status=UserStatus.ACTIVE, created_at=5).to_dict()
        assert data == {"userId": "alice", "name": "alice", "bio": "hi", "status": "active", "createdAt": 5}

    def test_from_record_fills_missing_fields(self):
        user = User.from_record("bob", {"name": "bob"})
        assert user.bio == DEFAULT_BIO
        assert user.status == UserStatus.INACTIVE
        assert user.created_at == 0


class TestClaim:
    def test_json_keeps_id_and_owner(self):
        claim = Claim(id="c1", owner_id="alice", text="the sky is blue", created_at=10)
        restored = Claim.from_json(claim.to_json())
        assert restored == claim


class TestInvitation:
    def test_is_expired(self):
        invitation = Invitation(id="i1", from_user="a", to_user="b", topic="t", created_at=0, expires_at=1000)
        assert not invitation.is_expired(at_ms=999)
        assert invitation.is_expired(at_ms=1000)

    def test_never_expires_without_deadline(self):
        invitation = Invitation(id="i1", from_user="a", to_user="b", topic="t", created_at=0)
        assert not invitation.is_expired(at_ms=10**15)

    def test_record_omits_missing_expiry(self):
        invitation = Invitation(id="i1", from_user="a", to_user="b", topic="t", created_at=3)
        record = invitation.to_record()
        assert "expiresAt" not in record
        assert Invitation.from_record("i1", record).expires_at is None

    def test_to_dict(self):
        invitation = Invitation(id="i1", from_user="a", to_user="b", topic="t", created_at=3, expires_at=9)
        assert invitation.to_dict()["invitationId"] == "i1"
        assert invitation.to_dict()["fromUser"] == "a"


class TestDebate:
    def _debate(self) -> Debate:
        return Debate(id="d1", user_a="alice", user_b="bob", topic="tabs", turn="alice", created_at=1)

    def test_other(self):
        debate = self._debate()
        assert debate.other("alice") == "bob"
        assert debate.other("bob") == "alice"

    def test_participants(self):
        debate = self._debate()
        assert debate.is_participant("alice")
        assert not debate.is_participant("carol")

    def test_record_round_trip_of_ended_debate(self):
        debate = self._debate()
        debate.status = DebateStatus.ENDED
        debate.winner = "bob"
        debate.ended_at = 7
        restored = Debate.from_record("d1", debate.to_record())
        assert restored == debate

    def test_missing_turn_defaults_to_user_a(self):
        restored = Debate.from_record("d1", {"userA": "alice", "userB": "bob"})
        assert restored.turn == "alice"
        assert restored.is_active


class TestMessage:
    def test_to_dict_uses_from(self):
        assert Message(sender="alice", text="hi", ts=4).to_dict() == {"from": "alice", "text": "hi", "ts": 4}


class TestStats:
    def test_score_is_wins_minus_losses(self):
        assert Stats(user_id="alice", wins=3, losses=5).score == -2


class TestFinishResult:
    def test_ended_with_winner(self):
        assert FinishResult(ended=True, winner="alice").to_dict() == {"ended": True, "winner": "alice"}

    def test_ended_without_winner(self):
        assert FinishResult(ended=True).to_dict() == {"ended": True, "winner": None}

    def test_awaiting(self):
        result = FinishResult(ended=False)
        assert result.awaiting_confirmation
        assert result.to_dict() == {"awaitingConfirmation": True}


def test_opponent_to_dict():
    assert Opponent(opponent="bob", claim_id="c1", text="x").to_dict() == {
        "opponent": "bob",
        "claimId": "c1",
        "text": "x",
    }
