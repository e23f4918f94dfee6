"""Tests for the invitation state machine."""

from __future__ import annotations

import pytest

from arena.core.admin import ban_user
from arena.core.exceptions import ForbiddenError, MissingFieldError, NotFoundError, ValidationException
from arena.core.invitations import (
    accept_invitation,
    create_invitation,
    get_invitation,
    list_invitations,
    reject_invitation,
)
from arena.core.models import DebateStatus
from arena.core.notifications import drain_inbox
from arena.core.users import create_user


class TestCreate:
    def test_create_notifies_recipient(self, store):
        invitation = create_invitation("alice", "bob", "tabs vs spaces")

        assert invitation.from_user == "alice"
        assert invitation.to_user == "bob"
        assert invitation.expires_at == invitation.created_at + 7 * 24 * 3600 * 1000

        inbox = drain_inbox("bob")
        assert len(inbox) == 1
        assert invitation.id in inbox[0]
        assert "alice" in inbox[0]
        assert drain_inbox("alice") == []

    @pytest.mark.parametrize(
        ("from_user", "to_user", "topic", "field"),
        [
            ("", "bob", "t", "fromUser"),
            ("alice", None, "t", "toUser"),
            ("alice", "bob", "  ", "topic"),
        ],
    )
    def test_missing_fields(self, store, from_user, to_user, topic, field):
        with pytest.raises(MissingFieldError) as excinfo:
            create_invitation(from_user, to_user, topic)
        assert excinfo.value.field == field
        assert list_invitations("bob") == []

    def test_self_invitation(self, store):
        with pytest.raises(ValidationException):
            create_invitation("alice", "alice", "myself")

    def test_only_recipient_sees_it(self, store):
        invitation = create_invitation("alice", "bob", "t")
        assert [i.id for i in list_invitations("bob")] == [invitation.id]
        assert list_invitations("alice") == []


class TestAccept:
    def test_accept_starts_debate_with_inviter_turn(self, store):
        invitation = create_invitation("alice", "bob", "tabs vs spaces")
        debate = accept_invitation(invitation.id)

        assert debate.user_a == "alice"
        assert debate.user_b == "bob"
        assert debate.topic == "tabs vs spaces"
        assert debate.status == DebateStatus.ACTIVE
        assert debate.turn == "alice"
        assert store.get_debate(debate.id) == debate
        assert store.debate_ids("alice") == [debate.id]
        assert store.debate_ids("bob") == [debate.id]

    def test_accept_removes_invitation_and_notifies_inviter(self, store):
        invitation = create_invitation("alice", "bob", "t")
        debate = accept_invitation(invitation.id)

        with pytest.raises(NotFoundError):
            get_invitation(invitation.id)
        assert list_invitations("bob") == []
        assert any(debate.id in note for note in drain_inbox("alice"))

    def test_double_accept(self, store):
        invitation = create_invitation("alice", "bob", "t")
        accept_invitation(invitation.id)
        with pytest.raises(NotFoundError):
            accept_invitation(invitation.id)
        assert len(store.debate_ids("alice")) == 1

    def test_accept_unknown(self, store):
        with pytest.raises(NotFoundError):
            accept_invitation("nope")

    @pytest.mark.parametrize("banned", ["alice", "bob"])
    def test_accept_with_banned_party(self, store, banned):
        create_user(banned)
        invitation = create_invitation("alice", "bob", "t")
        ban_user(banned)

        with pytest.raises(ForbiddenError) as excinfo:
            accept_invitation(invitation.id)

        assert excinfo.value.reason == "banned"
        assert store.debate_ids("alice") == []
        assert store.debate_ids("bob") == []
        assert [i.id for i in list_invitations("bob")] == [invitation.id]


class TestReject:
    def test_reject(self, store):
        invitation = create_invitation("alice", "bob", "t")
        drain_inbox("alice")

        rejected = reject_invitation(invitation.id)

        assert rejected.id == invitation.id
        assert list_invitations("bob") == []
        assert store.debate_ids("alice") == []
        assert len(drain_inbox("alice")) == 1

    def test_double_reject(self, store):
        invitation = create_invitation("alice", "bob", "t")
        reject_invitation(invitation.id)
        with pytest.raises(NotFoundError):
            reject_invitation(invitation.id)

    def test_accept_after_reject(self, store):
        invitation = create_invitation("alice", "bob", "t")
        reject_invitation(invitation.id)
        with pytest.raises(NotFoundError):
            accept_invitation(invitation.id)


class TestExpiry:
    def test_expired_invitation_cannot_be_accepted(self, store, clock, monkeypatch):
        monkeypatch.setenv("ARENA_INVITATION_TTL_SECONDS", "60")
        invitation = create_invitation("alice", "bob", "t")

        clock.advance(61)

        with pytest.raises(NotFoundError):
            accept_invitation(invitation.id)
        with pytest.raises(NotFoundError):
            reject_invitation(invitation.id)

    def test_listing_prunes_expired(self, store, clock, monkeypatch):
        monkeypatch.setenv("ARENA_INVITATION_TTL_SECONDS", "60")
        stale = create_invitation("alice", "bob", "old")
        clock.advance(30)
        fresh = create_invitation("carol", "bob", "new")
        clock.advance(31)

        assert [i.id for i in list_invitations("bob")] == [fresh.id]
        assert store.pending_invitation_ids("bob") == [fresh.id]
        assert store.get_invitation(stale.id) is None

    def test_still_valid_before_deadline(self, store, clock, monkeypatch):
        monkeypatch.setenv("ARENA_INVITATION_TTL_SECONDS", "60")
        invitation = create_invitation("alice", "bob", "t")
        clock.advance(59)
        assert accept_invitation(invitation.id).user_b == "bob"
