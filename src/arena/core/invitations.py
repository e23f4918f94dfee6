# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Invitation state machine.

    pending --accept--> (Debate created, invitation removed)
    pending --reject--> (invitation removed)
    pending --TTL-----> (invitation expired, behaves as removed)

An invitation is visible only to its recipient. Accepting or rejecting a
resolved, expired or unknown invitation raises NotFoundError, so neither
can succeed twice.
"""

from __future__ import annotations

import logging

from ..storage import get_store
from . import notifications
from .config import get_config
from .exceptions import NotFoundError, ValidationException
from .models import Debate, DebateStatus, Invitation, new_id, now_ms
from .users import ensure_not_banned
from .validation import require_text

logger = logging.getLogger(__name__)


def create_invitation(from_user: str, to_user: str, topic: str) -> Invitation:
    """Invite ``to_user`` to debate ``topic``.

    Raises:
        MissingFieldError: any of the three fields is empty.
        ValidationException: a user tried to invite themselves.
        ForbiddenError: either party is banned.
    """
    from_user = require_text(from_user, "fromUser")
    to_user = require_text(to_user, "toUser")
    topic = require_text(topic, "topic")
    if from_user == to_user:
        raise ValidationException("Cannot invite yourself to a debate", field="toUser", value=to_user)
    ensure_not_banned(from_user, to_user)

    ttl = get_config().invitation_ttl_seconds
    created = now_ms()
    invitation = Invitation(
        id=new_id(),
        from_user=from_user,
        to_user=to_user,
        topic=topic,
        created_at=created,
        expires_at=created + ttl * 1000,
    )
    get_store().save_invitation(invitation, ttl)
    notifications.notify(to_user, notifications.invitation_received(from_user, topic, invitation.id))
    logger.info("Invitation %s: %s -> %s on %r", invitation.id, from_user, to_user, topic)
    return invitation


def get_invitation(invitation_id: str) -> Invitation:
    invitation = get_store().get_invitation(invitation_id)
    if invitation is None:
        raise NotFoundError("Invitation", invitation_id)
    return invitation


def list_invitations(user_id: str) -> list[Invitation]:
    """Pending invitations addressed to ``user_id``, oldest first.

    Ids whose record has expired are dropped from the pending list.
    """
    store = get_store()
    out: list[Invitation] = []
    for invitation_id in store.pending_invitation_ids(user_id):
        invitation = store.get_invitation(invitation_id)
        if invitation is None:
            store.discard_invitation(invitation_id, user_id)
            logger.debug("Pruned stale invitation %s for %s", invitation_id, user_id)
            continue
        out.append(invitation)
    return out


def accept_invitation(invitation_id: str) -> Debate:
    """Turn a pending invitation into an active debate.

    The inviter becomes ``user_a`` and holds the first turn. The debate
    record, both membership entries and the invitation removal are written
    in one commit.

    Raises:
        NotFoundError: the invitation is unknown, resolved or expired.
        ForbiddenError: either party is banned. The invitation stays pending.
    """
    store = get_store()
    with store.lock(f"invitation:{invitation_id}"):
        invitation = store.get_invitation(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", invitation_id)
        ensure_not_banned(invitation.from_user, invitation.to_user)
        debate = Debate(
            id=new_id(),
            user_a=invitation.from_user,
            user_b=invitation.to_user,
            topic=invitation.topic,
            status=DebateStatus.ACTIVE,
            turn=invitation.from_user,
            created_at=now_ms(),
        )
        store.open_debate(debate, invitation)

    notifications.notify(
        invitation.from_user,
        notifications.invitation_accepted(invitation.to_user, invitation.topic, debate.id),
    )
    logger.info(
        "Invitation %s accepted, debate %s started",
        invitation_id,
        debate.id,
        extra={"invitation_id": invitation_id, "debate_id": debate.id},
    )
    return debate


def reject_invitation(invitation_id: str) -> Invitation:
    """Decline a pending invitation. No debate is created."""
    store = get_store()
    with store.lock(f"invitation:{invitation_id}"):
        invitation = store.get_invitation(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", invitation_id)
        store.discard_invitation(invitation_id, invitation.to_user)

    notifications.notify(
        invitation.from_user,
        notifications.invitation_rejected(invitation.to_user, invitation.topic),
    )
    logger.info("Invitation %s rejected", invitation_id)
    return invitation
