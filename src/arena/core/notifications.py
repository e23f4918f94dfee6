"""Inbox notifications.

Notifications are fire-and-forget, human-readable strings appended to the
recipient's inbox. Clients poll and drain the inbox; there is no push
delivery.
"""

from __future__ import annotations

import logging

from ..storage import get_store

logger = logging.getLogger(__name__)


def notify(recipient: str, text: str) -> None:
    """Append ``text`` to ``recipient``'s inbox."""
    get_store().push_inbox(recipient, text)
    logger.debug("Notified %s: %s", recipient, text)


def drain_inbox(user_id: str) -> list[str]:
    """Return all pending notifications for ``user_id`` and clear them."""
    messages = get_store().drain_inbox(user_id)
    if messages:
        logger.debug("Drained %d notification(s) for %s", len(messages), user_id)
    return messages


# -- Message templates ---------------------------------------------------------


def invitation_received(from_user: str, topic: str, invitation_id: str) -> str:
    return f"📩 New debate invitation from {from_user} on \"{topic}\". Invitation ID: {invitation_id}"


def invitation_accepted(to_user: str, topic: str, debate_id: str) -> str:
    return f"✅ {to_user} accepted your invitation! The debate on \"{topic}\" has started. Debate ID: {debate_id}"


def invitation_rejected(to_user: str, topic: str) -> str:
    return f"❌ {to_user} declined your invitation to debate \"{topic}\"."


def message_received(topic: str, debate_id: str, sender: str, text: str) -> str:
    return f"💬 New message in debate \"{topic}\" (ID: {debate_id}) from {sender}: {text}"


def finish_requested(user_id: str, debate_id: str) -> str:
    return (
        f"✅ {user_id} proposed to finish debate (ID: {debate_id}) and declare a winner. "
        "Call finish to agree."
    )


def debate_ended_without_winner(user_id: str, debate_id: str) -> str:
    return f"🏁 {user_id} ended debate (ID: {debate_id}) without declaring a winner."


def debate_ended_with_winner(debate_id: str, winner: str) -> str:
    return f"🏆 Debate (ID: {debate_id}) is over. Winner: {winner}."
