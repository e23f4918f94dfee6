# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Debate state machine.

    active --post_message--> active (turn flips to the other participant)
    active --finish---------> active (awaiting the other participant's vote)
                           \\-> ended (winner or no winner)

Finish negotiation is a symmetric rendezvous. Each participant votes
``want`` (finish and declare a winner) or ``no`` (finish without one); a
vote lives for ``finish_vote_ttl_seconds``. A ``no`` from either side ends
the debate without a winner. Two ``want`` votes end it with a computed
winner, whichever call arrives second. A lone ``want`` leaves the debate
active and asks the other participant to confirm.

The turn is advisory unless ``enforce_turns`` is set.

Message posting and finish negotiation hold the same per-debate lock, so a
winner is always computed from a complete, stable message log.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..storage import get_store
from . import notifications, scoring
from .config import get_config
from .exceptions import ForbiddenError, NotFoundError, ValidationException
from .models import Debate, FinishResult, FinishVote, Message, now_ms
from .users import ensure_not_banned
from .validation import require_bool, require_text

logger = logging.getLogger(__name__)


def _lock_name(debate_id: str) -> str:
    return f"debate:{debate_id}"


@dataclass
class DebateListing:
    """A debate plus its most recent message, as shown in a user's debate list."""

    debate: Debate
    last_message: Message | None

    def to_dict(self) -> dict[str, Any]:
        data = self.debate.to_dict()
        data["lastMessage"] = self.last_message.to_dict() if self.last_message else None
        return data


def get_debate(debate_id: str) -> Debate:
    debate = get_store().get_debate(debate_id)
    if debate is None:
        raise NotFoundError("Debate", debate_id)
    return debate


def list_debates(user_id: str) -> list[DebateListing]:
    """Every debate ``user_id`` takes part in, in the order they started."""
    store = get_store()
    out = []
    for debate_id in store.debate_ids(user_id):
        debate = store.get_debate(debate_id)
        if debate is None:
            continue
        out.append(DebateListing(debate=debate, last_message=store.last_message(debate_id)))
    return out


def get_history(debate_id: str) -> list[Message]:
    """The debate's messages in order; empty for an unknown debate."""
    return get_store().history(debate_id)


def _require_participant(debate: Debate, user_id: str) -> None:
    if not debate.is_participant(user_id):
        raise ForbiddenError(
            f"{user_id} is not a participant in debate {debate.id}",
            reason="not_participant",
        )


def _require_active(debate: Debate) -> None:
    if not debate.is_active:
        raise ForbiddenError(f"Debate {debate.id} has ended", reason="debate_ended")


def post_message(debate_id: str, sender: str, text: str) -> Message:
    """Append a message and hand the turn to the other participant.

    Raises:
        MissingFieldError: ``sender`` or ``text`` is empty.
        NotFoundError: no such debate.
        ForbiddenError: the debate has ended, the sender is not a
            participant or is banned, or turns are enforced and it is not
            the sender's turn.
    """
    sender = require_text(sender, "from")
    text = require_text(text, "text")

    store = get_store()
    with store.lock(_lock_name(debate_id)):
        debate = store.get_debate(debate_id)
        if debate is None:
            raise NotFoundError("Debate", debate_id)
        _require_active(debate)
        _require_participant(debate, sender)
        ensure_not_banned(sender)
        if get_config().enforce_turns and debate.turn != sender:
            raise ForbiddenError(f"It is {debate.turn}'s turn", reason="not_your_turn")

        message = Message(sender=sender, text=text, ts=now_ms())
        recipient = debate.other(sender)
        store.append_message(debate_id, message, next_turn=recipient)

    notifications.notify(recipient, notifications.message_received(debate.topic, debate_id, sender, text))
    logger.debug("Debate %s: message from %s, turn -> %s", debate_id, sender, recipient)
    return message


def request_finish(debate_id: str, user_id: str, want_winner: bool) -> FinishResult:
    """Cast ``user_id``'s finish vote and resolve the debate if possible.

    Raises:
        MissingFieldError: ``user_id`` or ``want_winner`` is missing.
        NotFoundError: no such debate.
        ForbiddenError: the debate has already ended, or ``user_id`` is not a
            participant or is banned.
    """
    user_id = require_text(user_id, "user")
    want_winner = require_bool(want_winner, "wantWinner")

    store = get_store()
    ttl = get_config().finish_vote_ttl_seconds
    with store.lock(_lock_name(debate_id)):
        debate = store.get_debate(debate_id)
        if debate is None:
            raise NotFoundError("Debate", debate_id)
        _require_participant(debate, user_id)
        _require_active(debate)
        ensure_not_banned(user_id)

        vote = FinishVote.WANT if want_winner else FinishVote.NO
        store.set_vote(debate_id, user_id, vote, ttl)
        other = debate.other(user_id)
        other_vote = store.get_vote(debate_id, other)

        if vote == FinishVote.NO or other_vote == FinishVote.NO:
            store.end_debate(debate_id, now_ms(), None, debate.participants)
            result = FinishResult(ended=True, winner=None)
            note = notifications.debate_ended_without_winner(user_id, debate_id)
            logger.info("Debate %s ended without a winner", debate_id, extra={"debate_id": debate_id})
        elif other_vote == FinishVote.WANT:
            winner = scoring.compute_winner(debate, store.history(debate_id))
            loser = debate.other(winner)
            store.end_debate(debate_id, now_ms(), winner, debate.participants)
            scoring.record_outcome(winner, loser)
            result = FinishResult(ended=True, winner=winner)
            note = notifications.debate_ended_with_winner(debate_id, winner)
            logger.info("Debate %s ended, winner %s", debate_id, winner, extra={"debate_id": debate_id})
        else:
            result = FinishResult(ended=False)
            note = notifications.finish_requested(user_id, debate_id)
            logger.debug("Debate %s: %s wants to finish, awaiting %s", debate_id, user_id, other)

    notifications.notify(other, note)
    return result


def get_summary(debate_id: str) -> str:
    return get_store().get_summary(debate_id) or ""


def set_summary(debate_id: str, summary: str) -> None:
    """Replace the debate's free-text summary (last write wins)."""
    if summary is None:
        raise ValidationException("summary is required", field="summary")
    if not isinstance(summary, str):
        raise ValidationException("summary must be a string", field="summary", value=summary)
    get_store().set_summary(debate_id, summary)
