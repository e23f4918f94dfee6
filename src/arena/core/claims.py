"""Claim store adapter.

Each user owns an append-only, ordered log of claims. Deletion is a linear
scan of the owner's log; there is no claim-id index.
"""

from __future__ import annotations

import logging

from ..storage import get_store
from .exceptions import NotFoundError
from .models import Claim, new_id, now_ms
from .users import ensure_not_banned
from .validation import require_text

logger = logging.getLogger(__name__)


def add_claim(user_id: str, text: str) -> Claim:
    """Append a claim to ``user_id``'s log."""
    text = require_text(text, "text")
    ensure_not_banned(user_id)
    claim = Claim(id=new_id(), owner_id=user_id, text=text, created_at=now_ms())
    get_store().append_claim(claim)
    logger.info("User %s added claim %s", user_id, claim.id)
    return claim


def list_claims(user_id: str) -> list[Claim]:
    """Return ``user_id``'s claims in the order they were made."""
    return get_store().list_claims(user_id)


def delete_claim(user_id: str, claim_id: str) -> None:
    """Remove one claim from the owner's log.

    Raises:
        NotFoundError: the owner has no claim with that id.
    """
    if not get_store().remove_claim(user_id, claim_id):
        raise NotFoundError("Claim", claim_id)
    logger.info("User %s deleted claim %s", user_id, claim_id)
