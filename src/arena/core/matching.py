# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Contradiction matcher.

"Contradiction" here means "anything another user has claimed": the matcher
partitions every claim log by author and returns all logs except the
requester's. There is no semantic comparison, relevance ranking or
de-duplication of identical text. Cost is a full scan, O(total claims).
"""

from __future__ import annotations

import logging

from ..storage import get_store
from .exceptions import DependencyFailure
from .models import Claim, Opponent

logger = logging.getLogger(__name__)


def find_contradictions(user_id: str) -> dict[str, list[Claim]]:
    """Map every other user with at least one claim to their full claim list.

    Raises:
        DependencyFailure: the claim store could not be read. No partial
            result is returned.
    """
    store = get_store()
    out: dict[str, list[Claim]] = {}
    try:
        for owner in sorted(store.claim_owners()):
            if owner == user_id:
                continue
            claims = store.list_claims(owner)
            if claims:
                out[owner] = claims
    except DependencyFailure as exc:
        logger.error("Contradiction scan for %s failed: %s", user_id, exc.message)
        raise DependencyFailure(f"Failed to fetch contradictions: {exc.message}", backend=exc.backend) from exc
    return out


def find_opponents(user_id: str) -> list[Opponent]:
    """Flatten ``find_contradictions`` into one entry per opposing claim."""
    contradictions = find_contradictions(user_id)
    opponents = [
        Opponent(opponent=owner, claim_id=claim.id, text=claim.text)
        for owner, claims in contradictions.items()
        for claim in claims
    ]
    logger.debug("Found %d contradiction candidate(s) for %s", len(opponents), user_id)
    return opponents
