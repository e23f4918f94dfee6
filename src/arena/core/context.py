"""User context aggregator.

Gathers everything a client needs about one user into a single document.
Read-only. Any failing sub-fetch fails the whole aggregation; there is no
partial-result mode.
"""

from __future__ import annotations

from typing import Any

from ..storage import get_store
from . import claims, debates, invitations, scoring


def get_user_context(user_id: str) -> dict[str, Any]:
    """Profile, claims, debates, stats, leaderboard and pending invitations for ``user_id``.

    ``profile`` is an empty dict when the user has not registered a profile.
    """
    user = get_store().get_user(user_id)
    return {
        "user": user_id,
        "profile": user.to_dict() if user else {},
        "claims": [c.to_dict() for c in claims.list_claims(user_id)],
        "debates": [d.to_dict() for d in debates.list_debates(user_id)],
        "stats": scoring.get_stats(user_id).to_dict(),
        "leaderboard": [e.to_dict() for e in scoring.get_leaderboard()],
        "invitations": [i.to_dict() for i in invitations.list_invitations(user_id)],
    }
