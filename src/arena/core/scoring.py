# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Winner computation and ranking.

The winner is whoever sent more messages. Ties, including a debate with no
messages at all, go to ``user_a`` (the inviter).

Stats are counters; the leaderboard score is derived from them. After every
outcome both users' totals are re-read and their leaderboard scores are
overwritten with ``wins - losses``, never incremented, so the two can not
drift apart.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from ..storage import get_store
from .config import get_config
from .models import Debate, LeaderboardEntry, Message, Stats

logger = logging.getLogger(__name__)

LEADERBOARD_LOCK = "leaderboard"


def tally(messages: Iterable[Message]) -> Counter[str]:
    """Count messages per sender."""
    return Counter(message.sender for message in messages)


def compute_winner(debate: Debate, messages: Iterable[Message]) -> str:
    """Return the participant with more messages; ``user_a`` wins ties."""
    counts = tally(messages)
    if counts[debate.user_a] >= counts[debate.user_b]:
        return debate.user_a
    return debate.user_b


def record_outcome(winner: str, loser: str) -> tuple[Stats, Stats]:
    """Credit a win and a loss, then overwrite both leaderboard scores.

    Returns:
        The winner's and loser's updated stats.
    """
    store = get_store()
    with store.lock(LEADERBOARD_LOCK):
        winner_stats, loser_stats = store.increment_stats(winner, loser)
        store.set_scores(
            {
                winner_stats.user_id: winner_stats.score,
                loser_stats.user_id: loser_stats.score,
            }
        )
    logger.info(
        "Outcome recorded: %s (%d) beat %s (%d)",
        winner,
        winner_stats.score,
        loser,
        loser_stats.score,
    )
    return winner_stats, loser_stats


def get_stats(user_id: str) -> Stats:
    return get_store().get_stats(user_id)


def get_leaderboard(limit: int | None = None) -> list[LeaderboardEntry]:
    """Top users by ``wins - losses``, highest first (top 5 by default)."""
    if limit is None:
        limit = get_config().leaderboard_size
    return get_store().top_scores(limit)
