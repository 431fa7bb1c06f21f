"""Utilities for ranking match scores."""

from .ranking import (
    LeaderboardEntry,
    MatchRanking,
    build_leaderboard,
    competition_ranks,
    format_average,
    rank_match,
)

__all__ = [
    "LeaderboardEntry",
    "MatchRanking",
    "build_leaderboard",
    "competition_ranks",
    "format_average",
    "rank_match",
]
