"""Golf pairing draw and score ranking."""

from .draw import GroupSizePolicy, DrawSequencer, draw_all, plan_group_sizes
from .exceptions import (
    ConfigurationError,
    GolfDrawError,
    InvariantViolation,
    RecoverableInputError,
)
from .records import (
    DrawingGroup,
    HistorySnapshot,
    MatchRecord,
    Member,
    ScoreEntry,
    ScoredGroup,
)
from .scoring import build_leaderboard, rank_match

__all__ = [
    "ConfigurationError",
    "DrawSequencer",
    "DrawingGroup",
    "GolfDrawError",
    "GroupSizePolicy",
    "HistorySnapshot",
    "InvariantViolation",
    "MatchRecord",
    "Member",
    "RecoverableInputError",
    "ScoreEntry",
    "ScoredGroup",
    "build_leaderboard",
    "draw_all",
    "plan_group_sizes",
    "rank_match",
]
