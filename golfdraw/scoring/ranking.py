"""Per-match standings and the cumulative leaderboard."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence, TypeVar, Union

from ..records import MatchRecord, ScoreEntry

T = TypeVar("T")

UNSCORED_AVERAGE = "0"
"""Displayed average of a member without any recorded score."""


@dataclass(frozen=True)
class MatchRanking:
    """A member's position within a single match."""

    member_name: str
    score: int
    rank: int

    def to_dict(self) -> dict[str, Any]:
        return {"memberName": self.member_name, "score": self.score, "rank": self.rank}


@dataclass(frozen=True)
class LeaderboardEntry:
    """A member's cumulative standing across all matches.

    Attributes
    ----------
    name : str
        Member name.
    avg_score : str
        Average of recorded scores formatted with one decimal place, or
        ``"0"`` when the member has no recorded score.
    total_score : int
        Sum of recorded scores.
    count : int
        Number of recorded scores. Unscored entries are not counted.
    rank : int
        Standard competition rank; members with equal ``avg_score`` share it.
    """

    name: str
    avg_score: str
    total_score: int
    count: int
    rank: int

    @property
    def average(self) -> Optional[float]:
        """Unrounded average, or ``None`` without recorded scores."""
        if self.count == 0:
            return None
        return self.total_score / self.count

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "avgScore": self.avg_score,
            "totalScore": self.total_score,
            "count": self.count,
            "rank": self.rank,
        }


def format_average(total_score: int, count: int) -> str:
    """Format ``total_score / count`` to one decimal, rounding halves up.

    Rounding works on the exact binary value of the quotient, so the output
    matches JavaScript's ``Number.prototype.toFixed(1)``.
    """
    if count == 0:
        return UNSCORED_AVERAGE
    value = Decimal(total_score / count)
    return str(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def competition_ranks(items: Sequence[T], key: Callable[[T], Hashable]) -> list[int]:
    """Return standard competition ranks ("1224") for already sorted ``items``.

    An item whose ``key`` equals its predecessor's shares the predecessor's
    rank; otherwise its rank is its 1-based position.
    """
    ranks: list[int] = []
    previous: Optional[Hashable] = None
    for idx, item in enumerate(items):
        current = key(item)
        if idx > 0 and current == previous:
            ranks.append(ranks[-1])
        else:
            ranks.append(idx + 1)
        previous = current
    return ranks


def _cut_with_ties(rankings: list[T], limit: Optional[int], rank_of: Callable[[T], int]) -> list[T]:
    """Keep the first ``limit`` rows plus any rows tied with the last one kept."""
    if limit is None:
        return rankings
    if limit < 0:
        raise ValueError("limit must be non-negative when provided")
    if limit == 0 or not rankings:
        return []
    kept = rankings[:limit]
    cutoff = rank_of(kept[-1])
    for row in rankings[limit:]:
        if rank_of(row) != cutoff:
            break
        kept.append(row)
    return kept


def rank_match(
    match: Union[MatchRecord, Iterable[ScoreEntry]],
    *,
    limit: Optional[int] = None,
) -> list[MatchRanking]:
    """Rank the scored entries of a single match, lowest score first.

    Parameters
    ----------
    match : Union[MatchRecord, Iterable[ScoreEntry]]
        The match, or its flattened score entries.
    limit : Optional[int], default: None
        When given, return only the top ``limit`` rows plus any rows tied at
        the cutoff rank.

    Returns
    -------
    list[MatchRanking]
        Entries with ``score > 0`` sorted ascending by score. Entries with
        equal scores keep their input order and share a rank.
    """
    entries = match.score_entries() if isinstance(match, MatchRecord) else list(match)
    scored = sorted((entry for entry in entries if entry.score > 0), key=lambda e: e.score)
    ranks = competition_ranks(scored, key=lambda e: e.score)
    rankings = [
        MatchRanking(member_name=entry.member_name, score=entry.score, rank=rank)
        for entry, rank in zip(scored, ranks)
    ]
    return _cut_with_ties(rankings, limit, lambda row: row.rank)


def build_leaderboard(matches: Iterable[MatchRecord]) -> list[LeaderboardEntry]:
    """Aggregate every match into a cumulative average leaderboard.

    Each member that appears in any score entry is listed. Members are
    ordered by their displayed average (lower is better); members without a
    recorded score always come last. Ties are decided on the displayed
    one-decimal average, so ``84.96`` and ``85.04`` both show as ``85.0`` and
    share a rank.
    """
    totals: dict[str, list[int]] = {}
    for match in matches:
        for entry in match.score_entries():
            stats = totals.setdefault(entry.member_name, [0, 0])
            if entry.score > 0:
                stats[0] += entry.score
                stats[1] += 1

    rows = [
        (name, format_average(total, count), total, count)
        for name, (total, count) in totals.items()
    ]
    rows.sort(key=lambda row: (row[3] == 0, float(row[1]) if row[3] else 0.0))
    ranks = competition_ranks(rows, key=lambda row: row[1])
    return [
        LeaderboardEntry(name=name, avg_score=avg, total_score=total, count=count, rank=rank)
        for (name, avg, total, count), rank in zip(rows, ranks)
    ]


__all__ = [
    "LeaderboardEntry",
    "MatchRanking",
    "UNSCORED_AVERAGE",
    "build_leaderboard",
    "competition_ranks",
    "format_average",
    "rank_match",
]
