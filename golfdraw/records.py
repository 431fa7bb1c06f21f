"""Plain data records exchanged between the draw, scoring and storage layers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
import logging
from typing import Any, Iterable, Mapping, Optional

from .exceptions import RecoverableInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Member:
    """A roster member. ``name`` is the key used by groups and scores."""

    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class DrawingGroup:
    """A drawn group.

    Attributes
    ----------
    id : int
        1-based position of the group in draw order.
    members : tuple[str, ...]
        Member names in the order they were drawn.
    """

    id: int
    members: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "members": list(self.members)}


def parse_score(member_name: str, value: Any) -> int:
    """Interpret ``value`` as a stroke count.

    ``None`` and blank strings mean "no score" and return ``0``. Integers,
    integral floats and numeric strings are accepted.

    Raises
    ------
    RecoverableInputError
        If ``value`` is not a non-negative whole number.
    """

    if value is None:
        return 0
    if isinstance(value, bool):
        raise RecoverableInputError(member_name, value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            value = float(text) if "." in text else int(text)
        except ValueError as exc:
            raise RecoverableInputError(member_name, value) from exc
    if isinstance(value, float):
        if value != value or not value.is_integer():
            raise RecoverableInputError(member_name, value)
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise RecoverableInputError(member_name, value)
    return value


@dataclass(frozen=True)
class ScoreEntry:
    """Score recorded for one member. ``0`` means "no score recorded"."""

    member_name: str
    score: int = 0

    @property
    def is_scored(self) -> bool:
        return self.score > 0

    @classmethod
    def from_raw(cls, member_name: str, value: Any) -> "ScoreEntry":
        """Build an entry from user input, treating bad values as unscored."""
        try:
            score = parse_score(member_name, value)
        except RecoverableInputError as exc:
            logger.warning(f"{exc}; recording it as unscored")
            score = 0
        return cls(member_name=member_name, score=score)

    def to_dict(self) -> dict[str, Any]:
        return {"memberName": self.member_name, "score": self.score}


@dataclass(frozen=True)
class ScoredGroup:
    """A drawn group together with the scores of its members."""

    id: int
    members: tuple[str, ...]
    scores: tuple[ScoreEntry, ...] = ()

    @classmethod
    def from_group(
        cls,
        group: DrawingGroup,
        raw_scores: Optional[Mapping[str, Any]] = None,
    ) -> "ScoredGroup":
        """Attach scores to ``group``, one entry per member in member order.

        Members missing from ``raw_scores`` are recorded as unscored.
        """
        raw_scores = raw_scores or {}
        scores = tuple(
            ScoreEntry.from_raw(name, raw_scores.get(name)) for name in group.members
        )
        return cls(id=group.id, members=group.members, scores=scores)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "members": list(self.members),
            "scores": [entry.to_dict() for entry in self.scores],
        }


@dataclass(frozen=True)
class MatchRecord:
    """A completed, scored draw.

    Only ``golf_course`` may change after creation; use
    :meth:`with_golf_course` to obtain the edited copy.
    """

    id: str
    date: datetime
    groups: tuple[ScoredGroup, ...] = ()
    golf_course: Optional[str] = None

    def with_golf_course(self, golf_course: Optional[str]) -> "MatchRecord":
        return replace(self, golf_course=golf_course or None)

    def score_entries(self) -> list[ScoreEntry]:
        """Return every score entry across all groups, in group order."""
        return [entry for group in self.groups for entry in group.scores]

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "date": self.date.isoformat(),
            "groups": [group.to_dict() for group in self.groups],
        }
        if self.golf_course:
            payload["golfCourse"] = self.golf_course
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MatchRecord":
        """Build a record from the exported dictionary shape.

        Score values pass through :meth:`ScoreEntry.from_raw`, so malformed
        scores are kept as unscored entries.
        """
        raw_date = data.get("date")
        if isinstance(raw_date, datetime):
            date = raw_date
        elif isinstance(raw_date, str) and raw_date:
            date = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
        else:
            raise ValueError("Match record requires a date")

        groups = []
        for raw_group in data.get("groups") or []:
            scores = tuple(
                ScoreEntry.from_raw(item.get("memberName", ""), item.get("score"))
                for item in raw_group.get("scores") or []
            )
            groups.append(
                ScoredGroup(
                    id=int(raw_group["id"]),
                    members=tuple(raw_group.get("members") or ()),
                    scores=scores,
                )
            )
        return cls(
            id=str(data["id"]),
            date=date,
            groups=tuple(groups),
            golf_course=data.get("golfCourse") or None,
        )


@dataclass(frozen=True)
class HistorySnapshot:
    """Versioned, read-only view of the roster and match history.

    ``version`` changes whenever the underlying store is mutated, so callers
    can tell whether a snapshot they hold is stale.
    """

    version: int
    members: tuple[Member, ...] = ()
    matches: tuple[MatchRecord, ...] = ()

    @classmethod
    def build(
        cls,
        version: int,
        members: Iterable[Member],
        matches: Iterable[MatchRecord],
    ) -> "HistorySnapshot":
        return cls(version=version, members=tuple(members), matches=tuple(matches))

    def match(self, match_id: str) -> MatchRecord:
        for record in self.matches:
            if record.id == match_id:
                return record
        raise LookupError(f"Unknown match record '{match_id}'")


__all__ = [
    "DrawingGroup",
    "HistorySnapshot",
    "MatchRecord",
    "Member",
    "ScoreEntry",
    "ScoredGroup",
    "parse_score",
]
