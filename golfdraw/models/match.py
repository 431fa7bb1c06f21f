"""Database models for recorded matches and their scores."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from .base import Base
from ..records import MatchRecord, ScoreEntry, ScoredGroup


def _as_utc(value: datetime) -> datetime:
    # Stored values are UTC; SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Match(Base):
    """A completed, scored draw."""

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    """Opaque identifier used for edits and deletion."""

    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """When the match took place."""

    golf_course: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    """Optional course name. The only field that may be edited later."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    groups: Mapped[list["MatchGroup"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="MatchGroup.group_number",
    )

    def __init__(
        self,
        *,
        id: str,
        played_at: datetime,
        golf_course: Optional[str] = None,
        groups: Optional[list["MatchGroup"]] = None,
    ) -> None:
        self.id = id
        self.played_at = _as_utc(played_at)
        self.golf_course = golf_course
        if groups is not None:
            self.groups = groups

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<Match(id={self.id}, played_at={self.played_at})>"

    @classmethod
    def from_record(cls, record: MatchRecord) -> "Match":
        """Build ORM rows mirroring ``record``."""
        groups = []
        for group in record.groups:
            groups.append(
                MatchGroup(
                    group_number=group.id,
                    members=list(group.members),
                    scores=[
                        MatchScore(position=idx, member_name=entry.member_name, score=entry.score)
                        for idx, entry in enumerate(group.scores)
                    ],
                )
            )
        return cls(
            id=record.id,
            played_at=record.date,
            golf_course=record.golf_course,
            groups=groups,
        )

    def to_record(self) -> MatchRecord:
        return MatchRecord(
            id=self.id,
            date=_as_utc(self.played_at),
            golf_course=self.golf_course,
            groups=tuple(group.to_record() for group in self.groups),
        )

    @classmethod
    def history(cls, session: Session) -> list["Match"]:
        """Return all matches, newest first."""
        stmt = select(cls).order_by(cls.played_at.desc(), cls.created_at.desc())
        return list(session.scalars(stmt).all())


class MatchGroup(Base):
    """One drawn group of a recorded match."""

    __tablename__ = "match_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    group_number: Mapped[int] = mapped_column(Integer, nullable=False)
    """1-based draw order of the group."""

    members: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Member names in draw order."""

    match: Mapped["Match"] = relationship(back_populates="groups")
    scores: Mapped[list["MatchScore"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="MatchScore.position",
    )

    __table_args__ = (
        UniqueConstraint("match_id", "group_number", name="match_groups_match_id_group_number_key"),
    )

    def __init__(
        self,
        *,
        group_number: int,
        members: list,
        scores: Optional[list["MatchScore"]] = None,
    ) -> None:
        self.group_number = group_number
        self.members = members
        if scores is not None:
            self.scores = scores

    def to_record(self) -> ScoredGroup:
        return ScoredGroup(
            id=self.group_number,
            members=tuple(self.members or ()),
            scores=tuple(score.to_record() for score in self.scores),
        )


class MatchScore(Base):
    """Score of one member within a recorded group. ``0`` means unscored."""

    __tablename__ = "match_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("match_groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    member_name: Mapped[str] = mapped_column(String(100), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    group: Mapped["MatchGroup"] = relationship(back_populates="scores")

    def __init__(self, *, position: int, member_name: str, score: int = 0) -> None:
        self.position = position
        self.member_name = member_name
        self.score = score

    def to_record(self) -> ScoreEntry:
        return ScoreEntry(member_name=self.member_name, score=self.score)
