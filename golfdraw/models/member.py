"""Roster member table."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, func, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base
from ..records import Member as MemberRecord


class Member(Base):
    """A member of the golf roster."""

    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    """Opaque identifier. Never used as a scoring key."""

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    """Display name. Groups and scores refer to members by this value."""

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Roster ordering; participants are drawn from the roster in this order."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __init__(
        self,
        *,
        id: str,
        name: str,
        position: int = 0,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.id = id
        self.name = name
        self.position = position
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<Member(id={self.id}, name={self.name})>"

    def to_record(self) -> MemberRecord:
        return MemberRecord(id=self.id, name=self.name)

    @classmethod
    def get_by_name(cls, session: Session, name: str) -> Optional["Member"]:
        """Return the member called ``name`` if it exists."""
        return session.scalar(select(cls).where(cls.name == name))

    @classmethod
    def roster(cls, session: Session) -> list["Member"]:
        """Return all members in roster order."""
        stmt = select(cls).order_by(cls.position.asc(), cls.created_at.asc(), cls.id.asc())
        return list(session.scalars(stmt).all())

    @classmethod
    def next_position(cls, session: Session) -> int:
        current = session.scalar(select(func.max(cls.position)))
        return 0 if current is None else current + 1
