"""Single-row counter that versions the roster and history snapshot."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base

_SINGLETON_ID = 1


class StoreRevision(Base):
    """Monotonic version of the stored roster and match history."""

    __tablename__ = "store_revisions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @classmethod
    def current(cls, session: Session) -> int:
        """Return the current version, ``0`` for an untouched store."""
        row = session.get(cls, _SINGLETON_ID)
        return 0 if row is None else row.value

    @classmethod
    def bump(cls, session: Session) -> int:
        """Increment and return the version. Call after every mutation."""
        row = session.get(cls, _SINGLETON_ID)
        if row is None:
            row = cls(id=_SINGLETON_ID, value=0)
            session.add(row)
        row.value += 1
        session.flush()
        return row.value
