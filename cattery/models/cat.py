"""Cat ORM — an adoptable cat with optional owner and soft-delete marker.

Invariants:
    - owner_id NULL means stray
    - deleted_at NULL means active; a soft-deleted cat always has owner_id NULL
    - age is a positive integer (validated at the API boundary)

Design Decisions:
    - Soft delete via timestamp: deleted cats stay queryable for the audit list
    - Index on owner_id: ownership listings and user-deletion counts filter on it
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from cattery.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Cat(Base):
    """Cat entity — stray, adopted, or soft-deleted."""
    __tablename__ = "cats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
