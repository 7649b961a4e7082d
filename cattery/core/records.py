"""Domain Records — immutable payloads returned inside Success outcomes.

Invariants:
    - Records are detached from the ORM session (safe after commit/close)
    - CatRecord.owner is None for strays; soft-deleted cats are always strays
    - ActivityCounts.cats counts active (non-soft-deleted) cats only

Design Decisions:
    - Frozen dataclasses: engines build them from explicit join rows, the
      transport layer serializes them through pydantic (from_attributes)
"""

from dataclasses import dataclass
from datetime import datetime, timezone


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class OwnerSummary:
    id: int
    name: str
    email: str


@dataclass(frozen=True)
class CatRecord:
    id: int
    name: str
    age: int
    owner_id: int | None
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary | None = None

    @property
    def is_stray(self) -> bool:
        return self.owner_id is None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class PostSummary:
    id: int
    title: str
    published: bool


@dataclass(frozen=True)
class ActivityCounts:
    cats: int
    posts: int


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    cats: tuple[CatRecord, ...] | None = None
    posts: tuple[PostSummary, ...] | None = None
    counts: ActivityCounts | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class CatDeletion:
    message: str
    cat: CatRecord


@dataclass(frozen=True)
class CatRestoration:
    message: str
    cat: CatRecord


@dataclass(frozen=True)
class UserRemoval:
    message: str
    user: UserRecord


@dataclass(frozen=True)
class DeletedUserData:
    user: UserRecord
    cats_affected: int
    posts_deleted: int


@dataclass(frozen=True)
class ForcedUserRemoval:
    message: str
    deleted_data: DeletedUserData


@dataclass(frozen=True)
class EmailAvailability:
    email: str
    available: bool
    message: str
