"""Cat Lifecycle — adoption, soft delete, restore and availability queries.

Invariants:
    - adopt_cat checks, in order: cat exists → cat is stray → user exists → write
    - delete_cat sets deleted_at AND clears owner_id in the same write
    - A soft-deleted cat is invisible to detail, availability and ownership queries
    - Checks and writes for one operation share one transaction; the cat row is
      locked (SELECT ... FOR UPDATE OF cats) before any precondition is read

Design Decisions:
    - Owner info fetched with an explicit outer join, not an ORM relationship
    - Adoption of a soft-deleted cat is NotFound: it must be restored first
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cattery.core.error_classification import (
    ADOPT_CAT_RULES, DELETE_CAT_RULES, INSERT_CAT_RULES, RESTORE_CAT_RULES,
)
from cattery.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from cattery.core.outcome import Outcome
from cattery.core.records import (
    CatDeletion, CatRecord, CatRestoration, OwnerSummary, as_utc,
)
from cattery.models.cat import Cat
from cattery.models.user import User
from cattery.services.transactional import TransactionalEngine

logger = logging.getLogger(__name__)


def to_cat_record(cat: Cat, owner: User | None = None) -> CatRecord:
    """Detach a Cat row (and its joined owner) into a CatRecord."""
    return CatRecord(
        id=cat.id,
        name=cat.name,
        age=cat.age,
        owner_id=cat.owner_id,
        deleted_at=as_utc(cat.deleted_at),
        created_at=as_utc(cat.created_at),
        updated_at=as_utc(cat.updated_at),
        owner=(
            OwnerSummary(id=owner.id, name=owner.name, email=owner.email)
            if owner is not None else None
        ),
    )


def _with_owner() -> Select:
    return select(Cat, User).outerjoin(User, Cat.owner_id == User.id)


def _cat_not_found(cat_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        f"Cat with ID {cat_id} does not exist",
        ErrorContext(cat_id=cat_id),
    )


def _user_not_found(user_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        f"User with ID {user_id} does not exist",
        ErrorContext(user_id=user_id),
    )


class CatLifecycle(TransactionalEngine):
    """Cat operations. One instance per request, gateway injected."""

    async def get_detail(self, cat_id: int) -> Outcome[CatRecord]:
        """Active cat with owner info."""
        async def work(db: AsyncSession) -> CatRecord:
            row = (await db.execute(
                _with_owner().where(Cat.id == cat_id, Cat.deleted_at.is_(None)),
            )).one_or_none()
            if row is None:
                raise _cat_not_found(cat_id)
            return to_cat_record(*row)

        return await self._execute("get_cat_detail", work, cat_id=cat_id)

    async def count_active_cats(self) -> Outcome[int]:
        async def work(db: AsyncSession) -> int:
            result = await db.execute(
                select(func.count(Cat.id)).where(Cat.deleted_at.is_(None)),
            )
            return result.scalar_one()

        return await self._execute("count_active_cats", work)

    async def adopt_cat(self, cat_id: int, user_id: int) -> Outcome[CatRecord]:
        """Give a stray cat to an existing user."""
        async def work(db: AsyncSession) -> CatRecord:
            row = (await db.execute(
                _with_owner()
                .where(Cat.id == cat_id, Cat.deleted_at.is_(None))
                .with_for_update(of=Cat),
            )).one_or_none()
            if row is None:
                raise _cat_not_found(cat_id)
            cat, current_owner = row

            if cat.owner_id is not None:
                owner_name = current_owner.name if current_owner else None
                raise ConflictError(
                    f"Cat {cat.name} has already been adopted, "
                    f"current owner: {owner_name or 'unknown'}",
                    ErrorContext(
                        cat_id=cat_id, user_id=user_id,
                        debug_info={
                            "owner_id": cat.owner_id, "owner_name": owner_name,
                        },
                    ),
                )

            user = await db.get(User, user_id)
            if user is None:
                raise _user_not_found(user_id)

            cat.owner_id = user.id
            await db.flush()
            logger.info(
                f"Cat {cat.name} adopted by {user.name}",
                extra={"operation": "adopt_cat", "cat_id": cat_id, "user_id": user_id},
            )
            return to_cat_record(cat, user)

        return await self._execute(
            "adopt_cat", work, ADOPT_CAT_RULES, cat_id=cat_id, user_id=user_id,
        )

    async def delete_cat(
        self, cat_id: int, reason: str | None = None,
    ) -> Outcome[CatDeletion]:
        """Soft delete: stamp deleted_at and release the owner."""
        async def work(db: AsyncSession) -> CatDeletion:
            cat = (await db.execute(
                select(Cat).where(Cat.id == cat_id).with_for_update(),
            )).scalar_one_or_none()
            if cat is None:
                raise _cat_not_found(cat_id)
            if cat.deleted_at is not None:
                raise ConflictError(
                    f"Cat {cat.name} has already been deleted",
                    ErrorContext(cat_id=cat_id),
                )

            previous_owner = cat.owner_id
            cat.deleted_at = datetime.now(timezone.utc)
            cat.owner_id = None
            await db.flush()
            logger.info(
                f"Cat {cat.name} soft-deleted (previous owner: {previous_owner})",
                extra={"operation": "delete_cat", "cat_id": cat_id, "reason": reason},
            )
            return CatDeletion(
                message=f"Cat {cat.name} was deleted successfully",
                cat=to_cat_record(cat),
            )

        return await self._execute(
            "delete_cat", work, DELETE_CAT_RULES, cat_id=cat_id,
        )

    async def restore_cat(
        self, cat_id: int, reason: str | None = None,
    ) -> Outcome[CatRestoration]:
        """Clear deleted_at. The cat comes back as a stray."""
        async def work(db: AsyncSession) -> CatRestoration:
            cat = (await db.execute(
                select(Cat).where(Cat.id == cat_id).with_for_update(),
            )).scalar_one_or_none()
            if cat is None:
                raise _cat_not_found(cat_id)
            if cat.deleted_at is None:
                raise ConflictError(
                    f"Cat {cat.name} is not deleted",
                    ErrorContext(cat_id=cat_id),
                )

            cat.deleted_at = None
            await db.flush()
            logger.info(
                f"Cat {cat.name} restored",
                extra={"operation": "restore_cat", "cat_id": cat_id, "reason": reason},
            )
            return CatRestoration(
                message=f"Cat {cat.name} was restored successfully",
                cat=to_cat_record(cat),
            )

        return await self._execute(
            "restore_cat", work, RESTORE_CAT_RULES, cat_id=cat_id,
        )

    async def get_deleted_cats(self) -> Outcome[list[CatRecord]]:
        """Soft-deleted cats, most recently deleted first."""
        async def work(db: AsyncSession) -> list[CatRecord]:
            result = await db.execute(
                select(Cat)
                .where(Cat.deleted_at.is_not(None))
                .order_by(Cat.deleted_at.desc(), Cat.id.desc()),
            )
            return [to_cat_record(cat) for cat in result.scalars()]

        return await self._execute("get_deleted_cats", work)

    async def get_available_cats(self) -> Outcome[list[CatRecord]]:
        """Strays that are not soft-deleted, in creation order."""
        async def work(db: AsyncSession) -> list[CatRecord]:
            result = await db.execute(
                select(Cat)
                .where(Cat.owner_id.is_(None), Cat.deleted_at.is_(None))
                .order_by(Cat.id.asc()),
            )
            return [to_cat_record(cat) for cat in result.scalars()]

        return await self._execute("get_available_cats", work)

    async def get_cats_by_owner(self, user_id: int) -> Outcome[list[CatRecord]]:
        async def work(db: AsyncSession) -> list[CatRecord]:
            if await db.get(User, user_id) is None:
                raise _user_not_found(user_id)
            result = await db.execute(
                select(Cat)
                .where(Cat.owner_id == user_id, Cat.deleted_at.is_(None))
                .order_by(Cat.id.asc()),
            )
            return [to_cat_record(cat) for cat in result.scalars()]

        return await self._execute("get_cats_by_owner", work, user_id=user_id)

    async def insert_cat(
        self, name: str, age: int, owner_id: int | None = None,
    ) -> Outcome[CatRecord]:
        """Create a cat. A missing owner surfaces as NotFound via the FK."""
        async def work(db: AsyncSession) -> CatRecord:
            cat = Cat(name=name, age=age, owner_id=owner_id)
            db.add(cat)
            await db.flush()
            logger.info(
                f"Cat {cat.name} created",
                extra={"operation": "insert_cat", "cat_id": cat.id, "user_id": owner_id},
            )
            return to_cat_record(cat)

        return await self._execute(
            "insert_cat", work, INSERT_CAT_RULES, owner_id=owner_id,
        )
