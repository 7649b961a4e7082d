"""User Lifecycle — lookup, listing, creation, safe delete and force delete.

Invariants:
    - remove() refuses while the user owns any active cat or authored any post;
      cats are checked before posts and only the first violation is reported
    - force_remove() strays ALL owned cats (soft-deleted included), deletes all
      posts, then deletes the user, in one transaction
    - force_remove() lets NotFound through unchanged; every other failure becomes
      BadRequest after being logged
    - Counts always use the same filter as the nested lists (active cats, all posts)

Design Decisions:
    - Per-user counts come from GROUP BY subqueries outer-joined to users,
      one round trip for the whole listing
"""

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cattery.core.error_classification import CREATE_USER_RULES, REMOVE_USER_RULES
from cattery.core.errors import (
    ConflictError, ErrorContext, ErrorKind, ResourceNotFoundError,
)
from cattery.core.outcome import Failure, Outcome, Success
from cattery.core.records import (
    ActivityCounts, DeletedUserData, EmailAvailability, ForcedUserRemoval,
    PostSummary, UserRecord, UserRemoval, as_utc,
)
from cattery.models.cat import Cat
from cattery.models.post import Post
from cattery.models.user import User
from cattery.services.cat_lifecycle import to_cat_record
from cattery.services.transactional import TransactionalEngine

logger = logging.getLogger(__name__)

FORCE_REMOVE_FAILED = "Force delete of user failed"


def to_user_record(user: User, **extra) -> UserRecord:
    return UserRecord(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=as_utc(user.created_at),
        updated_at=as_utc(user.updated_at),
        **extra,
    )


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError(
            f"User with ID {user_id} does not exist",
            ErrorContext(user_id=user_id),
        )
    return user


async def _count_active_cats(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Cat.id))
        .where(Cat.owner_id == user_id, Cat.deleted_at.is_(None)),
    )
    return result.scalar_one()


async def _count_posts(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Post.id)).where(Post.author_id == user_id),
    )
    return result.scalar_one()


class UserLifecycle(TransactionalEngine):
    """User operations. One instance per request, gateway injected."""

    async def find_by_id(
        self, user_id: int, include_details: bool = False,
    ) -> Outcome[UserRecord]:
        """User, optionally with active cats, posts and counts."""
        async def work(db: AsyncSession) -> UserRecord:
            user = await _get_user_or_404(db, user_id)
            if not include_details:
                return to_user_record(user)

            cats = (await db.execute(
                select(Cat)
                .where(Cat.owner_id == user_id, Cat.deleted_at.is_(None))
                .order_by(Cat.name.asc(), Cat.id.asc()),
            )).scalars().all()
            posts = (await db.execute(
                select(Post)
                .where(Post.author_id == user_id)
                .order_by(Post.created_at.desc(), Post.id.desc()),
            )).scalars().all()
            return to_user_record(
                user,
                cats=tuple(to_cat_record(cat) for cat in cats),
                posts=tuple(
                    PostSummary(id=p.id, title=p.title, published=p.published)
                    for p in posts
                ),
                counts=ActivityCounts(cats=len(cats), posts=len(posts)),
            )

        return await self._execute("find_user", work, user_id=user_id)

    async def find_all(self, include_stats: bool = False) -> Outcome[list[UserRecord]]:
        """All users, newest first."""
        async def work(db: AsyncSession) -> list[UserRecord]:
            order = (User.created_at.desc(), User.id.desc())
            if not include_stats:
                result = await db.execute(select(User).order_by(*order))
                return [to_user_record(user) for user in result.scalars()]

            cat_counts = (
                select(
                    Cat.owner_id.label("user_id"),
                    func.count(Cat.id).label("cats"),
                )
                .where(Cat.owner_id.is_not(None), Cat.deleted_at.is_(None))
                .group_by(Cat.owner_id)
                .subquery()
            )
            post_counts = (
                select(
                    Post.author_id.label("user_id"),
                    func.count(Post.id).label("posts"),
                )
                .group_by(Post.author_id)
                .subquery()
            )
            result = await db.execute(
                select(
                    User,
                    func.coalesce(cat_counts.c.cats, 0),
                    func.coalesce(post_counts.c.posts, 0),
                )
                .outerjoin(cat_counts, cat_counts.c.user_id == User.id)
                .outerjoin(post_counts, post_counts.c.user_id == User.id)
                .order_by(*order),
            )
            return [
                to_user_record(user, counts=ActivityCounts(cats=cats, posts=posts))
                for user, cats, posts in result.all()
            ]

        return await self._execute("list_users", work)

    async def create(self, name: str, email: str) -> Outcome[UserRecord]:
        async def work(db: AsyncSession) -> UserRecord:
            user = User(name=name, email=email)
            db.add(user)
            await db.flush()
            logger.info(
                f"User {user.email} created",
                extra={"operation": "create_user", "user_id": user.id},
            )
            return to_user_record(user)

        return await self._execute(
            "create_user", work, CREATE_USER_RULES, email=email,
        )

    async def remove(
        self, user_id: int, reason: str | None = None,
    ) -> Outcome[UserRemoval]:
        """Safe delete — refused while the user has dependents."""
        async def work(db: AsyncSession) -> UserRemoval:
            user = await _get_user_or_404(db, user_id)

            cat_count = await _count_active_cats(db, user_id)
            if cat_count > 0:
                raise ConflictError(
                    f"Cannot delete user {user.name}: the user still owns "
                    f"{cat_count} cat(s). Resolve the cats' ownership first.",
                    ErrorContext(user_id=user_id, debug_info={"cats": cat_count}),
                )

            post_count = await _count_posts(db, user_id)
            if post_count > 0:
                raise ConflictError(
                    f"Cannot delete user {user.name}: the user still has "
                    f"{post_count} post(s). Resolve the posts' authorship first.",
                    ErrorContext(user_id=user_id, debug_info={"posts": post_count}),
                )

            record = to_user_record(user)
            await db.delete(user)
            await db.flush()
            logger.info(
                f"User {record.display_name} deleted",
                extra={"operation": "remove_user", "user_id": user_id, "reason": reason},
            )
            return UserRemoval(
                message=f"User {record.display_name} was deleted successfully",
                user=record,
            )

        return await self._execute(
            "remove_user", work, REMOVE_USER_RULES, user_id=user_id,
        )

    async def force_remove(self, user_id: int) -> Outcome[ForcedUserRemoval]:
        """Cascade: stray the cats, delete the posts, delete the user."""
        async def work(db: AsyncSession) -> ForcedUserRemoval:
            user = await _get_user_or_404(db, user_id)
            record = to_user_record(user)

            strayed = await db.execute(
                update(Cat)
                .where(Cat.owner_id == user_id)
                .values(owner_id=None)
                .execution_options(synchronize_session=False),
            )
            removed_posts = await db.execute(
                delete(Post)
                .where(Post.author_id == user_id)
                .execution_options(synchronize_session=False),
            )
            await db.delete(user)
            await db.flush()

            logger.info(
                f"User {record.display_name} force-deleted: "
                f"{strayed.rowcount} cat(s) strayed, "
                f"{removed_posts.rowcount} post(s) deleted",
                extra={"operation": "force_remove_user", "user_id": user_id},
            )
            return ForcedUserRemoval(
                message=(
                    f"User {record.display_name} and all related data were deleted"
                ),
                deleted_data=DeletedUserData(
                    user=record,
                    cats_affected=strayed.rowcount,
                    posts_deleted=removed_posts.rowcount,
                ),
            )

        try:
            outcome = await self._execute(
                "force_remove_user", work, user_id=user_id,
            )
        except Exception as e:
            logger.error(
                f"Force delete of user {user_id} failed: {e}",
                exc_info=True,
                extra={"operation": "force_remove_user", "user_id": user_id},
            )
            return Failure(
                ErrorKind.BAD_REQUEST, FORCE_REMOVE_FAILED,
                {"operation": "force_remove_user", "user_id": user_id},
            )
        if isinstance(outcome, Failure) and outcome.kind is not ErrorKind.NOT_FOUND:
            return Failure(ErrorKind.BAD_REQUEST, FORCE_REMOVE_FAILED, outcome.context)
        return outcome

    async def is_email_exists(
        self, email: str, exclude_user_id: int | None = None,
    ) -> Outcome[bool]:
        """True if another user (not exclude_user_id) already holds the email."""
        async def work(db: AsyncSession) -> bool:
            user = (await db.execute(
                select(User).where(User.email == email),
            )).scalar_one_or_none()
            if user is None:
                return False
            return user.id != exclude_user_id

        return await self._execute("check_email", work, user_id=exclude_user_id)

    async def check_email(
        self, email: str, exclude_user_id: int | None = None,
    ) -> Outcome[EmailAvailability]:
        outcome = await self.is_email_exists(email, exclude_user_id)
        if isinstance(outcome, Failure):
            return outcome
        exists = outcome.value
        return Success(EmailAvailability(
            email=email,
            available=not exists,
            message="Email is already in use" if exists else "Email is available",
        ))
