"""Persistence Gateway — async engine, atomic transactions and error translation.

Invariants:
    - transaction() is the only way engines touch the database
    - Every transaction commits on normal exit and rolls back on ANY exception
      (domain refusals included, so no partial write survives a failed precondition)
    - IntegrityError / missing-row errors leave as PersistenceError with a PersistenceCode
    - All other SQLAlchemy exceptions leave as DatabaseError (core/errors.py)
    - SQLite connections run with PRAGMA foreign_keys=ON

Design Decisions:
    - Handle constructed explicitly at startup and passed into each engine
      (no module-level singleton)
    - expire_on_commit=False: records are built after commit without lazy loads
    - Pool sizing only applies to server databases; SQLite uses SQLAlchemy's default pool
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    IntegrityError, NoResultFound, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.orm.exc import StaleDataError

from cattery.core.errors import DatabaseError, PersistenceCode, PersistenceError
from cattery.db.base import Base

logger = logging.getLogger(__name__)

_UNIQUE_SQLSTATE = "23505"
_FOREIGN_KEY_SQLSTATE = "23503"


def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def integrity_code(exc: IntegrityError) -> PersistenceCode:
    """Read the constraint kind from a driver error.

    asyncpg exposes a SQLSTATE; SQLite only has the message text.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == _UNIQUE_SQLSTATE:
        return PersistenceCode.UNIQUE_VIOLATION
    if sqlstate == _FOREIGN_KEY_SQLSTATE:
        return PersistenceCode.FOREIGN_KEY_VIOLATION
    message = str(orig).lower()
    if "unique" in message or "duplicate key" in message:
        return PersistenceCode.UNIQUE_VIOLATION
    if "foreign key" in message:
        return PersistenceCode.FOREIGN_KEY_VIOLATION
    return PersistenceCode.INTEGRITY_VIOLATION


class PersistenceGateway:
    """Transactional access to the users/cats/posts store."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
        echo: bool = False,
    ):
        url = make_url(database_url)
        self.is_sqlite = url.get_backend_name() == "sqlite"
        engine_kwargs: dict[str, Any] = {"echo": echo}
        if not self.is_sqlite:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _set_sqlite_pragma)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session inside one atomic unit of work."""
        session = self._session_factory()
        try:
            async with session.begin():
                yield session
        except IntegrityError as e:
            code = integrity_code(e)
            logger.info(
                f"DB integrity violation: {e.orig}",
                extra={"error_code": code.value},
            )
            raise PersistenceError(code, str(e.orig)) from e
        except (NoResultFound, StaleDataError) as e:
            raise PersistenceError(
                PersistenceCode.RECORD_NOT_FOUND, str(e),
            ) from e
        except OperationalError as e:
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown") from e
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create all tables (tests and local development; production uses alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.transaction() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
