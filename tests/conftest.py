"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database (foreign keys ON)
    - Rows are seeded through their own committed transactions, never through
      a session the code under test also uses
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402

from cattery.infrastructure.persistence import PersistenceGateway  # noqa: E402
from cattery.models.cat import Cat  # noqa: E402
from cattery.models.post import Post  # noqa: E402
from cattery.models.user import User  # noqa: E402
from cattery.services.cat_lifecycle import CatLifecycle  # noqa: E402
from cattery.services.user_lifecycle import UserLifecycle  # noqa: E402


@pytest.fixture
async def gateway():
    gw = PersistenceGateway("sqlite+aiosqlite:///:memory:")
    await gw.create_schema()
    yield gw
    await gw.drop_schema()
    await gw.dispose()


@pytest.fixture
def cat_engine(gateway):
    return CatLifecycle(gateway)


@pytest.fixture
def user_engine(gateway):
    return UserLifecycle(gateway)


@pytest.fixture
def make_user(gateway):
    """Insert a user row directly; returns the detached ORM object."""
    counter = {"n": 0}

    async def _make(name: str | None = None, email: str | None = None) -> User:
        counter["n"] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
        )
        async with gateway.transaction() as db:
            db.add(user)
        return user

    return _make


@pytest.fixture
def make_cat(gateway):
    """Insert a cat row directly (owner and deleted_at set as given)."""
    async def _make(
        name: str = "Ginger", age: int = 2,
        owner_id: int | None = None, deleted: bool = False,
    ) -> Cat:
        cat = Cat(
            name=name, age=age, owner_id=owner_id,
            deleted_at=datetime.now(timezone.utc) if deleted else None,
        )
        async with gateway.transaction() as db:
            db.add(cat)
        return cat

    return _make


@pytest.fixture
def make_post(gateway):
    async def _make(author_id: int, title: str = "Hello", published: bool = True) -> Post:
        post = Post(title=title, content="...", published=published, author_id=author_id)
        async with gateway.transaction() as db:
            db.add(post)
        return post

    return _make


@pytest.fixture
def fetch_cat(gateway):
    """Read a cat row in a fresh transaction (bypasses the engines)."""
    async def _fetch(cat_id: int) -> Cat | None:
        async with gateway.transaction() as db:
            return await db.get(Cat, cat_id)

    return _fetch
