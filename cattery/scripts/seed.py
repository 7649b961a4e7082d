"""Seed demo data — five users with posts and cats, plus five strays.

Run with ``python -m cattery.scripts.seed``. Existing rows are wiped first,
children before parents so foreign keys never block the cleanup.
"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select

from cattery.config import get_settings
from cattery.infrastructure.observability import setup_logging
from cattery.infrastructure.persistence import PersistenceGateway
from cattery.models.cat import Cat
from cattery.models.post import Post
from cattery.models.user import User

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {
        "name": "Alice Johnson",
        "email": "alice@example.com",
        "posts": [
            ("Alice's first blog post", "How Alice got into programming.", True),
            ("TypeScript best practices", "A few habits worth keeping.", True),
            ("Draft: plans for next year", "Ideas that are not ready yet.", False),
        ],
        "cats": [("Whiskers", 3), ("Shadow", 2)],
    },
    {
        "name": "Bob Smith",
        "email": "bob@example.com",
        "posts": [
            ("Node.js performance tuning", "Tips from production incidents.", True),
            ("Getting started with NestJS", "A guide from zero.", True),
        ],
        "cats": [("Mittens", 4), ("Tiger", 1)],
    },
    {
        "name": "Charlie Brown",
        "email": "charlie@example.com",
        "posts": [
            ("Working with ORMs", "Advanced query patterns.", False),
        ],
        "cats": [("Luna", 5), ("Max", 3), ("Bella", 2)],
    },
    {
        "name": "Diana Prince",
        "email": "diana@example.com",
        "posts": [],
        "cats": [("Wonder Cat", 4)],
    },
    {
        "name": "Eva Green",
        "email": "eva@example.com",
        "posts": [],
        "cats": [],
    },
]

STRAY_CATS = [
    ("Street Tom", 3),
    ("Alley Cat", 2),
    ("Orange Tabby", 4),
    ("Fluffy", 1),
    ("Smokey", 6),
]


@dataclass(frozen=True)
class SeedSummary:
    users: int
    posts: int
    published_posts: int
    cats: int
    owned_cats: int
    stray_cats: int


async def seed_demo_data(gateway: PersistenceGateway) -> SeedSummary:
    """Replace all rows with the demo data set."""
    async with gateway.transaction() as db:
        await db.execute(delete(Cat))
        await db.execute(delete(Post))
        await db.execute(delete(User))

        for entry in DEMO_USERS:
            user = User(name=entry["name"], email=entry["email"])
            db.add(user)
            await db.flush()
            db.add_all(
                Post(title=title, content=content, published=published, author_id=user.id)
                for title, content, published in entry["posts"]
            )
            db.add_all(
                Cat(name=name, age=age, owner_id=user.id)
                for name, age in entry["cats"]
            )
        db.add_all(Cat(name=name, age=age) for name, age in STRAY_CATS)

    async with gateway.transaction() as db:
        async def count(stmt) -> int:
            return (await db.execute(stmt)).scalar_one()

        summary = SeedSummary(
            users=await count(select(func.count(User.id))),
            posts=await count(select(func.count(Post.id))),
            published_posts=await count(
                select(func.count(Post.id)).where(Post.published.is_(True)),
            ),
            cats=await count(select(func.count(Cat.id))),
            owned_cats=await count(
                select(func.count(Cat.id)).where(Cat.owner_id.is_not(None)),
            ),
            stray_cats=await count(
                select(func.count(Cat.id)).where(Cat.owner_id.is_(None)),
            ),
        )
    logger.info(f"Seed complete: {summary}")
    return summary


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, "text", settings.database_echo)
    gateway = PersistenceGateway(settings.database_url, echo=settings.database_echo)
    try:
        await gateway.create_schema()
        await seed_demo_data(gateway)
    finally:
        await gateway.dispose()


if __name__ == "__main__":
    asyncio.run(main())
