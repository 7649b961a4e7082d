"""ORM Models — SQLAlchemy declarative models for users, cats and posts.

Invariants:
    - All models inherit from Base (db/base.py)
    - No relationship() declarations: engines issue explicit joins and aggregates

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from cattery.models.user import User  # noqa: F401
from cattery.models.cat import Cat  # noqa: F401
from cattery.models.post import Post  # noqa: F401
