"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - One metadata object shared by models, tests and alembic
"""
