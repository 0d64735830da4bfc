"""Declarative Base — shared metadata for players, questions, sessions and results.

Invariants:
    - Every quiz model inherits from Base; alembic/env.py targets Base.metadata
    - Constraints get deterministic names (naming convention), so migrations can
      drop or alter them by name on both Postgres and SQLite batch mode
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
