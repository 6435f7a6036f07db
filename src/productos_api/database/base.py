"""
Declarative base for all ORM models.

Import `Base` in every model module; `Base.metadata` is what the startup hook and
the test fixtures use to create the schema.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Naming convention for constraints and indexes, so constraint names reported by
# the database are predictable (the integrity classifier relies on them).
Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

# Range of an `Integer` column on every supported backend (32-bit on PostgreSQL)
INTEGER_MIN = -2_147_483_648
INTEGER_MAX = 2_147_483_647
