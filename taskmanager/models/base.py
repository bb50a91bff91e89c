"""
Base configurations and mixins for database models.

Provides the declarative base with dictionary serialization plus the UUID
primary key and timestamp mixins shared by users and tasks.
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import Column, DateTime, Uuid, inspect
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.functions import now as db_now

from taskmanager.config import settings


class CustomBase:
    """
    Custom base class for SQLAlchemy models with enhanced serialization.

    ``to_dict`` converts UUIDs to strings, datetimes to ISO-8601 and enum
    members to their values.
    """

    def to_dict(self) -> dict:
        d = {}
        if not self:
            return d
        for column in inspect(self).mapper.column_attrs:
            value = getattr(self, column.key)
            if isinstance(value, uuid.UUID):
                d[column.key] = str(value)
            elif isinstance(value, datetime | date):
                d[column.key] = value.isoformat()
            elif isinstance(value, enum.Enum):
                d[column.key] = value.value
            else:
                d[column.key] = value
        return d


# Create the base class for all models
Base = declarative_base(cls=CustomBase)


class TimestampMixin:
    """
    Adds created_at / updated_at columns.

    The database fills both on insert. Services stamp them explicitly on every
    successful mutation so that no-op or failed writes never touch them.
    """

    created_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was last updated",
    )


class UUIDMixin:
    """UUID4 primary key generated client-side at construction time."""

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


SCHEMA_NAME = settings.schema_name


def qualified(table: str) -> str:
    """Schema-qualified table name for foreign keys."""
    return f"{SCHEMA_NAME}.{table}" if SCHEMA_NAME else table


__all__ = ["Base", "TimestampMixin", "UUIDMixin", "SCHEMA_NAME", "qualified"]
