"""
Task model for personal to-do items.

Architecture:
    User → Task

Lifecycle:
    Created → (Updated)* → Deleted

Status and priority are payload fields, not lifecycle states. The owner
reference is fixed at creation and never rewritten.
"""

import enum
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship, validates

from taskmanager.models.base import (
    SCHEMA_NAME,
    Base,
    TimestampMixin,
    UUIDMixin,
    qualified,
)


class TaskStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class TaskPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Ordering used when sorting by priority; string order would put High first
PRIORITY_RANK = {
    TaskPriority.LOW: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.HIGH: 2,
}


def to_utc(value: datetime) -> datetime:
    """Express a due date in UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Task(Base, UUIDMixin, TimestampMixin):
    """
    A to-do item owned by exactly one user.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_owner_id", "owner_id"),
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_due_date", "due_date"),
        {"schema": SCHEMA_NAME},
    )

    title = Column(
        String(200),
        nullable=False,
        comment="Short, non-empty task title",
    )

    description = Column(
        Text,
        nullable=True,
        comment="Optional free-form details",
    )

    due_date = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Optional due date; filtering compares its calendar date only",
    )

    status = Column(
        SAEnum(
            TaskStatus,
            name="task_status",
            native_enum=False,
            length=20,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=TaskStatus.PENDING,
        comment="Pending/InProgress/Completed",
    )

    priority = Column(
        SAEnum(
            TaskPriority,
            name="task_priority",
            native_enum=False,
            length=20,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=TaskPriority.MEDIUM,
        comment="Low/Medium/High",
    )

    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey(f"{qualified('users')}.id", ondelete="CASCADE"),
        nullable=False,
        comment="Reference to the user who owns this task",
    )

    owner = relationship(
        "User",
        back_populates="tasks",
        doc="User who owns this task",
    )

    @validates("title")
    def validate_title(self, key, value):
        if value is None or not value.strip():
            raise ValueError("Task title must not be empty")
        return value

    @validates("due_date")
    def validate_due_date(self, key, value):
        # Stored in UTC; the due date filter compares UTC calendar days
        return to_utc(value) if value is not None else None

    @validates("owner_id")
    def validate_owner_id(self, key, value):
        # Ownership is assigned once; reassignment is a programming error
        current = self.__dict__.get("owner_id")
        if current is not None and current != value:
            raise ValueError("Task owner cannot be changed")
        return value

    def __repr__(self):
        return (
            f"<Task(id={self.id}, "
            f"title='{self.title[:50] if self.title else None}', "
            f"status='{self.status.value if self.status else None}', "
            f"owner_id={self.owner_id})>"
        )
