"""
User model for authentication and task ownership.

Architecture:
    User → Task

Key Features:
    - Bcrypt password hashing (the plaintext is never stored)
    - Login by username or email, both globally unique
    - Automatic timestamp tracking
"""

from sqlalchemy import Column, Index, String
from sqlalchemy.orm import relationship

from taskmanager.models.base import SCHEMA_NAME, Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """
    Registered account that owns tasks.

    Uniqueness of username and email is exact-match; any case folding is left
    to the database collation.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_username", "username", unique=True),
        Index("ix_users_email", "email", unique=True),
        {"schema": SCHEMA_NAME},
    )

    username = Column(
        String(50),
        nullable=False,
        comment="Unique username for user identification and login",
    )

    email = Column(
        String(255),
        nullable=False,
        comment="Unique email address, also accepted at login",
    )

    hashed_password = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password for secure authentication",
    )

    # Convenience projection only; task queries always filter on Task.owner_id
    tasks = relationship(
        "Task",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
        doc="Tasks owned by this user",
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
