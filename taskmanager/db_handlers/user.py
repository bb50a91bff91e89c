from __future__ import annotations

import uuid

from sqlalchemy import exists, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db_handlers.base import BaseDBHandler, check_local_db
from taskmanager.models.user import User
from taskmanager.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self):
        super().__init__(User)

    @check_local_db
    async def username_or_email_exists(
        self, username: str, email: str, *, db: AsyncSession = None
    ) -> bool:
        """True if any user has this username OR this email."""
        try:
            stmt = select(
                exists().where(or_(User.username == username, User.email == email))
            )
            result = await db.execute(stmt)
            return bool(result.scalar())
        except SQLAlchemyError as e:
            logger.error(f"Error checking existence of user '{username}': {e}")
            raise self._storage_error("checking", e) from e

    @check_local_db
    async def get_user_by_login(
        self, username_or_email: str, *, db: AsyncSession = None
    ) -> User | None:
        """Get a user whose username or email equals the given identifier."""
        try:
            stmt = select(User).where(
                or_(
                    User.username == username_or_email,
                    User.email == username_or_email,
                )
            )
            result = await db.execute(stmt)
            # A username can equal another account's email; prefer the username
            users = result.scalars().all()
            for user in users:
                if user.username == username_or_email:
                    return user
            return users[0] if users else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by login '{username_or_email}': {e}")
            raise self._storage_error("loading", e) from e

    @check_local_db
    async def get_user_by_id(
        self, user_id: uuid.UUID, *, db: AsyncSession = None
    ) -> User | None:
        return await self.get(user_id, db=db)
