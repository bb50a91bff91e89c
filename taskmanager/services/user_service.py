"""
User directory: registration, existence checks and credential verification.

Registration runs the password rules before anything is written and stores
only a bcrypt hash. Authentication returns None for both an unknown account
and a wrong password so callers cannot tell the two apart.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db_handlers import UserDBHandler, check_local_db
from taskmanager.models import User
from taskmanager.services.password_validator import validate_password
from taskmanager.utils.auth import get_password_hash, verify_password
from taskmanager.utils.logger import setup_logger

logger = setup_logger(__name__)

_DUMMY_HASH: str | None = None


def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = get_password_hash("not-a-real-password")
    return _DUMMY_HASH


class RegistrationResult(BaseModel):
    """Either the stored user or the reason registration was refused."""

    user: User | None = None
    error: str | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @property
    def succeeded(self) -> bool:
        return self.user is not None


class UserService:
    def __init__(self, db_handler: UserDBHandler | None = None):
        self.db_handler = db_handler or UserDBHandler()

    @check_local_db
    async def exists(
        self, username: str, email: str, *, db: AsyncSession = None
    ) -> bool:
        """True if either the username or the email is already taken."""
        return await self.db_handler.username_or_email_exists(username, email, db=db)

    @check_local_db
    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        *,
        db: AsyncSession = None,
    ) -> RegistrationResult:
        validation = validate_password(password)
        if not validation.is_valid:
            logger.info(f"Registration refused for '{username}': {validation.reason}")
            return RegistrationResult(error=validation.reason)

        now = datetime.now(UTC)
        user = await self.db_handler.create(
            {
                "username": username,
                "email": email,
                "hashed_password": get_password_hash(password),
                "created_at": now,
                "updated_at": now,
            },
            db=db,
        )
        logger.info(f"User {user.username} registered with id {user.id}")
        return RegistrationResult(user=user)

    @check_local_db
    async def authenticate(
        self, username_or_email: str, password: str, *, db: AsyncSession = None
    ) -> User | None:
        user = await self.db_handler.get_user_by_login(username_or_email, db=db)
        # Unknown accounts still pay for one bcrypt check
        stored_hash = user.hashed_password if user else _dummy_hash()
        if not verify_password(password, stored_hash) or user is None:
            logger.info("Authentication failed: invalid credentials")
            return None

        logger.info(f"User {user.username} authenticated")
        return user

    @check_local_db
    async def get_user(self, user_id, *, db: AsyncSession = None) -> User | None:
        return await self.db_handler.get_user_by_id(user_id, db=db)
