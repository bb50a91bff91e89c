from __future__ import annotations

from functools import wraps
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db import AppAsyncSessionLocal
from taskmanager.exceptions import StorageError
from taskmanager.models.base import Base
from taskmanager.utils.logger import setup_logger

logger = setup_logger("db_handlers")


ModelType = TypeVar("ModelType", bound=Base)


def check_local_db(func):
    """
    Database session decorator with transaction management.

    When the caller passes ``db=`` the caller owns the session and the
    transaction. Otherwise a session is opened here, committed on success and
    rolled back on failure. Storage faults surface as StorageError; they are
    not retried.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        if kwargs.get("db") is not None:
            return await func(*args, **kwargs)

        async with AppAsyncSessionLocal() as db:
            kwargs["db"] = db
            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(
                    f"Transaction failed in {func.__name__}: {e}", exc_info=True
                )
                raise StorageError(
                    f"Storage failure in {func.__name__}", operation=func.__name__
                ) from e
            except OSError as e:
                # Driver-level connection failures (refused, timed out)
                await db.rollback()
                logger.error(f"Connection error in {func.__name__}: {e}")
                raise StorageError(
                    f"Database unreachable in {func.__name__}",
                    operation=func.__name__,
                ) from e
            except Exception:
                await db.rollback()
                raise

    return wrapper


class BaseDBHandler(Generic[ModelType]):
    """Generic handler for database operations with basic CRUD methods."""

    def __init__(self, model: type[ModelType]):
        self.model = model

    def _storage_error(self, action: str, e: Exception) -> StorageError:
        return StorageError(
            f"Error {action} {self.model.__name__}: {e}",
            operation=f"{action} {self.model.__name__}",
        )

    @check_local_db
    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession = None
    ) -> ModelType:
        """Create a new record in the database."""

        db_obj = self.model(**obj_dict)
        try:
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"IntegrityError creating {self.model.__name__}: {e}")
            raise self._storage_error("creating", e) from e
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error creating {self.model.__name__}: {e}", exc_info=True)
            raise self._storage_error("creating", e) from e

    @check_local_db
    async def get(self, id: Any, *, db: AsyncSession = None) -> ModelType | None:
        """Get a single record by its primary key."""
        try:
            stmt = select(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error loading {self.model.__name__} {id}: {e}")
            raise self._storage_error("loading", e) from e

    @check_local_db
    async def update(
        self,
        db_obj: ModelType,
        update_data: dict[str, Any],
        *,
        db: AsyncSession = None,
    ) -> ModelType:
        """Update an existing record in the database."""

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        try:
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            return db_obj
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                f"Error updating {self.model.__name__} with id {db_obj.id}: {e}",
                exc_info=True,
            )
            raise self._storage_error("updating", e) from e

    @check_local_db
    async def delete(self, db_obj: ModelType, *, db: AsyncSession = None) -> None:
        """Delete an already loaded record."""
        try:
            await db.delete(db_obj)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                f"Error removing {self.model.__name__} with id {db_obj.id}: {e}",
                exc_info=True,
            )
            raise self._storage_error("removing", e) from e
