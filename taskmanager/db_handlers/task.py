from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql.elements import ColumnElement

from taskmanager.db_handlers.base import BaseDBHandler, check_local_db
from taskmanager.models.task import Task
from taskmanager.services.task_repository import TaskRepository
from taskmanager.utils.logger import log_performance, setup_logger

logger = setup_logger("task_db_handler")


class TaskDBHandler(BaseDBHandler[Task], TaskRepository):
    def __init__(self):
        super().__init__(Task)

    @check_local_db
    async def get_owned_task(
        self, task_id: uuid.UUID, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Task | None:
        """Get task by ID that belongs to specific user."""
        try:
            stmt = select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving owned task {task_id} for user {owner_id}: {e}"
            )
            raise self._storage_error("loading", e) from e

    @check_local_db
    @log_performance(logger, "find_tasks")
    async def find_tasks(
        self,
        criteria: Sequence[ColumnElement[bool]],
        *,
        order_by: Sequence[ColumnElement[Any]] = (),
        offset: int = 0,
        limit: int | None = None,
        db: AsyncSession = None,
    ) -> list[Task]:
        """Get tasks matching every criterion with ordering and pagination."""
        try:
            stmt = select(Task).where(*criteria)
            if order_by:
                stmt = stmt.order_by(*order_by)
            if offset:
                stmt = stmt.offset(offset)
            if limit is not None:
                stmt = stmt.limit(limit)
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error querying tasks: {e}", exc_info=True)
            raise self._storage_error("querying", e) from e
