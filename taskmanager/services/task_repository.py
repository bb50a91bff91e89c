"""
Abstract persistence contract for task rows.

Predicates and orderings are SQLAlchemy column expressions, so the query
engine can compose them freely and any SQLAlchemy-backed store can run them.
Every read used by the services carries an owner predicate.
"""

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from taskmanager.models.task import Task


class TaskRepository(ABC):
    """Storage port consumed by the task query engine and task service."""

    @abstractmethod
    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession = None
    ) -> Task:
        """Insert a task and return it with its generated identifier."""

    @abstractmethod
    async def get_owned_task(
        self, task_id: uuid.UUID, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Task | None:
        """Fetch by id AND owner in a single predicate."""

    @abstractmethod
    async def find_tasks(
        self,
        criteria: Sequence[ColumnElement[bool]],
        *,
        order_by: Sequence[ColumnElement[Any]] = (),
        offset: int = 0,
        limit: int | None = None,
        db: AsyncSession = None,
    ) -> list[Task]:
        """Return tasks matching all criteria, ordered and windowed."""

    @abstractmethod
    async def update(
        self, db_obj: Task, update_data: dict[str, Any], *, db: AsyncSession = None
    ) -> Task:
        """Persist new field values on a loaded task."""

    @abstractmethod
    async def delete(self, db_obj: Task, *, db: AsyncSession = None) -> None:
        """Remove a loaded task."""
