"""
Task query engine: filtered, sorted and paginated listings of one user's tasks.

Query Flow:
    1. Owner predicate (always present, cannot be overridden)
    2. Optional filters combined with AND: status, due date (calendar day), priority
    3. Ordering by due date or priority rank, then created_at and id
    4. Page window: skip (page - 1) * page_size, take page_size

Sort fields are resolved to TaskSortField once at the boundary; the engine
only ever dispatches on the enum.
"""

import enum
import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import Date, case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from taskmanager.config import TaskQueryConfig
from taskmanager.models import PRIORITY_RANK, Task, TaskPriority, TaskStatus, to_utc
from taskmanager.services.task_repository import TaskRepository
from taskmanager.utils.logger import setup_logger

logger = setup_logger(__name__)

# Largest OFFSET bound to the database; fits a signed 32-bit integer
MAX_OFFSET = 2**31 - 1


class TaskSortField(str, enum.Enum):
    DUE_DATE = "duedate"
    PRIORITY = "priority"

    @classmethod
    def resolve(
        cls,
        value: "str | TaskSortField | None",
        default: "TaskSortField | None" = None,
    ) -> "TaskSortField":
        """Case-insensitive lookup; anything unrecognised falls back to ``default``."""
        if isinstance(value, cls):
            return value
        fallback = default or cls.DUE_DATE
        if not value:
            return fallback
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.debug(f"Unknown sort field '{value}', using {fallback.value}")
            return fallback


def page_window(page: int, page_size: int, max_page_size: int) -> tuple[int, int]:
    """
    Convert a 1-based page number into (offset, limit).

    Pages below 1 are treated as page 1; the size is clamped to
    [1, max_page_size] and the offset to MAX_OFFSET.
    """
    page = max(page, 1)
    page_size = min(max(page_size, 1), max_page_size)
    return min((page - 1) * page_size, MAX_OFFSET), page_size


def _as_calendar_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return to_utc(value).date()
    return value


def build_criteria(
    owner_id: uuid.UUID,
    status: TaskStatus | None = None,
    due_date: date | datetime | None = None,
    priority: TaskPriority | None = None,
) -> list[ColumnElement[bool]]:
    criteria = [Task.owner_id == owner_id]
    if status is not None:
        criteria.append(Task.status == status)
    if due_date is not None:
        # Calendar-day match; time of day is ignored
        criteria.append(
            func.date(Task.due_date, type_=Date) == _as_calendar_date(due_date)
        )
    if priority is not None:
        criteria.append(Task.priority == priority)
    return criteria


def build_ordering(
    sort_field: TaskSortField, descending: bool = False
) -> list[ColumnElement[Any]]:
    if sort_field is TaskSortField.PRIORITY:
        key = case(PRIORITY_RANK, value=Task.priority)
        primary = key.desc() if descending else key.asc()
    else:
        primary = (Task.due_date.desc() if descending else Task.due_date.asc())
        primary = primary.nulls_last()
    # Deterministic tie-break keeps pages stable between requests
    return [primary, Task.created_at.asc(), Task.id.asc()]


class TaskQueryEngine:
    def __init__(self, repository: TaskRepository, config: TaskQueryConfig):
        self.repository = repository
        self.config = config
        self.default_sort_field = TaskSortField.resolve(config.default_sort_field)

    async def query(
        self,
        owner_id: uuid.UUID,
        *,
        status: TaskStatus | None = None,
        due_date: date | datetime | None = None,
        priority: TaskPriority | None = None,
        sort_field: TaskSortField | str | None = None,
        sort_descending: bool = False,
        page: int = 1,
        page_size: int | None = None,
        db: AsyncSession = None,
    ) -> list[Task]:
        """Return one page of the owner's tasks; an empty list when nothing matches."""
        sort_field = TaskSortField.resolve(sort_field, self.default_sort_field)
        offset, limit = page_window(
            page,
            page_size if page_size is not None else self.config.default_page_size,
            self.config.max_page_size,
        )

        tasks = await self.repository.find_tasks(
            build_criteria(owner_id, status, due_date, priority),
            order_by=build_ordering(sort_field, sort_descending),
            offset=offset,
            limit=limit,
            db=db,
        )
        logger.debug(
            f"Task query for {owner_id}: status={status}, due_date={due_date}, "
            f"priority={priority}, sort={sort_field.value}"
            f"{' desc' if sort_descending else ''}, offset={offset}, "
            f"limit={limit} -> {len(tasks)} tasks"
        )
        return tasks

    async def all_for_owner(
        self, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> list[Task]:
        """Unfiltered, unpaginated scan of the owner's tasks."""
        return await self.repository.find_tasks(
            build_criteria(owner_id),
            order_by=[Task.created_at.asc(), Task.id.asc()],
            db=db,
        )
