"""
Task lifecycle: create, read, update and delete, always scoped to the owner.

A task that belongs to someone else is reported exactly like a task that does
not exist (None / False); callers never learn that it exists.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.config import TaskQueryConfig
from taskmanager.db_handlers import TaskDBHandler, check_local_db
from taskmanager.models import Task
from taskmanager.schemas import TaskCreate, TaskUpdate
from taskmanager.services.task_query import TaskQueryEngine
from taskmanager.services.task_repository import TaskRepository
from taskmanager.utils.logger import setup_logger

logger = setup_logger(__name__)

# Fields a full update overwrites; id and owner_id are never touched
UPDATABLE_FIELDS = ("title", "description", "due_date", "status", "priority")


class TaskService:
    def __init__(
        self,
        repository: TaskRepository | None = None,
        query_config: TaskQueryConfig | None = None,
    ):
        self.repository = repository or TaskDBHandler()
        self.query_engine = TaskQueryEngine(
            self.repository, query_config or TaskQueryConfig()
        )

    @check_local_db
    async def create_task(
        self, payload: TaskCreate, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Task:
        now = datetime.now(UTC)
        task = await self.repository.create(
            {
                **payload.model_dump(include=set(UPDATABLE_FIELDS)),
                "owner_id": owner_id,
                "created_at": now,
                "updated_at": now,
            },
            db=db,
        )
        logger.info(f"Task '{task.title}' ({task.id}) created for user {owner_id}")
        return task

    @check_local_db
    async def get_task(
        self, task_id: uuid.UUID, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Task | None:
        task = await self.repository.get_owned_task(task_id, owner_id, db=db)
        if task is None:
            logger.debug(f"Task {task_id} not found for user {owner_id}")
        return task

    @check_local_db
    async def list_tasks(
        self, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> list[Task]:
        return await self.query_engine.all_for_owner(owner_id, db=db)

    @check_local_db
    async def query_tasks(
        self, owner_id: uuid.UUID, *, db: AsyncSession = None, **filters
    ) -> list[Task]:
        """Filtered, sorted, paginated listing; see TaskQueryEngine.query."""
        return await self.query_engine.query(owner_id, db=db, **filters)

    @check_local_db
    async def update_task(
        self,
        task_id: uuid.UUID,
        payload: TaskUpdate,
        owner_id: uuid.UUID,
        *,
        db: AsyncSession = None,
    ) -> Task | None:
        task = await self.repository.get_owned_task(task_id, owner_id, db=db)
        if task is None:
            logger.warning(f"Update skipped: task {task_id} not found for user {owner_id}")
            return None

        previous_title = task.title
        update_data = payload.model_dump(include=set(UPDATABLE_FIELDS))
        update_data["updated_at"] = datetime.now(UTC)
        updated = await self.repository.update(task, update_data, db=db)
        logger.info(
            f"Task {task_id} updated for user {owner_id}: "
            f"'{previous_title}' -> '{updated.title}'"
        )
        return updated

    @check_local_db
    async def delete_task(
        self, task_id: uuid.UUID, owner_id: uuid.UUID, *, db: AsyncSession = None
    ) -> bool:
        task = await self.repository.get_owned_task(task_id, owner_id, db=db)
        if task is None:
            logger.debug(f"Delete skipped: task {task_id} not found for user {owner_id}")
            return False

        title = task.title
        await self.repository.delete(task, db=db)
        logger.info(f"Task '{title}' ({task_id}) deleted for user {owner_id}")
        return True
