"""
Task API Routes - personal task management for the authenticated user.

Every route resolves the caller from the bearer token and passes only that
user's id to the task service. Tasks owned by someone else answer 404, the
same as tasks that do not exist.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db import get_app_db
from taskmanager.dependencies import get_current_user, get_task_service
from taskmanager.models import TaskPriority, TaskStatus, User
from taskmanager.schemas import TaskCreate, TaskResponse, TaskUpdate
from taskmanager.services.task_query import TaskSortField
from taskmanager.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])

MAX_PAGE_NUMBER = 1_000_000


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    task_service: TaskService = Depends(get_task_service),
):
    task = await task_service.create_task(payload, current_user.id, db=db)
    return TaskResponse.model_validate(task)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    task_service: TaskService = Depends(get_task_service),
    status_filter: TaskStatus | None = Query(
        None, alias="status", description="Only tasks with this status"
    ),
    due_date: date | None = Query(
        None, description="Only tasks due on this calendar day"
    ),
    priority: TaskPriority | None = Query(None, description="Only tasks with this priority"),
    sort_by: str | None = Query(
        None, description="'duedate' (default) or 'priority'; case-insensitive"
    ),
    sort_descending: bool = Query(False, description="Reverse the sort order"),
    page: int = Query(
        1, le=MAX_PAGE_NUMBER, description="1-based page number; values below 1 mean 1"
    ),
    page_size: int | None = Query(None, ge=1, description="Tasks per page"),
):
    """
    List the current user's tasks with optional filters, sorting and paging.

    Filters combine with AND. Unknown sort fields fall back to due date.
    """
    tasks = await task_service.query_tasks(
        current_user.id,
        status=status_filter,
        due_date=due_date,
        priority=priority,
        sort_field=TaskSortField.resolve(
            sort_by, task_service.query_engine.default_sort_field
        ),
        sort_descending=sort_descending,
        page=page,
        page_size=page_size,
        db=db,
    )
    return [TaskResponse.model_validate(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    task_service: TaskService = Depends(get_task_service),
):
    task = await task_service.get_task(task_id, current_user.id, db=db)
    if task is None:
        raise _not_found()
    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    task_service: TaskService = Depends(get_task_service),
):
    task = await task_service.update_task(task_id, payload, current_user.id, db=db)
    if task is None:
        raise _not_found()
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    task_service: TaskService = Depends(get_task_service),
):
    if not await task_service.delete_task(task_id, current_user.id, db=db):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
