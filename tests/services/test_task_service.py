import asyncio
import uuid
from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from taskmanager.exceptions import StorageError
from taskmanager.models import Task, TaskPriority, TaskStatus
from taskmanager.schemas import TaskCreate, TaskUpdate


def _payload(**overrides) -> TaskCreate:
    fields = {
        "title": "Write report",
        "description": "Quarterly numbers",
        "due_date": datetime(2024, 3, 1, 9, 30, tzinfo=UTC),
        "status": TaskStatus.IN_PROGRESS,
        "priority": TaskPriority.HIGH,
    }
    fields.update(overrides)
    return TaskCreate(**fields)


@pytest.mark.asyncio
async def test_create_stamps_owner_and_timestamps(task_service, make_user, db):
    owner = await make_user("creator")

    task = await task_service.create_task(_payload(), owner.id, db=db)

    assert isinstance(task.id, uuid.UUID)
    assert task.owner_id == owner.id
    assert task.title == "Write report"
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.priority is TaskPriority.HIGH
    assert task.created_at is not None
    assert task.updated_at == task.created_at


@pytest.mark.asyncio
async def test_create_then_get_round_trip(task_service, make_user, db):
    owner = await make_user("roundtrip")
    created = await task_service.create_task(_payload(), owner.id, db=db)
    expected = created.to_dict()

    fetched = await task_service.get_task(created.id, owner.id, db=db)

    assert fetched is not None
    assert fetched.to_dict() == expected


@pytest.mark.asyncio
async def test_create_applies_defaults(task_service, make_user, db):
    owner = await make_user("defaults")

    task = await task_service.create_task(TaskCreate(title="Minimal"), owner.id, db=db)

    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.description is None
    assert task.due_date is None


@pytest.mark.asyncio
async def test_list_tasks_is_scoped_to_owner(task_service, make_user, db):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await task_service.create_task(_payload(title="a1"), alice.id, db=db)
    await task_service.create_task(_payload(title="a2"), alice.id, db=db)
    await task_service.create_task(_payload(title="b1"), bob.id, db=db)

    tasks = await task_service.list_tasks(alice.id, db=db)

    assert sorted(task.title for task in tasks) == ["a1", "a2"]
    assert await task_service.list_tasks(uuid.uuid4(), db=db) == []


@pytest.mark.asyncio
async def test_update_overwrites_fields_and_refreshes_updated_at(
    task_service, make_user, db
):
    owner = await make_user("updater")
    task = await task_service.create_task(_payload(), owner.id, db=db)
    original_id = task.id
    original_created = task.created_at
    original_updated = task.updated_at
    await asyncio.sleep(0.01)

    updated = await task_service.update_task(
        task.id,
        TaskUpdate(
            title="Write final report",
            description=None,
            due_date=None,
            status=TaskStatus.COMPLETED,
            priority=TaskPriority.LOW,
        ),
        owner.id,
        db=db,
    )

    assert updated.id == original_id
    assert updated.owner_id == owner.id
    assert updated.title == "Write final report"
    assert updated.description is None
    assert updated.due_date is None
    assert updated.status is TaskStatus.COMPLETED
    assert updated.priority is TaskPriority.LOW
    assert updated.created_at == original_created
    assert updated.updated_at > original_updated


@pytest.mark.asyncio
async def test_update_missing_task_returns_none(task_service, make_user, db):
    owner = await make_user("nobody")

    assert await task_service.update_task(uuid.uuid4(), _payload(), owner.id, db=db) is None


@pytest.mark.asyncio
async def test_delete_returns_true_then_false(task_service, make_user, db):
    owner = await make_user("deleter")
    task = await task_service.create_task(_payload(), owner.id, db=db)

    assert await task_service.delete_task(task.id, owner.id, db=db) is True
    assert await task_service.delete_task(task.id, owner.id, db=db) is False
    assert await task_service.get_task(task.id, owner.id, db=db) is None


@pytest.mark.asyncio
async def test_foreign_task_is_indistinguishable_from_missing(task_service, make_user, db):
    owner = await make_user("owner")
    intruder = await make_user("intruder")
    task = await task_service.create_task(_payload(), owner.id, db=db)
    original_updated = task.updated_at
    missing_id = uuid.uuid4()

    assert await task_service.get_task(task.id, intruder.id, db=db) is None
    assert await task_service.get_task(missing_id, intruder.id, db=db) is None

    assert await task_service.update_task(task.id, _payload(title="hijacked"), intruder.id, db=db) is None
    assert await task_service.update_task(missing_id, _payload(), intruder.id, db=db) is None

    assert await task_service.delete_task(task.id, intruder.id, db=db) is False
    assert await task_service.delete_task(missing_id, intruder.id, db=db) is False

    # The owner's task is untouched
    stmt = (
        select(Task)
        .where(Task.id == task.id)
        .execution_options(populate_existing=True)
    )
    stored = (await db.execute(stmt)).scalar_one()
    assert stored.title == "Write report"
    assert stored.owner_id == owner.id
    assert stored.updated_at == original_updated


@pytest.mark.asyncio
async def test_owner_cannot_be_reassigned(task_service, make_user, db):
    owner = await make_user("keeper")
    task = await task_service.create_task(_payload(), owner.id, db=db)

    with pytest.raises(ValueError):
        task.owner_id = uuid.uuid4()


@pytest.mark.asyncio
async def test_storage_failure_surfaces_as_storage_error(task_service, make_user, db, engine):
    owner = await make_user("broken")
    async with engine.begin() as conn:
        await conn.exec_driver_sql("DROP TABLE tasks")

    with pytest.raises(StorageError):
        await task_service.query_tasks(owner.id, db=db)
