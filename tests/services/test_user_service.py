import pytest
from sqlalchemy import select
from sqlalchemy.exc import InvalidRequestError

from taskmanager.models import User
from taskmanager.services.password_validator import MISSING_DIGIT

VALID_PASSWORD = "ValidPass1!"


@pytest.mark.asyncio
async def test_create_user_stores_hash_not_plaintext(user_service, db):
    result = await user_service.create_user(
        "alice", "alice@example.com", VALID_PASSWORD, db=db
    )

    assert result.succeeded
    assert result.error is None
    user = result.user
    assert user.id is not None
    assert user.hashed_password != VALID_PASSWORD
    assert user.hashed_password.startswith("$2")
    assert user.created_at is not None
    assert user.updated_at is not None


@pytest.mark.asyncio
async def test_create_user_with_weak_password_persists_nothing(user_service, db):
    result = await user_service.create_user(
        "bob", "bob@example.com", "NoDigitsHere!", db=db
    )

    assert not result.succeeded
    assert result.error == MISSING_DIGIT
    rows = (await db.execute(select(User))).scalars().all()
    assert rows == []


@pytest.mark.asyncio
async def test_exists_matches_username_or_email(user_service, db):
    await user_service.create_user("carol", "carol@example.com", VALID_PASSWORD, db=db)

    assert await user_service.exists("carol", "other@example.com", db=db)
    assert await user_service.exists("someone", "carol@example.com", db=db)
    assert not await user_service.exists("someone", "other@example.com", db=db)


@pytest.mark.asyncio
async def test_authenticate_by_username_or_email(user_service, db):
    created = (
        await user_service.create_user("dave", "dave@example.com", VALID_PASSWORD, db=db)
    ).user

    by_name = await user_service.authenticate("dave", VALID_PASSWORD, db=db)
    by_email = await user_service.authenticate("dave@example.com", VALID_PASSWORD, db=db)

    assert by_name.id == created.id
    assert by_email.id == created.id


@pytest.mark.asyncio
async def test_unknown_user_and_wrong_password_look_the_same(user_service, db):
    await user_service.create_user("erin", "erin@example.com", VALID_PASSWORD, db=db)

    unknown = await user_service.authenticate("nouser", "anypass", db=db)
    wrong_password = await user_service.authenticate("erin", "wrongpass", db=db)

    assert unknown is None
    assert wrong_password is None


@pytest.mark.asyncio
async def test_user_tasks_are_never_lazy_loaded(user_service, db):
    user = (
        await user_service.create_user("fiona", "fiona@example.com", VALID_PASSWORD, db=db)
    ).user

    # Task listings always go through the owner-scoped query engine
    with pytest.raises(InvalidRequestError):
        _ = user.tasks
