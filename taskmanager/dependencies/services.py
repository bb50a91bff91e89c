"""
Service providers for FastAPI routes.

Configuration is read from settings here, at the edge, and handed to the
services as explicit config objects.
"""

from functools import lru_cache

from taskmanager.config import settings
from taskmanager.services.task_service import TaskService
from taskmanager.services.token_service import TokenService
from taskmanager.services.user_service import UserService


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(settings.token_config())


def get_user_service() -> UserService:
    return UserService()


def get_task_service() -> TaskService:
    return TaskService(query_config=settings.task_query_config())
