from taskmanager.dependencies.auth import get_current_user
from taskmanager.dependencies.services import (
    get_task_service,
    get_token_service,
    get_user_service,
)

__all__ = [
    "get_current_user",
    "get_task_service",
    "get_token_service",
    "get_user_service",
]
