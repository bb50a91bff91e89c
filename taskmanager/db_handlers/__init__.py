from taskmanager.db_handlers.base import BaseDBHandler, check_local_db
from taskmanager.db_handlers.task import TaskDBHandler
from taskmanager.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "check_local_db",
    "TaskDBHandler",
    "UserDBHandler",
]
