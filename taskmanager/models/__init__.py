"""
Database models for the task manager.

Architecture: User → Task ownership pattern.
"""

from taskmanager.models.task import PRIORITY_RANK, Task, TaskPriority, TaskStatus, to_utc
from taskmanager.models.user import User

__all__ = [
    "User",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "PRIORITY_RANK",
    "to_utc",
]
