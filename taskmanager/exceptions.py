"""
Infrastructure faults raised by the task manager core.

Domain outcomes (task not found, weak password, bad credentials) are returned
as values and never raised. The exceptions here mean a collaborator failed and
the caller decides whether to retry.
"""


class TaskManagerError(Exception):
    """Base class for infrastructure faults."""


class StorageError(TaskManagerError):
    """The database could not complete a read or write."""

    def __init__(self, message: str, *, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class TokenSigningError(TaskManagerError):
    """An access token could not be signed."""
