"""Error types raised by the data-access layer."""


class TaskboardError(Exception):
    """Base class for Taskboard errors."""


class ValidationError(TaskboardError):
    """A required field is missing or blank."""

    def __init__(self, message: str, fields: tuple[str, ...] = ()):
        super().__init__(message)
        self.message = message
        self.fields = fields


class ConflictError(TaskboardError):
    """An entity with the same unique key already exists."""


class StoreConnectionError(TaskboardError):
    """The persistent store could not be reached at startup."""


class StoreError(TaskboardError):
    """A read or write against the connected store failed."""
