"""Pydantic models for API requests and responses."""

from .common import DatabaseStatus, ErrorResponse, HealthResponse
from .task import Task, TaskCreate
from .user import User, UserCreate

__all__ = [
    "DatabaseStatus",
    "ErrorResponse",
    "HealthResponse",
    "Task",
    "TaskCreate",
    "User",
    "UserCreate",
]
