"""Business logic services."""

from fastapi import Request

from .task_service import TaskService
from .user_service import UserService


def get_user_service(request: Request) -> UserService:
    """FastAPI dependency for the user service."""
    return request.app.state.user_service


def get_task_service(request: Request) -> TaskService:
    """FastAPI dependency for the task service."""
    return request.app.state.task_service


__all__ = ["TaskService", "UserService", "get_task_service", "get_user_service"]
