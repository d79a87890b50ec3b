"""
Tasks API endpoints.

Persisted when the database is connected, otherwise fallback mock data.
"""

import logging

from fastapi import APIRouter, Depends, Request

from taskboard.api.responses import error_response
from taskboard.config import settings
from taskboard.errors import StoreError, ValidationError
from taskboard.models.common import ErrorResponse
from taskboard.models.task import Task, TaskCreate
from taskboard.rate_limit import limiter
from taskboard.services import TaskService, get_task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tasks"])


@router.get(
    "/tasks",
    response_model=list[Task],
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(settings.read_rate_limit)
async def list_tasks(
    request: Request,
    service: TaskService = Depends(get_task_service),
):
    """List tasks, newest first."""
    try:
        return await service.list_tasks()

    except StoreError as e:
        logger.error(f"Error fetching tasks: {e}", exc_info=True)
        return error_response(request, 500, "Failed to fetch tasks", e)


@router.post(
    "/tasks",
    status_code=201,
    response_model=Task,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.write_rate_limit)
async def create_task(
    request: Request,
    payload: TaskCreate | None = None,
    service: TaskService = Depends(get_task_service),
):
    """Create a task. New tasks always start with ``completed`` false."""
    try:
        return await service.create_task(payload or TaskCreate())

    except ValidationError as e:
        logger.warning(f"Rejected task: {e}")
        return error_response(request, 400, e.message)

    except StoreError as e:
        logger.error(f"Error creating task: {e}", exc_info=True)
        return error_response(request, 500, "Failed to create task", e)
