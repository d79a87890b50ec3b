"""
Users API endpoints.

Served from MongoDB when connected, otherwise from fallback data.
"""

import logging

from fastapi import APIRouter, Depends, Request

from taskboard.api.responses import error_response
from taskboard.config import settings
from taskboard.errors import ConflictError, StoreError, ValidationError
from taskboard.models.common import ErrorResponse
from taskboard.models.user import User, UserCreate
from taskboard.rate_limit import limiter
from taskboard.services import UserService, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


@router.get(
    "/users",
    response_model=list[User],
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(settings.read_rate_limit)
async def list_users(
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """List all users."""
    try:
        return await service.list_users()

    except StoreError as e:
        logger.error(f"Error fetching users: {e}", exc_info=True)
        return error_response(request, 500, "Failed to fetch users", e)


@router.post(
    "/users",
    status_code=201,
    response_model=User,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.write_rate_limit)
async def create_user(
    request: Request,
    payload: UserCreate | None = None,
    service: UserService = Depends(get_user_service),
):
    """
    Create a user.

    Returns 400 when name or email is missing and 409 when the email is
    already registered.
    """
    try:
        return await service.create_user(payload or UserCreate())

    except ValidationError as e:
        logger.warning(f"Rejected user: {e}")
        return error_response(request, 400, e.message)

    except ConflictError as e:
        logger.warning(f"Duplicate user: {e}")
        return error_response(request, 409, str(e))

    except StoreError as e:
        logger.error(f"Error creating user: {e}", exc_info=True)
        return error_response(request, 500, "Failed to create user", e)
