"""
Rate limiting configuration for the Taskboard API.

Provides a shared Limiter instance used by all API endpoints.
Set TASKBOARD_RATE_LIMIT_ENABLED=false to disable (e.g., in tests or CI).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from taskboard.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
