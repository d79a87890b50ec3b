"""Database connection management."""

from .connection import (
    ConnectionManager,
    ConnectionPhase,
    ConnectionState,
    get_connection_manager,
)
from .health import HealthReporter

__all__ = [
    "ConnectionManager",
    "ConnectionPhase",
    "ConnectionState",
    "HealthReporter",
    "get_connection_manager",
]
