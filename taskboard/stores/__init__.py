"""Persisted and fallback entity stores."""

from .base import EntityStore
from .fallback import FALLBACK_TASKS, FALLBACK_USERS, FallbackTaskStore, FallbackUserStore
from .mongo import MongoTaskStore, MongoUserStore

__all__ = [
    "EntityStore",
    "FALLBACK_TASKS",
    "FALLBACK_USERS",
    "FallbackTaskStore",
    "FallbackUserStore",
    "MongoTaskStore",
    "MongoUserStore",
]
