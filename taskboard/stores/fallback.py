"""
Fallback stores used while the database is not connected.

Listing always returns the same fixed records. Creating echoes the input back
without keeping it anywhere, so it never shows up in a later listing.
"""

import time
from datetime import datetime, timezone
from typing import Any

from taskboard.models.task import Task
from taskboard.models.user import User

FALLBACK_USERS = (
    {"id": 1, "name": "John Doe", "email": "john@example.com"},
    {"id": 2, "name": "Jane Smith", "email": "jane@example.com"},
    {"id": 3, "name": "Bob Johnson", "email": "bob@example.com"},
)

FALLBACK_TASKS = (
    {"title": "Define TypeScript interfaces (Mock)", "completed": True},
    {"title": "Create React components (Mock)", "completed": False},
)


class FallbackUserStore:
    async def list(self) -> list[User]:
        return [User(**user) for user in FALLBACK_USERS]

    async def create(self, fields: dict[str, Any]) -> User:
        # Millisecond clock id: not unique under rapid concurrent creates
        return User(
            id=int(time.time() * 1000),
            name=fields["name"],
            email=fields["email"],
            created_at=datetime.now(timezone.utc),
        )


class FallbackTaskStore:
    async def list(self) -> list[Task]:
        return [Task(**task) for task in FALLBACK_TASKS]

    async def create(self, fields: dict[str, Any]) -> Task:
        return Task(title=fields["title"], completed=False)
