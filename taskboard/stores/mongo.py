"""
MongoDB-backed entity stores.

Documents use camelCase timestamp fields so existing ``users``/``tasks``
collections stay readable. The legacy ``__v`` version key is projected away.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from taskboard.db.connection import ConnectionManager
from taskboard.errors import ConflictError
from taskboard.models.task import Task
from taskboard.models.user import User

logger = logging.getLogger(__name__)

HIDDEN_FIELDS = {"__v": 0}


def _utcnow() -> datetime:
    # BSON dates have millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def user_from_document(doc: dict[str, Any]) -> User:
    return User(
        id=str(doc["_id"]),
        name=doc["name"],
        email=doc["email"],
        created_at=doc.get("createdAt"),
    )


def task_from_document(doc: dict[str, Any]) -> Task:
    return Task(
        id=str(doc["_id"]),
        title=doc["title"],
        completed=doc.get("completed", False),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


class MongoUserStore:
    """Users persisted in the ``users`` collection."""

    collection_name = "users"

    def __init__(self, manager: ConnectionManager):
        self._manager = manager

    async def list(self) -> list[User]:
        collection = self._manager.collection(self.collection_name)
        docs = await collection.find({}, HIDDEN_FIELDS).to_list(length=None)
        return [user_from_document(doc) for doc in docs]

    async def create(self, fields: dict[str, Any]) -> User:
        """
        Insert a user unless one with the same email exists.

        The lookup and the insert are separate round trips, so two concurrent
        creates for one email can both succeed unless the collection carries a
        unique index.

        Raises:
            ConflictError: If the email is already taken
        """
        collection = self._manager.collection(self.collection_name)
        email = fields["email"]

        existing = await collection.find_one({"email": email}, HIDDEN_FIELDS)
        if existing is not None:
            raise ConflictError("User already exists")

        now = _utcnow()
        doc = {"name": fields["name"], "email": email, "createdAt": now, "updatedAt": now}
        try:
            result = await collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise ConflictError("User already exists") from e

        logger.debug(f"Created user {result.inserted_id}")
        return User(id=str(result.inserted_id), name=doc["name"], email=email, created_at=now)


class MongoTaskStore:
    """Tasks persisted in the ``tasks`` collection, newest first."""

    collection_name = "tasks"

    def __init__(self, manager: ConnectionManager):
        self._manager = manager

    async def list(self) -> list[Task]:
        collection = self._manager.collection(self.collection_name)
        cursor = collection.find({}, HIDDEN_FIELDS).sort(
            [("createdAt", DESCENDING), ("_id", DESCENDING)]
        )
        docs = await cursor.to_list(length=None)
        return [task_from_document(doc) for doc in docs]

    async def create(self, fields: dict[str, Any]) -> Task:
        collection = self._manager.collection(self.collection_name)
        now = _utcnow()
        doc = {"title": fields["title"], "completed": False, "createdAt": now, "updatedAt": now}
        result = await collection.insert_one(doc)

        logger.debug(f"Created task {result.inserted_id}")
        return Task(
            id=str(result.inserted_id),
            title=doc["title"],
            completed=False,
            created_at=now,
            updated_at=now,
        )
