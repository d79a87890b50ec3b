"""Task service: title validation and store selection per call."""

import logging

from pymongo.errors import PyMongoError

from taskboard.db.connection import ConnectionManager
from taskboard.errors import StoreError, ValidationError
from taskboard.models.task import Task, TaskCreate
from taskboard.stores import EntityStore, FallbackTaskStore, MongoTaskStore

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task operations."""

    def __init__(
        self,
        manager: ConnectionManager,
        persisted: EntityStore[Task] | None = None,
        fallback: EntityStore[Task] | None = None,
    ):
        self._manager = manager
        self._persisted = persisted or MongoTaskStore(manager)
        self._fallback = fallback or FallbackTaskStore()

    def _store(self) -> EntityStore[Task]:
        if self._manager.current_state().is_connected:
            return self._persisted
        logger.debug("Database not connected - using fallback tasks")
        return self._fallback

    async def list_tasks(self) -> list[Task]:
        """List tasks, newest first when persisted."""
        store = self._store()
        try:
            return await store.list()
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def create_task(self, payload: TaskCreate) -> Task:
        """
        Create a task with ``completed`` set to false.

        Raises:
            ValidationError: If the title is missing or blank
            StoreError: If the connected store fails
        """
        title = (payload.title or "").strip()
        if not title:
            raise ValidationError("Title required", fields=("title",))

        store = self._store()
        try:
            return await store.create({"title": title})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
