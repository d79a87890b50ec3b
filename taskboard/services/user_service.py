"""
User service.

Validates input, then dispatches to the persisted or the fallback store
depending on the connection phase at the moment of the call.
"""

import logging

from pymongo.errors import PyMongoError

from taskboard.db.connection import ConnectionManager
from taskboard.errors import StoreError, ValidationError
from taskboard.models.user import User, UserCreate
from taskboard.stores import EntityStore, FallbackUserStore, MongoUserStore

logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations."""

    def __init__(
        self,
        manager: ConnectionManager,
        persisted: EntityStore[User] | None = None,
        fallback: EntityStore[User] | None = None,
    ):
        self._manager = manager
        self._persisted = persisted or MongoUserStore(manager)
        self._fallback = fallback or FallbackUserStore()

    def _store(self) -> EntityStore[User]:
        if self._manager.current_state().is_connected:
            return self._persisted
        logger.debug("Database not connected - using fallback users")
        return self._fallback

    async def list_users(self) -> list[User]:
        """
        List users.

        Raises:
            StoreError: If the connected store fails
        """
        store = self._store()
        try:
            return await store.list()
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def create_user(self, payload: UserCreate) -> User:
        """
        Create a user.

        Raises:
            ValidationError: If name or email is missing or blank
            ConflictError: If the email is taken (persisted mode only)
            StoreError: If the connected store fails
        """
        name = (payload.name or "").strip()
        email = (payload.email or "").strip()
        if not name or not email:
            raise ValidationError("Name and email are required", fields=("name", "email"))

        store = self._store()
        try:
            return await store.create({"name": name, "email": email})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
