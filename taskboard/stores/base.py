"""Common contract for persisted and fallback entity stores."""

from typing import Any, Protocol, TypeVar

EntityT = TypeVar("EntityT", covariant=True)


class EntityStore(Protocol[EntityT]):
    """List and create entities of one type."""

    async def list(self) -> list[EntityT]: ...

    async def create(self, fields: dict[str, Any]) -> EntityT: ...
