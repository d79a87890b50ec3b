"""
MongoDB connection management.

A ConnectionManager owns the motor client and the current connection phase.
A single connection attempt is made at startup; when no URI is configured or
the attempt fails, the manager stays disconnected and the API serves fallback
data. Readers get an immutable ConnectionState snapshot on every call.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import monitoring
from pymongo.errors import InvalidOperation, PyMongoError

from taskboard.config import Settings
from taskboard.errors import StoreConnectionError, StoreError

logger = logging.getLogger(__name__)

DEFAULT_SERVER_SELECTION_TIMEOUT_MS = 5000
DEFAULT_SOCKET_TIMEOUT_MS = 45000


class ConnectionPhase(str, Enum):
    """Lifecycle stage of the persistent-store connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


@dataclass(frozen=True)
class ConnectionState:
    """Snapshot of the connection. host/port are only set while connected."""

    phase: ConnectionPhase
    host: str | None = None
    port: int | None = None

    @property
    def is_connected(self) -> bool:
        return self.phase is ConnectionPhase.CONNECTED


def prefer_ipv4(uri: str) -> str:
    """
    Rewrite ``localhost`` hosts of a ``mongodb://`` URI to ``127.0.0.1``.

    SRV URIs (``mongodb+srv://``) are returned unchanged.
    """
    scheme, sep, rest = uri.partition("://")
    if scheme != "mongodb" or not sep:
        return uri

    end = len(rest)
    for delimiter in "/?":
        index = rest.find(delimiter)
        if index != -1:
            end = min(end, index)

    credentials, at, hosts = rest[:end].rpartition("@")
    nodes = []
    for node in hosts.split(","):
        name, colon, port = node.partition(":")
        if name == "localhost":
            node = f"127.0.0.1{colon}{port}"
        nodes.append(node)

    return f"{scheme}://{credentials}{at}{','.join(nodes)}{rest[end:]}"


class _HeartbeatMonitor(monitoring.ServerHeartbeatListener):
    """Forwards driver heartbeats to the manager that registered it."""

    def __init__(self, manager: "ConnectionManager"):
        self._manager = manager

    def started(self, event):
        pass

    def succeeded(self, event):
        self._manager._on_heartbeat(event.connection_id, healthy=True)

    def failed(self, event):
        self._manager._on_heartbeat(event.connection_id, healthy=False)


class ConnectionManager:
    """
    Owns the MongoDB client and the connection phase.

    Only connect(), close() and driver heartbeats change the phase. Heartbeats
    arrive on pymongo monitor threads, so every change publishes a new
    ConnectionState in a single assignment. Request handling reads it through
    current_state(), which never performs I/O.
    """

    def __init__(
        self,
        uri: str | None = None,
        database_name: str = "taskboard",
        server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
        socket_timeout_ms: int = DEFAULT_SOCKET_TIMEOUT_MS,
        ipv4_only: bool = True,
        client_factory=AsyncIOMotorClient,
    ):
        self.uri = uri
        self.database_name = database_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.socket_timeout_ms = socket_timeout_ms
        self.ipv4_only = ipv4_only
        self._client_factory = client_factory

        self._client = None
        self._address: tuple[str, int] | None = None
        self._state = ConnectionState(phase=ConnectionPhase.DISCONNECTED)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ConnectionManager":
        """Build a manager from application settings."""
        return cls(
            uri=settings.mongo_uri,
            database_name=settings.mongo_database,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
            socket_timeout_ms=settings.socket_timeout_ms,
            ipv4_only=settings.ipv4_only,
            **kwargs,
        )

    def current_state(self) -> ConnectionState:
        """Return the latest known connection state."""
        return self._state

    def _set_phase(self, phase: ConnectionPhase) -> None:
        address = self._address
        if phase is ConnectionPhase.CONNECTED and address is not None:
            self._state = ConnectionState(phase=phase, host=address[0], port=address[1])
        else:
            self._state = ConnectionState(phase=phase)

    async def connect(self, uri: str | None = None) -> ConnectionState:
        """
        Make a single attempt to connect to MongoDB.

        Args:
            uri: Overrides the configured URI when given

        Returns:
            The resulting state. Failures are logged and leave the manager
            disconnected; they are never raised to the caller.
        """
        target = uri or self.uri
        if not target:
            logger.warning("MONGO_URI not set - skipping database connection (fallback mode)")
            return self.current_state()

        try:
            await self._open(target)
        except StoreConnectionError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")

        return self.current_state()

    async def _open(self, uri: str) -> None:
        if self._client is not None:
            await self.close()

        if self.ipv4_only:
            uri = prefer_ipv4(uri)

        self._set_phase(ConnectionPhase.CONNECTING)
        client = None
        try:
            client = self._client_factory(
                uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                socketTimeoutMS=self.socket_timeout_ms,
                tz_aware=True,
                event_listeners=[_HeartbeatMonitor(self)],
            )
            await client.admin.command("ping")
            address = _server_address(client)
        except (PyMongoError, ValueError) as e:
            # The URI parser raises ValueError for bad ports and credentials
            if client is not None:
                client.close()
            self._set_phase(ConnectionPhase.DISCONNECTED)
            raise StoreConnectionError(str(e)) from e

        self._client = client
        self._address = address
        self._set_phase(ConnectionPhase.CONNECTED)

        host = f"{address[0]}:{address[1]}" if address else "unknown host"
        logger.info(f"Connected to MongoDB: {host}")

    def _on_heartbeat(self, connection_id, healthy: bool) -> None:
        """Track availability of the server this manager connected to."""
        if self._address is None or tuple(connection_id) != self._address:
            return

        if healthy and self._state.phase is ConnectionPhase.DISCONNECTED:
            logger.info("MongoDB heartbeat succeeded - leaving fallback mode")
            self._set_phase(ConnectionPhase.CONNECTED)
        elif not healthy and self._state.phase is ConnectionPhase.CONNECTED:
            logger.warning("MongoDB heartbeat failed - serving fallback data")
            self._set_phase(ConnectionPhase.DISCONNECTED)

    def collection(self, name: str):
        """
        Get a collection on the configured database.

        Raises:
            StoreError: If no client is open
        """
        if self._client is None:
            raise StoreError("Database client is not open")
        return self._client[self.database_name][name]

    async def close(self) -> None:
        """Close the client, if any."""
        if self._client is None:
            return

        self._set_phase(ConnectionPhase.DISCONNECTING)
        self._client.close()
        self._client = None
        self._address = None
        self._set_phase(ConnectionPhase.DISCONNECTED)
        logger.info("Closed MongoDB connection")


def _server_address(client) -> tuple[str, int] | None:
    try:
        return client.address
    except InvalidOperation:
        return None


def get_connection_manager(request: Request) -> ConnectionManager:
    """FastAPI dependency for the application's connection manager."""
    return request.app.state.connection_manager
