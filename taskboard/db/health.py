"""Database status reporting for the health endpoint."""

from taskboard.db.connection import ConnectionManager
from taskboard.models.common import DatabaseStatus


class HealthReporter:
    """Projects the connection state into the health payload."""

    def __init__(self, manager: ConnectionManager):
        self._manager = manager

    def snapshot(self) -> DatabaseStatus:
        state = self._manager.current_state()
        return DatabaseStatus(phase=state.phase.value, host=state.host, port=state.port)
