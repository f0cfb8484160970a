import logging
from typing import Any, Dict, List, Optional

from fastapi import WebSocket

from .constants import EventType

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Single-topic broadcaster over every connected dashboard WebSocket.

    Delivery is at most once per client: no acknowledgment, no retry, and no
    replay for clients that connect later.
    """

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"Dashboard connected ({len(self.active_connections)} active)")

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.info(f"Dashboard disconnected ({len(self.active_connections)} active)")

    async def broadcast_event(self, event_type: str, data: Optional[Dict[str, Any]] = None):
        """
        Sends `{"type": event_type, "data": data}` to all connected clients.
        """
        payload: Dict[str, Any] = {"type": event_type}
        if data is not None:
            payload["data"] = data

        # Iterate over a copy so a failed send can drop the connection mid-loop
        for connection in self.active_connections[:]:
            try:
                await connection.send_json(payload)
            except Exception as e:
                logger.warning(f"Dropping dashboard connection after failed send: {e}")
                self.disconnect(connection)

    async def publish_ticket(self, snapshot: Dict[str, Any]):
        await self.broadcast_event(EventType.TICKET_UPDATED.value, snapshot)


manager = ConnectionManager()


def get_broadcaster() -> ConnectionManager:
    """FastAPI dependency; overridden in tests."""
    return manager
