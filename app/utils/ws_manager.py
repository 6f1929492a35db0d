import asyncio
import json
import logging
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


def table_room(table_id) -> str:
    return f"table-{table_id}"


class WebSocketManager:
    def __init__(self):
        # authenticated staff/kitchen sockets, they receive every event
        self.staff_connections: Set[WebSocket] = set()
        # room name -> set(WebSocket); customers join their table's room
        self.rooms: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect_staff(self, websocket: WebSocket):
        await websocket.accept()
        async with self._lock:
            self.staff_connections.add(websocket)

    async def connect_room(self, websocket: WebSocket, room: str):
        await websocket.accept()
        async with self._lock:
            self.rooms.setdefault(room, set()).add(websocket)

    async def disconnect(self, websocket: WebSocket):
        async with self._lock:
            self.staff_connections.discard(websocket)
            for room, sockets in list(self.rooms.items()):
                if websocket in sockets:
                    sockets.remove(websocket)
                    if not sockets:
                        del self.rooms[room]

    @staticmethod
    def _encode(event: str, data: Any) -> str:
        return json.dumps({"event": event, "data": jsonable_encoder(data, by_alias=True)})

    async def _send_all(self, sockets, payload: str) -> int:
        sent = 0
        for ws in sockets:
            try:
                await ws.send_text(payload)
                sent += 1
            except Exception:
                logger.debug("dropping dead websocket")
                await self.disconnect(ws)
        return sent

    async def broadcast_staff(self, event: str, data: Any) -> int:
        async with self._lock:
            sockets = list(self.staff_connections)
        return await self._send_all(sockets, self._encode(event, data))

    async def broadcast_room(self, room: str, event: str, data: Any) -> int:
        async with self._lock:
            sockets = list(self.rooms.get(room, set()))
        return await self._send_all(sockets, self._encode(event, data))

    async def notify(self, event: str, staff_data: Any, table_id: Optional[int] = None, room_data: Any = None):
        """Send ``event`` to every staff socket and, if given, to one table's room."""
        await self.broadcast_staff(event, staff_data)
        if table_id is not None:
            await self.broadcast_room(table_room(table_id), event, staff_data if room_data is None else room_data)


ws_manager = WebSocketManager()
