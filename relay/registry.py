import threading
from typing import Dict, Optional

from logging_config import get_logger
from relay.errors import CrossRoomBind

logger = get_logger(__name__)


class ConnectionRegistry:
    """Maps each live connection id to the one room it is in."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rooms: Dict[str, str] = {}

    def bind(self, conn_id: str, room: str):
        with self._lock:
            current = self._rooms.get(conn_id)
            if current == room:
                logger.debug(f"Connection {conn_id} already bound to room {room}")
                return
            if current is not None:
                logger.warning(f"Refusing to bind {conn_id} to room {room}: already in room {current}")
                raise CrossRoomBind(room, f"Connection {conn_id} is already in room {current}")
            self._rooms[conn_id] = room
        logger.debug(f"Bound connection {conn_id} to room {room}")

    def unbind(self, conn_id: str) -> Optional[str]:
        with self._lock:
            room = self._rooms.pop(conn_id, None)
        if room is not None:
            logger.debug(f"Unbound connection {conn_id} from room {room}")
        return room

    def room_of(self, conn_id: str) -> Optional[str]:
        with self._lock:
            return self._rooms.get(conn_id)

    def __len__(self):
        with self._lock:
            return len(self._rooms)
