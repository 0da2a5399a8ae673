from dataclasses import dataclass, field
from typing import Dict, List, Optional

from logging_config import get_logger
from relay.errors import AlreadyHosted, NoHost, StaleRelease

logger = get_logger(__name__)


@dataclass
class RoomEntry:
    host: str
    # dict as an insertion-ordered set
    viewers: Dict[str, None] = field(default_factory=dict)

    @property
    def members(self) -> List[str]:
        return [self.host, *self.viewers]


class RoomDirectory:
    """Room code -> current host and viewers.

    A room exists exactly while it has a host. Entries are deleted outright
    when the host is released, so an absent code means an empty room.
    Callers serialize access per room (see RoomLocks).
    """

    def __init__(self):
        self._rooms: Dict[str, RoomEntry] = {}

    def claim_host(self, room: str, conn_id: str):
        entry = self._rooms.get(room)
        if entry is not None:
            logger.info(f"Host rejected: room {room} already has host {entry.host}")
            raise AlreadyHosted(room)
        self._rooms[room] = RoomEntry(host=conn_id)
        logger.info(f"Host added: room={room}, host={conn_id}")

    def host_of(self, room: str) -> Optional[str]:
        entry = self._rooms.get(room)
        return entry.host if entry else None

    def release_host(self, room: str, conn_id: str) -> List[str]:
        """Remove the room if conn_id still hosts it; returns the orphaned viewers."""
        entry = self._rooms.get(room)
        if entry is None or entry.host != conn_id:
            logger.warning(f"Stale host release for room {room} by {conn_id}")
            raise StaleRelease(room)
        del self._rooms[room]
        logger.info(f"Host removed: room={room}, host={conn_id}")
        return list(entry.viewers)

    def add_viewer(self, room: str, conn_id: str):
        entry = self._rooms.get(room)
        if entry is None:
            raise NoHost(room)
        entry.viewers[conn_id] = None

    def remove_viewer(self, room: str, conn_id: str) -> bool:
        entry = self._rooms.get(room)
        if entry is None or conn_id not in entry.viewers:
            return False
        del entry.viewers[conn_id]
        return True

    def is_viewer(self, room: str, conn_id: str) -> bool:
        entry = self._rooms.get(room)
        return entry is not None and conn_id in entry.viewers

    def viewers(self, room: str) -> List[str]:
        entry = self._rooms.get(room)
        return list(entry.viewers) if entry else []

    def members(self, room: str) -> List[str]:
        entry = self._rooms.get(room)
        return entry.members if entry else []

    def member_count(self, room: str) -> int:
        entry = self._rooms.get(room)
        return 1 + len(entry.viewers) if entry else 0

    def __contains__(self, room: str):
        return room in self._rooms

    def __len__(self):
        return len(self._rooms)
