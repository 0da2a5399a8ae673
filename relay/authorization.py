from typing import Dict, Set

from logging_config import get_logger
from relay.directory import RoomDirectory
from relay.errors import NoHost, Unauthorized

logger = get_logger(__name__)


class CursorAuthorizationTable:
    """Per-room set of viewers allowed to emit input events.

    Every member of a set is a current viewer of that room; decisions are
    only accepted from the room's current host.
    """

    def __init__(self, directory: RoomDirectory):
        self._directory = directory
        self._granted: Dict[str, Set[str]] = {}

    def request_access(self, room: str, viewer_id: str) -> str:
        """Returns the host the request should be forwarded to."""
        host_id = self._directory.host_of(room)
        if host_id is None:
            raise NoHost(room)
        if not self._directory.is_viewer(room, viewer_id):
            logger.warning(f"Cursor request from non-viewer {viewer_id} in room {room}")
            raise Unauthorized(room)
        return host_id

    def _check_decision(self, room: str, viewer_id: str, caller_id: str):
        host_id = self._directory.host_of(room)
        if host_id is None or caller_id != host_id:
            logger.warning(f"Unauthorized cursor decision by {caller_id} for {viewer_id} in room {room}")
            raise Unauthorized(room)
        if not self._directory.is_viewer(room, viewer_id):
            logger.warning(f"Cursor decision for non-viewer {viewer_id} in room {room}")
            raise Unauthorized(room)

    def grant(self, room: str, viewer_id: str, caller_id: str):
        self._check_decision(room, viewer_id, caller_id)
        self._granted.setdefault(room, set()).add(viewer_id)
        logger.info(f"Client {viewer_id} granted cursor access in room {room}")

    def deny(self, room: str, viewer_id: str, caller_id: str):
        self._check_decision(room, viewer_id, caller_id)
        self.revoke(room, viewer_id)
        logger.info(f"Client {viewer_id} denied cursor access in room {room}")

    def is_authorized(self, room: str, viewer_id: str) -> bool:
        return viewer_id in self._granted.get(room, ())

    def revoke(self, room: str, viewer_id: str) -> bool:
        granted = self._granted.get(room)
        if not granted or viewer_id not in granted:
            return False
        granted.discard(viewer_id)
        if not granted:
            del self._granted[room]
        logger.info(f"Revoked cursor access for {viewer_id} in room {room}")
        return True

    def revoke_all(self, room: str):
        granted = self._granted.pop(room, None)
        if granted:
            logger.info(f"Revoked cursor access for {len(granted)} clients in room {room}")

    def authorized(self, room: str) -> Set[str]:
        return set(self._granted.get(room, ()))

    def __contains__(self, room: str):
        return room in self._granted
