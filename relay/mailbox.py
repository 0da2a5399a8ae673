from collections import deque
from typing import Deque, Dict, List

from logging_config import get_logger
from schemas.messages import SignalEnvelope

logger = get_logger(__name__)


class SignalMailbox:
    """Per-room FIFO of signaling envelopes waiting for a recipient."""

    def __init__(self):
        self._queues: Dict[str, Deque[SignalEnvelope]] = {}

    def buffer(self, room: str, envelope: SignalEnvelope):
        self._queues.setdefault(room, deque()).append(envelope)
        logger.debug(f"Buffered signal from {envelope.senderId} for room {room} (queued: {len(self._queues[room])})")

    def drain(self, room: str) -> List[SignalEnvelope]:
        queue = self._queues.pop(room, None)
        if not queue:
            return []
        logger.debug(f"Draining {len(queue)} buffered signals for room {room}")
        return list(queue)

    def purge(self, room: str):
        queue = self._queues.pop(room, None)
        if queue:
            logger.info(f"Purged {len(queue)} undelivered signals for room {room}")

    def size(self, room: str) -> int:
        return len(self._queues.get(room, ()))

    def __contains__(self, room: str):
        return room in self._queues
