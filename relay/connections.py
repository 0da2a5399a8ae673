import asyncio
from typing import Dict, Iterable

from fastapi import WebSocket

from logging_config import get_logger
from relay.handler import Outbound
from schemas.messages import ServerFrame

logger = get_logger(__name__)


class ConnectionManager:
    """Live sockets by connection id, each with its own ordered send queue.

    `deliver` enqueues without awaiting, so messages reach each connection in
    the order the handler produced them even when several receive loops
    interleave.
    """

    def __init__(self):
        self._queues: Dict[str, asyncio.Queue] = {}
        self._writers: Dict[str, asyncio.Task] = {}

    def register(self, conn_id: str, websocket: WebSocket):
        queue = asyncio.Queue()
        self._queues[conn_id] = queue
        self._writers[conn_id] = asyncio.create_task(self._writer(conn_id, websocket, queue))
        logger.debug(f"Registered connection {conn_id} (live connections: {len(self._queues)})")

    async def unregister(self, conn_id: str):
        self._queues.pop(conn_id, None)
        task = self._writers.pop(conn_id, None)
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.debug(f"Unregistered connection {conn_id} (live connections: {len(self._queues)})")

    def deliver(self, outbound: Iterable[Outbound]):
        for message in outbound:
            queue = self._queues.get(message.target)
            if queue is None:
                logger.debug(f"Dropping {message.event} for vanished connection {message.target}")
                continue
            frame = ServerFrame(event=message.event, data=message.data)
            queue.put_nowait(frame.model_dump_json())

    async def _writer(self, conn_id: str, websocket: WebSocket, queue: asyncio.Queue):
        while True:
            text = await queue.get()
            try:
                await websocket.send_text(text)
            except Exception as e:
                # the receive loop sees the broken transport and runs the disconnect path;
                # until then deliver() drops instead of queueing
                logger.warning(f"Error sending to connection {conn_id}: {e}")
                if self._queues.get(conn_id) is queue:
                    del self._queues[conn_id]
                return

    def __contains__(self, conn_id: str):
        return conn_id in self._queues

    def __len__(self):
        return len(self._queues)
