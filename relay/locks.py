import threading
from contextlib import contextmanager
from typing import Dict


class RoomLocks:
    """Per-room critical sections.

    Locks are created on first use and dropped once no thread holds or waits
    on them, so the table does not grow with every room code ever seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}

    @contextmanager
    def hold(self, room: str):
        with self._guard:
            lock = self._locks.get(room)
            if lock is None:
                lock = self._locks[room] = threading.Lock()
            self._users[room] = self._users.get(room, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._users[room] -= 1
                if self._users[room] == 0:
                    del self._users[room]
                    del self._locks[room]

    def __len__(self):
        with self._guard:
            return len(self._locks)
