from typing import Optional


class RelayError(Exception):
    """Base class for protocol violations the relay recovers from locally."""

    def __init__(self, room: Optional[str] = None, message: Optional[str] = None):
        self.room = room
        super().__init__(message or self.default_message(room))

    def default_message(self, room):
        return f"{type(self).__name__} in room: {room}"


class AlreadyHosted(RelayError):
    def default_message(self, room):
        return "Room already has a host"


class NoHost(RelayError):
    def default_message(self, room):
        return f"No host found in room: {room}"


class Unauthorized(RelayError):
    pass


class DuplicateJoin(RelayError):
    pass


class StaleRelease(RelayError):
    pass


class CrossRoomBind(RelayError):
    pass
