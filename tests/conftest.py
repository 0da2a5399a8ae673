import pytest

from relay.handler import SessionHandler
from schemas.messages import inbound_adapter


def make_message(event, **data):
    return inbound_adapter.validate_python({"event": event, "data": data})


def events_for(outbound, target):
    return [(message.event, message.data) for message in outbound if message.target == target]


@pytest.fixture
def handler():
    return SessionHandler()


@pytest.fixture
def hosted_room(handler):
    """Room R1 with host A and viewer B."""
    handler.dispatch("A", make_message("join", room="R1", isHost=True))
    handler.dispatch("B", make_message("join", room="R1", isHost=False))
    return handler
