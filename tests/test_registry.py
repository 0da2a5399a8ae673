import pytest

from relay.errors import CrossRoomBind
from relay.registry import ConnectionRegistry


def test_bind_and_lookup():
    registry = ConnectionRegistry()
    registry.bind("c1", "R1")
    assert registry.room_of("c1") == "R1"
    assert registry.room_of("c2") is None
    assert len(registry) == 1


def test_rebinding_same_room_is_noop():
    registry = ConnectionRegistry()
    registry.bind("c1", "R1")
    registry.bind("c1", "R1")
    assert registry.room_of("c1") == "R1"
    assert len(registry) == 1


def test_binding_to_second_room_is_refused():
    registry = ConnectionRegistry()
    registry.bind("c1", "R1")
    with pytest.raises(CrossRoomBind):
        registry.bind("c1", "R2")
    assert registry.room_of("c1") == "R1"


def test_unbind_returns_previous_room():
    registry = ConnectionRegistry()
    registry.bind("c1", "R1")
    assert registry.unbind("c1") == "R1"
    assert registry.unbind("c1") is None
    assert registry.room_of("c1") is None
    registry.bind("c1", "R2")
    assert registry.room_of("c1") == "R2"
