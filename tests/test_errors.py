from relay.errors import AlreadyHosted, NoHost, RelayError, Unauthorized


def test_default_messages():
    assert str(AlreadyHosted("R1")) == "Room already has a host"
    assert str(NoHost("R2")) == "No host found in room: R2"
    assert str(Unauthorized("R3")) == "Unauthorized in room: R3"
    assert str(RelayError()) == "RelayError in room: None"


def test_explicit_message_and_room():
    error = Unauthorized("R1", "nope")
    assert str(error) == "nope"
    assert error.room == "R1"
