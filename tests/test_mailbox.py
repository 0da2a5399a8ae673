from relay.mailbox import SignalMailbox
from schemas.messages import SignalEnvelope


def envelope(sender, n):
    return SignalEnvelope(senderId=sender, payload={"candidate": {"n": n}})


def test_drain_returns_in_arrival_order_once():
    mailbox = SignalMailbox()
    for n in range(3):
        mailbox.buffer("R1", envelope("A", n))
    assert mailbox.size("R1") == 3

    drained = mailbox.drain("R1")
    assert [e.payload["candidate"]["n"] for e in drained] == [0, 1, 2]
    assert mailbox.drain("R1") == []
    assert "R1" not in mailbox


def test_rooms_are_independent():
    mailbox = SignalMailbox()
    mailbox.buffer("R1", envelope("A", 1))
    mailbox.buffer("R2", envelope("C", 2))
    assert [e.senderId for e in mailbox.drain("R2")] == ["C"]
    assert mailbox.size("R1") == 1


def test_purge_discards_everything():
    mailbox = SignalMailbox()
    mailbox.buffer("R1", envelope("A", 1))
    mailbox.purge("R1")
    mailbox.purge("R1")
    assert mailbox.size("R1") == 0
    assert mailbox.drain("R1") == []
