import pytest

from relay.directory import RoomDirectory
from relay.errors import AlreadyHosted, NoHost, StaleRelease


def test_claim_host_once_per_room():
    directory = RoomDirectory()
    directory.claim_host("R1", "A")
    with pytest.raises(AlreadyHosted):
        directory.claim_host("R1", "C")
    assert directory.host_of("R1") == "A"


def test_viewer_join_without_host_creates_nothing():
    directory = RoomDirectory()
    with pytest.raises(NoHost):
        directory.add_viewer("R2", "D")
    assert "R2" not in directory
    assert directory.host_of("R2") is None
    assert directory.members("R2") == []
    assert directory.member_count("R2") == 0


def test_members_keep_join_order():
    directory = RoomDirectory()
    directory.claim_host("R1", "A")
    directory.add_viewer("R1", "C")
    directory.add_viewer("R1", "B")
    assert directory.members("R1") == ["A", "C", "B"]
    assert directory.viewers("R1") == ["C", "B"]
    assert directory.member_count("R1") == 3
    assert directory.is_viewer("R1", "B")
    assert not directory.is_viewer("R1", "A")


def test_release_host_deletes_room_and_returns_viewers():
    directory = RoomDirectory()
    directory.claim_host("R1", "A")
    directory.add_viewer("R1", "B")
    assert directory.release_host("R1", "A") == ["B"]
    assert "R1" not in directory
    assert len(directory) == 0
    directory.claim_host("R1", "C")
    assert directory.host_of("R1") == "C"


def test_stale_release_leaves_new_host_in_place():
    directory = RoomDirectory()
    directory.claim_host("R1", "A")
    directory.release_host("R1", "A")
    directory.claim_host("R1", "C")
    with pytest.raises(StaleRelease):
        directory.release_host("R1", "A")
    assert directory.host_of("R1") == "C"


def test_remove_viewer():
    directory = RoomDirectory()
    directory.claim_host("R1", "A")
    directory.add_viewer("R1", "B")
    assert directory.remove_viewer("R1", "B") is True
    assert directory.remove_viewer("R1", "B") is False
    assert directory.remove_viewer("R9", "B") is False
    assert directory.members("R1") == ["A"]
