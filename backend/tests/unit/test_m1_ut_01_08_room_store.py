"""M1-UT-01~08 room store contract tests."""

from __future__ import annotations

import pytest

from meetroom.rooms.registry import BadCredentialsError
from meetroom.rooms.registry import HostProtectedError
from meetroom.rooms.registry import LobbyEntryNotFoundError
from meetroom.rooms.registry import NotHostError
from meetroom.rooms.registry import NotMemberError
from meetroom.rooms.registry import RoomExistsError
from meetroom.rooms.registry import RoomNotFoundError
from meetroom.rooms.registry import RoomStore
from meetroom.rooms.registry import SessionBusyError


def _store_with_room(password: str | None = None) -> RoomStore:
    store = RoomStore()
    store.create_room("r1", host_id="host", host_name="Hana", password=password)
    return store


def test_m1_ut_01_create_room_sets_single_host_member() -> None:
    """Input: create r1 by host -> Output: host is sole member, lobby empty, session indexed."""
    store = _store_with_room()

    room = store.get_room("r1")
    assert room.host_id == "host"
    assert list(room.members) == ["host"]
    assert room.members["host"].is_host is True
    assert room.members["host"].name == "Hana"
    assert room.lobby == {}
    assert store.find_room_id_by_session("host") == "r1"

    with pytest.raises(RoomExistsError):
        store.create_room("r1", host_id="other")


def test_m1_ut_02_empty_password_means_open_room() -> None:
    """Input: create with password='' -> Output: room.password is None and any password enters lobby."""
    store = _store_with_room(password="")

    assert store.get_room("r1").password is None
    store.enqueue("r1", session_id="guest", name="Gus", password="whatever")
    assert "guest" in store.get_room("r1").lobby


def test_m1_ut_03_enqueue_checks_password_before_lobby() -> None:
    """Input: wrong then right password -> Output: wrong raises with no state change, right lands in lobby only."""
    store = _store_with_room(password="xyz")

    with pytest.raises(BadCredentialsError):
        store.enqueue("r1", session_id="guest", name="Gus", password="abc")
    with pytest.raises(BadCredentialsError):
        store.enqueue("r1", session_id="guest", name="Gus", password=None)
    room = store.get_room("r1")
    assert (len(room.members), len(room.lobby)) == (1, 0)
    assert store.find_room_id_by_session("guest") is None

    store.enqueue("r1", session_id="guest", name="Gus", password="xyz")
    assert "guest" in room.lobby
    assert "guest" not in room.members

    with pytest.raises(RoomNotFoundError):
        store.enqueue("missing", session_id="x", name="X")


def test_m1_ut_04_session_lives_in_one_room_at_a_time() -> None:
    """Input: member/lobby session tries another room -> Output: SessionBusyError."""
    store = _store_with_room()
    store.create_room("r2", host_id="host2")
    store.enqueue("r1", session_id="guest", name="Gus")

    with pytest.raises(SessionBusyError):
        store.enqueue("r2", session_id="guest", name="Gus")
    with pytest.raises(SessionBusyError):
        store.enqueue("r1", session_id="guest", name="Gus")
    with pytest.raises(SessionBusyError):
        store.enqueue("r2", session_id="host", name="Hana")
    with pytest.raises(SessionBusyError):
        store.create_room("r3", host_id="host")


def test_m1_ut_05_admit_and_reject_are_host_only() -> None:
    """Input: non-host admit/reject, unknown entry -> Output: errors; host admit moves lobby->members."""
    store = _store_with_room()
    store.enqueue("r1", session_id="g1", name="G1")
    store.enqueue("r1", session_id="g2", name="G2")

    with pytest.raises(NotHostError):
        store.admit("r1", actor_id="g2", session_id="g1")
    with pytest.raises(LobbyEntryNotFoundError):
        store.admit("r1", actor_id="host", session_id="nobody")

    member = store.admit("r1", actor_id="host", session_id="g1")
    room = store.get_room("r1")
    assert member.is_host is False
    assert member.name == "G1"
    assert "g1" in room.members and "g1" not in room.lobby

    entry = store.reject("r1", actor_id="host", session_id="g2")
    assert entry.name == "G2"
    assert "g2" not in room.lobby and "g2" not in room.members
    assert store.find_room_id_by_session("g2") is None

    with pytest.raises(LobbyEntryNotFoundError):
        store.reject("r1", actor_id="host", session_id="g2")


def test_m1_ut_06_remove_member_protects_host() -> None:
    """Input: host removes self, non-member, member -> Output: first two raise, member removed."""
    store = _store_with_room()
    store.enqueue("r1", session_id="g1", name="G1")
    store.admit("r1", actor_id="host", session_id="g1")

    with pytest.raises(HostProtectedError):
        store.remove_member("r1", actor_id="host", session_id="host")
    with pytest.raises(NotMemberError):
        store.remove_member("r1", actor_id="host", session_id="ghost")
    with pytest.raises(NotHostError):
        store.remove_member("r1", actor_id="g1", session_id="host")

    store.remove_member("r1", actor_id="host", session_id="g1")
    assert list(store.get_room("r1").members) == ["host"]
    assert store.find_room_id_by_session("g1") is None


def test_m1_ut_07_discard_non_host_keeps_room() -> None:
    """Input: member and lobby entry disconnect -> Output: removed, host and room unchanged."""
    store = _store_with_room()
    store.enqueue("r1", session_id="g1", name="G1")
    store.admit("r1", actor_id="host", session_id="g1")
    store.enqueue("r1", session_id="g2", name="G2")

    departure = store.discard_session("g1")
    assert departure is not None
    assert departure.member is not None and departure.member.session_id == "g1"
    assert departure.room_closed is False

    departure = store.discard_session("g2")
    assert departure is not None
    assert departure.member is None
    assert departure.lobby_entry is not None

    room = store.get_room("r1")
    assert room.host_id == "host"
    assert list(room.members) == ["host"]
    assert room.lobby == {}
    assert store.discard_session("g1") is None


def test_m1_ut_08_discard_host_tears_room_down() -> None:
    """Input: host disconnects -> Output: room gone, every index entry cleared, id reusable."""
    store = _store_with_room()
    store.enqueue("r1", session_id="g1", name="G1")
    store.admit("r1", actor_id="host", session_id="g1")
    store.enqueue("r1", session_id="g2", name="G2")

    departure = store.discard_session("host")
    assert departure is not None
    assert departure.room_closed is True
    assert list(departure.room.members) == ["g1"]
    assert list(departure.room.lobby) == ["g2"]

    assert store.has_room("r1") is False
    assert store.list_rooms() == []
    for session_id in ("host", "g1", "g2"):
        assert store.find_room_id_by_session(session_id) is None

    room = store.create_room("r1", host_id="g1")
    assert room.host_id == "g1"
