"""
Basic tests for the Startups game engine.
"""

import pytest
from startups_engine import errors
from startups_engine.constants import COMPANY_NAMES
from startups_engine.engine import create_room, join_room, remove_player, start_game
from startups_engine.rules import create_rules, default_rules
from startups_engine.store import RoomStore

from conftest import cards, make_room


def test_create_room():
    """Test room creation."""
    room = create_room("owner1")
    assert room.owner == "owner1"
    assert len(room.code) == 4
    assert room.code == room.code.upper()
    assert not room.game_started
    assert not room.game_ended
    assert room.players == []
    assert room.anti_chips == {company: None for company in COMPANY_NAMES}


def test_join_room():
    """Test player joining room."""
    room = create_room("player1")
    result = join_room(room, "player1", "Alice")

    assert result.success
    assert len(result.state.players) == 1

    player = result.state.players[0]
    assert player.name == "Alice"
    assert player.chips1 == default_rules.starting_chips1
    assert player.chips3 == 0
    assert player.last_taken_company is None


def test_join_order_is_turn_order():
    """Players are seated in the order they join."""
    room = make_room("Alice", "Bob", "Charlie")
    assert [p.id for p in room.players] == ["p1", "p2", "p3"]


def test_join_same_player_twice():
    room = make_room("Alice")
    result = join_room(room, "p1", "Alice again")
    assert not result.success
    assert result.error_code == errors.ALREADY_IN_ROOM
    assert len(room.players) == 1


def test_room_full():
    """Test room capacity limit."""
    room = create_room("player0")

    for i in range(default_rules.max_players):
        result = join_room(room, f"player{i}", f"Player {i}")
        assert result.success

    result = join_room(room, "extra", "Extra Player")
    assert not result.success
    assert result.error_code == errors.ROOM_FULL
    assert "full" in result.error_message.lower()
    assert len(room.players) == 7


def test_join_after_start_rejected():
    room = make_room("Alice", "Bob")
    assert start_game(room, seed=1).success

    result = join_room(room, "late", "Latecomer")
    assert not result.success
    assert result.error_code == errors.GAME_ALREADY_STARTED


def test_start_game_insufficient_players():
    """Test game start fails with too few players."""
    room = make_room("Alice")

    start_result = start_game(room)
    assert not start_result.success
    assert start_result.error_code == errors.NOT_ENOUGH_PLAYERS
    assert not room.game_started
    assert room.deck == []


def test_start_game_twice_rejected():
    room = make_room("Alice", "Bob")
    assert start_game(room, seed=1).success
    deck_before = list(room.deck)

    result = start_game(room, seed=2)
    assert not result.success
    assert result.error_code == errors.GAME_ALREADY_STARTED
    assert room.deck == deck_before


def test_only_owner_can_start():
    room = make_room("Alice", "Bob")

    result = start_game(room, seed=1, requested_by="p2")
    assert not result.success
    assert result.error_code == errors.NOT_OWNER

    assert start_game(room, seed=1, requested_by="p1").success


def test_remove_player_in_lobby_reassigns_owner():
    room = make_room("Alice", "Bob", "Charlie")
    assert room.owner == "p1"

    result = remove_player(room, "p1")
    assert result.success
    assert room.owner == "p2"
    assert [p.id for p in room.players] == ["p2", "p3"]
    assert not room.game_ended


def test_remove_last_player_reports_empty():
    room = make_room("Alice")
    result = remove_player(room, "p1")
    assert result.success
    assert result.data["empty"]
    assert room.players == []


def test_remove_unknown_player():
    room = make_room("Alice")
    result = remove_player(room, "ghost")
    assert not result.success
    assert result.error_code == errors.PLAYER_NOT_FOUND


def test_custom_rules():
    rules = create_rules(max_players=3, starting_chips1=5)
    room = create_room("p1", code="abcd", rules=rules)
    assert room.code == "ABCD"
    for i in range(3):
        assert join_room(room, f"p{i}", f"P{i}").success
    assert join_room(room, "p9", "P9").error_code == errors.ROOM_FULL
    assert room.players[0].chips1 == 5


def test_rules_reject_max_below_min():
    with pytest.raises(ValueError):
        create_rules(min_players=4, max_players=3)


def test_rules_player_count_bounds():
    rules = create_rules(min_players=3, max_players=4)
    assert not rules.validate_player_count(2)
    assert rules.validate_player_count(3)
    assert rules.validate_player_count(4)
    assert not rules.validate_player_count(5)

    room = create_room("p1", rules=rules)
    join_room(room, "p1", "Alice")
    join_room(room, "p2", "Bob")
    assert start_game(room).error_code == errors.NOT_ENOUGH_PLAYERS
    join_room(room, "p3", "Charlie")
    assert start_game(room, seed=1).success


def test_room_store_is_case_insensitive():
    store = RoomStore()
    room = store.create("owner", code="ab12")
    assert room.code == "AB12"
    assert store.get("ab12") is room
    assert store.get("AB12") is room
    assert "aB12" in store
    assert store.lock("ab12") is store.lock("AB12")

    assert store.delete("Ab12")
    assert store.get("AB12") is None
    assert len(store) == 0


def test_room_store_generates_unique_codes():
    store = RoomStore()
    codes = {store.create(f"owner{i}").code for i in range(50)}
    assert len(codes) == 50


def test_room_store_require_unknown_room():
    store = RoomStore()
    with pytest.raises(errors.GameError) as exc_info:
        store.require("NOPE")
    assert exc_info.value.code == errors.ROOM_NOT_FOUND


def test_room_store_find_player_room():
    store = RoomStore()
    room = store.create("p1")
    join_room(room, "p1", "Alice")
    assert store.find_player_room("p1") is room
    assert store.find_player_room("nobody") is None


def test_state_serialization():
    """Test state sanitization for clients."""
    from startups_engine.serialization import sanitize_state

    room = make_room("Alice", "Bob")
    room.players[0].hand = cards("Octo Coffee", "Giraffe Beer", "Octo Coffee")

    sanitized = sanitize_state(room, "p1")
    alice = sanitized["players"][0]
    assert alice["hand"] == ["Octo Coffee", "Giraffe Beer", "Octo Coffee"]
    assert alice["hand_count"] == 3

    sanitized_other = sanitize_state(room, "p2")
    assert "hand" not in sanitized_other["players"][0]
    assert sanitized_other["players"][0]["hand_count"] == 3
    assert sanitized_other["players"][0]["chips1"] == 10
    assert sanitized_other["deck_size"] == 0
    assert len(sanitized_other["companies"]) == 6


def test_public_room_info():
    from startups_engine.serialization import get_public_room_info

    room = make_room("Alice", "Bob")
    info = get_public_room_info(room)
    assert info["code"] == "TEST"
    assert info["player_count"] == 2
    assert info["max_players"] == 7
    assert [p["name"] for p in info["players"]] == ["Alice", "Bob"]


@pytest.mark.asyncio
async def test_websocket_events():
    """Test WebSocket event parsing."""
    from startups_engine.ws.events import JoinRoomEvent, PlayerActionEvent, parse_inbound_event

    event = parse_inbound_event({"type": "join_room", "room_code": "abcd", "name": "Alice"})
    assert isinstance(event, JoinRoomEvent)
    assert event.room_code == "abcd"
    assert event.name == "Alice"

    action = parse_inbound_event({"type": "player_action", "action": "play_to_market", "hand_index": 2})
    assert isinstance(action, PlayerActionEvent)
    assert action.payload() == {"hand_index": 2}

    with pytest.raises(ValueError):
        parse_inbound_event({"type": "invalid"})
    with pytest.raises(ValueError):
        parse_inbound_event({"type": "player_action", "action": "steal"})
    with pytest.raises(ValueError):
        parse_inbound_event({"type": "player_action", "action": "take_from_market", "market_index": -1})


@pytest.mark.parametrize("index", [True, False, "0", "1", 1.0])
def test_action_indices_are_not_coerced(index):
    from startups_engine.ws.events import parse_inbound_event

    with pytest.raises(ValueError):
        parse_inbound_event({"type": "player_action", "action": "play_to_market", "hand_index": index})
    with pytest.raises(ValueError):
        parse_inbound_event({"type": "player_action", "action": "take_from_market", "market_index": index})
