"""Shared test fixtures for the Startups engine tests."""

import pytest

from startups_engine.antichips import recalc_anti_chips
from startups_engine.engine import create_room, join_room, start_game
from startups_engine.models import Card


def make_room(*names, code="TEST"):
    """Room with one seated player per name; ids are p1, p2, ..."""
    room = create_room("p1", code=code)
    for i, name in enumerate(names, start=1):
        result = join_room(room, f"p{i}", name)
        assert result.success
    return room


def make_started_room(*names, seed=42):
    """
    Started room with a cleared table: empty hands, market and portfolios,
    player p1 to move in the draw phase.
    """
    room = make_room(*names)
    result = start_game(room, seed=seed)
    assert result.success
    room.current_player_index = 0
    for player in room.players:
        player.hand = []
    return room


def set_portfolios(room, **portfolios):
    """Assign portfolios by player id and refresh anti-chips."""
    for player_id, portfolio in portfolios.items():
        room.get_player(player_id).portfolio = dict(portfolio)
    recalc_anti_chips(room)


def cards(*companies):
    return [Card(company) for company in companies]


@pytest.fixture
def two_player_room():
    return make_started_room("Alice", "Bob")


@pytest.fixture
def three_player_room():
    return make_started_room("Alice", "Bob", "Charlie")
