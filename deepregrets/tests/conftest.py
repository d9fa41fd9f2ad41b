"""
Pytest fixtures for Deep Regrets tests.
"""

import pytest

from ..spec_schema import GameContent, FishDefinition, FishSize
from ..engine_core.state import GameState
from ..engine_core.reducer import Reducer
from ..games.deep_regrets import create_deep_regrets_content
from .builders import KRAKEN_ID, start_game, force_action_phase


@pytest.fixture
def content() -> GameContent:
    """Standard Deep Regrets content."""
    return create_deep_regrets_content()


@pytest.fixture
def kraken_content() -> GameContent:
    """Standard content plus a difficulty-9 fish at Depth I."""
    base = create_deep_regrets_content()
    kraken = FishDefinition(
        id=KRAKEN_ID,
        name="Test Kraken",
        depth=1,
        size=FishSize.LARGE,
        value=9,
        difficulty=9,
    )
    return GameContent(
        content_id="deep_regrets_test",
        name="Deep Regrets (test)",
        fish=base.fish + [kraken],
        dinks=base.dinks,
        upgrades=base.upgrades,
        tackle_dice=base.tackle_dice,
        regrets=base.regrets,
        characters=base.characters,
        rules=base.rules,
    )


@pytest.fixture
def reducer(content) -> Reducer:
    return Reducer(content=content)


@pytest.fixture
def empty_game_state() -> GameState:
    """A game that has not been initialised yet."""
    return GameState()


@pytest.fixture
def two_seat_game(content) -> GameState:
    """Alice and Bob, day 1, refresh phase."""
    return start_game(content, num_seats=2)


@pytest.fixture
def at_sea(two_seat_game) -> GameState:
    """Both seats at Depth I in the action phase, Alice on turn."""
    return force_action_phase(two_seat_game, location="sea", depth=1)


@pytest.fixture
def at_port(two_seat_game) -> GameState:
    """Both seats at port in the action phase, Alice on turn."""
    return force_action_phase(two_seat_game, location="port")
