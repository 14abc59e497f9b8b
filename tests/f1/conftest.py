"""Fixtures for F1 tests - Progression model."""

import pytest

from coursequest.core.progression import GameState, create_default_game_state


@pytest.fixture
def fresh_state() -> GameState:
    """Default seed: three courses, no quests yet."""
    return create_default_game_state()


@pytest.fixture
def seeded_state() -> GameState:
    """Default seed after the first quest generation (9 quests)."""
    state = create_default_game_state()
    state.initialize_quests()
    return state
