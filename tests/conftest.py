"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the rpg_dice test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rpg_dice.core.config import DiceSettings, clear_settings_cache
from rpg_dice.engine.dice import DiceEngine, roll
from rpg_dice.engine.parser import parse
from rpg_dice.engine.roller import SequenceRandom
from rpg_dice.models.dice import DiceRoll


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "RPG_DICE_DEBUG": "true",
        "RPG_DICE_LOG_LEVEL": "DEBUG",
        "RPG_DICE_DICE_CRITICAL_METHOD": "add_max",
        "RPG_DICE_DICE_SECRET_METHOD": "game_master_channel",
        "RPG_DICE_DICE_MAX_EXPLOSIONS": "25",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def dice_settings() -> DiceSettings:
    """Provide default dice settings."""
    return DiceSettings()


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine(dice_settings: DiceSettings) -> DiceEngine:
    """Provide a seeded dice engine for reproducible tests."""
    return DiceEngine(seed=42, settings=dice_settings)


@pytest.fixture
def roll_formula(dice_settings: DiceSettings) -> Callable[..., DiceRoll]:
    """Provide a helper that parses a formula and rolls it with fixed faces.

    Returns:
        A function taking a formula and the faces to roll, plus any
        keyword arguments accepted by roll().
    """

    def _roll(expression: str, faces: list[int], **kwargs: object) -> DiceRoll:
        parts = parse(expression, settings=dice_settings)
        return roll(
            parts,
            SequenceRandom(faces),
            expression=expression,
            settings=dice_settings,
            **kwargs,
        )

    return _roll
