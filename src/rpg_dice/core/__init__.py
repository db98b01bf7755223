"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        RpgDiceError: Base exception for all package errors.
        DiceEngineError: Base exception for dice engine errors.
        DiceParseError: Structured parse failure (offset, fragment, reason).
        DiceRollError: Rolled dice used in an invalid state.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.

    Configuration:
        Settings: Main application settings class.
        DiceSettings: Dice engine settings.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from rpg_dice.core.config import (
    DiceSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from rpg_dice.core.exceptions import (
    ConfigurationError,
    DiceEngineError,
    DiceParseError,
    DiceRollError,
    RpgDiceError,
    ValidationError,
)
from rpg_dice.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "RpgDiceError",
    # Dice engine exceptions
    "DiceEngineError",
    "DiceParseError",
    "DiceRollError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "DiceSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
