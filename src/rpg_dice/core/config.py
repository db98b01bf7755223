"""Configuration management for the rpg_dice engine.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides.

Example:
    >>> from rpg_dice.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.dice.max_explosions
    100

Environment Variables:
    RPG_DICE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    RPG_DICE_DEBUG: Enable debug mode
    RPG_DICE_DICE_CRITICAL_METHOD: times_two, roll_twice, add_max or unknown
    RPG_DICE_DICE_SECRET_METHOD: ignore, hide, game_master_channel, game_master_direct
    RPG_DICE_DICE_SORT_ASCENDING: Display rolls lowest to highest
    RPG_DICE_DICE_MAX_EXPLOSIONS: Hard cap on extra dice from exploding
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rpg_dice.core.constants import (
    DEFAULT_MAX_DICE,
    DEFAULT_MAX_EXPLOSIONS,
    DEFAULT_MAX_SIDES,
)
from rpg_dice.core.exceptions import ConfigurationError
from rpg_dice.models.enums import CriticalMethod, OutputType, SecretMethod


class DiceSettings(BaseSettings):
    """Configuration for dice evaluation behavior.

    Attributes:
        critical_method: How a critical success amplifies a part total.
        secret_method: What to do with rolls flagged as secret.
        sort_ascending: Display rolls lowest to highest (else highest first).
        output_type: Default verbosity of formatted output.
        max_explosions: Hard cap on extra dice added by exploding.
        max_dice: Largest die count a single part may request.
        max_sides: Largest die size a single part may request.
    """

    model_config = SettingsConfigDict(
        env_prefix="RPG_DICE_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    critical_method: CriticalMethod = Field(
        default=CriticalMethod.TIMES_TWO,
        description="Critical success amplification",
    )
    secret_method: SecretMethod = Field(
        default=SecretMethod.HIDE,
        description="Handling of secret rolls",
    )
    sort_ascending: bool = Field(
        default=True,
        description="Display rolls lowest to highest",
    )
    output_type: OutputType = Field(
        default=OutputType.M,
        description="Default output verbosity",
    )
    max_explosions: int = Field(
        default=DEFAULT_MAX_EXPLOSIONS,
        ge=1,
        le=1000,
        description="Maximum extra dice added by exploding",
    )
    max_dice: int = Field(
        default=DEFAULT_MAX_DICE,
        ge=1,
        description="Maximum dice in a single part",
    )
    max_sides: int = Field(
        default=DEFAULT_MAX_SIDES,
        ge=1,
        description="Maximum sides on a single die",
    )

    @model_validator(mode="after")
    def validate_explosion_cap(self) -> "DiceSettings":
        """Ensure the explosion cap does not exceed the dice limit.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If max_explosions > max_dice.
        """
        if self.max_explosions > self.max_dice:
            raise ConfigurationError(
                f"max_explosions ({self.max_explosions}) must not exceed "
                f"max_dice ({self.max_dice})",
                config_key="max_explosions",
            )
        return self


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        dice: Dice engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="RPG_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="RPG Dice",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    dice: DiceSettings = Field(default_factory=DiceSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Primarily useful for testing or when environment variables have
    changed at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "DiceSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
