"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from rpg_dice.core.config import (
    DiceSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from rpg_dice.core.exceptions import ConfigurationError
from rpg_dice.models.enums import CriticalMethod, OutputType, SecretMethod
from rpg_dice.models.options import RollOptions


class TestDiceSettings:
    """Tests for DiceSettings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default dice settings."""
        monkeypatch.chdir(tmp_path)

        settings = DiceSettings()

        assert settings.critical_method == CriticalMethod.TIMES_TWO
        assert settings.secret_method == SecretMethod.HIDE
        assert settings.sort_ascending is True
        assert settings.output_type == OutputType.M
        assert settings.max_explosions == 100
        assert settings.max_dice == 1000
        assert settings.max_sides == 10000

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test dice settings are read from prefixed environment variables."""
        monkeypatch.setenv("RPG_DICE_DICE_CRITICAL_METHOD", "roll_twice")
        monkeypatch.setenv("RPG_DICE_DICE_SORT_ASCENDING", "false")
        monkeypatch.chdir(tmp_path)

        settings = DiceSettings()

        assert settings.critical_method == CriticalMethod.ROLL_TWICE
        assert settings.sort_ascending is False

    def test_explosion_cap_validation(self) -> None:
        """Test that max_explosions must not exceed max_dice."""
        with pytest.raises(ConfigurationError) as exc_info:
            DiceSettings(max_dice=10, max_explosions=20)

        assert "max_explosions" in str(exc_info.value)

    def test_explosion_cap_bounds(self) -> None:
        """Test max_explosions must be at least one."""
        with pytest.raises(PydanticValidationError):
            DiceSettings(max_explosions=0)

    def test_options_from_settings(self) -> None:
        """Test roll options mirror the configured defaults."""
        settings = DiceSettings(
            critical_method=CriticalMethod.ADD_MAX,
            secret_method=SecretMethod.IGNORE,
            output_type=OutputType.XXS,
        )

        options = RollOptions.from_settings(settings)

        assert options.critical_method == CriticalMethod.ADD_MAX
        assert options.secret_method == SecretMethod.IGNORE
        assert options.output_type == OutputType.XXS
        assert options.sort_ascending is True


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "RPG Dice"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert isinstance(settings.dice, DiceSettings)

    def test_env_vars(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test settings pick up environment variables."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.dice.critical_method == CriticalMethod.ADD_MAX
        assert settings.dice.secret_method == SecretMethod.GAME_MASTER_CHANNEL
        assert settings.dice.max_explosions == 25

    def test_is_production_property(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test is_production property."""
        monkeypatch.setenv("RPG_DICE_DEBUG", "false")
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.is_production is True

    def test_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test settings are read from a .env file in the working directory."""
        (tmp_path / ".env").write_text("RPG_DICE_LOG_LEVEL=WARNING\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.log_level == "WARNING"


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_returns_settings_instance(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test get_settings returns a Settings instance."""
        monkeypatch.chdir(tmp_path)

        settings = get_settings()

        assert isinstance(settings, Settings)

    def test_caching(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_settings returns the cached instance."""
        monkeypatch.chdir(tmp_path)

        first = get_settings()
        second = get_settings()

        assert first is second

    def test_clear_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test clearing the cache forces a reload."""
        monkeypatch.chdir(tmp_path)

        first = get_settings()
        clear_settings_cache()
        second = get_settings()

        assert first is not second

    def test_invalid_env_raises_configuration_error(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test invalid values surface as ConfigurationError."""
        monkeypatch.setenv("RPG_DICE_LOG_LEVEL", "LOUD")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "original_error" in exc_info.value.details
