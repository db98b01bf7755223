"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from rpg_dice.core.exceptions import (
    ConfigurationError,
    DiceEngineError,
    DiceParseError,
    DiceRollError,
    RpgDiceError,
    ValidationError,
)


class TestRpgDiceError:
    """Tests for the base RpgDiceError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = RpgDiceError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = RpgDiceError(
            "Test error",
            details={"key": "value", "count": 42},
        )
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        exc = RpgDiceError("Test", details={"x": 1})
        repr_str = repr(exc)
        assert "RpgDiceError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestDiceEngineExceptions:
    """Tests for dice engine exceptions."""

    def test_engine_error_with_expression(self) -> None:
        """Test DiceEngineError with an expression."""
        exc = DiceEngineError("Bad roll", expression="2d6+")
        assert exc.expression == "2d6+"
        assert exc.details["expression"] == "2d6+"

    def test_parse_error_location(self) -> None:
        """Test DiceParseError carries offset, fragment, and reason."""
        exc = DiceParseError(
            "Die size must be at least 1",
            offset=2,
            fragment="1d0",
            reason="invalid_die_size",
            expression="1d0",
        )
        assert exc.offset == 2
        assert exc.fragment == "1d0"
        assert exc.reason == "invalid_die_size"
        assert exc.details["offset"] == 2
        assert exc.details["reason"] == "invalid_die_size"
        assert exc.details["expression"] == "1d0"

    def test_parse_error_offset_zero_is_kept(self) -> None:
        """Test an offset of zero is still recorded."""
        exc = DiceParseError("Empty", offset=0, fragment="")
        assert exc.details["offset"] == 0
        assert exc.details["fragment"] == ""

    def test_roll_error_is_engine_error(self) -> None:
        """Test DiceRollError inherits from DiceEngineError."""
        exc = DiceRollError("Not rolled")
        assert isinstance(exc, DiceEngineError)


class TestConfigurationExceptions:
    """Tests for configuration exceptions."""

    def test_configuration_error_with_key(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError("Invalid value", config_key="max_explosions")
        assert exc.details["config_key"] == "max_explosions"

    def test_validation_error_with_field(self) -> None:
        """Test ValidationError with field info."""
        exc = ValidationError(
            "Invalid value",
            field_name="values",
            invalid_value=[],
        )
        assert exc.details["field_name"] == "values"
        assert exc.details["invalid_value"] == []


class TestExceptionHierarchy:
    """Tests for exception inheritance hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            DiceEngineError,
            DiceParseError,
            DiceRollError,
            ConfigurationError,
            ValidationError,
        ],
    )
    def test_all_inherit_from_base(self, exc_class: type[RpgDiceError]) -> None:
        """Test all exceptions inherit from RpgDiceError."""
        exc = exc_class("test")
        assert isinstance(exc, RpgDiceError)

    def test_parse_error_caught_as_base(self) -> None:
        """Test parse errors can be caught at the package boundary."""
        with pytest.raises(RpgDiceError):
            raise DiceParseError("Unmatched ')'", reason="unmatched_delimiter")
