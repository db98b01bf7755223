"""Tests for formatting options and output models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from rpg_dice.models.enums import CriticalMethod, OutputType, SecretMethod
from rpg_dice.models.options import FormattedRoll, RollOptions, SecretRouting


class TestRollOptions:
    """Tests for RollOptions."""

    def test_defaults(self) -> None:
        """Test default options."""
        options = RollOptions()

        assert options.critical_method == CriticalMethod.TIMES_TWO
        assert options.secret_method == SecretMethod.HIDE
        assert options.sort_ascending is True
        assert options.output_type == OutputType.M

    def test_values_coerced(self) -> None:
        """Test enum values are accepted as strings."""
        options = RollOptions(critical_method="roll_twice", output_type="xxs")

        assert options.critical_method is CriticalMethod.ROLL_TWICE
        assert options.output_type is OutputType.XXS

    def test_invalid_value(self) -> None:
        """Test unknown values are rejected."""
        with pytest.raises(PydanticValidationError):
            RollOptions(secret_method="shout")

    def test_frozen(self) -> None:
        """Test options cannot be modified."""
        options = RollOptions()

        with pytest.raises(PydanticValidationError):
            options.sort_ascending = False


class TestFormattedRoll:
    """Tests for FormattedRoll."""

    def test_defaults(self) -> None:
        """Test a formatted roll with only text."""
        formatted = FormattedRoll(text="**4**")

        assert formatted.has_secret is False
        assert formatted.routing == SecretRouting()
        assert formatted.totals == []
        assert formatted.inline is False

    def test_copy_with_inline(self) -> None:
        """Test copying with an update keeps the other fields."""
        formatted = FormattedRoll(text="**4**", total=4, totals=[4])

        inline = formatted.model_copy(update={"inline": True})

        assert inline.inline is True
        assert inline.total == 4
        assert formatted.inline is False
