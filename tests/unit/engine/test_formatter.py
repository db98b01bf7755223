"""Tests for chat markdown output."""

from __future__ import annotations

from collections.abc import Callable

from rpg_dice.engine.formatter import (
    apply_secret_policy,
    format_check,
    format_dice_roll,
    format_part,
    format_roll_data,
    format_total,
)
from rpg_dice.models.dice import DiceRoll, RollData
from rpg_dice.models.enums import OutputType, SecretMethod
from rpg_dice.models.options import RollOptions


class TestFormatRollData:
    """Tests for single roll rendering."""

    def test_plain(self) -> None:
        """Test an ordinary face is rendered as is."""
        assert format_roll_data(RollData(0, 6, 3)) == "3"

    def test_max_and_min(self) -> None:
        """Test max faces are bold and min faces italic."""
        assert format_roll_data(RollData(0, 6, 6)) == "**6**"
        assert format_roll_data(RollData(0, 6, 1)) == "_1_"

    def test_fixed(self) -> None:
        """Test fixed rolls are marked."""
        assert format_roll_data(RollData(0, 6, 4, is_fixed=True)) == "4f"

    def test_dropped(self) -> None:
        """Test dropped rolls are struck through."""
        roll = RollData(0, 6, 1)
        roll.is_dropped = True

        assert format_roll_data(roll) == "~~_1_~~"

    def test_clamped_and_exploded(self) -> None:
        """Test clamped rolls show both values and exploded rolls a bang."""
        roll = RollData(0, 6, 6)
        roll.value = 4
        roll.is_above_threshold = True
        roll.is_exploded = True

        assert format_roll_data(roll) == "**6**→4!"


class TestFormatPart:
    """Tests for part rendering."""

    def test_dice_and_modifier(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test a die part with a modifier."""
        part = roll_formula("2d6+3", [3, 5]).parts[0]

        assert format_part(part) == "2d6 [3,5]+3"

    def test_dropped_roll(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test a dropped roll is struck and sorted into place."""
        result = roll_formula("4d6dl1", [6, 5, 3, 1])

        text = format_part(result.parts[0])

        assert result.total == 14
        assert text == "4d6dl1 [~~_1_~~,3,5,**6**]"
        assert text.count("~~") == 2

    def test_descending(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test rolls may be shown highest first."""
        part = roll_formula("4d6dl1", [6, 5, 3, 1]).parts[0]

        assert format_part(part, sort_ascending=False) == "4d6dl1 [**6**,5,3,~~_1_~~]"

    def test_no_sort(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test no-sort keeps rolls in the order they were rolled."""
        part = roll_formula("4d6nsdl1", [3, 6, 1, 5]).parts[0]

        assert format_part(part) == "4d6dl1ns [3,**6**,~~_1_~~,5]"

    def test_fixed_rolls(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test fixed rolls echo in the notation and the rolls."""
        part = roll_formula("(3,5)2d6", [1]).parts[0]

        assert format_part(part) == "(3,5)2d6 [3f,5f]"

    def test_without_notation(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test the notation can be left out."""
        part = roll_formula("2d6+3", [3, 5]).parts[0]

        assert format_part(part, include_notation=False) == "[3,5]+3"


class TestFormatCheck:
    """Tests for check rendering."""

    def test_untested(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test an untested check has no grade marker."""
        check = roll_formula("2d6+3", [3, 5]).checks[0]

        assert format_check(check) == "**11** ⟵ 2d6 [3,5]+3"

    def test_tested(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test a tested check leads with its grade."""
        check = roll_formula("1d20+5 vs 15", [12]).checks[0]

        assert format_check(check) == "[success] **17** ⟵ 1d20 [12]+5 vs 15"

    def test_output_types(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test the smaller output types."""
        check = roll_formula("1d20+5 vs 15", [12]).checks[0]

        xxs = format_check(check, RollOptions(output_type=OutputType.XXS))
        small = format_check(check, RollOptions(output_type=OutputType.S))

        assert xxs == "[success] **17**"
        assert small == "[success] **17** ⟵ [12]+5 vs 15"

    def test_bare_part(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test a bare multiplier renders with its operator."""
        check = roll_formula("2d6*2", [3, 4]).checks[0]

        assert format_check(check) == "**14** ⟵ 2d6 [3,4] *2"

    def test_hidden_target(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test a hidden target stays a spoiler."""
        check = roll_formula("1d20 vs ||15||", [18]).checks[0]

        assert format_check(check).endswith("vs ||15||")


class TestFormatDiceRoll:
    """Tests for whole-roll rendering."""

    def test_one_line_per_check(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test each check gets its own line."""
        result = roll_formula("1d20 vs 5 2d6", [10, 2, 3])

        formatted = format_dice_roll(result)

        assert formatted.text.splitlines() == [
            "[success] **10** ⟵ 1d20 [10] vs 5",
            "**5** ⟵ 2d6 [2,3]",
        ]
        assert formatted.totals == [10, 5]
        assert formatted.total == 10

    def test_stops_after_failed_check(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test checks after the first failure are not rendered."""
        result = roll_formula("1d20 vs 15 1d20 vs 5", [2, 10])

        formatted = format_dice_roll(result)

        assert formatted.text == "[failure] **2** ⟵ 1d20 [2] vs 15"
        assert formatted.totals == [2, 10]

    def test_secret_hidden(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test a secret roll is wrapped in a spoiler by default."""
        formatted = format_dice_roll(roll_formula("1d20 secret", [7]))

        assert formatted.has_secret is True
        assert formatted.text == "||**7** ⟵ 1d20 [7] secret||"
        assert formatted.routing.is_routed is False

    def test_secret_ignored(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test the ignore method shows secret rolls plainly."""
        options = RollOptions(secret_method=SecretMethod.IGNORE)

        formatted = format_dice_roll(roll_formula("1d20 secret", [7]), options)

        assert formatted.has_secret is False
        assert "||" not in formatted.text

    def test_secret_routed(self, roll_formula: Callable[..., DiceRoll]) -> None:
        """Test game master methods return a routing intent."""
        options = RollOptions(secret_method=SecretMethod.GAME_MASTER_CHANNEL)

        formatted = format_dice_roll(roll_formula("1d20 secret", [7]), options)

        assert formatted.routing.is_routed is True
        assert formatted.routing.destination is SecretMethod.GAME_MASTER_CHANNEL
        assert not formatted.text.startswith("||")


class TestHelpers:
    """Tests for formatting helpers."""

    def test_secret_policy_wraps_each_line(self) -> None:
        """Test HIDE wraps every line separately."""
        text, routing = apply_secret_policy("a\nb", True, SecretMethod.HIDE)

        assert text == "||a||\n||b||"
        assert routing.is_routed is False

    def test_secret_policy_without_secret(self) -> None:
        """Test non-secret text passes through."""
        text, routing = apply_secret_policy("a", False, SecretMethod.GAME_MASTER_DIRECT)

        assert text == "a"
        assert routing.is_routed is False

    def test_format_total(self) -> None:
        """Test totals render without trailing zeros and nan as a sentinel."""
        assert format_total(3.0) == "3"
        assert format_total(2.5) == "2.5"
        assert format_total(float("nan")) == "(NaN)"
