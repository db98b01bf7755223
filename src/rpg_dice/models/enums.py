"""Enumeration types for the rpg_dice engine.

This module defines the closed sets of values the dice engine works with:
part operators, comparators, manipulation kinds, and the critical/secret
policies a game can be configured with.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class DiceOperator(StrEnum):
    """Operator joining a dice part to the parts before it."""

    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"

    @property
    def is_additive(self) -> bool:
        """Whether the operator starts a new additive group."""
        return self in (DiceOperator.PLUS, DiceOperator.MINUS)

    @property
    def is_multiplicative(self) -> bool:
        """Whether the operator folds into the current group."""
        return not self.is_additive


class TestType(StrEnum):
    """Comparator used by a pass/fail test or an explode trigger."""

    __test__ = False

    EQUAL = "="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="

    def compare(self, value: float, target: float) -> bool:
        """Compare a value against a target using this comparator.

        Args:
            value: The value being tested (a total or a die face).
            target: The value to test against.

        Returns:
            True if the comparison holds.
        """
        if self is TestType.EQUAL:
            return value == target
        if self is TestType.GREATER_THAN:
            return value > target
        if self is TestType.GREATER_THAN_OR_EQUAL:
            return value >= target
        if self is TestType.LESS_THAN:
            return value < target
        return value <= target


class DropKeepType(StrEnum):
    """Which rolls a drop/keep manipulation selects."""

    DROP_LOWEST = "dl"
    DROP_HIGHEST = "dh"
    KEEP_LOWEST = "kl"
    KEEP_HIGHEST = "kh"

    @property
    def is_keep(self) -> bool:
        """Whether the selected rolls are kept rather than dropped."""
        return self in (DropKeepType.KEEP_LOWEST, DropKeepType.KEEP_HIGHEST)

    @property
    def selects_highest(self) -> bool:
        """Whether the selection starts from the highest values."""
        return self in (DropKeepType.DROP_HIGHEST, DropKeepType.KEEP_HIGHEST)


class ThresholdType(StrEnum):
    """Direction of a threshold clamp."""

    LOW = "low"
    HIGH = "high"


class CriticalMethod(StrEnum):
    """How a critical success amplifies a part total."""

    UNKNOWN = "unknown"
    TIMES_TWO = "times_two"
    ROLL_TWICE = "roll_twice"
    ADD_MAX = "add_max"


class SecretMethod(StrEnum):
    """Policy for rolls flagged as secret."""

    IGNORE = "ignore"
    HIDE = "hide"
    GAME_MASTER_CHANNEL = "game_master_channel"
    GAME_MASTER_DIRECT = "game_master_direct"

    @property
    def is_routed(self) -> bool:
        """Whether secret output is sent somewhere other than the channel."""
        return self in (SecretMethod.GAME_MASTER_CHANNEL, SecretMethod.GAME_MASTER_DIRECT)


class OutputType(StrEnum):
    """Verbosity of formatted roll output."""

    XXS = "xxs"
    S = "s"
    M = "m"


class DieRollGrade(IntEnum):
    """Outcome of a tested check, ordered from worst to best."""

    UNKNOWN = 0
    CRITICAL_FAILURE = 1
    FAILURE = 2
    SUCCESS = 3
    CRITICAL_SUCCESS = 4

    @property
    def is_success(self) -> bool:
        """Whether the grade is a success or critical success."""
        return self in (DieRollGrade.SUCCESS, DieRollGrade.CRITICAL_SUCCESS)

    @property
    def is_failure(self) -> bool:
        """Whether the grade is a failure or critical failure."""
        return self in (DieRollGrade.FAILURE, DieRollGrade.CRITICAL_FAILURE)

    @property
    def marker(self) -> str:
        """Bracketed name the chat layer swaps for an emoji; empty if unknown."""
        if self is DieRollGrade.UNKNOWN:
            return ""
        return f"[{self.name.lower().replace('_', '-')}]"

    def increase(self) -> DieRollGrade:
        """Raise the grade one step, stopping at critical success."""
        if self is DieRollGrade.UNKNOWN:
            return self
        return DieRollGrade(min(self + 1, DieRollGrade.CRITICAL_SUCCESS))

    def decrease(self) -> DieRollGrade:
        """Lower the grade one step, stopping at critical failure."""
        if self is DieRollGrade.UNKNOWN:
            return self
        return DieRollGrade(max(self - 1, DieRollGrade.CRITICAL_FAILURE))


__all__ = [
    "DiceOperator",
    "TestType",
    "DropKeepType",
    "ThresholdType",
    "CriticalMethod",
    "SecretMethod",
    "OutputType",
    "DieRollGrade",
]
