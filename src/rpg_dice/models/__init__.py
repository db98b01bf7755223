"""Data models for dice expressions, rolls, and formatted output.

Exports:
    Enums: DiceOperator, TestType, DropKeepType, ThresholdType,
        CriticalMethod, SecretMethod, OutputType, DieRollGrade.
    Dice model: RollData, SortedRollData, DicePart, DiceCheck, DiceRoll,
        DiceTest, Threshold, Explode, DropKeep.
    Options: RollOptions, SecretRouting, FormattedRoll.
"""

from __future__ import annotations

from rpg_dice.models.dice import (
    DiceCheck,
    DicePart,
    DiceRoll,
    DiceTest,
    DropKeep,
    Explode,
    Number,
    RollData,
    SortedRollData,
    Threshold,
)
from rpg_dice.models.enums import (
    CriticalMethod,
    DiceOperator,
    DieRollGrade,
    DropKeepType,
    OutputType,
    SecretMethod,
    TestType,
    ThresholdType,
)
from rpg_dice.models.options import FormattedRoll, RollOptions, SecretRouting


__all__ = [
    # Enums
    "CriticalMethod",
    "DiceOperator",
    "DieRollGrade",
    "DropKeepType",
    "OutputType",
    "SecretMethod",
    "TestType",
    "ThresholdType",
    # Dice model
    "Number",
    "RollData",
    "SortedRollData",
    "DicePart",
    "DiceCheck",
    "DiceRoll",
    "DiceTest",
    "Threshold",
    "Explode",
    "DropKeep",
    # Options
    "RollOptions",
    "SecretRouting",
    "FormattedRoll",
]
