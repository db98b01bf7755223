"""Dice data model: rolls, parts, manipulations, and roll results.

Every evaluation builds a fresh, disposable graph of these objects. A
DicePart is produced once by the parser and afterwards only gains rolls
(and, on a critical success, a critical total). RollData is produced by
the roller and afterwards only has its working value and flags changed
by the manipulation pipeline.

Invariants:
    RollData.initial_value, is_min, and is_max are fixed when the roll is
    created and cannot be reassigned.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Union

from rpg_dice.core.constants import FIXED_MARKER, SECRET_WORD
from rpg_dice.core.markup import bold, format_number, italics, spoiler, strike
from rpg_dice.models.enums import (
    DiceOperator,
    DieRollGrade,
    DropKeepType,
    TestType,
    ThresholdType,
)


Number = Union[int, float]

_SECRET_RE = re.compile(rf"\b{SECRET_WORD}\b", re.IGNORECASE)

_IMMUTABLE_ROLL_FIELDS = frozenset({"initial_value", "is_min", "is_max"})


# =============================================================================
# Tests and Manipulations
# =============================================================================


@dataclass(frozen=True)
class DiceTest:
    """A pass/fail comparison of a total against a target.

    Attributes:
        type: The comparator.
        value: The target value.
        alias: How the comparator was written (e.g. '>=', 'vs', 'dc').
        hidden: Whether the target is displayed as a spoiler.
    """

    __test__ = False

    type: TestType
    value: Number
    alias: str = ""
    hidden: bool = False

    def test(self, total: Number) -> bool:
        """Return True if the total passes the test."""
        return self.type.compare(total, self.value)

    def __str__(self) -> str:
        target = format_number(self.value)
        if self.hidden:
            target = spoiler(target)
        return f"{self.alias or self.type.value} {target}"


@dataclass(frozen=True)
class Threshold:
    """Clamp each roll's working value to a bound.

    Attributes:
        kind: HIGH caps values above the bound, LOW raises values below it.
        bound: The clamp value.
        alias: How the threshold was written ('ht', 'tt', 'lt', 'bt').
    """

    kind: ThresholdType
    bound: int
    alias: str = ""

    def __str__(self) -> str:
        alias = self.alias or ("ht" if self.kind is ThresholdType.HIGH else "lt")
        return f"{alias}{self.bound}"


@dataclass(frozen=True)
class Explode:
    """Roll an extra die for every roll whose face matches the trigger.

    Attributes:
        kind: Comparator between the rolled face and the trigger value.
        value: Trigger value; None means "the die size".
    """

    kind: TestType = TestType.EQUAL
    value: int | None = None

    def trigger_value(self, die_size: int) -> int:
        return die_size if self.value is None else self.value

    def triggers(self, face: int, die_size: int) -> bool:
        """Return True if a roll showing this face explodes."""
        return self.kind.compare(face, self.trigger_value(die_size))

    def __str__(self) -> str:
        if self.value is None:
            return "x"
        if self.kind is TestType.EQUAL:
            return f"x{self.value}"
        return f"x{self.kind.value}{self.value}"


@dataclass(frozen=True)
class DropKeep:
    """Drop or keep the N highest or lowest rolls.

    Attributes:
        kind: Which rolls are selected and whether they are dropped or kept.
        count: How many rolls are selected.
    """

    kind: DropKeepType
    count: int = 1

    def __str__(self) -> str:
        return f"{self.kind.value}{self.count}"


# =============================================================================
# Rolls
# =============================================================================


@dataclass
class RollData:
    """A single die: its rolled face, working value, and pipeline flags.

    Attributes:
        index: Order in which the die was rolled within its part.
        die_size: Number of sides on the die.
        initial_value: The face as rolled (or as fixed); never changes.
        value: Working value used for totals; starts as initial_value.
        is_fixed: The value was supplied instead of rolled.
        is_min: The initial value is the lowest face (1).
        is_max: The initial value is the highest face.
        is_dropped: Excluded from the part total by drop/keep.
        is_exploded: This roll triggered an extra roll.
        is_explosion: This roll is an extra roll added by exploding.
        is_above_threshold: The value was clamped down to a high threshold.
        is_below_threshold: The value was clamped up to a low threshold.
    """

    index: int
    die_size: int
    initial_value: int
    is_fixed: bool = False
    is_explosion: bool = False
    value: int = field(init=False)
    is_min: bool = field(init=False)
    is_max: bool = field(init=False)
    is_dropped: bool = field(default=False, init=False)
    is_exploded: bool = field(default=False, init=False)
    is_above_threshold: bool = field(default=False, init=False)
    is_below_threshold: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        has_faces = self.die_size >= 1
        object.__setattr__(self, "is_min", has_faces and self.initial_value == 1)
        object.__setattr__(self, "is_max", has_faces and self.initial_value == self.die_size)
        self.value = self.initial_value

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IMMUTABLE_ROLL_FIELDS and name in self.__dict__:
            raise AttributeError(f"RollData.{name} is fixed at roll time")
        super().__setattr__(name, value)

    @property
    def is_clamped(self) -> bool:
        return self.is_above_threshold or self.is_below_threshold

    @property
    def text(self) -> str:
        """Chat markdown for this roll.

        Max faces are bold and min faces italic (judged on the face as
        rolled), clamped rolls show the face and the value used, exploded
        rolls end in '!', fixed rolls end in 'f', dropped rolls are struck.
        """
        output = format_number(self.initial_value)
        if self.is_max:
            output = bold(output)
        if self.is_min:
            output = italics(output)
        if self.is_clamped:
            output = f"{output}→{format_number(self.value)}"
        if self.is_exploded:
            output += "!"
        if self.is_fixed:
            output += FIXED_MARKER
        if self.is_dropped:
            output = strike(output)
        return output


@dataclass
class SortedRollData:
    """Index-ordered and value-ordered views over one part's rolls.

    Attributes:
        by_index: Rolls in creation order.
        by_value: Rolls by ascending value; ties by ascending index.
        initial_count: Dice rolled before exploding added any.
        initial_sum: Sum of the initial faces of those dice.
        count: Rolls remaining after drop/keep.
        sum: Sum of the working values of the remaining rolls.
    """

    by_index: list[RollData]
    by_value: list[RollData]
    initial_count: int
    initial_sum: int
    count: int
    sum: int


# =============================================================================
# Parts and Results
# =============================================================================


@dataclass
class DicePart:
    """One signed group of like dice (or a bare number) within a formula.

    Attributes:
        sign: Operator joining this part to the previous ones; None if the
            part was written without one.
        die_count: Number of dice; 0 for a bare numeric term.
        die_size: Sides per die.
        fixed_rolls: Values used in place of the first rolls.
        threshold: Optional threshold manipulation.
        explode: Optional explode manipulation.
        drop_keep: Optional drop/keep manipulation.
        no_sort: Display rolls in the order they were rolled.
        modifier: For die parts, the signed sum of attached +/- modifiers;
            for bare parts, the term's value.
        test: Optional pass/fail test ending a check.
        description: Free text attached to the part.
        rolls: Rolls produced for this part, in creation order.
        critical_total: Replacement total set by the critical resolver.
        critical_rolls: Extra rolls made by the critical resolver.
    """

    sign: DiceOperator | None = None
    die_count: int = 0
    die_size: int = 0
    fixed_rolls: tuple[int, ...] = ()
    threshold: Threshold | None = None
    explode: Explode | None = None
    drop_keep: DropKeep | None = None
    no_sort: bool = False
    modifier: Number = 0
    test: DiceTest | None = None
    description: str = ""
    rolls: list[RollData] = field(default_factory=list)
    critical_total: Number | None = None
    critical_rolls: list[RollData] = field(default_factory=list)

    @property
    def operator(self) -> DiceOperator:
        """The effective operator; unsigned parts add."""
        return self.sign or DiceOperator.PLUS

    @property
    def has_dice(self) -> bool:
        return self.die_count > 0 and self.die_size > 0

    @property
    def has_test(self) -> bool:
        return self.test is not None

    @property
    def has_secret(self) -> bool:
        """Whether the description flags this part as secret."""
        return _SECRET_RE.search(self.description) is not None

    @property
    def is_empty(self) -> bool:
        return not self.has_dice and not self.modifier and not self.has_test

    @property
    def is_rolled(self) -> bool:
        return bool(self.rolls) or not self.has_dice

    @property
    def roll_sum(self) -> int:
        """Sum of the working values of rolls that were not dropped."""
        return sum(roll.value for roll in self.rolls if not roll.is_dropped)

    @property
    def base_total(self) -> Number:
        """The part's contribution before any critical amplification."""
        magnitude: Number = self.roll_sum if self.has_dice else self.modifier
        if self.operator is DiceOperator.MINUS:
            magnitude = -magnitude
        if self.has_dice and self.operator.is_additive:
            magnitude += self.modifier
        return magnitude

    @property
    def total(self) -> Number:
        """The part's contribution, including a resolved critical."""
        if self.critical_total is not None:
            return self.critical_total
        return self.base_total

    @property
    def max_total(self) -> Number:
        """Highest possible contribution of the dice plus static modifiers."""
        return self.die_count * self.die_size + self.modifier


@dataclass
class DiceCheck:
    """A run of parts combined into one total, ending in at most one test.

    Attributes:
        parts: The parts in formula order.
        total: Combined total of the parts.
        grade: Result of the check's test, UNKNOWN when untested.
    """

    parts: list[DicePart]
    total: Number
    grade: DieRollGrade = DieRollGrade.UNKNOWN

    @property
    def test(self) -> DiceTest | None:
        return next((part.test for part in self.parts if part.test), None)

    @property
    def has_fixed(self) -> bool:
        return any(part.fixed_rolls for part in self.parts)

    @property
    def description(self) -> str:
        return " ".join(part.description for part in self.parts if part.description)


@dataclass
class DiceRoll:
    """The evaluated result of one dice expression.

    Attributes:
        expression: The formula as given to the parser.
        checks: The rolled parts split into checks.
    """

    expression: str
    checks: list[DiceCheck] = field(default_factory=list)

    @property
    def parts(self) -> list[DicePart]:
        return [part for check in self.checks for part in check.parts]

    @property
    def total(self) -> Number:
        """Total of the first check, or 0 for an empty roll."""
        return self.checks[0].total if self.checks else 0

    @property
    def totals(self) -> list[Number]:
        return [check.total for check in self.checks]

    @property
    def has_secret(self) -> bool:
        return any(part.has_secret for part in self.parts)


__all__ = [
    "Number",
    "DiceTest",
    "Threshold",
    "Explode",
    "DropKeep",
    "RollData",
    "SortedRollData",
    "DicePart",
    "DiceCheck",
    "DiceRoll",
]
