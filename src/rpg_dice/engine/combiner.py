"""Combine rolled parts into totals, split them into checks, and grade them.

Combining uses a fixed two-tier grouping rather than general operator
precedence: a + or - part starts a new additive group, and a * or / part
folds into the current group. The total is the sum of the groups.

Critical amplification is resolved here too. Whether a test result is a
critical success is a game-system decision supplied as a CriticalRule;
the resolver only applies the configured CriticalMethod to the part.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace
from typing import Protocol

from rpg_dice.core.constants import DEFAULT_MAX_EXPLOSIONS
from rpg_dice.core.exceptions import DiceRollError
from rpg_dice.core.logging import get_logger
from rpg_dice.engine.manipulation import apply_manipulations
from rpg_dice.engine.roller import RandomSource, roll_dice
from rpg_dice.models.dice import DiceCheck, DicePart, Number
from rpg_dice.models.enums import CriticalMethod, DiceOperator, DieRollGrade


logger = get_logger(__name__)


# =============================================================================
# Rolling
# =============================================================================


def roll_part(
    part: DicePart,
    rng: RandomSource,
    *,
    max_explosions: int = DEFAULT_MAX_EXPLOSIONS,
) -> DicePart:
    """Roll a part's dice and run its manipulations.

    Any critical amplification from an earlier roll is cleared. Bare
    numeric parts have nothing to roll.

    Returns:
        The same part, with its rolls filled in.
    """
    part.critical_total = None
    part.critical_rolls = []
    if part.has_dice:
        rolls = roll_dice(part.die_count, part.die_size, part.fixed_rolls, rng)
        part.rolls = apply_manipulations(part, rolls, rng, max_explosions=max_explosions)
    return part


# =============================================================================
# Combining
# =============================================================================


def combine(parts: Sequence[DicePart]) -> Number:
    """Fold part totals into one total.

    Args:
        parts: Rolled parts in formula order.

    Returns:
        The combined total. Dividing by a part whose total is zero yields
        nan for that group instead of raising.

    Raises:
        DiceRollError: If a die part has not been rolled yet.
    """
    groups: list[Number] = []
    current: Number | None = None

    for part in parts:
        if not part.is_rolled:
            raise DiceRollError("Cannot combine a part that has not been rolled")
        total = part.total
        if current is None or part.operator.is_additive:
            if current is not None:
                groups.append(current)
            current = total
        elif part.operator is DiceOperator.TIMES:
            current *= total
        elif total == 0:
            logger.warning("Division by a zero part total", accumulator=current)
            current = math.nan
        else:
            current /= total

    if current is not None:
        groups.append(current)
    return sum(groups)


# =============================================================================
# Checks and Grades
# =============================================================================


def split_checks(parts: Sequence[DicePart]) -> list[list[DicePart]]:
    """Split parts into checks, each ending in at most one test.

    A new check starts at an unsigned die part that is not first, and at
    any part that follows a check's test.
    """
    checks: list[list[DicePart]] = []
    current: list[DicePart] = []
    for part in parts:
        starts_check = bool(current) and (
            (part.sign is None and part.has_dice) or any(p.has_test for p in current)
        )
        if starts_check:
            checks.append(current)
            current = []
        current.append(part)
    if current:
        checks.append(current)
    return checks


def grade_check(parts: Sequence[DicePart], total: Number | None = None) -> DieRollGrade:
    """Grade a check's total against its test.

    Args:
        parts: The parts of one check.
        total: The check's total; combined from the parts when omitted.

    Returns:
        SUCCESS or FAILURE, or UNKNOWN when the check has no test.
    """
    test = next((part.test for part in parts if part.test), None)
    if test is None:
        return DieRollGrade.UNKNOWN
    value = combine(parts) if total is None else total
    return DieRollGrade.SUCCESS if test.test(value) else DieRollGrade.FAILURE


def build_check(parts: Sequence[DicePart]) -> DiceCheck:
    """Combine and grade one check's parts."""
    total = combine(parts)
    return DiceCheck(list(parts), total, grade_check(parts, total))


# =============================================================================
# Criticals
# =============================================================================


class CriticalRule(Protocol):
    """Game-system rule that may adjust a check's grade.

    Returning CRITICAL_SUCCESS makes the engine amplify the tested part
    with the configured CriticalMethod.
    """

    def __call__(self, check: DiceCheck) -> DieRollGrade: ...


def never_critical(check: DiceCheck) -> DieRollGrade:
    """Default rule: the grade is exactly what the test says."""
    return check.grade


def degrees_of_success(check: DiceCheck) -> DieRollGrade:
    """Grade attack and save tests in degrees of success.

    For tests written with 'ac', 'dc', or 'vs', beating the target by 10
    or more is a critical success and missing it by 10 or more is a
    critical failure. A die showing its highest face then raises the
    grade one step, and its lowest face lowers it one step. Other tests
    keep their plain grade.
    """
    test = check.test
    if test is None or test.alias not in ("ac", "dc", "vs"):
        return check.grade

    total, target = check.total, test.value
    if total >= target + 10:
        grade = DieRollGrade.CRITICAL_SUCCESS
    elif total >= target:
        grade = DieRollGrade.SUCCESS
    elif total <= target - 10:
        grade = DieRollGrade.CRITICAL_FAILURE
    else:
        grade = DieRollGrade.FAILURE

    die_part = next((part for part in check.parts if part.has_dice), None)
    if die_part is None or not die_part.rolls:
        return grade
    first = die_part.rolls[0]
    if first.is_max:
        return grade.increase()
    if first.is_min:
        return grade.decrease()
    return grade


def resolve_critical(
    part: DicePart,
    method: CriticalMethod,
    rng: RandomSource,
    *,
    max_explosions: int = DEFAULT_MAX_EXPLOSIONS,
) -> Number:
    """Amplify a critically successful part's total.

    Args:
        part: The rolled part whose test was a critical success.
        method: How to amplify the total.
        rng: Source for the roll-twice re-roll.
        max_explosions: Explosion cap for the re-roll.

    Returns:
        The amplified total, which is also stored on part.critical_total.
    """
    total = part.base_total
    if method is CriticalMethod.TIMES_TWO:
        result = total * 2
    elif method is CriticalMethod.ROLL_TWICE:
        reroll = replace(part, fixed_rolls=(), rolls=[], critical_total=None, critical_rolls=[])
        roll_part(reroll, rng, max_explosions=max_explosions)
        part.critical_rolls = reroll.rolls
        result = total + reroll.base_total
    elif method is CriticalMethod.ADD_MAX:
        result = total + part.max_total
    else:
        result = total

    part.critical_total = result
    logger.debug("Critical resolved", method=method.value, total=total, critical_total=result)
    return result


__all__ = [
    "CriticalRule",
    "build_check",
    "combine",
    "degrees_of_success",
    "grade_check",
    "never_critical",
    "resolve_critical",
    "roll_part",
    "split_checks",
]
