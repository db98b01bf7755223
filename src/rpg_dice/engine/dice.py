"""Dice engine entry points.

This module ties the pipeline together: parse a formula into parts, roll
and manipulate them, combine them into checks, resolve criticals, and
format the result. The module-level functions are stateless; DiceEngine
bundles them with its own random source, settings, and game-system hooks.

Example:
    >>> engine = DiceEngine(seed=42)
    >>> result = engine.roll_expression("4d6dl1+3")
    >>> formatted = engine.format(result)
    >>> print(formatted.text)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from rpg_dice.core.config import DiceSettings, get_settings
from rpg_dice.core.constants import LEFT_ARROW
from rpg_dice.core.exceptions import DiceParseError
from rpg_dice.core.logging import get_logger
from rpg_dice.engine.arithmetic import evaluate_math, is_sentinel, to_number
from rpg_dice.engine.combiner import (
    CriticalRule,
    build_check,
    combine,
    never_critical,
    resolve_critical,
    roll_part,
    split_checks,
)
from rpg_dice.engine.formatter import format_dice_roll
from rpg_dice.engine.matches import DiceMatch, find_dice_matches
from rpg_dice.engine.parser import parse
from rpg_dice.engine.roller import RandomSource, create_random
from rpg_dice.models.dice import DicePart, DiceRoll
from rpg_dice.models.enums import CriticalMethod, DieRollGrade
from rpg_dice.models.options import FormattedRoll, RollOptions


logger = get_logger(__name__)


class MacroResolver(Protocol):
    """Expands named macros and placeholders into raw dice text."""

    def resolve(self, text: str) -> str: ...


# =============================================================================
# Stateless Entry Points
# =============================================================================


def roll(
    parts: Sequence[DicePart],
    rng: RandomSource | None = None,
    *,
    expression: str = "",
    critical_method: CriticalMethod | None = None,
    critical_rule: CriticalRule = never_critical,
    settings: DiceSettings | None = None,
) -> DiceRoll:
    """Roll parsed parts and combine them into graded checks.

    Args:
        parts: Parts from parse(); rolled in place.
        rng: Random source; a fresh unseeded one when omitted.
        expression: The formula the parts came from, kept on the result.
        critical_method: How critical successes are amplified; the
            configured method when omitted.
        critical_rule: Game-system rule that decides critical grades.
        settings: Dice settings; the configured settings by default.

    Returns:
        The rolled result with one DiceCheck per check.
    """
    settings = settings or get_settings().dice
    source = rng if rng is not None else create_random()
    method = critical_method or settings.critical_method

    for part in parts:
        roll_part(part, source, max_explosions=settings.max_explosions)

    checks = []
    for check_parts in split_checks(parts):
        check = build_check(check_parts)
        grade = critical_rule(check)
        if grade is DieRollGrade.CRITICAL_SUCCESS:
            tested = next((part for part in check_parts if part.has_test), check_parts[0])
            resolve_critical(tested, method, source, max_explosions=settings.max_explosions)
            check.total = combine(check_parts)
        check.grade = grade
        checks.append(check)

    return DiceRoll(expression=expression, checks=checks)


def format_rolls(dice_roll: DiceRoll, options: RollOptions | None = None) -> FormattedRoll:
    """Format a rolled result; see format_dice_roll."""
    return format_dice_roll(dice_roll, options)


# =============================================================================
# Engine
# =============================================================================


class DiceEngine:
    """Dice evaluation bound to one random source and one set of options.

    Attributes:
        settings: Dice limits and defaults.
        options: Formatting options used when none are passed.
        critical_rule: Game-system rule deciding critical grades.
        macro_resolver: Optional macro expansion applied before parsing.

    Example:
        >>> engine = DiceEngine(seed=7)
        >>> engine.evaluate("1d20+5 vs 15").text
    """

    def __init__(
        self,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
        settings: DiceSettings | None = None,
        options: RollOptions | None = None,
        critical_rule: CriticalRule = never_critical,
        macro_resolver: MacroResolver | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            seed: Seed for a private random source; ignored if rng is given.
            rng: Random source to use instead of a seeded one.
            settings: Dice settings; the configured settings by default.
            options: Default formatting options; built from settings.
            critical_rule: Game-system rule deciding critical grades.
            macro_resolver: Expands macros before parsing.
        """
        self.settings = settings or get_settings().dice
        self.options = options or RollOptions.from_settings(self.settings)
        self.critical_rule = critical_rule
        self.macro_resolver = macro_resolver
        self._rng = rng if rng is not None else create_random(seed)
        logger.info("DiceEngine initialized", seed=seed, injected_rng=rng is not None)

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def parse(self, expression: str) -> list[DicePart]:
        """Expand macros, then parse the formula into parts."""
        if self.macro_resolver is not None:
            expression = self.macro_resolver.resolve(expression)
        return parse(expression, settings=self.settings)

    def roll(self, parts: Sequence[DicePart], *, expression: str = "") -> DiceRoll:
        return roll(
            parts,
            self._rng,
            expression=expression,
            critical_method=self.options.critical_method,
            critical_rule=self.critical_rule,
            settings=self.settings,
        )

    def roll_expression(self, expression: str) -> DiceRoll:
        """Parse and roll a formula.

        Raises:
            DiceParseError: If the formula is invalid.
        """
        return self.roll(self.parse(expression), expression=expression)

    def format(self, dice_roll: DiceRoll, options: RollOptions | None = None) -> FormattedRoll:
        return format_dice_roll(dice_roll, options or self.options)

    def evaluate(self, expression: str, options: RollOptions | None = None) -> FormattedRoll:
        """Parse, roll, and format a formula in one step."""
        return self.format(self.roll_expression(expression), options)

    @staticmethod
    def evaluate_math(expression: str) -> str:
        return evaluate_math(expression)

    def process_match(self, match: DiceMatch) -> FormattedRoll | None:
        """Evaluate one bracketed formula from a message.

        Dice formulas are rolled, pure math is calculated, and anything
        else (including a formula that fails to parse) yields None.
        """
        if match.has_dice:
            try:
                formatted = self.evaluate(match.formula)
            except DiceParseError as exc:
                logger.warning(
                    "Skipping unparseable dice match",
                    formula=match.formula,
                    reason=exc.reason,
                    offset=exc.offset,
                )
                return None
            return formatted.model_copy(update={"inline": match.inline})

        if match.is_math:
            result = evaluate_math(match.formula)
            total = float("nan") if is_sentinel(result) else to_number(result)
            return FormattedRoll(
                text=f"{result} {LEFT_ARROW} {match.formula}",
                total=total,
                totals=[total],
                inline=match.inline,
            )
        return None

    def process_message(self, content: str) -> list[FormattedRoll]:
        """Evaluate every bracketed formula in a chat message.

        Args:
            content: The message text.

        Returns:
            One formatted result per evaluable match, in message order.
        """
        results = []
        for match in find_dice_matches(content):
            formatted = self.process_match(match)
            if formatted is not None:
                results.append(formatted)
        logger.debug("Message processed", results=len(results))
        return results


__all__ = [
    "DiceEngine",
    "MacroResolver",
    "combine",
    "evaluate_math",
    "format_rolls",
    "parse",
    "roll",
]
