"""Parse dice formulas into dice parts.

The parser folds the token stream into a list of DicePart objects:

    - Every die token starts a new part.
    - A part carrying a test closes; whatever follows starts a new part.
    - A +/- modifier attaches to the previous part when that part has
      dice, an additive sign, and no test. Otherwise it becomes a bare
      numeric part. A * or / modifier is always a bare part of its own.
    - Manipulations attach to the die they follow; at most one of each
      kind per part.
    - Description text attaches to the current part. Text before the
      first part is carried into it.

Any error aborts the whole formula; no partial list of parts is returned.
"""

from __future__ import annotations

from rpg_dice.core.config import DiceSettings, get_settings
from rpg_dice.core.exceptions import DiceParseError
from rpg_dice.core.logging import get_logger
from rpg_dice.core.markup import unspoil
from rpg_dice.engine.arithmetic import evaluate_math, is_sentinel, to_number
from rpg_dice.engine.tokenizer import Token, TokenKind, tokenize
from rpg_dice.models.dice import DicePart, DiceTest, DropKeep, Explode, Number, Threshold
from rpg_dice.models.enums import DiceOperator, DropKeepType, TestType, ThresholdType


logger = get_logger(__name__)


TEST_ALIASES: dict[str, TestType] = {
    "gteq": TestType.GREATER_THAN_OR_EQUAL,
    "gte": TestType.GREATER_THAN_OR_EQUAL,
    ">=": TestType.GREATER_THAN_OR_EQUAL,
    "vs": TestType.GREATER_THAN_OR_EQUAL,
    "ac": TestType.GREATER_THAN_OR_EQUAL,
    "dc": TestType.GREATER_THAN_OR_EQUAL,
    "gt": TestType.GREATER_THAN,
    ">": TestType.GREATER_THAN,
    "lteq": TestType.LESS_THAN_OR_EQUAL,
    "lte": TestType.LESS_THAN_OR_EQUAL,
    "<=": TestType.LESS_THAN_OR_EQUAL,
    "lt": TestType.LESS_THAN,
    "<": TestType.LESS_THAN,
    "eq": TestType.EQUAL,
}
"""Comparator spellings accepted in tests; any run of '=' means EQUAL."""

THRESHOLD_ALIASES: dict[str, ThresholdType] = {
    "bt": ThresholdType.LOW,
    "lt": ThresholdType.LOW,
    "ht": ThresholdType.HIGH,
    "tt": ThresholdType.HIGH,
}


# =============================================================================
# Token Reducers
# =============================================================================


def _error(message: str, token: Token, reason: str, expression: str) -> DiceParseError:
    return DiceParseError(
        message,
        offset=token.offset,
        fragment=token.text,
        reason=reason,
        expression=expression,
    )


def _parse_test(token: Token) -> DiceTest:
    word, symbol, target = token.groups
    alias = (word or symbol or "").lower()
    test_type = TEST_ALIASES.get(alias, TestType.EQUAL)
    hidden = target.startswith("||")
    value = int(unspoil(target.replace(" ", "")))
    return DiceTest(test_type, value, alias=alias, hidden=hidden)


class _PartBuilder:
    """Accumulates parts while walking the token stream."""

    def __init__(self, expression: str, max_dice: int, max_sides: int) -> None:
        self.expression = expression
        self.max_dice = max_dice
        self.max_sides = max_sides
        self.parts: list[DicePart] = []
        self.pending_description: list[str] = []

    @property
    def current(self) -> DicePart | None:
        return self.parts[-1] if self.parts else None

    def add_part(self, part: DicePart) -> None:
        if not self.parts and self.pending_description:
            part.description = " ".join(self.pending_description)
            self.pending_description = []
        self.parts.append(part)

    def add_description(self, text: str) -> None:
        text = text.strip()
        if not text:
            return
        if self.current is None:
            self.pending_description.append(text)
        elif self.current.description:
            self.current.description = f"{self.current.description} {text}"
        else:
            self.current.description = text

    def reduce(self, token: Token) -> None:
        if token.kind is TokenKind.DICE:
            self.add_part(self._dice_part(token))
        elif token.kind is TokenKind.DROP_KEEP:
            self._set_manipulation(token, "drop_keep", self._drop_keep(token))
        elif token.kind is TokenKind.EXPLODE:
            self._set_manipulation(token, "explode", self._explode(token))
        elif token.kind is TokenKind.THRESHOLD:
            self._set_manipulation(token, "threshold", self._threshold(token))
        elif token.kind is TokenKind.NO_SORT:
            self._set_manipulation(token, "no_sort", True)
        elif token.kind is TokenKind.MOD:
            self._modifier(token)
        elif token.kind is TokenKind.TEST:
            self._test(token)
        elif token.kind is TokenKind.QUOTE:
            self.add_description(token.groups[0] or "")
        else:
            self.add_description(token.text)

    # -------------------------------------------------------------------------
    # Dice
    # -------------------------------------------------------------------------

    def _dice_part(self, token: Token) -> DicePart:
        sign, fixed, count, size = token.groups
        die_size = int(size)
        die_count = int(count) if count else 1

        if die_size < 1:
            raise _error("Die size must be at least 1", token, "invalid_die_size", self.expression)
        if die_count < 1:
            raise _error("Die count must be at least 1", token, "invalid_die_count", self.expression)
        if die_count > self.max_dice:
            raise _error(
                f"Too many dice (limit {self.max_dice})", token, "too_many_dice", self.expression
            )
        if die_size > self.max_sides:
            raise _error(
                f"Too many sides (limit {self.max_sides})", token, "too_many_sides", self.expression
            )

        fixed_rolls = tuple(int(value) for value in fixed.split(",")) if fixed else ()
        if len(fixed_rolls) > die_count:
            raise _error(
                f"{len(fixed_rolls)} fixed rolls given for {die_count} dice",
                token,
                "too_many_fixed_rolls",
                self.expression,
            )

        return DicePart(
            sign=DiceOperator(sign) if sign else None,
            die_count=die_count,
            die_size=die_size,
            fixed_rolls=fixed_rolls,
        )

    # -------------------------------------------------------------------------
    # Manipulations
    # -------------------------------------------------------------------------

    def _set_manipulation(self, token: Token, attribute: str, value: object) -> None:
        part = self.current
        if part is None or getattr(part, attribute):
            raise _error(
                f"Duplicate {token.kind.value} manipulation",
                token,
                "duplicate_manipulation",
                self.expression,
            )
        setattr(part, attribute, value)

    @staticmethod
    def _drop_keep(token: Token) -> DropKeep:
        kind, count = token.groups
        return DropKeep(DropKeepType(kind.lower()), int(count) if count else 1)

    @staticmethod
    def _explode(token: Token) -> Explode:
        comparator, value = token.groups
        if value is None:
            return Explode()
        return Explode(TestType(comparator) if comparator else TestType.EQUAL, int(value))

    @staticmethod
    def _threshold(token: Token) -> Threshold:
        alias, bound = token.groups
        alias = alias.lower()
        return Threshold(THRESHOLD_ALIASES[alias], int(bound), alias=alias)

    # -------------------------------------------------------------------------
    # Modifiers and Tests
    # -------------------------------------------------------------------------

    def _modifier(self, token: Token) -> None:
        sign, body = token.groups
        result = evaluate_math(body)
        if is_sentinel(result):
            self.add_description(f"{sign or ''}{result}")
            return

        value: Number = to_number(result)
        operator = DiceOperator(sign) if sign else None
        current = self.current

        if operator is DiceOperator.DIVIDE and value == 0:
            raise _error("Division by zero", token, "division_by_zero", self.expression)

        if (
            operator is not None
            and operator.is_additive
            and current is not None
            and current.has_dice
            and current.operator.is_additive
            and not current.has_test
        ):
            current.modifier += value if operator is DiceOperator.PLUS else -value
            return

        self.add_part(DicePart(sign=operator, modifier=value))

    def _test(self, token: Token) -> None:
        current = self.current
        if current is None or current.has_test:
            current = DicePart()
            self.add_part(current)
        current.test = _parse_test(token)


# =============================================================================
# Public API
# =============================================================================


def parse(expression: str, *, settings: DiceSettings | None = None) -> list[DicePart]:
    """Parse a dice formula into unrolled dice parts.

    Args:
        expression: A dice formula with any outer brackets already removed,
            e.g. '4d6dl1+3' or '1d20+5 vs 15 "attack"'.
        settings: Dice limits to enforce; the configured settings by default.

    Returns:
        The parts in formula order.

    Raises:
        DiceParseError: If the formula is empty or invalid. The error
            carries the offset, fragment, and reason of the failure.
    """
    if not expression or not expression.strip():
        raise DiceParseError(
            "Empty dice expression",
            offset=0,
            fragment="",
            reason="empty_expression",
            expression=expression,
        )

    if settings is None:
        settings = get_settings().dice

    builder = _PartBuilder(expression, settings.max_dice, settings.max_sides)
    for token in tokenize(expression):
        builder.reduce(token)

    if builder.pending_description:
        builder.add_part(DicePart())

    logger.debug("Dice expression parsed", expression=expression, parts=len(builder.parts))
    return builder.parts


__all__ = ["TEST_ALIASES", "THRESHOLD_ALIASES", "parse"]
