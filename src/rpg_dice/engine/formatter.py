"""Render rolled dice as chat markdown.

Rendering is layered: each roll renders itself (RollData.text), a part
renders its notation and bracketed rolls, a check renders its grade and
total in front of its parts, and a whole roll renders one line per check.

A typical medium line looks like::

    [success] **17** ⟵ 1d20 [12]+5 vs 15 attack

The secret policy is a pure decision on the rendered text: it may wrap the
text in spoiler delimiters or return a routing intent, but it never sends
anything anywhere.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from rpg_dice.core.constants import LEFT_ARROW, NAN_SENTINEL
from rpg_dice.core.logging import get_logger
from rpg_dice.core.markup import bold, format_number, italics, spoiler
from rpg_dice.engine.sorter import sort_rolls
from rpg_dice.models.dice import DiceCheck, DicePart, DiceRoll, Number, RollData
from rpg_dice.models.enums import OutputType, SecretMethod
from rpg_dice.models.options import FormattedRoll, RollOptions, SecretRouting


logger = get_logger(__name__)


# =============================================================================
# Rolls and Parts
# =============================================================================


def format_roll_data(roll: RollData) -> str:
    """Render one roll as markdown."""
    return roll.text


def format_total(total: Number) -> str:
    """Render a total, showing a non-finite one as the NaN sentinel."""
    if isinstance(total, float) and not math.isfinite(total):
        return NAN_SENTINEL
    return format_number(total)


def display_order(part: DicePart, *, sort_ascending: bool = True) -> list[RollData]:
    """Return a part's rolls in the order they should be shown."""
    sorted_rolls = sort_rolls(part.rolls)
    if part.no_sort:
        return sorted_rolls.by_index
    if sort_ascending:
        return sorted_rolls.by_value
    return list(reversed(sorted_rolls.by_value))


def format_notation(part: DicePart) -> str:
    """Render the dice notation of a part, e.g. '+(3,5)4d6dl1'.

    Bare numeric parts have no notation of their own; their value is
    rendered as the modifier.
    """
    if not part.has_dice:
        return ""
    fixed = f"({','.join(str(value) for value in part.fixed_rolls)})" if part.fixed_rolls else ""
    manipulations = "".join(
        str(manipulation)
        for manipulation in (part.threshold, part.explode, part.drop_keep)
        if manipulation is not None
    )
    no_sort = "ns" if part.no_sort else ""
    return f"{part.sign or ''}{fixed}{part.die_count}d{part.die_size}{manipulations}{no_sort}"


def _format_modifier(part: DicePart) -> str:
    if not part.has_dice:
        return f"{part.sign or ''}{format_number(part.modifier)}"
    if not part.modifier:
        return ""
    sign = "+" if part.modifier > 0 else "-"
    return f"{sign}{format_number(abs(part.modifier))}"


def _format_rolls(rolls: Sequence[RollData]) -> str:
    return f"[{','.join(format_roll_data(roll) for roll in rolls)}]"


def format_part(
    part: DicePart,
    *,
    sort_ascending: bool = True,
    include_notation: bool = True,
) -> str:
    """Render a part as 'notation [rolls]modifier test description'.

    Args:
        part: A rolled part.
        sort_ascending: Show rolls lowest to highest (else highest first).
        include_notation: Echo the dice notation before the rolls.

    Returns:
        The rendered part, e.g. '2d6 [3,5]+3'.
    """
    pieces: list[str] = []
    if part.has_dice:
        rolls = _format_rolls(display_order(part, sort_ascending=sort_ascending))
        if part.critical_rolls:
            rolls += _format_rolls(part.critical_rolls)
        if include_notation:
            pieces.append(f"{format_notation(part)} {rolls}{_format_modifier(part)}")
        else:
            pieces.append(f"{part.sign or ''}{rolls}{_format_modifier(part)}")
    elif part.modifier or not part.has_test:
        pieces.append(_format_modifier(part))

    if part.critical_total is not None:
        pieces.append(italics("(crit)"))
    if part.test is not None:
        pieces.append(str(part.test))
    if part.description:
        pieces.append(part.description)
    return " ".join(piece for piece in pieces if piece)


# =============================================================================
# Checks and Rolls
# =============================================================================


def format_check(check: DiceCheck, options: RollOptions | None = None) -> str:
    """Render a check as '[grade] **total** ⟵ parts'.

    The XXS output type renders only the grade and total; the S output
    type leaves out the dice notation.
    """
    options = options or RollOptions()
    head = " ".join(piece for piece in (check.grade.marker, bold(format_total(check.total))) if piece)
    if options.output_type is OutputType.XXS:
        return head

    include_notation = options.output_type is not OutputType.S
    body = " ".join(
        format_part(part, sort_ascending=options.sort_ascending, include_notation=include_notation)
        for part in check.parts
    )
    return f"{head} {LEFT_ARROW} {body}" if body else head


def apply_secret_policy(
    text: str,
    has_secret: bool,
    method: SecretMethod,
) -> tuple[str, SecretRouting]:
    """Decide how secret output is presented.

    Args:
        text: Rendered roll text.
        has_secret: Whether the roll was flagged secret.
        method: The configured secret method.

    Returns:
        The text to present (spoiler-wrapped line by line for HIDE) and the
        routing intent for the caller.
    """
    if not has_secret or method is SecretMethod.IGNORE:
        return text, SecretRouting()
    if method is SecretMethod.HIDE:
        return "\n".join(spoiler(line) for line in text.splitlines()), SecretRouting()
    return text, SecretRouting(is_routed=True, destination=method)


def format_dice_roll(dice_roll: DiceRoll, options: RollOptions | None = None) -> FormattedRoll:
    """Render a whole roll, one line per check.

    Checks after the first failed check are not rendered.

    Args:
        dice_roll: The rolled and combined expression.
        options: Formatting options; defaults apply when omitted.

    Returns:
        The formatted roll with its secret decision applied.
    """
    options = options or RollOptions()
    lines: list[str] = []
    for check in dice_roll.checks:
        lines.append(format_check(check, options))
        if check.grade.is_failure:
            break

    has_secret = dice_roll.has_secret and options.secret_method is not SecretMethod.IGNORE
    text, routing = apply_secret_policy("\n".join(lines), has_secret, options.secret_method)
    logger.debug(
        "Dice roll formatted",
        checks=len(dice_roll.checks),
        rendered=len(lines),
        has_secret=has_secret,
    )
    return FormattedRoll(
        text=text,
        has_secret=has_secret,
        routing=routing,
        total=dice_roll.total,
        totals=dice_roll.totals,
    )


__all__ = [
    "apply_secret_policy",
    "display_order",
    "format_check",
    "format_dice_roll",
    "format_notation",
    "format_part",
    "format_roll_data",
    "format_total",
]
