"""Dice expression engine.

This module turns dice formulas into rolled, manipulated, combined, and
formatted results.

Submodules:
    arithmetic: Math evaluation without eval
    roller: Die rolling with an injectable random source
    tokenizer: Formula tokens
    parser: Tokens into dice parts
    manipulation: Threshold, explode, and drop/keep pipeline
    sorter: Index and value views over rolls
    combiner: Totals, checks, grades, and criticals
    formatter: Chat markdown output and the secret policy
    matches: Bracketed formulas in chat messages
    dice: Entry points and the DiceEngine facade

Example:
    >>> from rpg_dice.engine import parse, roll, combine, SequenceRandom
    >>>
    >>> parts = parse("2d6+3")
    >>> result = roll(parts, SequenceRandom([3, 5]))
    >>> combine(result.parts)
    11
"""

from __future__ import annotations

# =============================================================================
# Arithmetic
# =============================================================================
from rpg_dice.engine.arithmetic import evaluate_math, is_math

# =============================================================================
# Rolling and Manipulation
# =============================================================================
from rpg_dice.engine.roller import RandomSource, SequenceRandom, create_random, roll_dice
from rpg_dice.engine.manipulation import (
    apply_drop_keep,
    apply_explode,
    apply_manipulations,
    apply_threshold,
)
from rpg_dice.engine.sorter import sort_rolls

# =============================================================================
# Parsing
# =============================================================================
from rpg_dice.engine.tokenizer import Token, TokenKind, tokenize
from rpg_dice.engine.parser import parse

# =============================================================================
# Combining and Criticals
# =============================================================================
from rpg_dice.engine.combiner import (
    CriticalRule,
    combine,
    degrees_of_success,
    grade_check,
    never_critical,
    resolve_critical,
    split_checks,
)

# =============================================================================
# Formatting
# =============================================================================
from rpg_dice.engine.formatter import (
    apply_secret_policy,
    format_check,
    format_dice_roll,
    format_part,
    format_roll_data,
)

# =============================================================================
# Messages and Engine
# =============================================================================
from rpg_dice.engine.matches import DiceMatch, find_dice_matches
from rpg_dice.engine.dice import DiceEngine, MacroResolver, format_rolls, roll


__all__ = [
    # Arithmetic
    "evaluate_math",
    "is_math",
    # Rolling
    "RandomSource",
    "SequenceRandom",
    "create_random",
    "roll_dice",
    "apply_threshold",
    "apply_explode",
    "apply_drop_keep",
    "apply_manipulations",
    "sort_rolls",
    # Parsing
    "Token",
    "TokenKind",
    "tokenize",
    "parse",
    # Combining
    "CriticalRule",
    "combine",
    "degrees_of_success",
    "grade_check",
    "never_critical",
    "resolve_critical",
    "split_checks",
    # Formatting
    "apply_secret_policy",
    "format_check",
    "format_dice_roll",
    "format_part",
    "format_roll_data",
    # Engine
    "DiceMatch",
    "find_dice_matches",
    "DiceEngine",
    "MacroResolver",
    "format_rolls",
    "roll",
]
