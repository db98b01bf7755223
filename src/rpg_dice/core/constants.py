"""Package-wide constants for the rpg_dice engine.

This module defines the limits, sentinels, and markup tokens shared by the
parser, manipulation pipeline, math evaluator, and formatter.
"""

from __future__ import annotations

# =============================================================================
# Dice Limits
# =============================================================================

DEFAULT_MAX_EXPLOSIONS = 100
"""Hard cap on extra dice a single part may add by exploding."""

DEFAULT_MAX_DICE = 1000
"""Largest die count a single part may request."""

DEFAULT_MAX_SIDES = 10000
"""Largest die size a single part may request."""

# =============================================================================
# Math Sentinels
# =============================================================================

NAN_SENTINEL = "(NaN)"
"""Inline result of math that evaluates to a non-finite number."""

ERROR_SENTINEL = "(ERR)"
"""Inline result of math that could not be evaluated."""

# =============================================================================
# Output Markup
# =============================================================================

LEFT_ARROW = "⟵"
"""Separator between a total and the rolls that produced it."""

SPOILER = "||"
"""Chat spoiler delimiter wrapped around hidden output."""

FIXED_MARKER = "f"
"""Suffix marking a roll whose value was supplied instead of rolled."""

SECRET_WORD = "secret"
"""Word in a part description that flags the roll as secret."""
