"""rpg_dice - Dice expression engine for tabletop role-playing chat.

Evaluates dice notation found in chat messages ('4d6dl1+3', '[[2d8x]]',
'[1d20+5 vs 15 attack]') into rolled, manipulated, and formatted results.

Example:
    >>> from rpg_dice import DiceEngine
    >>>
    >>> engine = DiceEngine(seed=42)
    >>> for result in engine.process_message("I attack! [1d20+5 vs 15] [[2d6+3]]"):
    ...     print(result.text)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Dice data model, enums, and formatting options.
    engine: Parser, roller, manipulation pipeline, combiner, and formatter.
"""

from __future__ import annotations

# Core
from rpg_dice.core.config import Settings, get_settings
from rpg_dice.core.exceptions import DiceParseError, RpgDiceError
from rpg_dice.core.logging import configure_logging, get_logger

# Engine
from rpg_dice.engine import (
    DiceEngine,
    SequenceRandom,
    combine,
    evaluate_math,
    format_rolls,
    parse,
    roll,
)

# Models
from rpg_dice.models import (
    CriticalMethod,
    DiceRoll,
    FormattedRoll,
    OutputType,
    RollOptions,
    SecretMethod,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "RpgDiceError",
    "DiceParseError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Engine
    "DiceEngine",
    "SequenceRandom",
    "parse",
    "roll",
    "combine",
    "format_rolls",
    "evaluate_math",
    # Models
    "CriticalMethod",
    "SecretMethod",
    "OutputType",
    "RollOptions",
    "DiceRoll",
    "FormattedRoll",
]
