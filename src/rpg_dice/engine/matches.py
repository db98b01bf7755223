"""Find bracketed dice formulas in chat messages.

Formulas are written in square brackets, '[1d20+5]', or in double square
brackets for inline output, '[[2d6]]'. Brackets inside markdown code
spans and code blocks are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from rpg_dice.engine.arithmetic import is_math
from rpg_dice.engine.tokenizer import DICE_RE


BASE_RE = re.compile(r"\[+[^\]]+\]+")
CODE_RE = re.compile(r"```.*?```|`[^`\n]*`", re.DOTALL)
INLINE_RE = re.compile(r"^\[\[.*\]\]$", re.DOTALL)
MATH_OPERATOR_RE = re.compile(r"[-+*/%^]|\b(?:min|max|floor|ceil|round|abs)\(", re.IGNORECASE)


@dataclass(frozen=True)
class DiceMatch:
    """A bracketed formula found in a message.

    Attributes:
        match: The matched text, brackets included.
        index: Offset of the match in the message.
        inline: Whether the formula was written in double brackets.
        formula: The formula with its brackets removed.
    """

    match: str
    index: int
    inline: bool
    formula: str

    @property
    def has_dice(self) -> bool:
        return has_dice(self.formula)

    @property
    def is_math(self) -> bool:
        return not self.has_dice and is_pure_math(self.formula)


def redact_code(content: str) -> str:
    """Blank out code spans and blocks without moving any offsets."""
    return CODE_RE.sub(lambda match: "*" * len(match.group(0)), content)


def debrace(text: str) -> str:
    """Remove every layer of enclosing square brackets."""
    while text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    return text


def has_dice(formula: str) -> bool:
    """Return True if the formula contains at least one die."""
    return DICE_RE.search(formula) is not None


def is_pure_math(formula: str) -> bool:
    """Return True if the formula is arithmetic with at least one operator."""
    return is_math(formula) and MATH_OPERATOR_RE.search(formula) is not None


def find_dice_matches(content: str) -> list[DiceMatch]:
    """Find every bracketed formula outside code spans.

    Args:
        content: A chat message.

    Returns:
        The matches in message order. The matched text is taken from the
        original message, not the redacted copy.
    """
    matches: list[DiceMatch] = []
    for found in BASE_RE.finditer(redact_code(content)):
        text = content[found.start() : found.end()]
        matches.append(
            DiceMatch(
                match=text,
                index=found.start(),
                inline=INLINE_RE.match(text) is not None,
                formula=debrace(text).strip(),
            )
        )
    return matches


__all__ = [
    "BASE_RE",
    "DiceMatch",
    "debrace",
    "find_dice_matches",
    "has_dice",
    "is_pure_math",
    "redact_code",
]
