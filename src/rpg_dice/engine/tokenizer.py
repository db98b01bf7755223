"""Tokenizer for dice formulas.

The tokenizer walks a formula left to right and, at each position, tries
the token patterns in priority order. Manipulation tokens (drop/keep,
explode, threshold, no-sort) are only recognized directly after a die or
another manipulation, so 'lt 5' after a die is a low threshold while
'lt 5' anywhere else is a less-than test. Anything no pattern claims
becomes description text.

Patterns are compiled once at import and never mutated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import StrEnum

from rpg_dice.core.exceptions import DiceParseError


class TokenKind(StrEnum):
    """Kinds of token a dice formula is split into."""

    DICE = "dice"
    DROP_KEEP = "drop_keep"
    EXPLODE = "explode"
    THRESHOLD = "threshold"
    NO_SORT = "no_sort"
    MOD = "mod"
    TEST = "test"
    QUOTE = "quote"
    DESCRIPTION = "description"


MANIPULATION_KINDS = frozenset(
    {TokenKind.DROP_KEEP, TokenKind.EXPLODE, TokenKind.THRESHOLD, TokenKind.NO_SORT}
)


@dataclass(frozen=True)
class Token:
    """A recognized piece of a dice formula.

    Attributes:
        kind: What the token is.
        text: The exact source text of the token.
        offset: Character offset of the token in the formula.
        groups: Captured values, specific to each kind.
    """

    kind: TokenKind
    text: str
    offset: int
    groups: tuple[str | None, ...] = ()

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


# =============================================================================
# Patterns
# =============================================================================

DICE_RE = re.compile(
    r"([-+*/])?\s*"
    r"(?:\(\s*(\d+(?:\s*,\s*\d+)*)\s*\)\s*)?"
    r"(?:(\d+)\s*|(?<![a-z\d]))d\s*(\d+)",
    re.IGNORECASE,
)
# A manipulation ends at a non-letter or where the next manipulation begins.
_MANIPULATION_END = r"(?=$|[^a-z\d]|dl|dh|kl|kh|ns|bt|lt|ht|tt|x)"

DROP_KEEP_RE = re.compile(r"(dl|dh|kl|kh)\s*(\d+)?" + _MANIPULATION_END, re.IGNORECASE)
EXPLODE_RE = re.compile(r"(?:x|!)(?:\s*(>=|>|<=|<|=)?\s*(\d+))?" + _MANIPULATION_END, re.IGNORECASE)
THRESHOLD_RE = re.compile(r"(bt|lt|ht|tt)\s*(\d+)" + _MANIPULATION_END, re.IGNORECASE)
NO_SORT_RE = re.compile(r"ns" + _MANIPULATION_END, re.IGNORECASE)
TEST_RE = re.compile(
    r"(?:(?<![a-z])(gteq|gte|gt|lteq|lte|lt|eq|vs|ac|dc)|(>=|<=|=+|>|<))"
    r"\s*(\d+|\|\|\s*\d+\s*\|\|)(?![a-z\d])",
    re.IGNORECASE,
)
QUOTE_RE = re.compile(r'"([^"]*)"|`([^`]*)`')
MOD_SIGN_RE = re.compile(r"([-+*/])\s*")
# A number may run straight into a test word; a following die is rejected separately.
MOD_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?(?!\d)")
MOD_FUNCTION_RE = re.compile(r"(?:floor|ceil|round|abs|min|max)\s*(?=\()", re.IGNORECASE)
DIE_AHEAD_RE = re.compile(r"\s*d\s*\d", re.IGNORECASE)

_MANIPULATION_PATTERNS: tuple[tuple[TokenKind, re.Pattern[str]], ...] = (
    (TokenKind.DROP_KEEP, DROP_KEEP_RE),
    (TokenKind.EXPLODE, EXPLODE_RE),
    (TokenKind.THRESHOLD, THRESHOLD_RE),
    (TokenKind.NO_SORT, NO_SORT_RE),
)

_OPENERS = {"(": ")", "[": "]"}
_CLOSERS = {")": "(", "]": "["}
_QUOTES = ('"', "`")


# =============================================================================
# Delimiter Checks
# =============================================================================


def _closing_paren(text: str, start: int) -> int | None:
    """Return the offset just past the ')' matching the '(' at start."""
    depth = 0
    for position in range(start, len(text)):
        char = text[position]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return position + 1
    return None


def check_balanced(expression: str) -> None:
    """Ensure parentheses, brackets, and quotes are all closed.

    Raises:
        DiceParseError: At the first unmatched delimiter.
    """
    stack: list[tuple[str, int]] = []
    quote: tuple[str, int] | None = None
    for position, char in enumerate(expression):
        if quote is not None:
            if char == quote[0]:
                quote = None
            continue
        if char in _QUOTES:
            quote = (char, position)
        elif char in _OPENERS:
            stack.append((char, position))
        elif char in _CLOSERS:
            if not stack or stack[-1][0] != _CLOSERS[char]:
                raise DiceParseError(
                    f"Unmatched {char!r}",
                    offset=position,
                    fragment=char,
                    reason="unmatched_delimiter",
                    expression=expression,
                )
            stack.pop()

    if quote is not None:
        raise DiceParseError(
            "Unterminated quote",
            offset=quote[1],
            fragment=expression[quote[1] :],
            reason="unterminated_quote",
            expression=expression,
        )
    if stack:
        opener, position = stack[-1]
        raise DiceParseError(
            f"Unterminated {opener!r}",
            offset=position,
            fragment=expression[position:],
            reason="unterminated_group",
            expression=expression,
        )


# =============================================================================
# Token Matchers
# =============================================================================


def _match_regex(kind: TokenKind, pattern: re.Pattern[str], text: str, position: int) -> Token | None:
    match = pattern.match(text, position)
    if match is None or match.end() == position:
        return None
    return Token(kind, match.group(0), position, match.groups())


def _match_mod(text: str, position: int, *, signed: bool) -> Token | None:
    """Match an operator followed by a number, a math group, or a call.

    When unsigned, only a leading number or group with no operator is
    accepted; this is how a formula can open with a bare number.
    """
    sign: str | None = None
    body_start = position
    if signed:
        sign_match = MOD_SIGN_RE.match(text, position)
        if sign_match is None:
            return None
        sign = sign_match.group(1)
        body_start = sign_match.end()

    body_end: int | None = None
    number = MOD_NUMBER_RE.match(text, body_start)
    if number is not None:
        body_end = number.end()
    else:
        call = MOD_FUNCTION_RE.match(text, body_start)
        group_start = call.end() if call is not None else body_start
        if group_start < len(text) and text[group_start] == "(":
            body_end = _closing_paren(text, group_start)

    if body_end is None or DIE_AHEAD_RE.match(text, body_end):
        return None
    body = text[body_start:body_end]
    return Token(TokenKind.MOD, text[position:body_end], position, (sign, body))


def _is_manipulation_position(tokens: list[Token]) -> bool:
    return bool(tokens) and (tokens[-1].kind is TokenKind.DICE or tokens[-1].kind in MANIPULATION_KINDS)


def _match_token(text: str, position: int, tokens: list[Token]) -> Token | None:
    quote = QUOTE_RE.match(text, position)
    if quote is not None:
        content = quote.group(1) if quote.group(1) is not None else quote.group(2)
        return Token(TokenKind.QUOTE, quote.group(0), position, (content,))

    if _is_manipulation_position(tokens):
        for kind, pattern in _MANIPULATION_PATTERNS:
            token = _match_regex(kind, pattern, text, position)
            if token is not None:
                return token

    token = _match_regex(TokenKind.DICE, DICE_RE, text, position)
    if token is not None:
        return token

    token = _match_mod(text, position, signed=True)
    if token is None and not tokens:
        token = _match_mod(text, position, signed=False)
    if token is not None:
        return token

    return _match_regex(TokenKind.TEST, TEST_RE, text, position)


def _append_description(tokens: list[Token], text: str, position: int) -> None:
    """Add one character of description, merging with adjacent description."""
    if tokens and tokens[-1].kind is TokenKind.DESCRIPTION:
        last = tokens[-1]
        gap = text[last.end : position]
        if not gap or gap.isspace():
            tokens[-1] = replace(last, text=text[last.offset : position + 1])
            return
    tokens.append(Token(TokenKind.DESCRIPTION, text[position], position))


def tokenize(expression: str) -> list[Token]:
    """Split a dice formula into tokens.

    Args:
        expression: A dice formula without its outer brackets.

    Returns:
        Tokens in source order. Whitespace between tokens is dropped.

    Raises:
        DiceParseError: If a parenthesis, bracket, or quote is left open.
    """
    check_balanced(expression)

    tokens: list[Token] = []
    position = 0
    while position < len(expression):
        if expression[position].isspace():
            position += 1
            continue
        token = _match_token(expression, position, tokens)
        if token is None:
            _append_description(tokens, expression, position)
            position += 1
        else:
            tokens.append(token)
            position = token.end
    return tokens


__all__ = [
    "TokenKind",
    "Token",
    "MANIPULATION_KINDS",
    "DICE_RE",
    "DROP_KEEP_RE",
    "EXPLODE_RE",
    "THRESHOLD_RE",
    "NO_SORT_RE",
    "TEST_RE",
    "QUOTE_RE",
    "check_balanced",
    "tokenize",
]
