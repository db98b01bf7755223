"""Arithmetic evaluation for math embedded in dice formulas.

Math is never handed to eval. Function calls and parenthesized groups are
rewritten innermost-first into plain numbers, one rewrite per pass, in
this priority order:

    1. min/max calls
    2. floor/ceil/round/abs calls
    3. parenthesized groups that contain operators
    4. parentheses around a bare number

What remains is read by a small recursive-descent grammar::

    expr    := term (('+' | '-') term)*
    term    := unary (('*' | '/' | '%') unary)*
    unary   := ('+' | '-') unary | power
    power   := primary ('^' unary)?
    primary := number | '(' expr ')'

Results that are not finite render as "(NaN)"; anything that cannot be
evaluated renders as "(ERR)".

Example:
    >>> evaluate_math("2+2")
    '4'
    >>> evaluate_math("+2+3")
    '+5'
    >>> evaluate_math("1/0")
    '(NaN)'
"""

from __future__ import annotations

import math
import re
from typing import Callable

from rpg_dice.core.constants import ERROR_SENTINEL, NAN_SENTINEL
from rpg_dice.core.logging import get_logger


logger = get_logger(__name__)


NUMBER_PATTERN = r"(?:\d+(?:\.\d*)?|\.\d+)(?:e[-+]?\d+)?"

_NUMBER_RE = re.compile(rf"^[-+]?{NUMBER_PATTERN}$")
_ALLOWED_RE = re.compile(r"^(?:[\d.e+\-*/%^(),]|floor|ceil|round|abs|min|max)*$")
_SPLIT_NUMBER_RE = re.compile(r"[\d.]\s+[\d.]")
_WHITESPACE_RE = re.compile(r"\s+")
_IMPLICIT_MULTIPLY_RE = re.compile(r"([\d.)])(?=\(|(?:floor|ceil|round|abs|min|max)\()")
_MIN_MAX_RE = re.compile(r"(min|max)\(([^()]*)\)")
_FUNCTION_RE = re.compile(r"(floor|ceil|round|abs)\(([^()]*)\)")
_GROUP_RE = re.compile(r"(?<![a-z])\(([^(),]*)\)")
_TOKEN_RE = re.compile(rf"({NUMBER_PATTERN})|([-+*/%^()])")


class MathError(ValueError):
    """Raised internally when math cannot be evaluated."""


class NonFiniteError(MathError):
    """Raised internally when a reduced value is not finite."""


# =============================================================================
# Grammar
# =============================================================================


def _divide(left: float, right: float) -> float:
    if right == 0:
        return math.nan if left == 0 else math.copysign(math.inf, left)
    return left / right


def _modulo(left: float, right: float) -> float:
    if right == 0:
        return math.nan
    return math.fmod(left, right)


def _power(base: float, exponent: float) -> float:
    try:
        result = base**exponent
    except (ZeroDivisionError, OverflowError):
        return math.inf
    if isinstance(result, complex):
        return math.nan
    return float(result)


_BINARY_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "+": lambda left, right: left + right,
    "-": lambda left, right: left - right,
    "*": lambda left, right: left * right,
    "/": _divide,
    "%": _modulo,
}


def _tokenize(text: str) -> list[float | str]:
    tokens: list[float | str] = []
    position = 0
    while position < len(text):
        match = _TOKEN_RE.match(text, position)
        if match is None:
            raise MathError(f"Unexpected character {text[position]!r} at {position}")
        number, operator = match.groups()
        tokens.append(float(number) if number is not None else operator)
        position = match.end()
    return tokens


class _Grammar:
    """Recursive-descent reader over a tokenized arithmetic string."""

    def __init__(self, text: str) -> None:
        self._tokens = _tokenize(text)
        self._position = 0

    def parse(self) -> float:
        value = self._expr()
        if self._position != len(self._tokens):
            raise MathError(f"Unexpected token {self._peek()!r}")
        return value

    def _peek(self) -> float | str | None:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _take(self) -> float | str | None:
        token = self._peek()
        self._position += 1
        return token

    def _is_operator(self, *operators: str) -> bool:
        token = self._peek()
        return isinstance(token, str) and token in operators

    def _expr(self) -> float:
        value = self._term()
        while self._is_operator("+", "-"):
            operator = self._take()
            value = _BINARY_OPERATORS[operator](value, self._term())
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._is_operator("*", "/", "%"):
            operator = self._take()
            value = _BINARY_OPERATORS[operator](value, self._unary())
        return value

    def _unary(self) -> float:
        if self._is_operator("+", "-"):
            operator = self._take()
            value = self._unary()
            return -value if operator == "-" else value
        return self._power()

    def _power(self) -> float:
        base = self._primary()
        if self._is_operator("^"):
            self._take()
            return _power(base, self._unary())
        return base

    def _primary(self) -> float:
        token = self._take()
        if isinstance(token, float):
            return token
        if token == "(":
            value = self._expr()
            if self._take() != ")":
                raise MathError("Unterminated parenthesis")
            return value
        raise MathError(f"Expected a number, found {token!r}")


def _calculate(text: str) -> float:
    return _Grammar(text).parse()


# =============================================================================
# Reduction
# =============================================================================


def format_result(value: float) -> str:
    """Render a finite number, dropping the fraction from integral values.

    Raises:
        NonFiniteError: If the value is infinite or NaN.
    """
    if not math.isfinite(value):
        raise NonFiniteError(f"Non-finite value {value!r}")
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _substitute(value: float) -> str:
    """Render a reduced value for splicing back into the expression.

    Negative values keep parentheses so a following '^' still applies to
    the whole value.
    """
    result = format_result(value)
    return f"({result})" if result.startswith("-") else result


def _arguments(text: str) -> list[float]:
    if not text:
        raise MathError("Missing function arguments")
    return [_calculate(argument) for argument in text.split(",")]


def _round_half_up(value: float, places: float = 0) -> float:
    if not float(places).is_integer() or places < 0:
        raise MathError("round() places must be a non-negative integer")
    scale = 10 ** int(places)
    return math.floor(value * scale + 0.5) / scale


def _call_min_max(match: re.Match[str]) -> str:
    name, arguments = match.groups()
    values = _arguments(arguments)
    return _substitute(min(values) if name == "min" else max(values))


def _call_function(match: re.Match[str]) -> str:
    name, arguments = match.groups()
    values = _arguments(arguments)
    if name == "round":
        if len(values) > 2:
            raise MathError("round() takes at most two arguments")
        return _substitute(_round_half_up(*values))
    if len(values) != 1:
        raise MathError(f"{name}() takes exactly one argument")
    value = values[0]
    if name == "abs":
        return _substitute(abs(value))
    if not math.isfinite(value):
        raise NonFiniteError(f"{name}() of a non-finite value")
    return _substitute(float(math.floor(value) if name == "floor" else math.ceil(value)))


def _reduce_group(text: str) -> str:
    for match in _GROUP_RE.finditer(text):
        content = match.group(1)
        if content and not _NUMBER_RE.match(content):
            return text[: match.start()] + _substitute(_calculate(content)) + text[match.end() :]
    return text


def _strip_parens(text: str) -> str:
    for match in _GROUP_RE.finditer(text):
        content = match.group(1)
        if content[:1] in ("-", "+") and text[match.end() : match.end() + 1] == "^":
            continue
        if _NUMBER_RE.match(content):
            return text[: match.start()] + match.group(1) + text[match.end() :]
    return text


_REDUCTIONS: tuple[Callable[[str], str], ...] = (
    lambda text: _MIN_MAX_RE.sub(_call_min_max, text, count=1),
    lambda text: _FUNCTION_RE.sub(_call_function, text, count=1),
    _reduce_group,
    _strip_parens,
)


def _reduce(text: str) -> str:
    """Rewrite calls and groups into numbers until nothing changes."""
    previous = None
    while text != previous:
        previous = text
        text = _IMPLICIT_MULTIPLY_RE.sub(r"\1*", text)
        for reduction in _REDUCTIONS:
            reduced = reduction(text)
            if reduced != text:
                text = reduced
                break
    return text


def _normalize(expression: str) -> str:
    text = expression.strip().lower()
    if _SPLIT_NUMBER_RE.search(text):
        raise MathError("Numbers separated by whitespace")
    text = _WHITESPACE_RE.sub("", text)
    if not text or not _ALLOWED_RE.match(text):
        raise MathError("Unsupported characters")
    return text


# =============================================================================
# Public API
# =============================================================================


def is_math(text: str) -> bool:
    """Return True if the text only contains math this module understands.

    Args:
        text: Candidate text, such as a bracketed chat fragment.

    Returns:
        True if the text has at least one digit and nothing but numbers,
        operators, parentheses, and supported function names.
    """
    try:
        normalized = _normalize(text)
    except MathError:
        return False
    return any(char.isdigit() for char in normalized)


def to_number(text: str) -> int | float:
    """Convert evaluated math output to a number, preferring int.

    Raises:
        ValueError: If the text is a sentinel or not a number.
    """
    value = float(text)
    if value.is_integer():
        return int(value)
    return value


def is_sentinel(text: str) -> bool:
    """Return True if the text is a math failure sentinel."""
    return text in (NAN_SENTINEL, ERROR_SENTINEL)


def evaluate_math(expression: str) -> str:
    """Evaluate an arithmetic expression to its rendered result.

    Args:
        expression: Arithmetic text using + - * / % ^, parentheses, and the
            functions min, max, floor, ceil, round, and abs.

    Returns:
        The result as text. A leading '+' or '-' on the input is preserved
        on the output ('+2+3' gives '+5', '-2+3' gives '+1'). Non-finite
        results give '(NaN)' and invalid input gives '(ERR)'.
    """
    try:
        text = _normalize(expression)
        sign = text[0] if text[0] in "+-" else ""
        value = _calculate(_reduce(text))
    except NonFiniteError:
        logger.debug("Math evaluated to a non-finite value", expression=expression)
        return NAN_SENTINEL
    except (MathError, ValueError, ArithmeticError, RecursionError) as exc:
        logger.debug("Math evaluation failed", expression=expression, error=str(exc))
        return ERROR_SENTINEL

    if not math.isfinite(value):
        logger.debug("Math evaluated to a non-finite value", expression=expression)
        return NAN_SENTINEL

    result = format_result(value)
    if sign and value >= 0:
        return f"+{result}"
    return result


__all__ = [
    "NUMBER_PATTERN",
    "MathError",
    "NonFiniteError",
    "evaluate_math",
    "format_result",
    "is_math",
    "is_sentinel",
    "to_number",
]
