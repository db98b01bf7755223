"""Chat markdown helpers used when rendering rolls."""

from __future__ import annotations

from rpg_dice.core.constants import SPOILER


def bold(value: str) -> str:
    return f"**{value}**"


def italics(value: str) -> str:
    return f"_{value}_"


def strike(value: str) -> str:
    return f"~~{value}~~"


def spoiler(value: str) -> str:
    """Wrap a value in spoiler delimiters unless it already is one."""
    if is_spoiler(value):
        return value
    return f"{SPOILER}{value}{SPOILER}"


def is_spoiler(value: str) -> bool:
    return len(value) > 2 * len(SPOILER) and value.startswith(SPOILER) and value.endswith(SPOILER)


def unspoil(value: str) -> str:
    """Strip one pair of spoiler delimiters, if present."""
    return value[len(SPOILER):-len(SPOILER)] if is_spoiler(value) else value


def format_number(value: float) -> str:
    """Render a number without a trailing .0 for integral floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = ["bold", "italics", "strike", "spoiler", "is_spoiler", "unspoil", "format_number"]
