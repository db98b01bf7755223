"""Die rolling with an injectable random source.

The roller never touches module-level random state. Each engine owns a
random source, so a seeded engine is reproducible and tests can replay an
exact sequence of faces with SequenceRandom.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from rpg_dice.core.exceptions import ValidationError
from rpg_dice.core.logging import get_logger
from rpg_dice.models.dice import RollData


logger = get_logger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can pick a uniform integer in a closed range.

    random.Random satisfies this protocol.
    """

    def randint(self, a: int, b: int) -> int: ...


class SequenceRandom:
    """Random source that replays a fixed sequence of values.

    Once the sequence is exhausted the last value repeats. Values are
    returned as given, without checking them against the requested range.

    Example:
        >>> rng = SequenceRandom([6, 5, 3, 1])
        >>> [rng.randint(1, 6) for _ in range(5)]
        [6, 5, 3, 1, 1]
    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        if not self._values:
            raise ValidationError(
                "SequenceRandom needs at least one value",
                field_name="values",
            )
        self._position = 0

    @property
    def calls(self) -> int:
        """How many values have been requested so far."""
        return self._position

    def randint(self, a: int, b: int) -> int:
        index = min(self._position, len(self._values) - 1)
        self._position += 1
        return self._values[index]


def create_random(seed: int | None = None) -> random.Random:
    """Create an independent random source, optionally seeded."""
    return random.Random(seed)


def roll_die(die_size: int, rng: RandomSource) -> int:
    """Roll a single die.

    Dice with fewer than one side always show 0 and a d1 always shows 1;
    neither consumes a value from the random source.
    """
    if die_size < 1:
        return 0
    if die_size == 1:
        return 1
    return rng.randint(1, die_size)


def roll_dice(
    die_count: int,
    die_size: int,
    fixed_rolls: Sequence[int] = (),
    rng: RandomSource | None = None,
    *,
    start_index: int = 0,
) -> list[RollData]:
    """Roll a group of like dice.

    Args:
        die_count: How many dice to roll.
        die_size: Sides per die.
        fixed_rolls: Values used, in order, for the first dice instead of
            rolling them.
        rng: Random source; a fresh unseeded one when omitted.
        start_index: Index given to the first die.

    Returns:
        One RollData per die, in index order.
    """
    source = rng if rng is not None else create_random()
    rolls: list[RollData] = []
    for offset in range(die_count):
        if offset < len(fixed_rolls):
            rolls.append(RollData(start_index + offset, die_size, fixed_rolls[offset], is_fixed=True))
        else:
            rolls.append(RollData(start_index + offset, die_size, roll_die(die_size, source)))

    logger.debug(
        "Dice rolled",
        die_count=die_count,
        die_size=die_size,
        fixed=len(fixed_rolls),
        values=[roll.initial_value for roll in rolls],
    )
    return rolls


__all__ = [
    "RandomSource",
    "SequenceRandom",
    "create_random",
    "roll_die",
    "roll_dice",
]
