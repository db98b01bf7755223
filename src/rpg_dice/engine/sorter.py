"""Index-ordered and value-ordered views over a part's rolls."""

from __future__ import annotations

from collections.abc import Sequence

from rpg_dice.models.dice import RollData, SortedRollData


def sort_rolls(rolls: Sequence[RollData]) -> SortedRollData:
    """Build sorted views and sums for a part's rolls.

    Both views contain every roll, dropped or not. The initial figures
    cover the dice rolled before exploding added any; count and sum cover
    the rolls left after drop/keep.

    Args:
        rolls: The part's rolls in any order.

    Returns:
        The sorted views with their counts and sums.
    """
    by_index = sorted(rolls, key=lambda roll: roll.index)
    by_value = sorted(rolls, key=lambda roll: (roll.value, roll.index))
    initial = [roll for roll in by_index if not roll.is_explosion]
    kept = [roll for roll in by_index if not roll.is_dropped]
    return SortedRollData(
        by_index=by_index,
        by_value=by_value,
        initial_count=len(initial),
        initial_sum=sum(roll.initial_value for roll in initial),
        count=len(kept),
        sum=sum(roll.value for roll in kept),
    )


__all__ = ["sort_rolls"]
