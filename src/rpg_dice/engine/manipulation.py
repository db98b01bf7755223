"""Manipulation pipeline applied to a part's rolls.

Manipulations run in a fixed order no matter how they were written:

    1. threshold   clamp working values of the rolled dice
    2. explode     add extra dice for triggering faces
    3. drop/keep   mark rolls excluded from the total

Each step mutates the RollData list in place. initial_value, is_min, and
is_max are never changed, so the faces as rolled stay visible.
"""

from __future__ import annotations

from rpg_dice.core.constants import DEFAULT_MAX_EXPLOSIONS
from rpg_dice.core.logging import get_logger
from rpg_dice.engine.roller import RandomSource, roll_die
from rpg_dice.models.dice import DicePart, DropKeep, Explode, RollData, Threshold
from rpg_dice.models.enums import ThresholdType


logger = get_logger(__name__)


def apply_threshold(rolls: list[RollData], threshold: Threshold | None) -> None:
    """Clamp each roll's working value to the threshold bound.

    A high threshold lowers values above the bound to the bound; a low
    threshold raises values below the bound to the bound.
    """
    if threshold is None:
        return
    for roll in rolls:
        if threshold.kind is ThresholdType.HIGH and roll.value > threshold.bound:
            roll.value = threshold.bound
            roll.is_above_threshold = True
        elif threshold.kind is ThresholdType.LOW and roll.value < threshold.bound:
            roll.value = threshold.bound
            roll.is_below_threshold = True


def apply_explode(
    rolls: list[RollData],
    explode: Explode | None,
    rng: RandomSource,
    *,
    max_explosions: int = DEFAULT_MAX_EXPLOSIONS,
) -> None:
    """Roll one extra die for every roll whose face triggers the explode.

    Extra dice are appended to the list and may trigger again. Triggers
    are judged on the face as rolled, so a threshold clamp does not stop
    or start an explosion.

    Args:
        rolls: The part's rolls; extended in place.
        explode: The explode manipulation, if any.
        rng: Source for the extra dice.
        max_explosions: Hard cap on extra dice for this part.
    """
    if explode is None or not rolls:
        return

    position = 0
    added = 0
    while position < len(rolls):
        roll = rolls[position]
        position += 1
        if not explode.triggers(roll.initial_value, roll.die_size):
            continue
        if added >= max_explosions:
            logger.warning(
                "Explosion cap reached",
                die_size=roll.die_size,
                max_explosions=max_explosions,
            )
            break
        roll.is_exploded = True
        rolls.append(
            RollData(len(rolls), roll.die_size, roll_die(roll.die_size, rng), is_explosion=True)
        )
        added += 1

    if added:
        logger.debug("Dice exploded", added=added)


def apply_drop_keep(rolls: list[RollData], drop_keep: DropKeep | None) -> None:
    """Mark rolls dropped according to the drop/keep selection.

    Selection works on rolls ordered by value (ties by index), after any
    explosion has added rolls. Drop modes drop the selected rolls; keep
    modes drop every roll that was not selected. Selecting at least as
    many rolls as exist drops all of them (drop) or none of them (keep).
    """
    if drop_keep is None:
        return

    if drop_keep.kind.selects_highest:
        ordered = sorted(rolls, key=lambda roll: (-roll.value, roll.index))
    else:
        ordered = sorted(rolls, key=lambda roll: (roll.value, roll.index))
    selected = {id(roll) for roll in ordered[: max(drop_keep.count, 0)]}

    for roll in rolls:
        is_selected = id(roll) in selected
        roll.is_dropped = not is_selected if drop_keep.kind.is_keep else is_selected


def apply_manipulations(
    part: DicePart,
    rolls: list[RollData],
    rng: RandomSource,
    *,
    max_explosions: int = DEFAULT_MAX_EXPLOSIONS,
) -> list[RollData]:
    """Run the full pipeline for one part.

    Args:
        part: The part whose manipulations are applied.
        rolls: The part's freshly rolled dice; modified in place.
        rng: Source for any extra dice.
        max_explosions: Hard cap on extra dice from exploding.

    Returns:
        The same list, now including any explosion rolls.
    """
    apply_threshold(rolls, part.threshold)
    apply_explode(rolls, part.explode, rng, max_explosions=max_explosions)
    apply_drop_keep(rolls, part.drop_keep)
    return rolls


__all__ = [
    "apply_threshold",
    "apply_explode",
    "apply_drop_keep",
    "apply_manipulations",
]
