"""Formatting options and formatted output models.

These are the values handed across the boundary between the dice engine
and the presentation layer, so they are validated pydantic models rather
than plain dataclasses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from rpg_dice.models.enums import CriticalMethod, OutputType, SecretMethod


if TYPE_CHECKING:
    from rpg_dice.core.config import DiceSettings


class RollOptions(BaseModel):
    """Per-game options controlling criticals, secrecy, and display.

    Attributes:
        critical_method: How a critical success amplifies a part total.
        secret_method: What to do with rolls flagged as secret.
        sort_ascending: Display rolls lowest to highest.
        output_type: Verbosity of the formatted output.
    """

    model_config = ConfigDict(frozen=True)

    critical_method: CriticalMethod = Field(default=CriticalMethod.TIMES_TWO)
    secret_method: SecretMethod = Field(default=SecretMethod.HIDE)
    sort_ascending: bool = Field(default=True)
    output_type: OutputType = Field(default=OutputType.M)

    @classmethod
    def from_settings(cls, settings: DiceSettings) -> RollOptions:
        """Build options from the configured dice settings.

        Args:
            settings: The dice section of the application settings.

        Returns:
            Options mirroring the configured defaults.
        """
        return cls(
            critical_method=settings.critical_method,
            secret_method=settings.secret_method,
            sort_ascending=settings.sort_ascending,
            output_type=settings.output_type,
        )


class SecretRouting(BaseModel):
    """Where the presentation layer should deliver a secret roll.

    Attributes:
        is_routed: Whether output goes somewhere other than the channel.
        destination: The secret method that chose the destination.
    """

    model_config = ConfigDict(frozen=True)

    is_routed: bool = False
    destination: SecretMethod | None = None


class FormattedRoll(BaseModel):
    """Rendered output of one dice expression.

    Attributes:
        text: Chat markdown for the roll, already spoiler-wrapped if hidden.
        has_secret: Whether any part was flagged secret.
        routing: Delivery intent for secret rolls.
        total: Total of the first check.
        totals: Totals of every check.
        inline: Whether the roll came from a double-bracketed match.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    has_secret: bool = False
    routing: SecretRouting = Field(default_factory=SecretRouting)
    total: float = 0
    totals: list[float] = Field(default_factory=list)
    inline: bool = False


__all__ = ["RollOptions", "SecretRouting", "FormattedRoll"]
