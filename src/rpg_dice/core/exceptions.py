"""Custom exception hierarchy for the rpg_dice engine.

This module defines the exception hierarchy used across the package. All
exceptions inherit from RpgDiceError, enabling unified error handling at
the chat-bot boundary while preserving domain-specific context.

Example:
    >>> from rpg_dice.core.exceptions import DiceParseError
    >>> raise DiceParseError("Invalid die size", offset=2, fragment="d0")
"""

from __future__ import annotations

from typing import Any


class RpgDiceError(Exception):
    """Base exception for all rpg_dice errors.

    All custom exceptions in this package inherit from this class,
    enabling unified error handling at the application boundary.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Dice Engine Domain Exceptions
# =============================================================================


class DiceEngineError(RpgDiceError):
    """Base exception for all dice engine errors.

    Raised when there are issues with parsing, rolling, or combining
    dice expressions.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice engine error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        self.expression = expression
        super().__init__(message, details=combined_details)


class DiceParseError(DiceEngineError):
    """Raised when a dice expression cannot be parsed.

    A parse error always aborts the whole expression; no partial roll
    is produced from the parts that did parse.

    Attributes:
        offset: Character offset in the expression where the problem starts.
        fragment: The offending piece of the expression.
        reason: Short machine-friendly description of the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        offset: int | None = None,
        fragment: str | None = None,
        reason: str | None = None,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice parse error with location context.

        Args:
            message: Human-readable error description.
            offset: Character offset where the error was detected.
            fragment: The text fragment that failed to parse.
            reason: Short reason code (e.g. 'invalid_die_size').
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if offset is not None:
            combined_details["offset"] = offset
        if fragment is not None:
            combined_details["fragment"] = fragment
        if reason:
            combined_details["reason"] = reason
        self.offset = offset
        self.fragment = fragment
        self.reason = reason
        super().__init__(message, expression=expression, details=combined_details)


class DiceRollError(DiceEngineError):
    """Raised when rolled dice are used in an invalid state.

    This typically occurs when combining or formatting parts that were
    never rolled.
    """


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(RpgDiceError):
    """Raised when application configuration is invalid.

    This includes missing required settings, invalid values, or
    incompatible configuration combinations.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(RpgDiceError):
    """Raised when data validation fails.

    This includes constraint violations or type mismatches in values
    handed to the engine by callers.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "RpgDiceError",
    # Dice engine exceptions
    "DiceEngineError",
    "DiceParseError",
    "DiceRollError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
