"""
Load Calculation Errors

Exceptions raised by the load calculators. Malformed text input is never
an error (the normalizer substitutes defaults); these cover inputs that
cannot produce a meaningful load.
"""

from typing import Any, Dict, Optional


class LoadCalculationError(ValueError):
    """Base exception for all load calculation errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class MissingInputError(LoadCalculationError):
    """
    A required input stage has not been provided.

    Raised instead of computing against zeroed geometry when, for example,
    results are requested before the room dimensions were saved.
    """

    def __init__(self, stage: str, room_type: Optional[str] = None):
        where = f" for {room_type}" if room_type else ""
        super().__init__(
            f"Missing required input stage '{stage}'{where}",
            {"stage": stage, "room_type": room_type},
        )
        self.stage = stage
        self.room_type = room_type


class DegenerateInputError(LoadCalculationError):
    """An input would make a load infinite, undefined or physically meaningless."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid value for '{field}': {value!r} ({reason})",
            {"field": field, "value": value, "reason": reason},
        )
        self.field = field
        self.value = value
        self.reason = reason
