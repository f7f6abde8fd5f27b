"""
Domain-specific exception hierarchy for the staff scheduler.

Validation outcomes (past bookings, conflicts, breaks...) are returned as data
and never raised. These exceptions cover commands that cannot be carried out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ValidationResult


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class InvalidTransitionError(SchedulingError):
    """Raised when an appointment status change is not allowed."""


class AppointmentNotFoundError(SchedulingError):
    """Raised when an appointment id is unknown to the store."""


class StoreError(SchedulingError):
    """Raised when persisted appointment data cannot be read or written."""


class BookingRejectedError(SchedulingError):
    """Raised by the booking workflow when a write would break the schedule."""

    def __init__(self, message: str, result: "ValidationResult | None" = None):
        super().__init__(message)
        self.result = result
