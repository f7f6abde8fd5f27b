"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import AvailabilityChecker
from .conflicts import ConflictDetector
from .lifecycle import LifecycleAction, allowed_actions, transition
from .models import (
    Appointment,
    AppointmentStatus,
    AvailabilityResult,
    ConflictResult,
    Slot,
    TimeRange,
    ValidationResult,
    Violation,
    ViolationCode,
    WorkingWindow,
)
from .overlap import intervals_collide
from .slot_generator import SLOT_STEP_MINUTES, SlotGenerator

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "AvailabilityChecker",
    "AvailabilityResult",
    "ConflictDetector",
    "ConflictResult",
    "LifecycleAction",
    "SLOT_STEP_MINUTES",
    "Slot",
    "SlotGenerator",
    "TimeRange",
    "ValidationResult",
    "Violation",
    "ViolationCode",
    "WorkingWindow",
    "allowed_actions",
    "intervals_collide",
    "transition",
]
