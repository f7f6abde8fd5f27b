"""
Service layer helpers that orchestrate stores and domain logic.
"""

from .booking import BookingService
from .calendar import WorkingCalendar
from .schedule_validator import ScheduleValidator
from .scheduling import SchedulingService
from .stores import AppointmentStoreProtocol, CalendarStoreProtocol

__all__ = [
    "AppointmentStoreProtocol",
    "BookingService",
    "CalendarStoreProtocol",
    "ScheduleValidator",
    "SchedulingService",
    "WorkingCalendar",
]
