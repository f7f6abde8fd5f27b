"""
Application service exposed to the booking flow.

The service fetches working windows and appointments through injected store
protocols and delegates every decision to the domain layer. This keeps the
CLI thin and lets tests swap in in-memory stores.
"""

from __future__ import annotations

import logging
from datetime import date as Date, datetime
from typing import Callable, List, Optional

from pendulum import DateTime

from ..domain.models import (
    AvailabilityResult,
    ConflictResult,
    Slot,
    ValidationResult,
    as_local,
)
from ..domain.slot_generator import SlotGenerator
from .calendar import WorkingCalendar
from .schedule_validator import ScheduleValidator, local_now
from .stores import AppointmentStoreProtocol, CalendarStoreProtocol

logger = logging.getLogger(__name__)


class SchedulingService:
    """
    Orchestrates calendar and appointment lookups for validation and slot listing.

    Nothing here mutates the stores; callers commit appointments themselves
    after ``validate_schedule`` passes.
    """

    def __init__(
        self,
        appointment_store: AppointmentStoreProtocol,
        calendar_store: CalendarStoreProtocol,
        slot_generator: Optional[SlotGenerator] = None,
        clock: Callable[[], DateTime] = local_now,
    ) -> None:
        self._appointment_store = appointment_store
        self._calendar = WorkingCalendar(calendar_store)
        self._slot_generator = slot_generator or SlotGenerator()
        self._validator = ScheduleValidator(
            calendar=self._calendar,
            appointment_store=appointment_store,
            clock=clock,
        )
        self._clock = clock

    @property
    def appointment_store(self) -> AppointmentStoreProtocol:
        """The store validation reads; writers must commit through the same one."""
        return self._appointment_store

    def now(self) -> DateTime:
        return as_local(self._clock())

    def validate_schedule(
        self,
        staff_id: str,
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> ValidationResult:
        """Run every check for ``[start, end)`` and collect the violations."""
        return self._validator.validate(staff_id, start, end, exclude_appointment_id=exclude_id)

    def check_availability(self, staff_id: str, start: datetime, end: datetime) -> AvailabilityResult:
        return self._validator.check_availability(staff_id, as_local(start), as_local(end))

    def check_conflict(
        self,
        staff_id: str,
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> ConflictResult:
        return self._validator.check_conflict(staff_id, as_local(start), as_local(end), exclude_id)

    def get_available_slots(
        self,
        staff_id: str,
        date: Date,
        duration_minutes: int,
    ) -> List[Slot]:
        """
        List bookable slots for a staff member on ``date``.

        Recomputed on every call. An empty list is a normal answer.
        """
        if duration_minutes <= 0:
            raise ValueError(f"Duration must be positive, got {duration_minutes}")

        if isinstance(date, datetime):
            date = date.date()

        window = self._calendar.resolve_for(staff_id, date)
        if window is None:
            return []

        appointments = self._appointment_store.find_live_on_date(staff_id, date)
        slots = self._slot_generator.generate(
            day=date,
            window=window,
            appointments=appointments,
            duration_minutes=duration_minutes,
        )
        logger.debug(
            "%d slot(s) of %d min for %s on %s",
            len(slots), duration_minutes, staff_id, date,
        )
        return slots

    @staticmethod
    def calculate_end_time(start: datetime, duration_minutes: int) -> DateTime:
        """End of an appointment of ``duration_minutes`` starting at ``start``."""
        return as_local(start).add(minutes=duration_minutes)
