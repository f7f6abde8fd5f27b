"""
Single pass/fail gate run before an appointment is created or retimed.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

import pendulum
from pendulum import DateTime

from ..domain.availability import AvailabilityChecker
from ..domain.conflicts import ConflictDetector
from ..domain.models import (
    AvailabilityResult,
    ConflictResult,
    ValidationResult,
    Violation,
    ViolationCode,
    as_local,
)
from .calendar import WorkingCalendar
from .stores import AppointmentStoreProtocol

logger = logging.getLogger(__name__)


def local_now() -> DateTime:
    """Current local wall-clock time without tzinfo."""
    return pendulum.now().naive()


class ScheduleValidator:
    """
    Composes temporal sanity checks, availability and conflict detection.

    Violations accumulate in check order; no check short-circuits the next one.
    Store failures are not caught here.
    """

    def __init__(
        self,
        calendar: WorkingCalendar,
        appointment_store: AppointmentStoreProtocol,
        availability_checker: Optional[AvailabilityChecker] = None,
        conflict_detector: Optional[ConflictDetector] = None,
        clock: Callable[[], DateTime] = local_now,
    ) -> None:
        self._calendar = calendar
        self._appointment_store = appointment_store
        self._availability_checker = availability_checker or AvailabilityChecker()
        self._conflict_detector = conflict_detector or ConflictDetector()
        self._clock = clock

    def validate(
        self,
        staff_id: str,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[str] = None,
    ) -> ValidationResult:
        start = as_local(start)
        end = as_local(end)
        result = ValidationResult()

        if start >= end:
            result.add(Violation(
                ViolationCode.INVALID_INTERVAL,
                "Start time must be before end time",
            ))

        if start < as_local(self._clock()):
            result.add(Violation(
                ViolationCode.PAST_BOOKING,
                "Cannot book an appointment in the past",
            ))

        result.add(self.check_availability(staff_id, start, end).violation)
        result.add(self.check_conflict(staff_id, start, end, exclude_appointment_id).violation)

        if result.valid:
            logger.debug("Interval %s-%s is valid for %s", start, end, staff_id)
        else:
            logger.debug(
                "Interval %s-%s rejected for %s: %s",
                start, end, staff_id, ", ".join(code.value for code in result.codes),
            )

        return result

    def check_availability(self, staff_id: str, start: datetime, end: datetime) -> AvailabilityResult:
        window = self._calendar.resolve_for(staff_id, start)
        return self._availability_checker.check(window, start, end)

    def check_conflict(
        self,
        staff_id: str,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[str] = None,
    ) -> ConflictResult:
        appointments = self._appointment_store.find_live(staff_id, exclude_appointment_id)
        return self._conflict_detector.detect(
            appointments, start, end, exclude_appointment_id=exclude_appointment_id
        )
