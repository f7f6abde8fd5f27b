"""
Enumerates bookable slots for one staff member on one calendar date.

Pure domain logic: the working window and the day's appointments are handed
in by the service layer, nothing is fetched here.
"""

from datetime import date as Date
from typing import Iterable, Iterator, List, Tuple

from .models import (
    Appointment,
    Slot,
    WorkingWindow,
    day_bounds,
    format_minutes,
)
from .overlap import intervals_collide

SLOT_STEP_MINUTES = 30


class SlotGenerator:
    """
    Walks a working window in fixed 30-minute steps and keeps the candidates
    that avoid the break and every live appointment.

    Algorithm:
    1. Convert window and break bounds to minutes since midnight
    2. Convert the day's live appointments to minutes on the target date
    3. Try every start from window start to ``window end - duration``
    4. Skip candidates colliding with the break or an appointment
    5. Always advance by the fixed step, whatever the duration
    """

    step_minutes = SLOT_STEP_MINUTES

    def generate(
        self,
        day: Date,
        window: WorkingWindow | None,
        appointments: Iterable[Appointment],
        duration_minutes: int,
    ) -> List[Slot]:
        """
        Return the bookable slots for ``day``, ascending by start time.

        Args:
            day: Calendar date the slots belong to
            window: The staff member's working window for that weekday, if any
            appointments: Appointments starting on ``day``
            duration_minutes: Length of the requested service

        Returns:
            List of Slot objects; empty when nothing fits
        """
        return list(self.iter_slots(day, window, appointments, duration_minutes))

    def iter_slots(
        self,
        day: Date,
        window: WorkingWindow | None,
        appointments: Iterable[Appointment],
        duration_minutes: int,
    ) -> Iterator[Slot]:
        if duration_minutes <= 0:
            raise ValueError(f"Duration must be positive, got {duration_minutes}")

        if window is None:
            return

        break_bounds = window.break_minutes()
        busy = self._busy_minutes(day, appointments)

        current = window.start_minutes
        while current + duration_minutes <= window.end_minutes:
            slot_start = current
            slot_end = current + duration_minutes
            current += self.step_minutes

            if break_bounds and intervals_collide(break_bounds[0], break_bounds[1], slot_start, slot_end):
                continue

            if any(intervals_collide(busy_start, busy_end, slot_start, slot_end) for busy_start, busy_end in busy):
                continue

            yield Slot(
                date=day,
                start_time=format_minutes(slot_start),
                end_time=format_minutes(slot_end),
            )

    @staticmethod
    def _busy_minutes(
        day: Date,
        appointments: Iterable[Appointment],
    ) -> List[Tuple[float, float]]:
        """
        Express live appointments as minute offsets from midnight of ``day``.

        Seconds are kept as fractions so sub-minute boundaries still compare
        the way the timestamps would.
        """
        midnight, _ = day_bounds(day)
        busy: List[Tuple[float, float]] = []

        for appointment in appointments:
            if not appointment.is_live:
                continue
            start = (appointment.start_at - midnight).total_seconds() / 60
            end = (appointment.end_at - midnight).total_seconds() / 60
            busy.append((start, end))

        return busy
