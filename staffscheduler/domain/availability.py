"""
Checks a candidate interval against a staff member's working window.
"""

import logging
from datetime import datetime, time

from .models import AvailabilityResult, Violation, ViolationCode, WorkingWindow
from .overlap import intervals_collide

logger = logging.getLogger(__name__)


def _clock(value: datetime) -> time:
    # Seconds are ignored; windows are declared at minute precision.
    return time(hour=value.hour, minute=value.minute)


class AvailabilityChecker:
    """
    Decides whether ``[start, end)`` fits inside a working window and outside its break.

    Both ends are assumed to fall on the same calendar date; only their clock
    times are compared with the window.
    """

    def check(
        self,
        window: WorkingWindow | None,
        start: datetime,
        end: datetime,
    ) -> AvailabilityResult:
        if window is None:
            return AvailabilityResult(
                available=False,
                violation=Violation(
                    ViolationCode.NO_WORKING_WINDOW,
                    "Staff member does not work on this day of the week",
                ),
            )

        clock_start = _clock(start)
        clock_end = _clock(end)

        if clock_start < window.start_time or clock_end > window.end_time:
            logger.debug(
                "Interval %s-%s falls outside working hours %s for %s",
                clock_start, clock_end, window.format_hours(), window.staff_id,
            )
            return AvailabilityResult(
                available=False,
                violation=Violation(
                    ViolationCode.OUTSIDE_WORKING_HOURS,
                    f"Requested time is outside working hours ({window.format_hours()})",
                ),
            )

        if window.has_break and intervals_collide(
            window.break_start, window.break_end, clock_start, clock_end
        ):
            return AvailabilityResult(
                available=False,
                violation=Violation(
                    ViolationCode.BREAK_CONFLICT,
                    f"Requested time overlaps the staff member's break ({window.format_break()})",
                ),
            )

        return AvailabilityResult(available=True)
