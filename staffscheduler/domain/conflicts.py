"""
Detects double bookings against a staff member's existing appointments.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from .models import Appointment, ConflictResult, format_clock
from .overlap import intervals_collide

logger = logging.getLogger(__name__)


class ConflictDetector:
    """
    Finds the first live appointment colliding with a candidate interval.

    Appointments are scanned in the order given; that order carries no
    temporal meaning, so "first" is simply the first match found.
    """

    def detect(
        self,
        appointments: Iterable[Appointment],
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[str] = None,
    ) -> ConflictResult:
        for existing in appointments:
            if not existing.is_live:
                continue
            if exclude_appointment_id is not None and existing.id == exclude_appointment_id:
                continue

            if intervals_collide(existing.start_at, existing.end_at, start, end):
                logger.debug(
                    "Candidate %s-%s collides with appointment %s",
                    start, end, existing.id,
                )
                return ConflictResult(
                    has_conflict=True,
                    appointment=existing,
                    message=self.format_message(existing),
                )

        return ConflictResult(has_conflict=False)

    @staticmethod
    def format_message(existing: Appointment) -> str:
        service = f" for {existing.service_name}" if existing.service_name else ""
        return (
            f"Time already taken by another appointment{service} with "
            f"{existing.display_customer()} "
            f"({format_clock(existing.start_at)} - {format_clock(existing.end_at)})"
        )
