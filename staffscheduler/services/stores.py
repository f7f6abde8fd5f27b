"""
Protocols describing the data collaborators the scheduling services read from.

The engine never locks and never retries. Making "validate, then insert" atomic
is up to whoever owns the store (a serializable transaction, a unique
``(staff_id, start_at)`` constraint, or a lock keyed by staff id).
"""

from __future__ import annotations

from datetime import date as Date
from typing import List, Optional, Protocol

from pendulum import DateTime

from ..domain.models import Appointment, AppointmentStatus, WorkingWindow


class AppointmentStoreProtocol(Protocol):
    """Read/write interface of the appointment store."""

    def find_live(self, staff_id: str, exclude_id: Optional[str] = None) -> List[Appointment]:
        """Return PENDING/CONFIRMED appointments for a staff member."""

    def find_live_on_date(self, staff_id: str, date: Date) -> List[Appointment]:
        """Return live appointments starting within ``date`` (00:00 to 23:59:59.999), by start."""

    def insert(self, appointment: Appointment) -> Appointment:
        """Persist a new appointment and return it."""

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        """Change the status of an existing appointment."""

    def get(self, appointment_id: str) -> Optional[Appointment]:
        """Return an appointment by id, or None."""

    def update_interval(self, appointment_id: str, start: DateTime, end: DateTime) -> Appointment:
        """Move an existing appointment to a new interval."""


class CalendarStoreProtocol(Protocol):
    """Read interface of the working-hours calendar."""

    def find_window(self, staff_id: str, weekday: int) -> Optional[WorkingWindow]:
        """Return the active working window for a weekday (0=Monday), or None."""
