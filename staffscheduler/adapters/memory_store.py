"""
In-memory implementations of the store protocols.

Used by tests and as the base of the file-backed appointment store.
"""

import threading
from dataclasses import replace
from datetime import date as Date
from typing import Dict, Iterable, List, Optional, Tuple

from pendulum import DateTime

from ..domain.exceptions import AppointmentNotFoundError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    WorkingWindow,
    day_bounds,
)


class InMemoryAppointmentStore:
    """
    Appointment store keeping records in insertion order.

    Records are replaced, never mutated, so appointments handed out earlier
    keep the values they had when read.
    """

    def __init__(self, appointments: Iterable[Appointment] = ()):
        self._lock = threading.RLock()
        self._appointments: Dict[str, Appointment] = {}
        for appointment in appointments:
            self._appointments[appointment.id] = appointment

    def all(self) -> List[Appointment]:
        with self._lock:
            return list(self._appointments.values())

    def get(self, appointment_id: str) -> Optional[Appointment]:
        with self._lock:
            return self._appointments.get(appointment_id)

    def _live(self, staff_id: str, exclude_id: Optional[str] = None) -> List[Appointment]:
        with self._lock:
            return [
                appointment for appointment in self._appointments.values()
                if appointment.staff_id == staff_id
                and appointment.is_live
                and appointment.id != exclude_id
            ]

    def find_live(self, staff_id: str, exclude_id: Optional[str] = None) -> List[Appointment]:
        return self._live(staff_id, exclude_id)

    def find_live_on_date(self, staff_id: str, date: Date) -> List[Appointment]:
        start_of_day, end_of_day = day_bounds(date)
        found = [
            appointment for appointment in self._live(staff_id)
            if start_of_day <= appointment.start_at <= end_of_day
        ]
        return sorted(found, key=lambda a: a.start_at)

    def insert(self, appointment: Appointment) -> Appointment:
        with self._lock:
            if appointment.id in self._appointments:
                raise ValueError(f"Appointment {appointment.id} already exists")
            self._appointments[appointment.id] = appointment
            self._persist()
            return appointment

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        return self._replace(appointment_id, status=AppointmentStatus(status))

    def update_interval(self, appointment_id: str, start: DateTime, end: DateTime) -> Appointment:
        return self._replace(appointment_id, start_at=start, end_at=end)

    def _replace(self, appointment_id: str, **changes) -> Appointment:
        with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                raise AppointmentNotFoundError(f"Appointment not found: {appointment_id}")
            updated = replace(current, **changes)
            self._appointments[appointment_id] = updated
            self._persist()
            return updated

    def _persist(self) -> None:
        """Hook for subclasses that write records somewhere durable."""


class InMemoryCalendarStore:
    """Calendar store holding at most one working window per (staff, weekday)."""

    def __init__(self, windows: Iterable[WorkingWindow] = ()):
        self._windows: Dict[Tuple[str, int], WorkingWindow] = {}
        for window in windows:
            self.add(window)

    def add(self, window: WorkingWindow) -> None:
        key = (window.staff_id, window.weekday)
        if key in self._windows:
            raise ValueError(
                f"Staff member {window.staff_id} already has working hours for weekday {window.weekday}"
            )
        self._windows[key] = window

    def find_window(self, staff_id: str, weekday: int) -> Optional[WorkingWindow]:
        return self._windows.get((staff_id, weekday))

    def windows_for(self, staff_id: str) -> List[WorkingWindow]:
        return sorted(
            (window for (owner, _), window in self._windows.items() if owner == staff_id),
            key=lambda w: w.weekday,
        )
