"""
Booking workflow built on top of the scheduling service.

This is the caller the scheduling engine expects: it serialises
"validate, then write" per staff member and drives status changes through
the appointment lifecycle.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterable, Iterator, Optional

from ..domain.exceptions import AppointmentNotFoundError, BookingRejectedError
from ..domain.lifecycle import LifecycleAction, transition
from ..domain.models import Appointment, AppointmentStatus, as_local
from .scheduling import SchedulingService
from .stores import AppointmentStoreProtocol

logger = logging.getLogger(__name__)


class BookingService:
    """
    Creates, retimes and moves appointments through their lifecycle.

    Every write for a staff member runs under that staff member's lock, so two
    bookings made through the same service instance cannot both pass
    validation and then both insert. The lock is process-local; several
    processes sharing one store still need a guard in the store itself.
    """

    def __init__(self, scheduling: SchedulingService) -> None:
        self._scheduling = scheduling
        self._appointment_store: AppointmentStoreProtocol = scheduling.appointment_store
        self._locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _staff_lock(self, staff_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[staff_id]

    def _require(self, appointment_id: str) -> Appointment:
        appointment = self._appointment_store.get(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(f"Appointment not found: {appointment_id}")
        return appointment

    @contextmanager
    def _locked(self, appointment_id: str) -> Iterator[Appointment]:
        """
        Hold the owner's lock and yield the appointment as read under it.

        The staff id never changes, so the first read only picks the lock.
        """
        staff_id = self._require(appointment_id).staff_id
        with self._staff_lock(staff_id):
            yield self._require(appointment_id)

    def book(
        self,
        *,
        staff_id: str,
        service_id: str,
        start: datetime,
        duration_minutes: int,
        service_name: str = "",
        customer_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        """
        Validate and insert a new PENDING appointment.

        Raises:
            BookingRejectedError: If validation reports any violation
        """
        if duration_minutes <= 0:
            raise ValueError(f"Duration must be positive, got {duration_minutes}")

        start = as_local(start)
        end = self._scheduling.calculate_end_time(start, duration_minutes)

        with self._staff_lock(staff_id):
            result = self._scheduling.validate_schedule(staff_id, start, end)
            if not result.valid:
                logger.warning(
                    "Booking for %s at %s rejected: %s",
                    staff_id, start, "; ".join(result.messages),
                )
                raise BookingRejectedError("; ".join(result.messages), result)

            appointment = self._appointment_store.insert(
                Appointment(
                    id=uuid.uuid4().hex,
                    staff_id=staff_id,
                    service_id=service_id,
                    start_at=start,
                    end_at=end,
                    status=AppointmentStatus.PENDING,
                    service_name=service_name,
                    customer_name=customer_name,
                    notes=notes,
                    created_at=self._scheduling.now(),
                )
            )

        logger.info(
            "Booked appointment %s for %s (%s - %s)",
            appointment.id, staff_id, appointment.start_at, appointment.end_at,
        )
        return appointment

    def reschedule(self, appointment_id: str, new_start: datetime) -> Appointment:
        """Move a live appointment to ``new_start``, keeping its duration."""
        new_start = as_local(new_start)

        with self._locked(appointment_id) as appointment:
            if not appointment.is_live:
                raise BookingRejectedError(
                    f"Cannot reschedule an appointment that is {appointment.status.value}"
                )

            new_end = self._scheduling.calculate_end_time(new_start, appointment.duration_minutes())
            result = self._scheduling.validate_schedule(
                appointment.staff_id, new_start, new_end, exclude_id=appointment.id
            )
            if not result.valid:
                raise BookingRejectedError("; ".join(result.messages), result)

            updated = self._appointment_store.update_interval(appointment.id, new_start, new_end)

        logger.info("Rescheduled appointment %s to %s - %s", appointment.id, new_start, new_end)
        return updated

    def confirm(self, appointment_id: str) -> Appointment:
        return self._apply(appointment_id, LifecycleAction.CONFIRM)

    def cancel(self, appointment_id: str) -> Appointment:
        """
        Cancel a live appointment that has not started yet.

        The interval becomes bookable again immediately.
        """
        return self._apply(appointment_id, LifecycleAction.CANCEL)

    def complete(self, appointment_id: str) -> Appointment:
        return self._apply(appointment_id, LifecycleAction.COMPLETE)

    def mark_no_show(self, appointment_id: str) -> Appointment:
        return self._apply(appointment_id, LifecycleAction.NO_SHOW)

    def _apply(self, appointment_id: str, action: LifecycleAction) -> Appointment:
        with self._locked(appointment_id) as appointment:
            if (
                action is LifecycleAction.CANCEL
                and appointment.is_live
                and appointment.start_at <= self._scheduling.now()
            ):
                raise BookingRejectedError("Appointment has already started or taken place")

            status = transition(appointment.status, action)
            updated = self._appointment_store.update_status(appointment_id, status)

        logger.info("Appointment %s: %s -> %s", appointment_id, appointment.status.value, status.value)
        return updated

    def assign_staff(
        self,
        candidate_staff_ids: Iterable[str],
        start: datetime,
        end: datetime,
    ) -> Optional[str]:
        """Return the first candidate who can take ``[start, end)``, or None."""
        for staff_id in candidate_staff_ids:
            if self._scheduling.validate_schedule(staff_id, start, end).valid:
                return staff_id
        return None
