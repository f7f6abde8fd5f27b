"""
Tests for double-booking detection.
"""

from staffscheduler.domain.conflicts import ConflictDetector
from staffscheduler.domain.models import Appointment, AppointmentStatus, parse_local


def _appointment(id: str, start: str, end: str, status=AppointmentStatus.CONFIRMED, **kwargs) -> Appointment:
    return Appointment(
        id=id,
        staff_id="ana",
        service_id="haircut",
        start_at=parse_local(f"2024-11-25 {start}"),
        end_at=parse_local(f"2024-11-25 {end}"),
        status=status,
        **kwargs,
    )


def _detect(appointments, start: str, end: str, exclude=None):
    return ConflictDetector().detect(
        appointments,
        parse_local(f"2024-11-25 {start}"),
        parse_local(f"2024-11-25 {end}"),
        exclude_appointment_id=exclude,
    )


class TestConflictDetector:
    """Tests for ConflictDetector."""

    def test_no_appointments(self):
        result = _detect([], "10:00", "11:00")

        assert not result.has_conflict
        assert result.violation is None

    def test_back_to_back_is_not_a_conflict(self):
        existing = [_appointment("a1", "10:00", "10:30")]

        assert not _detect(existing, "10:30", "11:00").has_conflict
        assert not _detect(existing, "09:30", "10:00").has_conflict

    def test_overlap_detected(self):
        existing = [
            _appointment(
                "a1", "14:00", "15:00",
                service_name="Haircut", customer_name="Maria",
            )
        ]

        result = _detect(existing, "14:30", "15:30")

        assert result.has_conflict
        assert result.appointment.id == "a1"
        assert "14:00" in result.message
        assert "15:00" in result.message
        assert "Haircut" in result.message
        assert "Maria" in result.message
        assert result.violation.message == result.message

    def test_containment_in_both_directions(self):
        existing = [_appointment("a1", "10:00", "12:00")]

        assert _detect(existing, "10:30", "11:00").has_conflict
        assert _detect(existing, "09:00", "13:00").has_conflict

    def test_cancelled_and_finished_appointments_are_ignored(self):
        existing = [
            _appointment("a1", "10:00", "11:00", status=AppointmentStatus.CANCELLED),
            _appointment("a2", "10:00", "11:00", status=AppointmentStatus.COMPLETED),
            _appointment("a3", "10:00", "11:00", status=AppointmentStatus.NO_SHOW),
        ]

        assert not _detect(existing, "10:00", "11:00").has_conflict

    def test_pending_blocks_time(self):
        existing = [_appointment("a1", "10:00", "11:00", status=AppointmentStatus.PENDING)]

        assert _detect(existing, "10:15", "10:45").has_conflict

    def test_excluded_appointment_is_skipped(self):
        existing = [_appointment("a1", "10:00", "11:00")]

        assert not _detect(existing, "10:30", "11:30", exclude="a1").has_conflict

    def test_first_match_in_given_order_wins(self):
        existing = [
            _appointment("late", "11:00", "12:00"),
            _appointment("early", "10:00", "11:00"),
        ]

        result = _detect(existing, "10:30", "11:30")

        assert result.appointment.id == "late"

    def test_unknown_customer_uses_placeholder(self):
        existing = [_appointment("a1", "10:00", "11:00")]

        assert "Customer" in _detect(existing, "10:00", "11:00").message
