"""
Tests for slot generator.
"""

from datetime import date, time

import pytest

from staffscheduler.domain.models import Appointment, AppointmentStatus, WorkingWindow, parse_local
from staffscheduler.domain.slot_generator import SLOT_STEP_MINUTES, SlotGenerator

MONDAY = date(2024, 11, 25)

WINDOW_WITH_BREAK = WorkingWindow(
    staff_id="ana",
    weekday=0,
    start_time=time(9, 0),
    end_time=time(18, 0),
    break_start=time(12, 0),
    break_end=time(13, 0),
)


def _appointment(start: str, end: str, status=AppointmentStatus.CONFIRMED) -> Appointment:
    return Appointment(
        id=f"{start}-{end}",
        staff_id="ana",
        service_id="haircut",
        start_at=parse_local(f"2024-11-25 {start}"),
        end_at=parse_local(f"2024-11-25 {end}"),
        status=status,
    )


def _starts(slots):
    return [slot.start_time for slot in slots]


class TestSlotGenerator:
    """Tests for SlotGenerator."""

    def test_ninety_minute_slots_around_lunch(self):
        """09:00-18:00 with a 12-13 break and no bookings."""
        slots = SlotGenerator().generate(MONDAY, WINDOW_WITH_BREAK, [], 90)

        assert _starts(slots) == [
            "09:00", "09:30", "10:00", "10:30",
            "13:00", "13:30", "14:00", "14:30", "15:00", "15:30", "16:00", "16:30",
        ]
        assert slots[3].end_time == "12:00"  # ends exactly at break start
        assert slots[-1].to_dict() == {"startTime": "16:30", "endTime": "18:00"}
        assert all(slot.date == MONDAY for slot in slots)

    def test_no_window_yields_nothing(self):
        assert SlotGenerator().generate(MONDAY, None, [], 30) == []

    def test_step_is_fixed_regardless_of_duration(self):
        window = WorkingWindow("ana", 0, time(9), time(11))

        slots = SlotGenerator().generate(MONDAY, window, [], 45)

        assert _starts(slots) == ["09:00", "09:30", "10:00"]
        assert [slot.end_time for slot in slots] == ["09:45", "10:15", "10:45"]
        assert SLOT_STEP_MINUTES == 30

    def test_last_slot_ends_at_closing(self):
        window = WorkingWindow("ana", 0, time(9), time(10))

        slots = SlotGenerator().generate(MONDAY, window, [], 60)

        assert _starts(slots) == ["09:00"]

    def test_duration_longer_than_window(self):
        window = WorkingWindow("ana", 0, time(9), time(10))

        assert SlotGenerator().generate(MONDAY, window, [], 90) == []

    def test_existing_appointments_are_skipped(self):
        window = WorkingWindow("ana", 0, time(9), time(12))
        appointments = [_appointment("10:00", "11:00")]

        slots = SlotGenerator().generate(MONDAY, window, appointments, 30)

        assert _starts(slots) == ["09:00", "09:30", "11:00", "11:30"]

    def test_cancelled_appointments_free_the_time(self):
        window = WorkingWindow("ana", 0, time(9), time(12))
        appointments = [_appointment("10:00", "11:00", status=AppointmentStatus.CANCELLED)]

        slots = SlotGenerator().generate(MONDAY, window, appointments, 30)

        assert len(slots) == 6

    def test_off_grid_appointment_blocks_neighbouring_slots(self):
        window = WorkingWindow("ana", 0, time(9), time(11))
        appointments = [_appointment("09:45", "10:15")]

        slots = SlotGenerator().generate(MONDAY, window, appointments, 30)

        assert _starts(slots) == ["09:00", "10:30"]

    def test_ascending_order(self):
        slots = SlotGenerator().generate(MONDAY, WINDOW_WITH_BREAK, [_appointment("14:00", "15:00")], 30)
        starts = _starts(slots)

        assert starts == sorted(starts)
        assert "14:00" not in starts
        assert "14:30" not in starts
        assert "15:00" in starts

    def test_iter_slots_matches_generate(self):
        generator = SlotGenerator()

        assert list(generator.iter_slots(MONDAY, WINDOW_WITH_BREAK, [], 60)) == generator.generate(
            MONDAY, WINDOW_WITH_BREAK, [], 60
        )

    def test_non_positive_duration_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            SlotGenerator().generate(MONDAY, WINDOW_WITH_BREAK, [], 0)
