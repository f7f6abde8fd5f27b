"""
Tests for the command line interface.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from staffscheduler.cli.app import app

# 2030-01-07 is a Monday, far enough ahead to never be in the past.
MONDAY = "2030-01-07"

CONFIG_YAML = """
data_file: appointments.json
services:
  - id: haircut
    name: Haircut
    duration_minutes: 30
  - id: coloring
    name: Coloring
    duration_minutes: 90
staff:
  - id: ana
    name: Ana
    working_hours:
      - {weekday: 0, start: "09:00", end: "18:00", break_start: "12:00", break_end: "13:00"}
"""

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


def _invoke(config_path: Path, *args: str):
    return runner.invoke(app, [*args, "--config", str(config_path)])


def _stored(config_path: Path):
    return json.loads((config_path.parent / "appointments.json").read_text(encoding="utf-8"))


class TestSlotsCommand:
    """Tests for `staffscheduler slots`."""

    def test_lists_slots_for_service(self, config_path):
        result = _invoke(config_path, "slots", "ana", MONDAY, "--service", "coloring")

        assert result.exit_code == 0, result.output
        assert "09:00 - 10:30" in result.output
        assert "16:30 - 18:00" in result.output
        assert "11:00 - 12:30" not in result.output

    def test_day_off(self, config_path):
        result = _invoke(config_path, "slots", "ana", "2030-01-06")

        assert result.exit_code == 0
        assert "No available slots" in result.output

    def test_unknown_staff(self, config_path):
        result = _invoke(config_path, "slots", "carla", MONDAY)

        assert result.exit_code == 1
        assert "Unknown staff member" in result.output

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["slots", "ana", MONDAY, "--config", str(tmp_path / "none.yaml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestBookingCommands:
    """Booking, validation and status commands share the data file."""

    def test_book_then_validate_conflict(self, config_path):
        booked = _invoke(
            config_path, "book", "ana", f"{MONDAY} 14:00", "--service", "haircut", "--customer", "Maria"
        )
        assert booked.exit_code == 0, booked.output

        records = _stored(config_path)
        assert len(records) == 1
        assert records[0]["status"] == "PENDING"

        clash = _invoke(config_path, "validate", "ana", f"{MONDAY} 14:15", "--duration", "30")
        assert clash.exit_code == 1
        assert "already taken" in clash.output

        free = _invoke(config_path, "validate", "ana", f"{MONDAY} 14:30", "--duration", "30")
        assert free.exit_code == 0
        assert "is available" in free.output

    def test_validate_reports_every_violation(self, config_path):
        result = _invoke(config_path, "validate", "ana", "2000-01-03 12:00", "--end", "2000-01-03 12:30")

        assert result.exit_code == 1
        assert "past" in result.output
        assert "break" in result.output

    def test_rejected_booking(self, config_path):
        result = _invoke(config_path, "book", "ana", f"{MONDAY} 12:00", "--service", "haircut")

        assert result.exit_code == 1
        assert "Booking rejected" in result.output

    def test_status_commands(self, config_path):
        _invoke(config_path, "book", "ana", f"{MONDAY} 10:00", "--service", "haircut")
        appointment_id = _stored(config_path)[0]["id"]

        confirmed = _invoke(config_path, "confirm", appointment_id)
        assert confirmed.exit_code == 0
        assert "CONFIRMED" in confirmed.output

        completed = _invoke(config_path, "complete", appointment_id)
        assert completed.exit_code == 0
        assert _stored(config_path)[0]["status"] == "COMPLETED"

        cancelled = _invoke(config_path, "cancel", appointment_id)
        assert cancelled.exit_code == 1
        assert "Cannot cancel" in cancelled.output

    def test_cancel_frees_slot(self, config_path):
        _invoke(config_path, "book", "ana", f"{MONDAY} 10:00", "--service", "haircut")
        appointment_id = _stored(config_path)[0]["id"]

        assert _invoke(config_path, "cancel", appointment_id).exit_code == 0

        again = _invoke(config_path, "book", "ana", f"{MONDAY} 10:00", "--service", "haircut")
        assert again.exit_code == 0, again.output

    def test_reschedule(self, config_path):
        _invoke(config_path, "book", "ana", f"{MONDAY} 10:00", "--service", "haircut")
        appointment_id = _stored(config_path)[0]["id"]

        result = _invoke(config_path, "reschedule", appointment_id, f"{MONDAY} 15:00")

        assert result.exit_code == 0, result.output
        assert _stored(config_path)[0]["startAt"] == f"{MONDAY}T15:00:00"

    def test_unknown_appointment(self, config_path):
        result = _invoke(config_path, "confirm", "missing")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_appointments_listing(self, config_path):
        _invoke(config_path, "book", "ana", f"{MONDAY} 10:00", "--service", "haircut", "--customer", "Maria")

        result = _invoke(config_path, "appointments", "ana")

        assert result.exit_code == 0
        assert "Maria" in result.output


class TestInfoCommands:
    def test_list_staff(self, config_path):
        result = _invoke(config_path, "list-staff")

        assert result.exit_code == 0
        assert "Ana" in result.output
        assert "Monday" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "staffscheduler" in result.output
