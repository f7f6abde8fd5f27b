"""
File-backed appointment store used by the command line interface.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import StoreError
from ..domain.models import Appointment, AppointmentStatus, parse_local
from .memory_store import InMemoryAppointmentStore

logger = logging.getLogger(__name__)


def appointment_to_dict(appointment: Appointment) -> Dict[str, Any]:
    return {
        "id": appointment.id,
        "staffId": appointment.staff_id,
        "serviceId": appointment.service_id,
        "startAt": appointment.start_at.isoformat(),
        "endAt": appointment.end_at.isoformat(),
        "status": appointment.status.value,
        "serviceName": appointment.service_name,
        "customerName": appointment.customer_name,
        "notes": appointment.notes,
        "createdAt": appointment.created_at.isoformat() if appointment.created_at else None,
    }


def appointment_from_dict(data: Dict[str, Any]) -> Appointment:
    created_at = data.get("createdAt")
    return Appointment(
        id=data["id"],
        staff_id=data["staffId"],
        service_id=data["serviceId"],
        start_at=parse_local(data["startAt"]),
        end_at=parse_local(data["endAt"]),
        status=AppointmentStatus(data.get("status", AppointmentStatus.PENDING.value)),
        service_name=data.get("serviceName") or "",
        customer_name=data.get("customerName"),
        notes=data.get("notes"),
        created_at=parse_local(created_at) if created_at else None,
    )


class JsonAppointmentStore(InMemoryAppointmentStore):
    """
    Appointment store persisted as a JSON list.

    The whole file is read once on construction and rewritten after every
    write. A missing file is treated as an empty store.
    """

    def __init__(self, data_file: Path):
        self.data_file = Path(data_file)
        super().__init__(self._load())

    def _load(self) -> List[Appointment]:
        if not self.data_file.exists():
            logger.debug("No appointment file at %s, starting empty", self.data_file)
            return []

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                records = json.load(f)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(records, list):
            raise StoreError(f"{self.data_file} must contain a list of appointments")

        try:
            return [appointment_from_dict(record) for record in records]
        except (KeyError, ValueError) as exc:
            raise StoreError(f"Invalid appointment record in {self.data_file}: {exc}") from exc

    def _persist(self) -> None:
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        payload = [appointment_to_dict(appointment) for appointment in self.all()]
        tmp_file = self.data_file.with_suffix(self.data_file.suffix + ".tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        tmp_file.replace(self.data_file)
        logger.debug("Saved %d appointment(s) to %s", len(payload), self.data_file)
