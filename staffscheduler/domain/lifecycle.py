"""
Appointment status state machine.

    PENDING   --confirm--> CONFIRMED
    PENDING   --cancel---> CANCELLED
    CONFIRMED --cancel---> CANCELLED
    CONFIRMED --complete-> COMPLETED
    CONFIRMED --no_show--> NO_SHOW

CANCELLED, COMPLETED and NO_SHOW are terminal.
"""

from enum import Enum
from typing import Dict, List, Tuple

from .exceptions import InvalidTransitionError
from .models import AppointmentStatus


class LifecycleAction(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    COMPLETE = "complete"
    NO_SHOW = "no_show"


TRANSITIONS: Dict[Tuple[AppointmentStatus, LifecycleAction], AppointmentStatus] = {
    (AppointmentStatus.PENDING, LifecycleAction.CONFIRM): AppointmentStatus.CONFIRMED,
    (AppointmentStatus.PENDING, LifecycleAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.CONFIRMED, LifecycleAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.CONFIRMED, LifecycleAction.COMPLETE): AppointmentStatus.COMPLETED,
    (AppointmentStatus.CONFIRMED, LifecycleAction.NO_SHOW): AppointmentStatus.NO_SHOW,
}


def transition(status: AppointmentStatus, action: LifecycleAction) -> AppointmentStatus:
    """Return the status reached by applying ``action`` to ``status``."""
    status = AppointmentStatus(status)
    action = LifecycleAction(action)

    try:
        return TRANSITIONS[(status, action)]
    except KeyError:
        raise InvalidTransitionError(
            f"Cannot {action.value.replace('_', '-')} an appointment that is {status.value}"
        ) from None


def allowed_actions(status: AppointmentStatus) -> List[LifecycleAction]:
    status = AppointmentStatus(status)
    return [action for (source, action) in TRANSITIONS if source == status]
