"""
Working-calendar lookup.
"""

import logging
from datetime import date as Date
from typing import Optional

from ..domain.models import WorkingWindow
from .stores import CalendarStoreProtocol

logger = logging.getLogger(__name__)


class WorkingCalendar:
    """Resolves a staff member's declared hours for a weekday."""

    def __init__(self, calendar_store: CalendarStoreProtocol) -> None:
        self._calendar_store = calendar_store

    def resolve(self, staff_id: str, weekday: int) -> Optional[WorkingWindow]:
        """
        Return the working window for ``weekday`` (0=Monday, 6=Sunday).

        None means the staff member does not work that day.
        """
        window = self._calendar_store.find_window(staff_id, weekday)
        if window is None:
            logger.debug("No working window for %s on weekday %d", staff_id, weekday)
        return window

    def resolve_for(self, staff_id: str, day: Date) -> Optional[WorkingWindow]:
        """Same as ``resolve`` with the weekday taken from a date or datetime."""
        return self.resolve(staff_id, day.weekday())
