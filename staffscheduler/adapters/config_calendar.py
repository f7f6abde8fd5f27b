"""
Calendar store built from the staff section of the configuration.
"""

from ..config import AppConfig
from .memory_store import InMemoryCalendarStore


class ConfigCalendarStore(InMemoryCalendarStore):
    """Serves the working windows declared under ``staff[].working_hours``."""

    def __init__(self, config: AppConfig):
        super().__init__(config.working_windows())
        self.config = config
