"""
Adapters layer - Store implementations behind the service protocols.
"""

from .config_calendar import ConfigCalendarStore
from .json_store import JsonAppointmentStore
from .memory_store import InMemoryAppointmentStore, InMemoryCalendarStore

__all__ = [
    "ConfigCalendarStore",
    "InMemoryAppointmentStore",
    "InMemoryCalendarStore",
    "JsonAppointmentStore",
]
