"""
staffscheduler - availability and conflict resolution for staff appointments.
"""

__version__ = "0.1.0"
