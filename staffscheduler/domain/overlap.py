"""
The overlap rule shared by break checks, conflict detection and slot generation.
"""

from typing import Any


def intervals_collide(existing_start: Any, existing_end: Any, start: Any, end: Any) -> bool:
    """
    Check whether the candidate ``[start, end)`` collides with an existing interval.

    Works on anything comparable: datetimes, times or minutes since midnight.
    Touching endpoints (``existing_end == start`` or ``existing_start == end``)
    are not a collision.

    The three clauses are kept as written; boundary behaviour depends on them.
    """
    # Candidate starts inside the existing interval
    starts_inside = existing_start <= start and existing_end > start
    # Candidate ends inside the existing interval
    ends_inside = existing_start < end and existing_end >= end
    # Candidate swallows the existing interval
    contains = existing_start >= start and existing_end <= end

    return starts_inside or ends_inside or contains
