"""Planned and billable hour accounting."""

import math
from datetime import datetime

from events.domain.value_objects import EventStatus


def default_planned_hours(start: datetime, end: datetime) -> int:
    """Whole hours covering the interval, never less than one."""
    seconds = max((end - start).total_seconds(), 0)
    minutes = int(seconds // 60)
    return max(1, math.ceil(minutes / 60))


def billable_hours(status: EventStatus, planned_hours: int) -> int:
    if status is not EventStatus.COMPLETED:
        return 0
    return max(0, planned_hours)
