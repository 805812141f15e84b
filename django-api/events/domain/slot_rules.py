"""Slot occupancy rules for lessons.

At any instant a slot holds at most two lessons, at most one of them a
group lesson. Occupancy is counted with a sweep over interval boundaries,
so partial overlaps are caught as well as identical times.
"""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from events.domain.value_objects import ActivityType, ScheduledInterval

MAX_LESSONS_PER_SLOT = 2
MAX_GROUP_LESSONS_PER_SLOT = 1


class SlotConflictRule(Enum):
    """Occupancy rule violated by a candidate; the value is the user-facing text."""

    TOO_MANY_LESSONS = "too many simultaneous lessons"
    TOO_MANY_GROUP_LESSONS = "more than one group lesson in the same slot"
    GROUP_WITH_INDIVIDUALS = (
        "group lesson combined with individual lessons exceeds slot capacity"
    )


def _boundary_points(
    events: Iterable[ScheduledInterval],
) -> list[tuple[datetime, int, ActivityType]]:
    points = []
    for item in events:
        points.append((item.start, 1, item.activity_type))
        points.append((item.end, -1, item.activity_type))
    # Endings sort before starts at the same instant: back-to-back lessons
    # never overlap.
    points.sort(key=lambda point: (point[0], point[1]))
    return points


def _check_counts(individual: int, group: int) -> SlotConflictRule | None:
    # Group rules take precedence over the total.
    if group > MAX_GROUP_LESSONS_PER_SLOT:
        return SlotConflictRule.TOO_MANY_GROUP_LESSONS
    if group >= 1 and individual >= 2:
        return SlotConflictRule.GROUP_WITH_INDIVIDUALS
    if individual + group > MAX_LESSONS_PER_SLOT:
        return SlotConflictRule.TOO_MANY_LESSONS
    return None


def validate_lesson_parallelism(
    existing: Iterable[ScheduledInterval], candidate: ScheduledInterval
) -> SlotConflictRule | None:
    """Return the first rule the candidate breaks, or None if it may be admitted.

    Non-lesson candidates are always admitted. Only lesson intervals in
    ``existing`` are counted; callers pass Planned and Completed lessons.
    """
    if not candidate.activity_type.is_lesson:
        return None

    events = [item for item in existing if item.activity_type.is_lesson]
    events.append(candidate)

    individual = 0
    group = 0
    for _, delta, activity_type in _boundary_points(events):
        if activity_type is ActivityType.INDIVIDUAL_LESSON:
            individual += delta
        elif activity_type is ActivityType.GROUP_LESSON:
            group += delta

        conflict = _check_counts(individual, group)
        if conflict is not None:
            return conflict

    return None
