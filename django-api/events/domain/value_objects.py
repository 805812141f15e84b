"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Self
from uuid import UUID


class ActivityType(Enum):
    """Kinds of schedulable activity."""

    INDIVIDUAL_LESSON = "INDIVIDUAL_LESSON"
    GROUP_LESSON = "GROUP_LESSON"
    LEISURE_GROUP = "LEISURE_GROUP"
    OFFSITE_EVENT = "OFFSITE_EVENT"
    PEDAGOGICAL_CONSILIUM = "PEDAGOGICAL_CONSILIUM"
    TEACHERS_GENERAL_MEETING = "TEACHERS_GENERAL_MEETING"
    PSYCHOLOGIST_SESSION = "PSYCHOLOGIST_SESSION"

    @property
    def is_lesson(self) -> bool:
        """Only lessons occupy slot capacity."""
        return self in (ActivityType.INDIVIDUAL_LESSON, ActivityType.GROUP_LESSON)

    @property
    def is_administrative(self) -> bool:
        """Administrative activities never involve students."""
        return self in (
            ActivityType.OFFSITE_EVENT,
            ActivityType.PEDAGOGICAL_CONSILIUM,
            ActivityType.TEACHERS_GENERAL_MEETING,
            ActivityType.PSYCHOLOGIST_SESSION,
        )

    @property
    def category(self) -> str:
        """Calendar grouping: individual, group (leisure included) or administrative."""
        if self is ActivityType.INDIVIDUAL_LESSON:
            return "individual"
        if self in (ActivityType.GROUP_LESSON, ActivityType.LEISURE_GROUP):
            return "group"
        return "administrative"


class EventStatus(Enum):
    """Attendance lifecycle states."""

    PLANNED = "PLANNED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"

    @property
    def is_terminal(self) -> bool:
        return self is not EventStatus.PLANNED


class ParticipantRole(Enum):
    """Role a person plays in an event."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    CURATOR = "CURATOR"
    PSYCHOLOGIST = "PSYCHOLOGIST"
    PARENT = "PARENT"

    @property
    def is_staff(self) -> bool:
        return self in (
            ParticipantRole.TEACHER,
            ParticipantRole.CURATOR,
            ParticipantRole.PSYCHOLOGIST,
        )


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PersonId:
    """Unique identifier for a student, parent or staff member."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PlannedHours:
    """Whole planned hours, at least one."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Planned hours must be at least 1")


@dataclass(frozen=True)
class TimeInterval:
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("Interval end must be later than start")

    def overlaps(self, other: "TimeInterval") -> bool:
        return self.start < other.end and other.start < self.end

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True)
class ScheduledInterval:
    """An interval tagged with the activity occupying it."""

    interval: TimeInterval
    activity_type: ActivityType

    @property
    def start(self) -> datetime:
        return self.interval.start

    @property
    def end(self) -> datetime:
        return self.interval.end
