"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from events.domain.value_objects import (
    ActivityType,
    EventId,
    EventStatus,
    ParticipantRole,
    PersonId,
    ScheduledInterval,
    TimeInterval,
)


@dataclass(frozen=True)
class Participant:
    """A person taking part in an event in a given role."""

    person_id: PersonId
    role: ParticipantRole
    full_name: str = ""


@dataclass(frozen=True)
class Event:
    """Domain representation of a scheduled Event."""

    id: EventId
    title: str
    activity_type: ActivityType
    planned_start: datetime
    planned_end: datetime
    planned_hours: int
    billable_hours: int
    status: EventStatus
    created_by: PersonId
    subject: str | None = None
    location: str | None = None
    notes: str | None = None
    cancel_reason_id: str | None = None
    cancel_comment: str | None = None
    completion_comment: str | None = None
    fact_start: datetime | None = None
    fact_end: datetime | None = None
    participants: tuple[Participant, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(start=self.planned_start, end=self.planned_end)

    @property
    def scheduled_interval(self) -> ScheduledInterval:
        return ScheduledInterval(interval=self.interval, activity_type=self.activity_type)

    @property
    def occupies_slot(self) -> bool:
        """Canceled lessons release their slot."""
        return self.activity_type.is_lesson and self.status is not EventStatus.CANCELED

    def participants_with_role(self, *roles: ParticipantRole) -> list[Participant]:
        return [p for p in self.participants if p.role in roles]


@dataclass(frozen=True)
class EventDraft:
    """A requested event that has not been admitted yet."""

    title: str
    activity_type: ActivityType
    planned_start: datetime
    planned_end: datetime
    created_by: PersonId
    planned_hours: int | None = None
    subject: str | None = None
    location: str | None = None
    notes: str | None = None
    participants: tuple[Participant, ...] = ()


@dataclass(frozen=True)
class EventChanges:
    """Non-status field edits. None means "leave unchanged"."""

    title: str | None = None
    subject: str | None = None
    activity_type: ActivityType | None = None
    planned_start: datetime | None = None
    planned_end: datetime | None = None
    planned_hours: int | None = None
    location: str | None = None
    notes: str | None = None
    participants: tuple[Participant, ...] | None = None
    clear_subject: bool = False


@dataclass(frozen=True)
class StatusPayload:
    """Data accompanying a status transition."""

    completion_comment: str | None = None
    cancel_reason_id: str | None = None
    cancel_comment: str | None = None
    fact_start: datetime | None = None
    fact_end: datetime | None = None


@dataclass(frozen=True)
class EventQuery:
    """Filter for listing events by planned start."""

    date_from: date | None = None
    date_to: date | None = None
    status: EventStatus | None = None


@dataclass(frozen=True)
class CancelReason:
    """Catalog entry explaining why an event was canceled."""

    id: str
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class GuardianContact:
    """A guardian reachable for notifications about one student."""

    guardian_id: PersonId
    student_id: PersonId
    student_name: str
    address: str


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one notification dispatch."""

    guardian_id: PersonId
    delivered: bool
    error: str | None = None


@dataclass(frozen=True)
class FanoutReport:
    """Settled outcomes of a notification fan-out."""

    event_id: EventId
    outcomes: tuple[DeliveryOutcome, ...] = field(default_factory=tuple)

    @property
    def delivered(self) -> int:
        return sum(1 for o in self.outcomes if o.delivered)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.delivered


@dataclass(frozen=True)
class Person:
    """Catalog view of a student, parent or staff member."""

    id: PersonId
    full_name: str
    role: ParticipantRole
    telegram_enabled: bool = False
    morning_reminder_hour: int | None = None


@dataclass(frozen=True)
class StatusTotals:
    """Per-status aggregate over a date range."""

    status: EventStatus
    count: int
    planned_hours: int
    billable_hours: int


@dataclass(frozen=True)
class ReminderItem:
    """One event in a guardian's daily reminder, with the guardian's students in it."""

    event_id: EventId
    title: str
    start: datetime
    end: datetime
    students: tuple[Participant, ...]


@dataclass(frozen=True)
class MorningReminder:
    guardian: Person
    day: date
    items: tuple[ReminderItem, ...] = field(default_factory=tuple)
