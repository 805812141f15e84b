from events.domain.models import (
    CancelReason,
    DeliveryOutcome,
    Event,
    EventChanges,
    EventDraft,
    EventQuery,
    FanoutReport,
    GuardianContact,
    MorningReminder,
    Participant,
    Person,
    ReminderItem,
    StatusPayload,
    StatusTotals,
)
from events.domain.value_objects import (
    ActivityType,
    EventId,
    EventStatus,
    ParticipantRole,
    PersonId,
    PlannedHours,
    ScheduledInterval,
    TimeInterval,
)

__all__ = [
    "Event",
    "EventDraft",
    "EventChanges",
    "EventQuery",
    "StatusPayload",
    "Participant",
    "CancelReason",
    "GuardianContact",
    "DeliveryOutcome",
    "FanoutReport",
    "Person",
    "StatusTotals",
    "ReminderItem",
    "MorningReminder",
    "ActivityType",
    "EventStatus",
    "ParticipantRole",
    "EventId",
    "PersonId",
    "PlannedHours",
    "TimeInterval",
    "ScheduledInterval",
]
