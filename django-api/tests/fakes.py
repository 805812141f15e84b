"""In-memory implementations of the store interfaces for service tests."""

import asyncio
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from uuid import uuid4

from events.domain import (
    ActivityType,
    CancelReason,
    Event,
    EventDraft,
    EventId,
    EventQuery,
    EventStatus,
    GuardianContact,
    Person,
    PersonId,
    ScheduledInterval,
    StatusTotals,
    TimeInterval,
)
from events.stores.interfaces import CatalogLookup, EventStore, GuardianDirectory, MessagingChannel


def at(hour: int, minute: int = 0, day: int = 10) -> datetime:
    return datetime(2025, 3, day, hour, minute, tzinfo=timezone.utc)


def slot(activity_type: ActivityType, start: datetime, end: datetime) -> ScheduledInterval:
    return ScheduledInterval(interval=TimeInterval(start=start, end=end), activity_type=activity_type)


class InMemoryEventStore(EventStore):
    def __init__(self) -> None:
        self.events: dict[EventId, Event] = {}
        self.admissions = 0
        self.locked: list[EventId] = []

    @contextmanager
    def admission(self):
        self.admissions += 1
        yield

    @contextmanager
    def transaction(self):
        yield

    def list_events(self, query: EventQuery) -> list[Event]:
        events = list(self.events.values())
        if query.date_from:
            events = [e for e in events if e.planned_start.date() >= query.date_from]
        if query.date_to:
            events = [e for e in events if e.planned_start.date() <= query.date_to]
        if query.status:
            events = [e for e in events if e.status is query.status]
        return sorted(events, key=lambda e: e.planned_start)

    def get_event(self, event_id: EventId, for_update: bool = False) -> Event | None:
        if for_update:
            self.locked.append(event_id)
        return self.events.get(event_id)

    def find_occupied_intervals(self, interval, exclude=None):
        return [
            e.scheduled_interval
            for e in self.events.values()
            if e.occupies_slot and e.id != exclude and e.interval.overlaps(interval)
        ]

    def add_event(self, draft: EventDraft, planned_hours: int, billable_hours: int) -> Event:
        event = Event(
            id=EventId(uuid4()),
            title=draft.title,
            activity_type=draft.activity_type,
            planned_start=draft.planned_start,
            planned_end=draft.planned_end,
            planned_hours=planned_hours,
            billable_hours=billable_hours,
            status=EventStatus.PLANNED,
            created_by=draft.created_by,
            subject=draft.subject,
            location=draft.location,
            notes=draft.notes,
            participants=draft.participants,
        )
        self.events[event.id] = event
        return event

    def save_event(self, event: Event, replace_participants: bool = False) -> Event:
        self.events[event.id] = event
        return event

    def list_events_with_participants(self, person_ids, roles, date_from, date_to, statuses=None):
        person_ids, roles = set(person_ids), set(roles)
        return [
            e
            for e in self.list_events(EventQuery(date_from=date_from, date_to=date_to))
            if (statuses is None or e.status in statuses)
            and any(p.person_id in person_ids and p.role in roles for p in e.participants)
        ]

    def status_totals(self, query: EventQuery) -> list[StatusTotals]:
        events = self.list_events(replace(query, status=None))
        totals = []
        for status in EventStatus:
            group = [e for e in events if e.status is status]
            if group:
                totals.append(
                    StatusTotals(
                        status=status,
                        count=len(group),
                        planned_hours=sum(e.planned_hours for e in group),
                        billable_hours=sum(e.billable_hours for e in group),
                    )
                )
        return totals

    def cancel_reason_counts(self, query: EventQuery) -> dict[str | None, int]:
        counts: dict[str | None, int] = {}
        for event in self.list_events(replace(query, status=EventStatus.CANCELED)):
            counts[event.cancel_reason_id] = counts.get(event.cancel_reason_id, 0) + 1
        return counts

    def put(self, activity_type: ActivityType, start: datetime, end: datetime, **fields) -> Event:
        """Insert an event directly, bypassing admission."""
        event = Event(
            id=EventId(uuid4()),
            title=fields.pop("title", "Existing"),
            activity_type=activity_type,
            planned_start=start,
            planned_end=end,
            planned_hours=fields.pop("planned_hours", 1),
            billable_hours=0,
            status=EventStatus.PLANNED,
            created_by=PersonId(uuid4()),
        )
        event = replace(event, **fields)
        self.events[event.id] = event
        return event


class InMemoryCatalog(CatalogLookup):
    def __init__(
        self, subjects=("Mathematics",), reasons=("STUDENT_SICK", "OTHER"), persons=None
    ) -> None:
        self.subjects = set(subjects)
        self.reasons = {code: CancelReason(id=code, name=code.title()) for code in reasons}
        # None means every id is known.
        self.persons: dict[PersonId, Person] | None = (
            None if persons is None else {p.id: p for p in persons}
        )

    def subject_is_active(self, name: str) -> bool:
        return name in self.subjects

    def get_cancel_reason(self, reason_id: str) -> CancelReason | None:
        return self.reasons.get(reason_id)

    def persons_exist(self, person_ids) -> bool:
        return self.persons is None or all(p in self.persons for p in person_ids)

    def get_person(self, person_id: PersonId) -> Person | None:
        return (self.persons or {}).get(person_id)


class InMemoryGuardians(GuardianDirectory):
    def __init__(self, contacts: list[GuardianContact] | None = None, reminders=None) -> None:
        self.contacts = contacts or []
        self.reminders: dict[PersonId, list[PersonId]] = reminders or {}
        self.requested: list[PersonId] = []

    def guardians_for_students(self, student_ids):
        self.requested.extend(student_ids)
        return [c for c in self.contacts if c.student_id in student_ids]

    def students_for_guardian(self, guardian_id: PersonId) -> list[PersonId]:
        return list(self.reminders.get(guardian_id, []))


class RecordingChannel(MessagingChannel):
    """Channel fake: records sends; addresses in ``fail``/``raise_for``/``hang`` misbehave."""

    def __init__(self, configured=True, fail=(), raise_for=(), hang=()) -> None:
        self.configured = configured
        self.fail = set(fail)
        self.raise_for = set(raise_for)
        self.hang = set(hang)
        self.sent: list[tuple[str, str]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def send(self, address: str, text: str) -> bool:
        if address in self.hang:
            await asyncio.sleep(5)
        if address in self.raise_for:
            raise ConnectionError("channel down")
        self.sent.append((address, text))
        return address not in self.fail

