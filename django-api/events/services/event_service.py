"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from events.domain.errors import (
    EventNotFoundError,
    CompletedEventLockedError,
    InactiveSubjectError,
    InvalidEventIdError,
    InvalidIntervalError,
    InvalidPlannedHoursError,
    SlotConflictError,
    StudentsNotAllowedError,
    UnknownPersonError,
)
from events.domain.hours import billable_hours, default_planned_hours
from events.domain.lifecycle import transition
from events.domain.models import (
    Event,
    EventChanges,
    EventDraft,
    EventQuery,
    Participant,
    StatusPayload,
)
from events.domain.slot_rules import validate_lesson_parallelism
from events.domain.value_objects import (
    ActivityType,
    EventId,
    EventStatus,
    ParticipantRole,
    PlannedHours,
    ScheduledInterval,
    TimeInterval,
)
from events.stores.interfaces import CatalogLookup, EventStore

logger = logging.getLogger(__name__)


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except (TypeError, ValueError, AttributeError):
        raise InvalidEventIdError() from None


def planned_hours_value(hours: int) -> int:
    try:
        return PlannedHours(hours).value
    except ValueError:
        raise InvalidPlannedHoursError() from None


def unique_participants(participants) -> tuple[Participant, ...]:
    """Drop repeated (person, role) pairs, keeping the first occurrence."""
    seen = set()
    result = []
    for participant in participants:
        key = (participant.person_id, participant.role)
        if key in seen:
            continue
        seen.add(key)
        result.append(participant)
    return tuple(result)


class EventService:
    """Service for scheduling events and moving them through their lifecycle."""

    def __init__(
        self,
        store: EventStore,
        catalog: CatalogLookup,
        on_created: Callable[[Event], None] | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._on_created = on_created

    def list_events(self, query: EventQuery | None = None) -> list[Event]:
        """Return events ordered by planned start."""
        return self._store.list_events(query or EventQuery())

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def _check_subject(self, subject: str | None) -> None:
        if subject and not self._catalog.subject_is_active(subject):
            raise InactiveSubjectError(subject)

    @staticmethod
    def _check_participants(activity_type: ActivityType, participants) -> None:
        if activity_type.is_administrative and any(
            p.role is ParticipantRole.STUDENT for p in participants
        ):
            raise StudentsNotAllowedError()

    def _check_persons(self, person_ids) -> None:
        person_ids = set(person_ids)
        if person_ids and not self._catalog.persons_exist(person_ids):
            raise UnknownPersonError(sorted(str(p) for p in person_ids))

    def _check_slot(self, candidate: ScheduledInterval, exclude: EventId | None = None) -> None:
        if not candidate.activity_type.is_lesson:
            return
        existing = self._store.find_occupied_intervals(candidate.interval, exclude=exclude)
        conflict = validate_lesson_parallelism(existing, candidate)
        if conflict is not None:
            logger.info(
                "Rejected %s at %s-%s: %s",
                candidate.activity_type.value,
                candidate.start.isoformat(),
                candidate.end.isoformat(),
                conflict.value,
            )
            raise SlotConflictError(conflict)

    def create_event(self, draft: EventDraft) -> Event:
        """Admit and persist a new PLANNED event.

        Raises:
            InvalidIntervalError: If the end is not after the start.
            InactiveSubjectError: If the subject is not active in the catalog.
            StudentsNotAllowedError: If an administrative event lists students.
            UnknownPersonError: If the creator or a participant does not exist.
            InvalidPlannedHoursError: If explicit planned hours are below 1.
            SlotConflictError: If a lesson would overfill its slot.
        """
        try:
            interval = TimeInterval(start=draft.planned_start, end=draft.planned_end)
        except ValueError:
            raise InvalidIntervalError() from None

        self._check_subject(draft.subject)
        participants = unique_participants(draft.participants)
        self._check_participants(draft.activity_type, participants)
        self._check_persons([draft.created_by, *(p.person_id for p in participants)])

        if draft.planned_hours is not None:
            planned_hours = planned_hours_value(draft.planned_hours)
        else:
            planned_hours = default_planned_hours(interval.start, interval.end)

        candidate = ScheduledInterval(interval=interval, activity_type=draft.activity_type)
        with self._store.admission():
            self._check_slot(candidate)
            event = self._store.add_event(
                replace(draft, participants=participants),
                planned_hours=planned_hours,
                billable_hours=billable_hours(EventStatus.PLANNED, planned_hours),
            )

        logger.info("Created %s event %s", event.activity_type.value, event.id)
        if self._on_created is not None:
            self._on_created(event)
        return event

    def update_event(self, event_id: str, changes: EventChanges) -> Event:
        """Apply non-status edits, re-validating the slot when the interval moves.

        Raises:
            InvalidEventIdError, EventNotFoundError, InvalidIntervalError,
            InactiveSubjectError, StudentsNotAllowedError, SlotConflictError,
            UnknownPersonError, InvalidPlannedHoursError, CompletedEventLockedError.
        """
        key = parse_event_id(event_id)
        if changes.subject:
            self._check_subject(changes.subject)
        if changes.participants is not None:
            self._check_persons(p.person_id for p in changes.participants)

        with self._store.admission():
            current = self._store.get_event(key, for_update=True)
            if current is None:
                raise EventNotFoundError(event_id)

            updated = self._merge(current, changes)
            try:
                interval = updated.interval
            except ValueError:
                raise InvalidIntervalError() from None
            self._check_participants(updated.activity_type, updated.participants)

            rescheduled = (
                updated.planned_start != current.planned_start
                or updated.planned_end != current.planned_end
            )
            if rescheduled and current.status is EventStatus.COMPLETED:
                raise CompletedEventLockedError()

            moved = rescheduled or updated.activity_type is not current.activity_type
            if moved and updated.occupies_slot:
                self._check_slot(
                    ScheduledInterval(interval=interval, activity_type=updated.activity_type),
                    exclude=key,
                )

            return self._store.save_event(
                updated, replace_participants=changes.participants is not None
            )

    @staticmethod
    def _merge(current: Event, changes: EventChanges) -> Event:
        fields = {}
        for name in (
            "title",
            "activity_type",
            "planned_start",
            "planned_end",
            "location",
            "notes",
        ):
            value = getattr(changes, name)
            if value is not None:
                fields[name] = value
        if changes.clear_subject:
            fields["subject"] = None
        elif changes.subject is not None:
            fields["subject"] = changes.subject
        if changes.participants is not None:
            fields["participants"] = unique_participants(changes.participants)
        if changes.planned_hours is not None:
            planned_hours = planned_hours_value(changes.planned_hours)
            fields["planned_hours"] = planned_hours
            fields["billable_hours"] = billable_hours(current.status, planned_hours)
        return replace(current, **fields)

    def transition_status(
        self, event_id: str, target: EventStatus, payload: StatusPayload
    ) -> Event:
        """Move an event to COMPLETED or CANCELED.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ValidationError: If the payload is incomplete for ``target``.
        """
        key = parse_event_id(event_id)
        with self._store.transaction():
            current = self._store.get_event(key, for_update=True)
            if current is None:
                raise EventNotFoundError(event_id)
            updated = transition(current, target, payload, self._catalog.get_cancel_reason)
            saved = self._store.save_event(updated)

        logger.info(
            "Event %s moved %s -> %s", saved.id, current.status.value, saved.status.value
        )
        return saved
