"""Django ORM implementations of the store interfaces."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time, timezone

from django.db import connection, transaction
from django.db.models import Count, Sum
from django.utils import timezone as django_timezone

from events import models
from events.domain import (
    ActivityType,
    CancelReason,
    Event,
    EventDraft,
    EventId,
    EventQuery,
    EventStatus,
    GuardianContact,
    Participant,
    ParticipantRole,
    Person,
    PersonId,
    ScheduledInterval,
    StatusTotals,
    TimeInterval,
)
from events.stores.interfaces import CatalogLookup, EventStore, GuardianDirectory

logger = logging.getLogger(__name__)

# Key for the PostgreSQL advisory lock that serializes lesson admission.
ADMISSION_LOCK_KEY = 7_340_112

LESSON_TYPES = [t.value for t in ActivityType if t.is_lesson]
OCCUPYING_STATUSES = [EventStatus.PLANNED.value, EventStatus.COMPLETED.value]


def _participant_to_domain(row: models.EventParticipant) -> Participant:
    return Participant(
        person_id=PersonId(row.person_id),
        role=ParticipantRole(row.role),
        full_name=row.person.full_name,
    )


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        activity_type=ActivityType(row.activity_type),
        planned_start=row.planned_start_at,
        planned_end=row.planned_end_at,
        planned_hours=row.planned_hours,
        billable_hours=row.billable_hours,
        status=EventStatus(row.status),
        created_by=PersonId(row.created_by_id),
        subject=row.subject,
        location=row.location,
        notes=row.notes,
        cancel_reason_id=row.cancel_reason_id,
        cancel_comment=row.cancel_comment,
        completion_comment=row.completion_comment,
        fact_start=row.fact_start_at,
        fact_end=row.fact_end_at,
        participants=tuple(_participant_to_domain(p) for p in row.participants.all()),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _day_bounds(date_from: date | None, date_to: date | None) -> dict:
    filters = {}
    if date_from:
        filters["planned_start_at__gte"] = datetime.combine(date_from, time.min, tzinfo=timezone.utc)
    if date_to:
        filters["planned_start_at__lte"] = datetime.combine(date_to, time.max, tzinfo=timezone.utc)
    return filters


class DjangoEventStore(EventStore):
    """Event store backed by the Django ORM."""

    def _queryset(self):
        return models.Event.objects.prefetch_related("participants__person")

    @contextmanager
    def admission(self) -> Iterator[None]:
        with transaction.atomic():
            if connection.vendor == "postgresql":
                with connection.cursor() as cursor:
                    cursor.execute("SELECT pg_advisory_xact_lock(%s)", [ADMISSION_LOCK_KEY])
            yield

    def transaction(self):
        return transaction.atomic()

    def list_events(self, query: EventQuery) -> list[Event]:
        qs = self._queryset().filter(**_day_bounds(query.date_from, query.date_to))
        if query.status is not None:
            qs = qs.filter(status=query.status.value)
        return [_event_to_domain(row) for row in qs.order_by("planned_start_at")]

    def get_event(self, event_id: EventId, for_update: bool = False) -> Event | None:
        qs = self._queryset()
        if for_update:
            qs = qs.select_for_update()
        row = qs.filter(id=event_id.value).first()
        return _event_to_domain(row) if row else None

    def find_occupied_intervals(
        self, interval: TimeInterval, exclude: EventId | None = None
    ) -> list[ScheduledInterval]:
        qs = models.Event.objects.filter(
            status__in=OCCUPYING_STATUSES,
            activity_type__in=LESSON_TYPES,
            planned_start_at__lt=interval.end,
            planned_end_at__gt=interval.start,
        )
        if exclude is not None:
            qs = qs.exclude(id=exclude.value)
        rows = qs.values_list("planned_start_at", "planned_end_at", "activity_type")
        return [
            ScheduledInterval(
                interval=TimeInterval(start=start, end=end),
                activity_type=ActivityType(activity_type),
            )
            for start, end, activity_type in rows
        ]

    def _write_participants(self, row: models.Event, participants) -> None:
        models.EventParticipant.objects.bulk_create(
            models.EventParticipant(
                event=row,
                person_id=p.person_id.value,
                role=p.role.value,
                position=position,
            )
            for position, p in enumerate(participants)
        )

    def add_event(self, draft: EventDraft, planned_hours: int, billable_hours: int) -> Event:
        with transaction.atomic():
            row = models.Event.objects.create(
                title=draft.title,
                subject=draft.subject,
                activity_type=draft.activity_type.value,
                status=EventStatus.PLANNED.value,
                planned_start_at=draft.planned_start,
                planned_end_at=draft.planned_end,
                planned_hours=planned_hours,
                billable_hours=billable_hours,
                location=draft.location,
                notes=draft.notes,
                created_by_id=draft.created_by.value,
            )
            self._write_participants(row, draft.participants)
        logger.debug("Stored event %s", row.id)
        return _event_to_domain(self._queryset().get(id=row.id))

    def save_event(self, event: Event, replace_participants: bool = False) -> Event:
        with transaction.atomic():
            models.Event.objects.filter(id=event.id.value).update(
                title=event.title,
                subject=event.subject,
                activity_type=event.activity_type.value,
                status=event.status.value,
                planned_start_at=event.planned_start,
                planned_end_at=event.planned_end,
                planned_hours=event.planned_hours,
                billable_hours=event.billable_hours,
                cancel_reason_id=event.cancel_reason_id,
                cancel_comment=event.cancel_comment,
                completion_comment=event.completion_comment,
                fact_start_at=event.fact_start,
                fact_end_at=event.fact_end,
                location=event.location,
                notes=event.notes,
                updated_at=django_timezone.now(),
            )
            row = models.Event.objects.get(id=event.id.value)
            if replace_participants:
                row.participants.all().delete()
                self._write_participants(row, event.participants)
        return _event_to_domain(self._queryset().get(id=event.id.value))

    def list_events_with_participants(
        self, person_ids, roles, date_from, date_to, statuses=None
    ) -> list[Event]:
        qs = self._queryset().filter(
            participants__person_id__in=[p.value for p in person_ids],
            participants__role__in=[r.value for r in roles],
            **_day_bounds(date_from, date_to),
        )
        if statuses is not None:
            qs = qs.filter(status__in=[s.value for s in statuses])
        return [_event_to_domain(row) for row in qs.distinct().order_by("planned_start_at")]

    def status_totals(self, query: EventQuery) -> list[StatusTotals]:
        rows = (
            models.Event.objects.filter(**_day_bounds(query.date_from, query.date_to))
            .values("status")
            .annotate(
                total=Count("id"),
                planned_sum=Sum("planned_hours"),
                billable_sum=Sum("billable_hours"),
            )
            .order_by()
        )
        return [
            StatusTotals(
                status=EventStatus(row["status"]),
                count=row["total"],
                planned_hours=row["planned_sum"] or 0,
                billable_hours=row["billable_sum"] or 0,
            )
            for row in rows
        ]

    def cancel_reason_counts(self, query: EventQuery) -> dict[str | None, int]:
        rows = (
            models.Event.objects.filter(
                status=EventStatus.CANCELED.value,
                **_day_bounds(query.date_from, query.date_to),
            )
            .values("cancel_reason_id")
            .annotate(total=Count("id"))
            .order_by()
        )
        return {row["cancel_reason_id"]: row["total"] for row in rows}


class DjangoCatalogLookup(CatalogLookup):
    """Reads the subject, cancel-reason and person catalogs."""

    def subject_is_active(self, name: str) -> bool:
        return models.Subject.objects.filter(name=name, is_active=True).exists()

    def get_cancel_reason(self, reason_id: str) -> CancelReason | None:
        row = models.CancelReason.objects.filter(code=reason_id).first()
        if row is None:
            return None
        return CancelReason(id=row.code, name=row.name, is_active=row.is_active)

    def persons_exist(self, person_ids) -> bool:
        wanted = {p.value for p in person_ids}
        return models.Person.objects.filter(id__in=wanted).count() == len(wanted)

    def get_person(self, person_id: PersonId) -> Person | None:
        row = models.Person.objects.filter(id=person_id.value).first()
        if row is None:
            return None
        return Person(
            id=PersonId(row.id),
            full_name=row.full_name,
            role=ParticipantRole(row.role),
            telegram_enabled=row.telegram_enabled,
            morning_reminder_hour=row.morning_reminder_hour,
        )


class DjangoGuardianDirectory(GuardianDirectory):
    """Resolves guardians through parent-student links."""

    def guardians_for_students(self, student_ids: list[PersonId]) -> list[GuardianContact]:
        links = (
            models.GuardianLink.objects.select_related("parent", "student")
            .filter(
                student_id__in=[s.value for s in student_ids],
                parent__telegram_enabled=True,
                parent__telegram_chat_id__isnull=False,
            )
            .exclude(parent__telegram_chat_id="")
        )
        return [
            GuardianContact(
                guardian_id=PersonId(link.parent_id),
                student_id=PersonId(link.student_id),
                student_name=link.student.full_name,
                address=link.parent.telegram_chat_id,
            )
            for link in links
        ]

    def students_for_guardian(self, guardian_id: PersonId) -> list[PersonId]:
        ids = models.GuardianLink.objects.filter(
            parent_id=guardian_id.value, receives_morning_reminder=True
        ).values_list("student_id", flat=True)
        return [PersonId(student_id) for student_id in ids]
