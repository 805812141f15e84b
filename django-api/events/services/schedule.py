"""Per-person views of the timetable: a staff member's calendar and a
guardian's daily reminder."""

import calendar
import logging
from datetime import date, datetime, timezone

from events.domain.errors import PersonNotFoundError
from events.domain.models import Event, MorningReminder, ReminderItem
from events.domain.value_objects import EventStatus, ParticipantRole, PersonId
from events.stores.interfaces import CatalogLookup, EventStore, GuardianDirectory

logger = logging.getLogger(__name__)

SCHEDULE_ROLES = (ParticipantRole.TEACHER, ParticipantRole.CURATOR)
REMINDER_STATUSES = (EventStatus.PLANNED, EventStatus.COMPLETED)


def _find_person(catalog: CatalogLookup, person_id: str):
    try:
        key = PersonId.from_string(person_id)
    except (TypeError, ValueError, AttributeError):
        raise PersonNotFoundError(person_id) from None
    return catalog.get_person(key)


def _today() -> date:
    return datetime.now(timezone.utc).date()


def current_month(today: date) -> tuple[date, date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


class ScheduleService:
    """Reads the timetable from the point of view of one person."""

    def __init__(
        self,
        store: EventStore,
        catalog: CatalogLookup,
        guardians: GuardianDirectory,
        today=_today,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._guardians = guardians
        self._today = today

    def staff_schedule(
        self, person_id: str, date_from: date | None = None, date_to: date | None = None
    ) -> list[Event]:
        """Events a teacher or curator leads, by planned start.

        Without bounds the current UTC month is used; a single missing bound
        falls back to that month's edge.

        Raises:
            PersonNotFoundError: If the id is malformed, unknown or not staff.
        """
        person = _find_person(self._catalog, person_id)
        if person is None or not person.role.is_staff:
            raise PersonNotFoundError(person_id)

        month_start, month_end = current_month(self._today())
        return self._store.list_events_with_participants(
            [person.id],
            SCHEDULE_ROLES,
            date_from or month_start,
            date_to or month_end,
        )

    def morning_reminder(self, guardian_id: str, day: date | None = None) -> MorningReminder:
        """Planned and completed events of the guardian's students on one UTC day.

        Only students whose link has the morning reminder switched on are
        included, and each item lists just those students.

        Raises:
            PersonNotFoundError: If the id is malformed, unknown or not a parent.
        """
        guardian = _find_person(self._catalog, guardian_id)
        if guardian is None or guardian.role is not ParticipantRole.PARENT:
            raise PersonNotFoundError(guardian_id)

        day = day or self._today()
        students = set(self._guardians.students_for_guardian(guardian.id))
        if not students:
            return MorningReminder(guardian=guardian, day=day)

        events = self._store.list_events_with_participants(
            students, [ParticipantRole.STUDENT], day, day, statuses=REMINDER_STATUSES
        )
        items = tuple(
            ReminderItem(
                event_id=event.id,
                title=event.title,
                start=event.planned_start,
                end=event.planned_end,
                students=tuple(
                    p
                    for p in event.participants_with_role(ParticipantRole.STUDENT)
                    if p.person_id in students
                ),
            )
            for event in events
        )
        logger.debug("Morning reminder for %s on %s: %d events", guardian.id, day, len(items))
        return MorningReminder(guardian=guardian, day=day, items=items)
