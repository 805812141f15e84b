"""Service construction for the HTTP layer."""

from events.services.event_service import EventService
from events.services.reports import ReportService
from events.services.schedule import ScheduleService
from events.signals import announce_event_created
from events.stores.django_store import (
    DjangoCatalogLookup,
    DjangoEventStore,
    DjangoGuardianDirectory,
)


def get_event_service() -> EventService:
    return EventService(
        store=DjangoEventStore(),
        catalog=DjangoCatalogLookup(),
        on_created=announce_event_created,
    )


def get_report_service() -> ReportService:
    return ReportService(store=DjangoEventStore(), catalog=DjangoCatalogLookup())


def get_schedule_service() -> ScheduleService:
    return ScheduleService(
        store=DjangoEventStore(),
        catalog=DjangoCatalogLookup(),
        guardians=DjangoGuardianDirectory(),
    )
