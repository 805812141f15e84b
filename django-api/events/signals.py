"""Django signals for post-commit side effects of scheduling.

``event_created`` is sent by the event service once a new event is stored.
Guardian notifications start only after the surrounding transaction commits
and run on a background thread, so a slow or failing messaging channel can
never hold up or roll back the request that created the event.
"""

import logging
import threading
from functools import partial

from django.conf import settings
from django.db import connections, transaction
from django.dispatch import Signal, receiver

from events.domain import Event, EventId, ParticipantRole
from events.services.notifications import GuardianNotifier
from events.services.telegram import TelegramChannel
from events.stores.django_store import DjangoEventStore, DjangoGuardianDirectory

logger = logging.getLogger(__name__)

event_created = Signal()


def announce_event_created(event: Event) -> None:
    """Hook passed to EventService as ``on_created``."""
    event_created.send(sender=Event, event=event)


def build_notifier() -> GuardianNotifier:
    channel = TelegramChannel(
        token=settings.TELEGRAM_BOT_TOKEN,
        api_base=settings.TELEGRAM_API_BASE,
        timeout=settings.NOTIFY_TIMEOUT_SECONDS,
    )
    return GuardianNotifier(
        store=DjangoEventStore(),
        guardians=DjangoGuardianDirectory(),
        channel=channel,
        time_zone=settings.NOTIFY_TIME_ZONE,
        max_concurrency=settings.NOTIFY_MAX_CONCURRENCY,
        timeout=settings.NOTIFY_TIMEOUT_SECONDS,
    )


def run_guardian_notifications(event_id: EventId) -> None:
    """Thread target: run the fan-out and release the thread's DB connection."""
    try:
        build_notifier().notify_guardians(event_id)
    except Exception:
        logger.exception("Guardian notifications for event %s crashed", event_id)
    finally:
        connections.close_all()


def start_guardian_notifications(event_id: EventId) -> None:
    thread = threading.Thread(
        target=run_guardian_notifications,
        args=(event_id,),
        name=f"notify-{event_id}",
        daemon=True,
    )
    thread.start()


@receiver(event_created, sender=Event)
def schedule_guardian_notifications(sender, event: Event, **kwargs):
    """Queue guardian notifications for lessons with students, after commit."""
    if not settings.TELEGRAM_BOT_TOKEN:
        return
    if not event.participants_with_role(ParticipantRole.STUDENT):
        return
    transaction.on_commit(partial(start_guardian_notifications, event.id))
