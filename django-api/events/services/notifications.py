"""Guardian notifications for newly scheduled lessons.

Each guardian gets an independent dispatch. Failures and timeouts are
recorded in the report and logged; they never reach the caller.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from events.domain.models import DeliveryOutcome, Event, FanoutReport, GuardianContact
from events.domain.value_objects import EventId, ParticipantRole
from events.stores.interfaces import EventStore, GuardianDirectory, MessagingChannel

logger = logging.getLogger(__name__)

NO_STAFF = "not specified"


@dataclass(frozen=True)
class OutgoingMessage:
    guardian: GuardianContact
    text: str


def format_local_start(start: datetime, tz: ZoneInfo) -> tuple[str, str]:
    local = start.astimezone(tz)
    return local.strftime("%d.%m.%Y"), local.strftime("%H:%M")


def compose_message(student: str, subject: str, staff: str, date: str, time: str) -> str:
    return "\n".join(
        [
            f"Your child {student} has a lesson in {subject} with {staff}.",
            f"Lesson date: {date}",
            f"Lesson time: {time}",
            "",
            "If your child cannot attend, please message the bot.",
        ]
    )


class GuardianNotifier:
    """Tells guardians about lessons scheduled for their students."""

    def __init__(
        self,
        store: EventStore,
        guardians: GuardianDirectory,
        channel: MessagingChannel,
        time_zone: str = "Europe/Moscow",
        max_concurrency: int = 5,
        timeout: float = 10.0,
    ) -> None:
        self._store = store
        self._guardians = guardians
        self._channel = channel
        self._tz = ZoneInfo(time_zone)
        self._max_concurrency = max(1, max_concurrency)
        self._timeout = timeout

    def build_messages(self, event: Event) -> list[OutgoingMessage]:
        students = event.participants_with_role(ParticipantRole.STUDENT)
        if not students:
            return []

        staff = ", ".join(
            p.full_name
            for p in event.participants
            if p.role.is_staff and p.full_name
        ) or NO_STAFF
        subject = (event.subject or "").strip() or event.title
        date, time = format_local_start(event.planned_start, self._tz)

        contacts = self._guardians.guardians_for_students([p.person_id for p in students])
        return [
            OutgoingMessage(
                guardian=contact,
                text=compose_message(contact.student_name, subject, staff, date, time),
            )
            for contact in contacts
            if contact.address.strip()
        ]

    def notify_guardians(self, event_id: EventId) -> FanoutReport:
        """Send one message per opted-in guardian and wait for all attempts to settle.

        Reads happen synchronously here; only the dispatches run on the event
        loop.
        """
        if not self._channel.is_configured:
            logger.debug("Messaging channel not configured, skipping event %s", event_id)
            return FanoutReport(event_id=event_id)

        event = self._store.get_event(event_id)
        if event is None:
            logger.warning("Event %s vanished before notifications were sent", event_id)
            return FanoutReport(event_id=event_id)

        messages = self.build_messages(event)
        if not messages:
            return FanoutReport(event_id=event_id)

        outcomes = asyncio.run(self.dispatch(messages))
        report = FanoutReport(event_id=event_id, outcomes=tuple(outcomes))
        logger.info(
            "Notified guardians for event %s: %d delivered, %d failed",
            event_id,
            report.delivered,
            report.failed,
        )
        return report

    async def dispatch(self, messages: list[OutgoingMessage]) -> list[DeliveryOutcome]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def deliver(message: OutgoingMessage) -> DeliveryOutcome:
            guardian_id = message.guardian.guardian_id
            async with semaphore:
                try:
                    delivered = await asyncio.wait_for(
                        self._channel.send(message.guardian.address, message.text),
                        timeout=self._timeout,
                    )
                except asyncio.TimeoutError:
                    logger.warning("Notification to guardian %s timed out", guardian_id)
                    return DeliveryOutcome(guardian_id=guardian_id, delivered=False, error="timeout")
                except Exception as e:
                    logger.warning("Notification to guardian %s failed: %s", guardian_id, e)
                    return DeliveryOutcome(guardian_id=guardian_id, delivered=False, error=str(e))

            if not delivered:
                logger.warning("Notification to guardian %s was not accepted", guardian_id)
                return DeliveryOutcome(guardian_id=guardian_id, delivered=False, error="rejected")
            return DeliveryOutcome(guardian_id=guardian_id, delivered=True)

        return list(await asyncio.gather(*(deliver(m) for m in messages)))
