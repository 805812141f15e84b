"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractContextManager
from datetime import date

from events.domain import (
    CancelReason,
    Event,
    EventDraft,
    EventId,
    EventQuery,
    EventStatus,
    GuardianContact,
    ParticipantRole,
    Person,
    PersonId,
    ScheduledInterval,
    StatusTotals,
    TimeInterval,
)


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def admission(self) -> AbstractContextManager[None]:
        """Serialize the read-validate-write sequence of lesson admission.

        Everything executed inside the block runs in one transaction, and no
        two admissions may interleave.
        """
        ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Run the block in one transaction; row locks are held until it exits."""
        ...

    @abstractmethod
    def list_events(self, query: EventQuery) -> list[Event]:
        """Return matching events ordered by planned start ascending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, for_update: bool = False) -> Event | None:
        """Return an event by ID, or None if not found.

        With ``for_update`` the row stays locked until the enclosing
        transaction ends.
        """
        ...

    @abstractmethod
    def find_occupied_intervals(
        self, interval: TimeInterval, exclude: EventId | None = None
    ) -> list[ScheduledInterval]:
        """Return Planned or Completed lesson intervals overlapping ``interval``."""
        ...

    @abstractmethod
    def add_event(self, draft: EventDraft, planned_hours: int, billable_hours: int) -> Event:
        """Persist a new PLANNED event and return it."""
        ...

    @abstractmethod
    def save_event(self, event: Event, replace_participants: bool = False) -> Event:
        """Write all fields of an existing event and return the stored state."""
        ...

    @abstractmethod
    def list_events_with_participants(
        self,
        person_ids: Iterable[PersonId],
        roles: Iterable[ParticipantRole],
        date_from: date,
        date_to: date,
        statuses: Iterable[EventStatus] | None = None,
    ) -> list[Event]:
        """Return events where one of ``person_ids`` takes part in one of ``roles``.

        Limited to planned starts within the day range, ordered by planned start.
        """
        ...

    @abstractmethod
    def status_totals(self, query: EventQuery) -> list[StatusTotals]:
        """Count events and sum their hours per status over ``query``'s date range."""
        ...

    @abstractmethod
    def cancel_reason_counts(self, query: EventQuery) -> dict[str | None, int]:
        """Count canceled events per reason id over ``query``'s date range."""
        ...


class CatalogLookup(ABC):
    """Read-only access to catalog data owned by other parts of the CRM."""

    @abstractmethod
    def subject_is_active(self, name: str) -> bool:
        ...

    @abstractmethod
    def get_cancel_reason(self, reason_id: str) -> CancelReason | None:
        """Return the reason, or None if no such catalog entry exists."""
        ...

    @abstractmethod
    def persons_exist(self, person_ids: Iterable[PersonId]) -> bool:
        """Return whether every id refers to a known person."""
        ...

    @abstractmethod
    def get_person(self, person_id: PersonId) -> Person | None:
        ...


class GuardianDirectory(ABC):
    """Resolves guardians who opted into lesson notifications."""

    @abstractmethod
    def guardians_for_students(self, student_ids: list[PersonId]) -> list[GuardianContact]:
        """Return one contact per (guardian, student) link.

        Only guardians with notifications enabled and an address on file
        are returned.
        """
        ...

    @abstractmethod
    def students_for_guardian(self, guardian_id: PersonId) -> list[PersonId]:
        """Return students linked to the guardian who receive the morning reminder."""
        ...


class MessagingChannel(ABC):
    """Outbound message delivery."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        ...

    @abstractmethod
    async def send(self, address: str, text: str) -> bool:
        """Deliver ``text`` to ``address``; return whether it was accepted."""
        ...
