"""Hour and attendance reports over a planned-start date range."""

from dataclasses import dataclass
from datetime import date

from events.domain.models import EventQuery
from events.domain.value_objects import EventStatus
from events.stores.interfaces import CatalogLookup, EventStore

UNSPECIFIED_REASON = "Not specified"


@dataclass(frozen=True)
class HoursSummary:
    date_from: date | None
    date_to: date | None
    total: int
    planned: int
    completed: int
    canceled: int
    planned_hours: int
    factual_hours: int
    billable_hours: int
    attendance_rate: float


@dataclass(frozen=True)
class CancelReasonCount:
    reason_id: str | None
    reason_name: str
    count: int


class ReportService:
    """Aggregates events for the reporting screens."""

    def __init__(self, store: EventStore, catalog: CatalogLookup) -> None:
        self._store = store
        self._catalog = catalog

    def summary(self, date_from: date | None = None, date_to: date | None = None) -> HoursSummary:
        totals = {
            row.status: row
            for row in self._store.status_totals(EventQuery(date_from=date_from, date_to=date_to))
        }
        completed = totals.get(EventStatus.COMPLETED)

        def count(status: EventStatus) -> int:
            return totals[status].count if status in totals else 0

        total = sum(row.count for row in totals.values())
        attendance_rate = round(count(EventStatus.COMPLETED) / total * 100, 2) if total else 0.0

        return HoursSummary(
            date_from=date_from,
            date_to=date_to,
            total=total,
            planned=count(EventStatus.PLANNED),
            completed=count(EventStatus.COMPLETED),
            canceled=count(EventStatus.CANCELED),
            planned_hours=sum(row.planned_hours for row in totals.values()),
            factual_hours=completed.planned_hours if completed else 0,
            billable_hours=completed.billable_hours if completed else 0,
            attendance_rate=attendance_rate,
        )

    def cancel_reasons(
        self, date_from: date | None = None, date_to: date | None = None
    ) -> list[CancelReasonCount]:
        """Canceled events grouped by reason, most frequent first."""
        counts = self._store.cancel_reason_counts(EventQuery(date_from=date_from, date_to=date_to))

        rows = []
        for reason_id, count in counts.items():
            reason = self._catalog.get_cancel_reason(reason_id) if reason_id else None
            rows.append(
                CancelReasonCount(
                    reason_id=reason_id,
                    reason_name=reason.name if reason else UNSPECIFIED_REASON,
                    count=count,
                )
            )
        return sorted(rows, key=lambda row: row.count, reverse=True)
