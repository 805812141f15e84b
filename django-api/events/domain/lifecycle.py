"""Event status state machine.

PLANNED is entered only on creation. COMPLETED and CANCELED are terminal:
re-issuing the same status amends the terminal record, and moving from one
terminal status to the other is rejected. Each transition recomputes billable
hours.
"""

from collections.abc import Callable
from dataclasses import replace

from events.domain.errors import (
    InvalidIntervalError,
    MissingCancelReasonError,
    MissingCompletionCommentError,
    UnknownCancelReasonError,
    UnsupportedTransitionError,
)
from events.domain.hours import billable_hours
from events.domain.models import CancelReason, Event, StatusPayload
from events.domain.value_objects import EventStatus

ReasonLookup = Callable[[str], CancelReason | None]


def _clean(text: str | None) -> str | None:
    if text is None:
        return None
    text = text.strip()
    return text or None


def _complete(event: Event, payload: StatusPayload) -> Event:
    comment = _clean(payload.completion_comment)
    if comment is None:
        raise MissingCompletionCommentError()

    fact_start = payload.fact_start or event.planned_start
    fact_end = payload.fact_end or event.planned_end
    if fact_end <= fact_start:
        raise InvalidIntervalError()

    return replace(
        event,
        status=EventStatus.COMPLETED,
        billable_hours=billable_hours(EventStatus.COMPLETED, event.planned_hours),
        completion_comment=comment,
        fact_start=fact_start,
        fact_end=fact_end,
        cancel_reason_id=None,
        cancel_comment=None,
    )


def _cancel(event: Event, payload: StatusPayload, reasons: ReasonLookup) -> Event:
    reason_id = _clean(payload.cancel_reason_id)
    if reason_id is None:
        raise MissingCancelReasonError()
    if reasons(reason_id) is None:
        raise UnknownCancelReasonError(reason_id)

    return replace(
        event,
        status=EventStatus.CANCELED,
        billable_hours=billable_hours(EventStatus.CANCELED, event.planned_hours),
        cancel_reason_id=reason_id,
        cancel_comment=_clean(payload.cancel_comment),
        completion_comment=None,
        fact_start=None,
        fact_end=None,
    )


def transition(
    event: Event,
    target: EventStatus,
    payload: StatusPayload,
    reasons: ReasonLookup,
) -> Event:
    """Return ``event`` moved to ``target``.

    The input event is never modified, so a failed transition leaves no
    partial writes behind.

    Raises:
        UnsupportedTransitionError: If ``target`` is PLANNED, or the event is
            already in the other terminal status.
        MissingCompletionCommentError: Completing without a comment.
        MissingCancelReasonError: Canceling without a reason.
        UnknownCancelReasonError: The reason is not in the catalog.
        InvalidIntervalError: Actual end is not after actual start.
    """
    if event.status.is_terminal and target is not event.status:
        raise UnsupportedTransitionError(target.value)
    if target is EventStatus.COMPLETED:
        return _complete(event, payload)
    if target is EventStatus.CANCELED:
        return _cancel(event, payload, reasons)
    raise UnsupportedTransitionError(target.value)
