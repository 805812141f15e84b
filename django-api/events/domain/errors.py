"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    SLOT_CONFLICT = "SLOT_CONFLICT"
    MISSING_CANCEL_REASON = "MISSING_CANCEL_REASON"
    MISSING_COMPLETION_COMMENT = "MISSING_COMPLETION_COMMENT"
    UNKNOWN_CANCEL_REASON = "UNKNOWN_CANCEL_REASON"
    UNSUPPORTED_TRANSITION = "UNSUPPORTED_TRANSITION"
    INVALID_INTERVAL = "INVALID_INTERVAL"
    INACTIVE_SUBJECT = "INACTIVE_SUBJECT"
    STUDENTS_NOT_ALLOWED = "STUDENTS_NOT_ALLOWED"
    INVALID_PLANNED_HOURS = "INVALID_PLANNED_HOURS"
    UNKNOWN_PERSON = "UNKNOWN_PERSON"
    PERSON_NOT_FOUND = "PERSON_NOT_FOUND"
    COMPLETED_EVENT_LOCKED = "COMPLETED_EVENT_LOCKED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Base for errors caused by incomplete or inconsistent input."""


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class SlotConflictError(DomainError):
    """Raised when a lesson would exceed the occupancy ceiling of its slot."""

    def __init__(self, rule) -> None:
        super().__init__(code=ErrorCode.SLOT_CONFLICT, message=rule.value)
        self.rule = rule


class MissingCancelReasonError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.MISSING_CANCEL_REASON,
            message="Cancel reason is required for canceled status",
        )


class MissingCompletionCommentError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.MISSING_COMPLETION_COMMENT,
            message="Completion comment is required for completed status",
        )


class UnknownCancelReasonError(ValidationError):
    def __init__(self, reason_id: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_CANCEL_REASON,
            message="Cancel reason not found",
        )
        self.reason_id = reason_id


class UnsupportedTransitionError(ValidationError):
    """Raised for a target status that cannot be reached by a transition."""

    def __init__(self, target: str) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_TRANSITION,
            message=f"Cannot transition an event to {target}",
        )


class InvalidIntervalError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_INTERVAL,
            message="End must be later than start",
        )


class InactiveSubjectError(ValidationError):
    def __init__(self, subject: str) -> None:
        super().__init__(
            code=ErrorCode.INACTIVE_SUBJECT,
            message="Selected subject is not in the active catalog",
        )
        self.subject = subject


class StudentsNotAllowedError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STUDENTS_NOT_ALLOWED,
            message="Administrative events cannot include students",
        )


class InvalidPlannedHoursError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_PLANNED_HOURS,
            message="Planned hours must be at least 1",
        )


class UnknownPersonError(ValidationError):
    """Raised when a creator or participant id matches no person."""

    def __init__(self, person_ids) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_PERSON,
            message="Referenced user does not exist",
        )
        self.person_ids = person_ids


class PersonNotFoundError(DomainError):
    """Raised when a teacher or guardian looked up by id does not exist."""

    def __init__(self, person_id: str) -> None:
        super().__init__(
            code=ErrorCode.PERSON_NOT_FOUND,
            message="Person not found",
        )
        self.person_id = person_id


class CompletedEventLockedError(ValidationError):
    """Raised when a completed event's planned interval is edited."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.COMPLETED_EVENT_LOCKED,
            message="Completed events cannot be rescheduled",
        )
