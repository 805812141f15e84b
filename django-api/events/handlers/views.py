"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging
from datetime import date

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.domain import EventQuery, EventStatus
from events.domain.errors import DomainError, ErrorCode
from events.handlers.dependencies import (
    get_event_service,
    get_report_service,
    get_schedule_service,
)
from events.handlers.serializers import (
    CancelReasonCountSerializer,
    EventInputSerializer,
    EventSerializer,
    HoursSummarySerializer,
    MorningReminderSerializer,
    ScheduleItemSerializer,
    StatusInputSerializer,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PERSON_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SLOT_CONFLICT: status.HTTP_409_CONFLICT,
}

VALIDATION_FAILED = "VALIDATION_FAILED"


def domain_error_response(error: DomainError) -> Response:
    http_status = ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST)
    return Response(
        {"code": error.code.value, "error": error.message, "details": None},
        status=http_status,
    )


def validation_failed(details) -> Response:
    return Response(
        {"code": VALIDATION_FAILED, "error": "Validation failed", "details": details},
        status=status.HTTP_400_BAD_REQUEST,
    )


class InvalidQuery(Exception):
    def __init__(self, details: dict) -> None:
        super().__init__("invalid query")
        self.details = details


def _date_param(request: Request, name: str) -> date | None:
    raw = request.query_params.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise InvalidQuery({name: "Expected YYYY-MM-DD"}) from None


def _status_param(request: Request) -> EventStatus | None:
    raw = request.query_params.get("status")
    if not raw:
        return None
    try:
        return EventStatus(raw)
    except ValueError:
        raise InvalidQuery({"status": f"Unknown status {raw}"}) from None


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        try:
            query = EventQuery(
                date_from=_date_param(request, "from"),
                date_to=_date_param(request, "to"),
                status=_status_param(request),
            )
        except InvalidQuery as e:
            return validation_failed(e.details)

        events = get_event_service().list_events(query)
        return Response({"items": EventSerializer(events, many=True).data})

    def post(self, request: Request) -> Response:
        serializer = EventInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer.errors)

        try:
            event = get_event_service().create_event(serializer.to_draft())
        except DomainError as e:
            return domain_error_response(e)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET/PATCH /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            event = get_event_service().get_event(event_id)
        except DomainError as e:
            return domain_error_response(e)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventInputSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_failed(serializer.errors)

        try:
            event = get_event_service().update_event(event_id, serializer.to_changes())
        except DomainError as e:
            return domain_error_response(e)
        return Response(EventSerializer(event).data)


class EventStatusView(APIView):
    """Handler for POST /api/events/{event_id}/status"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = StatusInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer.errors)

        try:
            event = get_event_service().transition_status(
                event_id, serializer.to_target(), serializer.to_payload()
            )
        except DomainError as e:
            return domain_error_response(e)
        return Response(EventSerializer(event).data)


class SummaryReportView(APIView):
    """Handler for GET /api/reports/summary"""

    def get(self, request: Request) -> Response:
        try:
            date_from = _date_param(request, "from")
            date_to = _date_param(request, "to")
        except InvalidQuery as e:
            return validation_failed(e.details)

        summary = get_report_service().summary(date_from, date_to)
        return Response(HoursSummarySerializer(summary).data)


class CancelReasonReportView(APIView):
    """Handler for GET /api/reports/cancel-reasons"""

    def get(self, request: Request) -> Response:
        try:
            date_from = _date_param(request, "from")
            date_to = _date_param(request, "to")
        except InvalidQuery as e:
            return validation_failed(e.details)

        rows = get_report_service().cancel_reasons(date_from, date_to)
        return Response({"items": CancelReasonCountSerializer(rows, many=True).data})


class StaffScheduleView(APIView):
    """Handler for GET /api/teachers/{person_id}/schedule"""

    def get(self, request: Request, person_id: str) -> Response:
        try:
            date_from = _date_param(request, "from")
            date_to = _date_param(request, "to")
        except InvalidQuery as e:
            return validation_failed(e.details)

        try:
            events = get_schedule_service().staff_schedule(person_id, date_from, date_to)
        except DomainError as e:
            return domain_error_response(e)
        return Response({"items": ScheduleItemSerializer(events, many=True).data})


class MorningReminderView(APIView):
    """Handler for GET /api/parents/{person_id}/morning-reminder"""

    def get(self, request: Request, person_id: str) -> Response:
        try:
            day = _date_param(request, "date")
        except InvalidQuery as e:
            return validation_failed(e.details)

        try:
            reminder = get_schedule_service().morning_reminder(person_id, day)
        except DomainError as e:
            return domain_error_response(e)
        return Response(MorningReminderSerializer(reminder).data)
