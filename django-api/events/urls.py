from django.urls import path

from events.handlers import (
    CancelReasonReportView,
    EventDetailView,
    EventListView,
    EventStatusView,
    MorningReminderView,
    StaffScheduleView,
    SummaryReportView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/status", EventStatusView.as_view(), name="event-status"),
    path("reports/summary", SummaryReportView.as_view(), name="report-summary"),
    path(
        "reports/cancel-reasons",
        CancelReasonReportView.as_view(),
        name="report-cancel-reasons",
    ),
    path(
        "teachers/<str:person_id>/schedule", StaffScheduleView.as_view(), name="staff-schedule"
    ),
    path(
        "parents/<str:person_id>/morning-reminder",
        MorningReminderView.as_view(),
        name="morning-reminder",
    ),
]
