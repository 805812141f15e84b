from events.handlers.views import (
    CancelReasonReportView,
    EventDetailView,
    EventListView,
    EventStatusView,
    MorningReminderView,
    StaffScheduleView,
    SummaryReportView,
)

__all__ = [
    "EventListView",
    "EventDetailView",
    "EventStatusView",
    "SummaryReportView",
    "CancelReasonReportView",
    "StaffScheduleView",
    "MorningReminderView",
]
