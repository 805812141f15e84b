"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
Subject, CancelReason, Person and GuardianLink are catalog tables maintained
through the admin; the scheduling engine only reads them.
"""

import uuid

from django.db import models

from events.domain.value_objects import ActivityType, EventStatus, ParticipantRole


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.name.replace("_", " ").title()) for member in enum_cls]


class Subject(models.Model):
    """Persistence model for the subject catalog."""

    name = models.CharField(max_length=255, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class CancelReason(models.Model):
    """Persistence model for cancellation reasons, keyed by code."""

    code = models.CharField(max_length=64, primary_key=True)
    name = models.CharField(max_length=255)
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["sort_order", "code"]

    def __str__(self) -> str:
        return self.name


class Person(models.Model):
    """Persistence model for students, parents and staff."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(max_length=255)
    role = models.CharField(max_length=32, choices=_choices(ParticipantRole))
    telegram_enabled = models.BooleanField(default=False)
    telegram_chat_id = models.CharField(max_length=64, blank=True, null=True)
    morning_reminder_hour = models.PositiveSmallIntegerField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["full_name"]

    def __str__(self) -> str:
        return self.full_name


class GuardianLink(models.Model):
    """Links a parent to a student."""

    parent = models.ForeignKey(Person, on_delete=models.CASCADE, related_name="student_links")
    student = models.ForeignKey(Person, on_delete=models.CASCADE, related_name="parent_links")
    receives_morning_reminder = models.BooleanField(default=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["parent", "student"], name="unique_guardian_link"),
        ]

    def __str__(self) -> str:
        return f"{self.parent} -> {self.student}"


class Event(models.Model):
    """Persistence model for scheduled events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    subject = models.CharField(max_length=255, blank=True, null=True)
    activity_type = models.CharField(max_length=32, choices=_choices(ActivityType))
    status = models.CharField(
        max_length=16, choices=_choices(EventStatus), default=EventStatus.PLANNED.value
    )
    planned_start_at = models.DateTimeField()
    planned_end_at = models.DateTimeField()
    fact_start_at = models.DateTimeField(blank=True, null=True)
    fact_end_at = models.DateTimeField(blank=True, null=True)
    planned_hours = models.PositiveIntegerField()
    billable_hours = models.PositiveIntegerField(default=0)
    cancel_reason = models.ForeignKey(
        CancelReason, on_delete=models.PROTECT, blank=True, null=True, related_name="events"
    )
    cancel_comment = models.TextField(blank=True, null=True)
    completion_comment = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey(Person, on_delete=models.PROTECT, related_name="created_events")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["planned_start_at"]
        indexes = [
            models.Index(fields=["planned_start_at"], name="event_planned_start_idx"),
            models.Index(
                fields=["status", "activity_type", "planned_start_at"],
                name="event_occupancy_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.planned_start_at}"


class EventParticipant(models.Model):
    """Persistence model for event participants, kept in request order."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="participants")
    person = models.ForeignKey(Person, on_delete=models.CASCADE, related_name="participations")
    role = models.CharField(max_length=32, choices=_choices(ParticipantRole))
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "person", "role"], name="unique_event_participant"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.person} ({self.role})"
