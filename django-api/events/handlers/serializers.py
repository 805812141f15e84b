"""Serializers for request parsing and domain-to-API transformation.

JSON keys keep the stored field names (camelCase) so existing clients and
data stay compatible.
"""

from rest_framework import serializers

from events.domain import (
    ActivityType,
    EventChanges,
    EventDraft,
    EventStatus,
    Participant,
    ParticipantRole,
    PersonId,
    StatusPayload,
)

MAX_EXPLICIT_PLANNED_HOURS = 12


def _enum_choices(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class ParticipantInputSerializer(serializers.Serializer):
    userId = serializers.UUIDField()
    participantRole = serializers.ChoiceField(choices=_enum_choices(ParticipantRole))

    def to_domain(self, data: dict) -> Participant:
        return Participant(
            person_id=PersonId(data["userId"]),
            role=ParticipantRole(data["participantRole"]),
        )


class EventInputSerializer(serializers.Serializer):
    """Create payload; with ``partial=True`` it parses PATCH bodies."""

    title = serializers.CharField(max_length=255)
    subject = serializers.CharField(max_length=255, required=False, allow_blank=True)
    activityType = serializers.ChoiceField(choices=_enum_choices(ActivityType))
    plannedStartAt = serializers.DateTimeField()
    plannedEndAt = serializers.DateTimeField()
    plannedHours = serializers.IntegerField(
        min_value=1, max_value=MAX_EXPLICIT_PLANNED_HOURS, required=False
    )
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=4000, required=False, allow_blank=True)
    createdByUserId = serializers.UUIDField()
    participants = ParticipantInputSerializer(many=True, required=False)

    def validate(self, attrs: dict) -> dict:
        start = attrs.get("plannedStartAt")
        end = attrs.get("plannedEndAt")
        if start and end and end <= start:
            raise serializers.ValidationError({"plannedEndAt": "End must be later than start"})
        return attrs

    @staticmethod
    def _participants(data: dict) -> tuple[Participant, ...]:
        item = ParticipantInputSerializer()
        return tuple(item.to_domain(p) for p in data.get("participants", []))

    def to_draft(self) -> EventDraft:
        data = self.validated_data
        return EventDraft(
            title=data["title"],
            activity_type=ActivityType(data["activityType"]),
            planned_start=data["plannedStartAt"],
            planned_end=data["plannedEndAt"],
            created_by=PersonId(data["createdByUserId"]),
            planned_hours=data.get("plannedHours"),
            subject=data.get("subject") or None,
            location=data.get("location") or None,
            notes=data.get("notes") or None,
            participants=self._participants(data),
        )

    def to_changes(self) -> EventChanges:
        data = self.validated_data
        activity_type = data.get("activityType")
        return EventChanges(
            title=data.get("title"),
            subject=data.get("subject") or None,
            clear_subject="subject" in data and not data["subject"],
            activity_type=ActivityType(activity_type) if activity_type else None,
            planned_start=data.get("plannedStartAt"),
            planned_end=data.get("plannedEndAt"),
            planned_hours=data.get("plannedHours"),
            location=data.get("location"),
            notes=data.get("notes"),
            participants=self._participants(data) if "participants" in data else None,
        )


class StatusInputSerializer(serializers.Serializer):
    """Status transition payload. Required fields per status are enforced by the domain."""

    status = serializers.ChoiceField(choices=_enum_choices(EventStatus))
    completionComment = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=4000
    )
    cancelReasonId = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=64
    )
    cancelComment = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=1000
    )
    factStartAt = serializers.DateTimeField(required=False, allow_null=True)
    factEndAt = serializers.DateTimeField(required=False, allow_null=True)

    def to_target(self) -> EventStatus:
        return EventStatus(self.validated_data["status"])

    def to_payload(self) -> StatusPayload:
        data = self.validated_data
        return StatusPayload(
            completion_comment=data.get("completionComment"),
            cancel_reason_id=data.get("cancelReasonId"),
            cancel_comment=data.get("cancelComment"),
            fact_start=data.get("factStartAt"),
            fact_end=data.get("factEndAt"),
        )


class ParticipantSerializer(serializers.Serializer):
    """Serializer for Participant domain model."""

    userId = serializers.CharField(source="person_id")
    participantRole = serializers.CharField(source="role.value")
    fullName = serializers.CharField(source="full_name")


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField()
    title = serializers.CharField()
    subject = serializers.CharField(allow_null=True)
    activityType = serializers.CharField(source="activity_type.value")
    status = serializers.CharField(source="status.value")
    plannedStartAt = serializers.DateTimeField(source="planned_start")
    plannedEndAt = serializers.DateTimeField(source="planned_end")
    plannedHours = serializers.IntegerField(source="planned_hours")
    billableHours = serializers.IntegerField(source="billable_hours")
    factStartAt = serializers.DateTimeField(source="fact_start", allow_null=True)
    factEndAt = serializers.DateTimeField(source="fact_end", allow_null=True)
    cancelReasonId = serializers.CharField(source="cancel_reason_id", allow_null=True)
    cancelComment = serializers.CharField(source="cancel_comment", allow_null=True)
    completionComment = serializers.CharField(source="completion_comment", allow_null=True)
    location = serializers.CharField(allow_null=True)
    notes = serializers.CharField(allow_null=True)
    createdByUserId = serializers.CharField(source="created_by")
    participants = ParticipantSerializer(many=True)
    createdAt = serializers.DateTimeField(source="created_at", allow_null=True)
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True)


class HoursSummarySerializer(serializers.Serializer):
    def to_representation(self, instance) -> dict:
        return {
            "period": {
                "from": instance.date_from.isoformat() if instance.date_from else None,
                "to": instance.date_to.isoformat() if instance.date_to else None,
            },
            "eventCounts": {
                "total": instance.total,
                "planned": instance.planned,
                "completed": instance.completed,
                "canceled": instance.canceled,
            },
            "hours": {
                "planned": instance.planned_hours,
                "factual": instance.factual_hours,
                "billable": instance.billable_hours,
            },
            "conversion": {"attendanceRate": instance.attendance_rate},
        }


class CancelReasonCountSerializer(serializers.Serializer):
    reasonId = serializers.CharField(source="reason_id", allow_null=True)
    reasonName = serializers.CharField(source="reason_name")
    count = serializers.IntegerField()


class ScheduleItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    activityType = serializers.CharField(source="activity_type.value")
    category = serializers.CharField(source="activity_type.category")
    status = serializers.CharField(source="status.value")
    plannedStartAt = serializers.DateTimeField(source="planned_start")
    plannedEndAt = serializers.DateTimeField(source="planned_end")


class ReminderStudentSerializer(serializers.Serializer):
    userId = serializers.CharField(source="person_id")
    fullName = serializers.CharField(source="full_name")


class ReminderItemSerializer(serializers.Serializer):
    eventId = serializers.CharField(source="event_id")
    title = serializers.CharField()
    startAt = serializers.DateTimeField(source="start")
    endAt = serializers.DateTimeField(source="end")
    students = ReminderStudentSerializer(many=True)


class MorningReminderSerializer(serializers.Serializer):
    def to_representation(self, instance) -> dict:
        guardian = instance.guardian
        return {
            "parent": {
                "id": str(guardian.id),
                "fullName": guardian.full_name,
                "telegramEnabled": guardian.telegram_enabled,
                "morningReminderHour": guardian.morning_reminder_hour,
            },
            "date": instance.day.isoformat(),
            "items": ReminderItemSerializer(instance.items, many=True).data,
        }
