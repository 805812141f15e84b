from django.contrib import admin

from events.models import CancelReason, Event, EventParticipant, GuardianLink, Person, Subject


class EventParticipantInline(admin.TabularInline):
    model = EventParticipant
    extra = 1


class GuardianLinkInline(admin.TabularInline):
    model = GuardianLink
    fk_name = "parent"
    extra = 1


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "activity_type", "status", "planned_start_at", "planned_hours"]
    list_filter = ["status", "activity_type"]
    search_fields = ["title", "subject"]
    # Status and hours change only through the status endpoint.
    readonly_fields = [
        "status",
        "billable_hours",
        "cancel_reason",
        "cancel_comment",
        "completion_comment",
        "fact_start_at",
        "fact_end_at",
    ]
    inlines = [EventParticipantInline]


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ["full_name", "role", "telegram_enabled"]
    list_filter = ["role", "telegram_enabled"]
    search_fields = ["full_name"]
    inlines = [GuardianLinkInline]


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    list_display = ["name", "is_active"]
    list_filter = ["is_active"]


@admin.register(CancelReason)
class CancelReasonAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "sort_order", "is_active"]
