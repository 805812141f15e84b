from django.core.management.base import BaseCommand

from events.models import CancelReason

DEFAULT_REASONS = [
    ("STUDENT_SICK", "Student is ill", 10),
    ("PARENT_CANCEL", "Canceled by parent", 20),
    ("ABSENT_NO_NOTICE", "Absent without notice", 30),
    ("TEACHER_SICK", "Teacher is ill", 40),
    ("CENTER_RESCHEDULE", "Rescheduled by the center", 50),
    ("FORCE_MAJEURE", "Force majeure", 60),
    ("OTHER", "Other", 999),
]


class Command(BaseCommand):
    help = "Create or refresh the default cancellation reasons."

    def handle(self, *args, **options):
        for code, name, sort_order in DEFAULT_REASONS:
            CancelReason.objects.update_or_create(
                code=code,
                defaults={"name": name, "sort_order": sort_order, "is_active": True},
            )
        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEFAULT_REASONS)} cancel reasons"))
