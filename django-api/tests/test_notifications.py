"""Unit tests for the guardian notification fan-out.

Run with: pytest tests/test_notifications.py -v
"""

from datetime import datetime, timezone
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from events.domain import (
    ActivityType,
    EventId,
    GuardianContact,
    Participant,
    ParticipantRole,
    PersonId,
)
from events.services.notifications import GuardianNotifier, compose_message, format_local_start
from fakes import InMemoryGuardians, RecordingChannel, at


def person(role: ParticipantRole, name: str) -> Participant:
    return Participant(person_id=PersonId(uuid4()), role=role, full_name=name)


def contact(student: Participant, address: str) -> GuardianContact:
    return GuardianContact(
        guardian_id=PersonId(uuid4()),
        student_id=student.person_id,
        student_name=student.full_name,
        address=address,
    )


@pytest.fixture
def anna() -> Participant:
    return person(ParticipantRole.STUDENT, "Anna Smirnova")


@pytest.fixture
def lesson(store, anna):
    return store.put(
        ActivityType.INDIVIDUAL_LESSON,
        at(7),
        at(8),
        title="Algebra",
        subject="Mathematics",
        participants=(
            anna,
            person(ParticipantRole.TEACHER, "Irina Petrova"),
            person(ParticipantRole.CURATOR, "Oleg Ivanov"),
        ),
    )


def notifier(store, guardians, channel, **kwargs) -> GuardianNotifier:
    return GuardianNotifier(store=store, guardians=guardians, channel=channel, **kwargs)


class TestMessage:
    def test_local_date_and_time(self):
        """07:00 UTC is 10:00 in Moscow."""
        date, time = format_local_start(at(7), ZoneInfo("Europe/Moscow"))
        assert (date, time) == ("10.03.2025", "10:00")

    def test_compose_message(self):
        text = compose_message("Anna", "Mathematics", "Irina", "10.03.2025", "10:00")
        assert text.splitlines()[0] == "Your child Anna has a lesson in Mathematics with Irina."
        assert "Lesson date: 10.03.2025" in text
        assert "Lesson time: 10:00" in text


class TestNotifyGuardians:
    def test_one_message_per_guardian(self, store, lesson, anna):
        mother, father = contact(anna, "111"), contact(anna, "222")
        channel = RecordingChannel()

        report = notifier(store, InMemoryGuardians([mother, father]), channel).notify_guardians(lesson.id)

        assert report.delivered == 2
        assert sorted(address for address, _ in channel.sent) == ["111", "222"]
        text = channel.sent[0][1]
        assert "Anna Smirnova" in text
        assert "Mathematics" in text
        assert "Irina Petrova, Oleg Ivanov" in text
        assert "10.03.2025" in text and "10:00" in text

    def test_title_used_without_subject(self, store, anna):
        event = store.put(
            ActivityType.GROUP_LESSON, at(7), at(8), title="Chess club", participants=(anna,)
        )
        channel = RecordingChannel()
        notifier(store, InMemoryGuardians([contact(anna, "111")]), channel).notify_guardians(event.id)
        assert "lesson in Chess club with not specified." in channel.sent[0][1]

    def test_no_students_is_noop(self, store):
        event = store.put(
            ActivityType.INDIVIDUAL_LESSON,
            at(7),
            at(8),
            participants=(person(ParticipantRole.TEACHER, "Irina Petrova"),),
        )
        guardians = InMemoryGuardians()
        report = notifier(store, guardians, RecordingChannel()).notify_guardians(event.id)
        assert report.outcomes == ()
        assert guardians.requested == []

    def test_unconfigured_channel_is_noop(self, store, lesson, anna):
        channel = RecordingChannel(configured=False)
        report = notifier(store, InMemoryGuardians([contact(anna, "111")]), channel).notify_guardians(lesson.id)
        assert report.outcomes == ()
        assert channel.sent == []

    def test_missing_event_is_noop(self, store):
        report = notifier(store, InMemoryGuardians(), RecordingChannel()).notify_guardians(
            EventId(uuid4())
        )
        assert report.outcomes == ()

    def test_blank_addresses_skipped(self, store, lesson, anna):
        channel = RecordingChannel()
        notifier(store, InMemoryGuardians([contact(anna, "  ")]), channel).notify_guardians(lesson.id)
        assert channel.sent == []

    def test_failures_are_isolated(self, store, lesson, anna):
        """A raising or rejecting dispatch does not stop the others."""
        guardians = InMemoryGuardians(
            [contact(anna, "boom"), contact(anna, "nope"), contact(anna, "ok")]
        )
        channel = RecordingChannel(fail={"nope"}, raise_for={"boom"})

        report = notifier(store, guardians, channel).notify_guardians(lesson.id)

        assert report.delivered == 1
        assert report.failed == 2
        errors = sorted(o.error for o in report.outcomes if not o.delivered)
        assert errors == ["channel down", "rejected"]

    def test_timeout_counts_as_failure(self, store, lesson, anna):
        guardians = InMemoryGuardians([contact(anna, "slow"), contact(anna, "ok")])
        channel = RecordingChannel(hang={"slow"})

        report = notifier(store, guardians, channel, timeout=0.05).notify_guardians(lesson.id)

        outcomes = {o.error for o in report.outcomes}
        assert outcomes == {"timeout", None}
        assert [address for address, _ in channel.sent] == ["ok"]

    def test_bounded_concurrency_still_delivers_all(self, store, lesson, anna):
        guardians = InMemoryGuardians([contact(anna, str(n)) for n in range(7)])
        channel = RecordingChannel()
        report = notifier(store, guardians, channel, max_concurrency=2).notify_guardians(lesson.id)
        assert report.delivered == 7


def test_format_handles_non_utc_input():
    start = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert format_local_start(start, ZoneInfo("UTC")) == ("10.03.2025", "12:00")
