"""Unit tests for EventService.

These test admission, lifecycle orchestration and domain error mapping
against in-memory stores.
Run with: pytest tests/test_services.py -v
"""

from dataclasses import replace
from uuid import uuid4

import pytest

from events.domain import (
    ActivityType,
    EventChanges,
    EventDraft,
    EventQuery,
    EventStatus,
    Participant,
    ParticipantRole,
    Person,
    PersonId,
    StatusPayload,
)
from events.domain.errors import (
    CompletedEventLockedError,
    EventNotFoundError,
    InactiveSubjectError,
    InvalidEventIdError,
    InvalidIntervalError,
    InvalidPlannedHoursError,
    MissingCancelReasonError,
    SlotConflictError,
    StudentsNotAllowedError,
    UnknownPersonError,
    UnsupportedTransitionError,
)
from events.domain.slot_rules import SlotConflictRule
from events.services.event_service import EventService
from fakes import InMemoryCatalog, at

INDIVIDUAL = ActivityType.INDIVIDUAL_LESSON
GROUP = ActivityType.GROUP_LESSON


def draft(activity_type=INDIVIDUAL, start=None, end=None, **fields) -> EventDraft:
    return EventDraft(
        title=fields.pop("title", "Lesson"),
        activity_type=activity_type,
        planned_start=start or at(10),
        planned_end=end or at(11),
        created_by=PersonId(uuid4()),
        **fields,
    )


def student() -> Participant:
    return Participant(person_id=PersonId(uuid4()), role=ParticipantRole.STUDENT)


@pytest.fixture
def created():
    return []


@pytest.fixture
def service(store, catalog, created) -> EventService:
    return EventService(store=store, catalog=catalog, on_created=created.append)


class TestCreateEvent:
    def test_creates_planned_event_with_default_hours(self, service, created):
        """A 09:00-09:40 lesson without explicit hours plans one hour."""
        event = service.create_event(draft(start=at(9), end=at(9, 40)))
        assert event.status is EventStatus.PLANNED
        assert event.planned_hours == 1
        assert event.billable_hours == 0
        assert created == [event]

    def test_explicit_planned_hours_kept(self, service):
        event = service.create_event(draft(planned_hours=3))
        assert event.planned_hours == 3

    def test_admission_runs_inside_serialized_block(self, service, store):
        service.create_event(draft())
        assert store.admissions == 1

    def test_slot_conflict_rejects_and_persists_nothing(self, service, store, created):
        """Group + individual at 10:00 block a second individual."""
        store.put(GROUP, at(10), at(11))
        store.put(INDIVIDUAL, at(10), at(11))

        with pytest.raises(SlotConflictError) as exc:
            service.create_event(draft())

        assert exc.value.rule is SlotConflictRule.GROUP_WITH_INDIVIDUALS
        assert exc.value.message == SlotConflictRule.GROUP_WITH_INDIVIDUALS.value
        assert len(store.events) == 2
        assert created == []

    def test_canceled_lessons_free_their_slot(self, service, store):
        store.put(GROUP, at(14), at(15), status=EventStatus.CANCELED)
        event = service.create_event(draft(GROUP, at(14, 30), at(15, 30)))
        assert event.activity_type is GROUP

    def test_completed_lessons_still_occupy(self, service, store):
        store.put(GROUP, at(14), at(15), status=EventStatus.COMPLETED)
        with pytest.raises(SlotConflictError):
            service.create_event(draft(GROUP, at(14, 30), at(15, 30)))

    def test_administrative_events_skip_slot_check(self, service, store):
        for _ in range(3):
            store.put(INDIVIDUAL, at(10), at(11))
        event = service.create_event(draft(ActivityType.TEACHERS_GENERAL_MEETING))
        assert event.activity_type is ActivityType.TEACHERS_GENERAL_MEETING

    def test_administrative_events_reject_students(self, service):
        with pytest.raises(StudentsNotAllowedError):
            service.create_event(
                draft(ActivityType.PEDAGOGICAL_CONSILIUM, participants=(student(),))
            )

    def test_inactive_subject_rejected(self, service):
        with pytest.raises(InactiveSubjectError):
            service.create_event(draft(subject="Astrology"))

    def test_active_subject_accepted(self, service):
        assert service.create_event(draft(subject="Mathematics")).subject == "Mathematics"

    def test_inverted_interval_rejected(self, service):
        with pytest.raises(InvalidIntervalError):
            service.create_event(draft(start=at(11), end=at(10)))

    def test_duplicate_participants_collapsed(self, service):
        pupil = student()
        event = service.create_event(draft(participants=(pupil, pupil)))
        assert event.participants == (pupil,)

    def test_zero_planned_hours_rejected(self, service, store):
        with pytest.raises(InvalidPlannedHoursError) as exc:
            service.create_event(draft(planned_hours=0))
        assert exc.value.code.value == "INVALID_PLANNED_HOURS"
        assert store.events == {}

    def test_unknown_participant_rejected(self, store, created):
        creator = Person(id=PersonId(uuid4()), full_name="Maria", role=ParticipantRole.CURATOR)
        catalog = InMemoryCatalog(persons=[creator])
        service = EventService(store=store, catalog=catalog, on_created=created.append)
        stranger = student()

        with pytest.raises(UnknownPersonError) as exc:
            service.create_event(replace(draft(participants=(stranger,)), created_by=creator.id))

        assert exc.value.person_ids == [str(stranger.person_id)]
        assert store.events == {}
        assert created == []

    def test_unknown_creator_rejected(self, store):
        service = EventService(store=store, catalog=InMemoryCatalog(persons=[]))
        with pytest.raises(UnknownPersonError):
            service.create_event(draft())

    def test_without_hook(self, store, catalog):
        event = EventService(store=store, catalog=catalog).create_event(draft())
        assert event.id in store.events


class TestUpdateEvent:
    def test_moving_into_full_slot_rejected(self, service, store):
        store.put(GROUP, at(14), at(15))
        event = store.put(GROUP, at(16), at(17))

        with pytest.raises(SlotConflictError):
            service.update_event(
                str(event.id), EventChanges(planned_start=at(14, 30), planned_end=at(15, 30))
            )
        assert store.events[event.id].planned_start == at(16)

    def test_event_does_not_conflict_with_itself(self, service, store):
        store.put(INDIVIDUAL, at(10), at(11))
        event = store.put(GROUP, at(10), at(11))
        updated = service.update_event(str(event.id), EventChanges(planned_end=at(11, 30)))
        assert updated.planned_end == at(11, 30)

    def test_changing_type_revalidates(self, service, store):
        store.put(GROUP, at(10), at(11))
        event = store.put(ActivityType.LEISURE_GROUP, at(10), at(11))
        with pytest.raises(SlotConflictError):
            service.update_event(str(event.id), EventChanges(activity_type=GROUP))

    def test_canceled_event_moves_freely(self, service, store):
        store.put(GROUP, at(14), at(15))
        event = store.put(GROUP, at(16), at(17), status=EventStatus.CANCELED)
        updated = service.update_event(str(event.id), EventChanges(planned_start=at(14)))
        assert updated.planned_start == at(14)

    def test_end_before_start_rejected(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11))
        with pytest.raises(InvalidIntervalError):
            service.update_event(str(event.id), EventChanges(planned_end=at(9)))

    def test_students_added_to_meeting_rejected(self, service, store):
        event = store.put(ActivityType.OFFSITE_EVENT, at(10), at(11))
        with pytest.raises(StudentsNotAllowedError):
            service.update_event(str(event.id), EventChanges(participants=(student(),)))

    def test_new_planned_hours_rebill_completed_event(self, service, store):
        event = store.put(
            INDIVIDUAL, at(10), at(11), status=EventStatus.COMPLETED, billable_hours=1,
            completion_comment="done",
        )
        updated = service.update_event(str(event.id), EventChanges(planned_hours=2))
        assert updated.billable_hours == 2

    def test_title_edit_keeps_other_fields(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11), subject="Mathematics")
        updated = service.update_event(str(event.id), EventChanges(title="Geometry"))
        assert updated == replace(event, title="Geometry")

    def test_clear_subject(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11), subject="Mathematics")
        updated = service.update_event(str(event.id), EventChanges(clear_subject=True))
        assert updated.subject is None

    def test_zero_planned_hours_rejected(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11))
        with pytest.raises(InvalidPlannedHoursError):
            service.update_event(str(event.id), EventChanges(planned_hours=0))
        assert store.events[event.id] == event

    def test_unknown_participant_rejected(self, store):
        event = store.put(INDIVIDUAL, at(10), at(11))
        service = EventService(store=store, catalog=InMemoryCatalog(persons=[]))
        with pytest.raises(UnknownPersonError):
            service.update_event(str(event.id), EventChanges(participants=(student(),)))

    def test_completed_event_cannot_be_rescheduled(self, service, store):
        event = store.put(
            INDIVIDUAL, at(10), at(11), status=EventStatus.COMPLETED, completion_comment="done",
            fact_start=at(10), fact_end=at(11),
        )
        with pytest.raises(CompletedEventLockedError):
            service.update_event(str(event.id), EventChanges(planned_start=at(12), planned_end=at(13)))
        assert store.events[event.id] == event

    def test_completed_event_other_fields_editable(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11), status=EventStatus.COMPLETED)
        updated = service.update_event(str(event.id), EventChanges(notes="Homework set"))
        assert updated.notes == "Homework set"

    def test_unknown_event(self, service):
        with pytest.raises(EventNotFoundError):
            service.update_event(str(uuid4()), EventChanges(title="x"))


class TestTransitionStatus:
    def test_complete_event(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11), planned_hours=1)
        done = service.transition_status(
            str(event.id), EventStatus.COMPLETED, StatusPayload(completion_comment="Covered chapter 3")
        )
        assert done.billable_hours == 1
        assert store.events[event.id].status is EventStatus.COMPLETED
        assert store.locked == [event.id]

    def test_failed_transition_leaves_event_unmodified(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11))
        with pytest.raises(MissingCancelReasonError):
            service.transition_status(str(event.id), EventStatus.CANCELED, StatusPayload())
        assert store.events[event.id] == event

    def test_canceled_lesson_cannot_be_completed_into_a_taken_slot(self, service, store):
        """Once a canceled group lesson's slot is taken, the lesson stays canceled."""
        first = service.create_event(draft(GROUP))
        service.transition_status(
            str(first.id), EventStatus.CANCELED, StatusPayload(cancel_reason_id="STUDENT_SICK")
        )
        service.create_event(draft(GROUP))

        with pytest.raises(UnsupportedTransitionError):
            service.transition_status(
                str(first.id), EventStatus.COMPLETED, StatusPayload(completion_comment="held")
            )

        occupying = store.find_occupied_intervals(first.interval)
        assert [s.activity_type for s in occupying] == [GROUP]
        assert store.events[first.id].status is EventStatus.CANCELED

    def test_completed_lesson_cannot_be_canceled(self, service, store):
        event = store.put(INDIVIDUAL, at(10), at(11), status=EventStatus.COMPLETED)
        with pytest.raises(UnsupportedTransitionError):
            service.transition_status(
                str(event.id), EventStatus.CANCELED, StatusPayload(cancel_reason_id="OTHER")
            )

    def test_transition_does_not_notify(self, service, store, created):
        event = store.put(INDIVIDUAL, at(10), at(11), participants=(student(),))
        service.transition_status(
            str(event.id), EventStatus.CANCELED, StatusPayload(cancel_reason_id="STUDENT_SICK")
        )
        assert created == []

    def test_get_event_invalid_id_raises_error(self, service):
        """get_event raises InvalidEventIdError for malformed UUID."""
        with pytest.raises(InvalidEventIdError):
            service.get_event("not-a-uuid")

    def test_get_event_not_found_raises_error(self, service):
        """get_event raises EventNotFoundError when store returns None."""
        with pytest.raises(EventNotFoundError):
            service.get_event(str(uuid4()))

    def test_transition_unknown_event(self, service):
        with pytest.raises(EventNotFoundError):
            service.transition_status(
                str(uuid4()), EventStatus.COMPLETED, StatusPayload(completion_comment="x")
            )


class TestListEvents:
    def test_filters_by_status(self, service, store):
        store.put(INDIVIDUAL, at(10), at(11))
        canceled = store.put(INDIVIDUAL, at(12), at(13), status=EventStatus.CANCELED)
        events = service.list_events(EventQuery(status=EventStatus.CANCELED))
        assert [e.id for e in events] == [canceled.id]

    def test_ordered_by_planned_start(self, service, store):
        late = store.put(INDIVIDUAL, at(15), at(16))
        early = store.put(INDIVIDUAL, at(8), at(9))
        assert [e.id for e in service.list_events()] == [early.id, late.id]
