"""Tests for lifecycle transitions."""

from datetime import timedelta

import pytest

from moments.lifecycle import LifecycleWorkflow, build_moment, phase
from moments.models import INITIAL_FEELING_NOTE, CompletedMoment
from shared_types import Emotion, MomentStatus, MomentType, Phase, Priority


@pytest.fixture
def workflow(repository):
    return LifecycleWorkflow(repository)


class TestBuildMoment:
    def test_seeds_initial_feeling(self, now):
        m = build_moment("Trip", now.date(), emotion=Emotion.EXCITED, now=now)
        assert m.status == MomentStatus.ACTIVE
        assert m.initial_emotion == Emotion.EXCITED
        assert len(m.emotion_history) == 1
        assert m.emotion_history[0].note == INITIAL_FEELING_NOTE
        assert m.emotion_history[0].date == now
        assert m.created_at == now

    def test_strips_and_drops_blank_tasks(self, now):
        m = build_moment(" Trip ", now.date(), tasks=["Pack ", "", "  "], now=now)
        assert m.title == "Trip"
        assert [t.text for t in m.tasks] == ["Pack"]

    @pytest.mark.parametrize("title,has_date", [("", True), ("  ", True), ("Trip", False)])
    def test_missing_fields(self, now, title, has_date):
        assert build_moment(title, now.date() if has_date else None, now=now) is None


class TestCreate:
    def test_create_adds_to_repository(self, workflow, repository, now):
        m = workflow.create(
            "Exam", now.date() + timedelta(days=10),
            moment_type=MomentType.STUDY, priority=Priority.HIGH, now=now,
        )
        assert m in repository.query_active()

    def test_create_without_date_refused(self, workflow, repository):
        assert workflow.create("Exam", None) is None
        assert len(repository) == 0


class TestComplete:
    def test_complete_attaches_reflection(self, workflow, repository, make_moment, now):
        m = make_moment()
        repository.create(m)
        done = workflow.complete(m.id, 4, "Start earlier", True, now=now)
        assert isinstance(done, CompletedMoment)
        stored = repository.get(m.id)
        assert stored.status == MomentStatus.COMPLETED
        assert stored.reflection.rating == 4
        assert stored.reflection.lessons == "Start earlier"
        assert stored.reflection.repeatable is True
        assert stored.reflection.completed_date == now

    def test_keeps_shared_fields(self, workflow, repository, make_moment, now):
        m = make_moment(notes="bring calculator")
        repository.create(m)
        done = workflow.complete(m.id, 3, now=now)
        assert done.id == m.id
        assert done.notes == m.notes
        assert done.created_at == m.created_at

    @pytest.mark.parametrize("rating", [0, 6])
    def test_invalid_rating_refused(self, workflow, repository, make_moment, rating):
        m = make_moment()
        repository.create(m)
        assert workflow.complete(m.id, rating) is None
        stored = repository.get(m.id)
        assert stored.status == MomentStatus.ACTIVE
        assert stored.reflection is None

    def test_cannot_complete_twice(self, workflow, repository, make_moment):
        m = make_moment()
        repository.create(m)
        workflow.complete(m.id, 5)
        assert workflow.complete(m.id, 2) is None
        assert repository.get(m.id).reflection.rating == 5

    def test_unknown_moment(self, workflow):
        assert workflow.complete("missing", 3) is None


class TestPostpone:
    def test_postpone_past_due(self, workflow, repository, make_moment, now):
        m = make_moment(days=-1)
        repository.create(m)
        assert phase(m, now) == Phase.PAST_DUE
        moved = workflow.postpone(m.id, now=now)
        assert moved.date == m.date + timedelta(days=7)
        assert moved.status == MomentStatus.ACTIVE
        assert repository.get(m.id).date == moved.date

    def test_not_past_due_refused(self, workflow, repository, make_moment, now):
        m = make_moment(days=0)
        repository.create(m)
        assert workflow.postpone(m.id, now=now) is None
        assert repository.get(m.id).date == m.date

    def test_custom_postpone_days(self, repository, make_moment, now):
        m = make_moment(days=-3)
        repository.create(m)
        moved = LifecycleWorkflow(repository, postpone_days=14).postpone(m.id, now=now)
        assert moved.date == m.date + timedelta(days=14)


class TestArchive:
    def test_archive_active(self, workflow, repository, make_moment):
        m = make_moment()
        repository.create(m)
        archived = workflow.archive(m.id)
        assert archived.status == MomentStatus.ARCHIVED
        assert archived.reflection is None
        assert repository.query_history() == [archived]

    def test_archive_completed_drops_reflection(self, workflow, repository, make_moment):
        m = make_moment()
        repository.create(m)
        workflow.complete(m.id, 4)
        archived = workflow.archive(m.id)
        assert archived.status == MomentStatus.ARCHIVED
        assert archived.reflection is None

    def test_archive_twice_refused(self, workflow, repository, make_moment):
        m = make_moment()
        repository.create(m)
        workflow.archive(m.id)
        assert workflow.archive(m.id) is None


class TestPhase:
    def test_phases(self, workflow, repository, make_moment, now):
        upcoming, overdue, done = make_moment(days=2), make_moment(days=-2), make_moment()
        for m in (upcoming, overdue, done):
            repository.create(m)
        workflow.complete(done.id, 3)
        assert phase(upcoming, now) == Phase.ACTIVE
        assert phase(overdue, now) == Phase.PAST_DUE
        assert phase(repository.get(done.id), now) == Phase.COMPLETED
