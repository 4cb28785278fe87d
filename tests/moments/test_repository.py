"""Tests for MomentRepository."""

from datetime import timedelta

from moments.models import ArchivedMoment, CompletedMoment, EmotionLog, Reflection, Task
from moments.repository import MomentRepository
from moments.storage import MomentStorage
from shared_types import Emotion, MomentStatus


def _reload(repository):
    return MomentRepository(MomentStorage(repository.storage.store))


def _complete(moment):
    return CompletedMoment.model_validate(
        {**moment.model_dump(exclude={"status", "reflection"}), "reflection": Reflection(rating=4)}
    )


class TestCreate:
    def test_create_persists(self, repository, make_moment):
        m = make_moment()
        assert repository.create(m) is True
        assert m.id in repository
        assert _reload(repository).get(m.id) == m

    def test_rejects_blank_title(self, repository, make_moment):
        assert repository.create(make_moment(title="   ")) is False
        assert len(repository) == 0

    def test_rejects_duplicate_id(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        assert repository.create(m.evolve(title="Other")) is False
        assert repository.get(m.id).title == "Exam"

    def test_rejects_non_active(self, repository, make_moment):
        assert repository.create(_complete(make_moment())) is False
        assert len(repository) == 0

    def test_rejects_duplicate_task_ids(self, repository, make_moment):
        t = Task(text="a")
        assert repository.create(make_moment(tasks=[t, t])) is False

    def test_rejected_create_writes_nothing(self, repository, make_moment):
        repository.create(make_moment(title=""))
        assert repository.storage.store.load("moments") is None


class TestQueries:
    def test_query_active_ascending(self, repository, make_moment):
        for title, days in [("later", 20), ("soon", 2), ("mid", 8)]:
            repository.create(make_moment(title=title, days=days))
        assert [m.title for m in repository.query_active()] == ["soon", "mid", "later"]

    def test_query_history_descending(self, repository, make_moment):
        a = make_moment(title="old", days=-30)
        b = make_moment(title="new", days=-1)
        c = make_moment(title="still active", days=5)
        for m in (a, b, c):
            repository.create(m)
        repository.update(_complete(a))
        repository.update(ArchivedMoment.model_validate(b.model_dump(exclude={"status", "reflection"})))
        assert [m.title for m in repository.query_history()] == ["new", "old"]

    def test_snapshot_is_a_copy(self, repository, make_moment):
        repository.create(make_moment())
        snap = repository.snapshot()
        snap.clear()
        assert len(repository) == 1


class TestUpdate:
    def test_full_replace(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        assert repository.update(m.evolve(title="Final exam")) is True
        assert _reload(repository).get(m.id).title == "Final exam"

    def test_unknown_id(self, repository, make_moment):
        assert repository.update(make_moment()) is False

    def test_rejects_blank_title(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        assert repository.update(m.evolve(title="")) is False
        assert repository.get(m.id).title == "Exam"

    def test_rejects_status_reversal(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        repository.update(_complete(m))
        assert repository.update(m) is False
        assert repository.get(m.id).status == MomentStatus.COMPLETED

    def test_archived_is_terminal(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        archived = ArchivedMoment.model_validate(m.model_dump(exclude={"status", "reflection"}))
        repository.update(archived)
        assert repository.update(_complete(m)) is False

    def test_completed_can_be_archived(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        repository.update(_complete(m))
        archived = ArchivedMoment.model_validate(m.model_dump(exclude={"status", "reflection"}))
        assert repository.update(archived) is True

    def test_rejects_created_at_change(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        assert repository.update(m.evolve(created_at=m.created_at - timedelta(days=1))) is False

    def test_rejects_emotion_history_rewrite(self, repository, make_moment, now):
        m = make_moment(emotion_history=[EmotionLog(date=now, emotion=Emotion.HAPPY)])
        repository.create(m)
        assert repository.update(m.evolve(emotion_history=())) is False

    def test_rejects_emotion_entry_edit_with_same_id(self, repository, make_moment, now):
        m = make_moment(emotion_history=[EmotionLog(date=now, emotion=Emotion.HAPPY)])
        repository.create(m)
        edited = m.emotion_history[0].model_copy(update={"emotion": Emotion.STRESSED, "note": "changed"})
        assert repository.update(m.evolve(emotion_history=(edited,))) is False
        assert repository.get(m.id).emotion_history[0].emotion == Emotion.HAPPY
        assert _reload(repository).get(m.id).emotion_history[0].note is None

    def test_rejects_reflection_change(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        done = _complete(m)
        assert repository.update(done) is True
        changed = done.evolve(reflection=Reflection(rating=1, lessons="second thoughts"))
        assert repository.update(changed) is False
        assert repository.get(m.id).reflection.rating == 4
        assert _reload(repository).get(m.id).reflection.lessons == ""

    def test_completed_accepts_task_toggle(self, repository, make_moment):
        m = make_moment(tasks=[Task(text="Pack")])
        repository.create(m)
        repository.update(_complete(m))
        assert repository.toggle_task(m.id, m.tasks[0].id) is True
        assert repository.get(m.id).reflection.rating == 4


class TestDeleteAndSelect:
    def test_delete(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        assert repository.delete(m.id) is True
        assert _reload(repository).get(m.id) is None

    def test_delete_unknown(self, repository):
        assert repository.delete("missing") is False

    def test_delete_clears_selection(self, repository, make_moment):
        a, b = make_moment(title="a"), make_moment(title="b")
        repository.create(a)
        repository.create(b)
        repository.select(a.id)
        repository.delete(a.id)
        assert repository.selected is None

    def test_delete_other_keeps_selection(self, repository, make_moment):
        a, b = make_moment(title="a"), make_moment(title="b")
        repository.create(a)
        repository.create(b)
        repository.select(a.id)
        repository.delete(b.id)
        assert repository.selected == a

    def test_select_unknown(self, repository):
        assert repository.select("missing") is False
        assert repository.selected is None


class TestTasksAndEmotions:
    def test_toggle_task(self, repository, make_moment):
        t = Task(text="Revise")
        m = make_moment(tasks=[t])
        repository.create(m)
        assert repository.toggle_task(m.id, t.id) is True
        assert repository.get(m.id).tasks[0].is_completed is True
        repository.toggle_task(m.id, t.id)
        assert repository.get(m.id).tasks[0].is_completed is False

    def test_toggle_unknown_task(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        assert repository.toggle_task(m.id, "nope") is False

    def test_add_and_remove_task(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        task = repository.add_task(m.id, "  Buy pens ")
        assert task.text == "Buy pens"
        assert [t.text for t in repository.get(m.id).tasks] == ["Buy pens"]
        assert repository.remove_task(m.id, task.id) is True
        assert repository.get(m.id).tasks == ()

    def test_add_blank_task(self, repository, make_moment):
        m = make_moment()
        repository.create(m)
        assert repository.add_task(m.id, "  ") is None

    def test_log_emotion_appends(self, repository, make_moment, now):
        m = make_moment()
        repository.create(m)
        log = repository.log_emotion(m.id, Emotion.WORRIED, "nervous", when=now)
        history = repository.get(m.id).emotion_history
        assert history[-1] == log
        assert history[-1].note == "nervous"

    def test_log_emotion_unknown_moment(self, repository):
        assert repository.log_emotion("missing", Emotion.CALM) is None
