"""Tests for the planning domain model."""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from studyplanner.core.models import (
    Event,
    FocusSession,
    Priority,
    Subject,
    SubjectPatch,
    Task,
    TaskPatch,
    default_subjects,
)


class TestPriority:
    def test_rank(self):
        assert [p.rank for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)] == [1, 2, 3]

    def test_parse_known(self):
        assert Priority.parse("high") is Priority.HIGH
        assert Priority.parse("LOW") is Priority.LOW
        assert Priority.parse(Priority.MEDIUM) is Priority.MEDIUM

    def test_parse_unknown_is_medium(self):
        assert Priority.parse("urgent") is Priority.MEDIUM
        assert Priority.parse(None) is Priority.MEDIUM


class TestTask:
    def test_defaults(self, today):
        task = Task(id="1", title="Read", due_date=today)
        assert task.completed is False
        assert task.pinned is False
        assert task.priority is Priority.MEDIUM

    def test_frozen(self, today):
        task = Task(id="1", title="Read", due_date=today)
        with pytest.raises(FrozenInstanceError):
            task.completed = True

    def test_to_dict_uses_wire_names(self):
        task = Task(id="1", title="Read", due_date=date(2025, 1, 20), priority=Priority.HIGH)
        assert task.to_dict() == {
            "id": "1",
            "title": "Read",
            "dueDate": "2025-01-20",
            "completed": False,
            "priority": "high",
            "pinned": False,
        }

    def test_from_dict_legacy_numeric_id(self):
        task = Task.from_dict({"id": 1700000000000, "title": "Old", "dueDate": "2024-03-01"})
        assert task.id == "1700000000000"
        assert task.due_date == date(2024, 3, 1)
        assert task.priority is Priority.MEDIUM


class TestSubject:
    def test_find_task(self, today):
        task = Task(id="t", title="x", due_date=today)
        subject = Subject(id="s", name="Math", color="c", tasks=(task,))
        assert subject.find_task("t") is task
        assert subject.find_task("missing") is None

    def test_from_dict_nested_tasks(self):
        subject = Subject.from_dict(
            {
                "id": 1,
                "name": "Subject 1",
                "color": "bg-blue-500",
                "expanded": False,
                "tasks": [{"id": 10, "title": "t", "dueDate": "2024-01-01", "priority": "high"}],
            }
        )
        assert subject.id == "1"
        assert subject.expanded is False
        assert subject.tasks[0].id == "10"
        assert subject.tasks[0].priority is Priority.HIGH

    def test_default_subjects(self):
        subjects = default_subjects()
        assert [(s.name, s.color) for s in subjects] == [
            ("Subject 1", "bg-blue-500"),
            ("Subject 2", "bg-green-500"),
        ]
        assert all(s.expanded and s.tasks == () for s in subjects)


class TestEvent:
    def test_details_round_trip(self):
        data = {"id": 5, "title": "Exam", "date": "2025-02-01", "time": "09:00", "type": "exam"}
        event = Event.from_dict(data)
        assert event.id == "5"
        assert event.details == {"time": "09:00", "type": "exam"}
        assert event.to_dict() == {**data, "id": "5"}


class TestFocusSession:
    def test_from_dict_without_id_uses_timestamp(self):
        session = FocusSession.from_dict({"date": "2025-01-15", "duration": 25, "timestamp": 123})
        assert session.id == "123"
        assert session.timestamp == 123


class TestTaskPatch:
    def test_apply_only_given_fields(self, today):
        task = Task(id="1", title="Read", due_date=today, pinned=True)
        updated = TaskPatch(title="Read ch. 2", priority=Priority.LOW).apply(task)
        assert updated.title == "Read ch. 2"
        assert updated.priority is Priority.LOW
        assert updated.pinned is True
        assert updated.due_date == today
        assert task.title == "Read"

    def test_false_is_a_change(self, today):
        task = Task(id="1", title="Read", due_date=today, completed=True)
        assert TaskPatch(completed=False).apply(task).completed is False

    def test_from_dict_parses_values(self):
        patch = TaskPatch.from_dict({"due_date": "2025-03-01", "priority": "high"})
        assert patch.due_date == date(2025, 3, 1)
        assert patch.priority is Priority.HIGH

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="dueDate"):
            TaskPatch.from_dict({"dueDate": "2025-03-01"})


class TestSubjectPatch:
    def test_apply(self):
        subject = Subject(id="s", name="Math", color="bg-blue-500")
        updated = SubjectPatch(color="bg-red-500").apply(subject)
        assert updated.color == "bg-red-500"
        assert updated.name == "Math"

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="tasks"):
            SubjectPatch.from_dict({"tasks": []})
