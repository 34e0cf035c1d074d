"""Derived views over planner state - pure functions, no I/O."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import TypeVar

from .models import Event, FocusSession, Priority, Subject, Task

SORT_BY_DUE_DATE = "dueDate"
SORT_BY_PRIORITY = "priority"
SORT_OPTIONS = (SORT_BY_DUE_DATE, SORT_BY_PRIORITY)


@dataclass(frozen=True)
class TaskView:
    """A task tagged with its owning subject."""

    id: str
    title: str
    due_date: date
    completed: bool
    priority: Priority
    pinned: bool
    subject_id: str
    subject_name: str
    subject_color: str

    @classmethod
    def of(cls, task: Task, subject: Subject) -> "TaskView":
        return cls(
            id=task.id,
            title=task.title,
            due_date=task.due_date,
            completed=task.completed,
            priority=task.priority,
            pinned=task.pinned,
            subject_id=subject.id,
            subject_name=subject.name,
            subject_color=subject.color,
        )

    def days_until_due(self, as_of: date) -> int:
        """Days until due date (negative if overdue)."""
        return (self.due_date - as_of).days


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int


T = TypeVar("T", Task, TaskView)


def flatten_tasks(subjects: Iterable[Subject]) -> list[TaskView]:
    """
    Every subject's tasks, tagged with the owning subject.

    Order is subject order, then task insertion order within each subject.
    """
    return [TaskView.of(task, subject) for subject in subjects for task in subject.tasks]


def sort_tasks(tasks: Sequence[T], sort_by: str = SORT_BY_DUE_DATE) -> list[T]:
    """
    Sort tasks by priority rank or by due date (the default).

    Both sorts are stable and return a new list.
    """
    if sort_by == SORT_BY_PRIORITY:
        return sorted(tasks, key=lambda t: t.priority.rank)
    return sorted(tasks, key=lambda t: t.due_date)


def task_stats(subjects: Iterable[Subject]) -> TaskStats:
    """Count total, completed and pending tasks across all subjects."""
    total = 0
    completed = 0
    for subject in subjects:
        total += len(subject.tasks)
        completed += sum(1 for t in subject.tasks if t.completed)
    return TaskStats(total=total, completed=completed, pending=total - completed)


def overdue_tasks(subjects: Iterable[Subject], today: date) -> list[TaskView]:
    """Incomplete tasks whose due date is strictly before today."""
    return [t for t in flatten_tasks(subjects) if t.due_date < today and not t.completed]


def due_today_tasks(subjects: Iterable[Subject], today: date) -> list[TaskView]:
    """Incomplete tasks due exactly today."""
    return [t for t in flatten_tasks(subjects) if t.due_date == today and not t.completed]


def pinned_tasks(subjects: Iterable[Subject]) -> list[TaskView]:
    return [t for t in flatten_tasks(subjects) if t.pinned]


def tasks_on(subjects: Iterable[Subject], day: date) -> list[TaskView]:
    """All tasks due on a given day, completed or not."""
    return [t for t in flatten_tasks(subjects) if t.due_date == day]


def events_on(events: Iterable[Event], day: date) -> list[Event]:
    return [e for e in events if e.date == day]


def focus_minutes_by_date(sessions: Iterable[FocusSession]) -> dict[date, int]:
    """Summed focus duration per day, oldest day first."""
    totals: dict[date, int] = {}
    for session in sessions:
        totals[session.date] = totals.get(session.date, 0) + session.duration
    return dict(sorted(totals.items()))


def total_focus(sessions: Iterable[FocusSession], on: date | None = None) -> int:
    """Total focus duration, optionally restricted to one day."""
    return sum(s.duration for s in sessions if on is None or s.date == on)
