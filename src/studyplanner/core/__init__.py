"""Functional core - pure planning logic with no I/O."""

from .models import (
    Event,
    FocusSession,
    Priority,
    Subject,
    SubjectPatch,
    Task,
    TaskPatch,
    default_subjects,
)
from .views import (
    TaskStats,
    TaskView,
    due_today_tasks,
    flatten_tasks,
    overdue_tasks,
    sort_tasks,
    task_stats,
)

__all__ = [
    # Models
    "Event",
    "FocusSession",
    "Priority",
    "Subject",
    "SubjectPatch",
    "Task",
    "TaskPatch",
    "default_subjects",
    # Views
    "TaskStats",
    "TaskView",
    "due_today_tasks",
    "flatten_tasks",
    "overdue_tasks",
    "sort_tasks",
    "task_stats",
]
