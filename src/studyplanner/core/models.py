"""Pure planning domain model - no I/O dependencies."""

from dataclasses import dataclass, field, fields, replace
from datetime import date
from enum import Enum

DEFAULT_SUBJECT_COLORS = [
    "bg-blue-500",
    "bg-green-500",
    "bg-purple-500",
    "bg-orange-500",
    "bg-pink-500",
    "bg-teal-500",
]


class Priority(str, Enum):
    """Task priority, ranked high (1) to low (3)."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, value: "str | Priority | None") -> "Priority":
        """Lenient parse: anything unrecognised is medium."""
        if isinstance(value, Priority):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.MEDIUM


_PRIORITY_RANK = {Priority.HIGH: 1, Priority.MEDIUM: 2, Priority.LOW: 3}


@dataclass(frozen=True)
class Task:
    """A unit of work owned by exactly one subject."""

    id: str
    title: str
    due_date: date
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    pinned: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "dueDate": self.due_date.isoformat(),
            "completed": self.completed,
            "priority": self.priority.value,
            "pinned": self.pinned,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its persisted JSON form."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            due_date=date.fromisoformat(data["dueDate"]),
            completed=bool(data.get("completed", False)),
            priority=Priority.parse(data.get("priority")),
            pinned=bool(data.get("pinned", False)),
        )


@dataclass(frozen=True)
class Subject:
    """A top-level grouping (e.g. a course) owning its tasks."""

    id: str
    name: str
    color: str
    expanded: bool = True
    tasks: tuple[Task, ...] = ()

    def find_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "expanded": self.expanded,
            "tasks": [t.to_dict() for t in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Subject":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            color=data.get("color", DEFAULT_SUBJECT_COLORS[0]),
            expanded=bool(data.get("expanded", True)),
            tasks=tuple(Task.from_dict(t) for t in data.get("tasks", [])),
        )


@dataclass(frozen=True)
class Event:
    """
    A standalone calendar entry.

    Only id, title and date are interpreted. Any other caller-supplied field
    (time, description, type, ...) lives in `details` and is round-tripped
    verbatim through persistence.
    """

    id: str
    title: str
    date: date
    details: dict = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        return {
            **self.details,
            "id": self.id,
            "title": self.title,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        details = {k: v for k, v in data.items() if k not in ("id", "title", "date")}
        return cls(
            id=str(data["id"]),
            title=data["title"],
            date=date.fromisoformat(data["date"]),
            details=details,
        )


@dataclass(frozen=True)
class FocusSession:
    """A recorded interval of focused work."""

    id: str
    date: date
    duration: int
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "duration": self.duration,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FocusSession":
        # Sessions written before ids existed fall back to their timestamp
        timestamp = int(data["timestamp"])
        return cls(
            id=str(data.get("id", timestamp)),
            date=date.fromisoformat(data["date"]),
            duration=int(data["duration"]),
            timestamp=timestamp,
        )


def _check_keys(cls, data: dict) -> None:
    allowed = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} field(s): {', '.join(unknown)}")


@dataclass(frozen=True)
class TaskPatch:
    """Partial task update. None means "leave unchanged"."""

    title: str | None = None
    due_date: date | None = None
    completed: bool | None = None
    priority: Priority | None = None
    pinned: bool | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "TaskPatch":
        """Build a patch from keyword data, rejecting unknown keys."""
        _check_keys(cls, data)
        values = dict(data)
        if isinstance(values.get("due_date"), str):
            values["due_date"] = date.fromisoformat(values["due_date"])
        if values.get("priority") is not None:
            values["priority"] = Priority.parse(values["priority"])
        return cls(**values)

    def changes(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def apply(self, task: Task) -> Task:
        return replace(task, **self.changes())


@dataclass(frozen=True)
class SubjectPatch:
    """Partial subject update (rename, recolor, expand/collapse)."""

    name: str | None = None
    color: str | None = None
    expanded: bool | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "SubjectPatch":
        _check_keys(cls, data)
        return cls(**data)

    def changes(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def apply(self, subject: Subject) -> Subject:
        return replace(subject, **self.changes())


def default_subjects() -> tuple[Subject, ...]:
    """Seed state used when nothing has been persisted yet."""
    return (
        Subject(id="1", name="Subject 1", color="bg-blue-500"),
        Subject(id="2", name="Subject 2", color="bg-green-500"),
    )
