"""Planning store - canonical planner state and all mutations.

The store holds three collections (subjects, events, focus sessions). Every
mutation swaps the affected collection for a new tuple of frozen values and
then writes a snapshot of it through the SnapshotStore port.

Not-found references and validation failures are silent no-ops: the
operation returns False (or None for the add operations) and nothing changes.
Persistence failures are logged and never interrupt the in-memory state.

The three collections are persisted as independent blobs, so a crash between
writes can leave them out of step with each other.
"""

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import date
from typing import Any

from studyplanner.core.models import (
    DEFAULT_SUBJECT_COLORS,
    Event,
    FocusSession,
    Priority,
    Subject,
    SubjectPatch,
    Task,
    TaskPatch,
    default_subjects,
)
from studyplanner.ports.clock import Clock
from studyplanner.ports.snapshot_store import SnapshotError, SnapshotStore

logger = logging.getLogger(__name__)

SUBJECTS_KEY = "studentPlannerData"
EVENTS_KEY = "studentPlannerEvents"
FOCUS_SESSIONS_KEY = "focusSessions"


class PlanningStore:
    """Single owner of the planner's subjects, events and focus sessions."""

    def __init__(
        self,
        snapshots: SnapshotStore,
        clock: Clock,
        subject_colors: list[str] | None = None,
    ):
        self.snapshots = snapshots
        self.clock = clock
        self.subject_colors = subject_colors or DEFAULT_SUBJECT_COLORS
        self._subjects: tuple[Subject, ...] = self._load(SUBJECTS_KEY, Subject.from_dict, default_subjects)
        self._events: tuple[Event, ...] = self._load(EVENTS_KEY, Event.from_dict, tuple)
        self._focus_sessions: tuple[FocusSession, ...] = self._load(
            FOCUS_SESSIONS_KEY, FocusSession.from_dict, tuple
        )

    # ============== Persistence ==============

    def _load(self, key: str, decode: Callable[[dict], Any], default: Callable[[], tuple]) -> tuple:
        try:
            raw = self.snapshots.load(key)
        except SnapshotError as e:
            logger.warning(f"Could not read snapshot {key}: {e}")
            return default()
        if raw is None:
            return default()
        try:
            return tuple(decode(item) for item in json.loads(raw))
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring corrupt snapshot {key}: {e}")
            return default()

    def _save(self, key: str, payload: str) -> None:
        try:
            self.snapshots.save(key, payload)
        except SnapshotError as e:
            logger.error(f"Failed to persist {key}, continuing in memory: {e}")

    def _set_subjects(self, subjects: Iterable[Subject]) -> None:
        subjects = tuple(subjects)
        payload = _encode(subjects)
        self._subjects = subjects
        self._save(SUBJECTS_KEY, payload)

    def _set_events(self, events: Iterable[Event]) -> None:
        events = tuple(events)
        payload = _encode(events)
        self._events = events
        self._save(EVENTS_KEY, payload)

    def _set_focus_sessions(self, sessions: Iterable[FocusSession]) -> None:
        sessions = tuple(sessions)
        payload = _encode(sessions)
        self._focus_sessions = sessions
        self._save(FOCUS_SESSIONS_KEY, payload)

    # ============== Reads ==============

    @property
    def subjects(self) -> tuple[Subject, ...]:
        return self._subjects

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    @property
    def focus_sessions(self) -> tuple[FocusSession, ...]:
        return self._focus_sessions

    def today(self) -> date:
        return self.clock.today()

    def get_subject(self, subject_id: str) -> Subject | None:
        for subject in self._subjects:
            if subject.id == subject_id:
                return subject
        return None

    def get_task(self, subject_id: str, task_id: str) -> Task | None:
        subject = self.get_subject(subject_id)
        return subject.find_task(task_id) if subject else None

    def _fresh_id(self, taken: set[str]) -> str:
        new_id = self.clock.new_id()
        while new_id in taken:
            new_id = self.clock.new_id()
        return new_id

    def _all_task_ids(self) -> set[str]:
        return {t.id for s in self._subjects for t in s.tasks}

    # ============== Subjects ==============

    def _replace_subject(self, subject_id: str, change: Callable[[Subject], Subject | None]) -> bool:
        """Apply change to one subject. change returns None to refuse."""
        for i, subject in enumerate(self._subjects):
            if subject.id != subject_id:
                continue
            updated = change(subject)
            if updated is None:
                return False
            self._set_subjects(self._subjects[:i] + (updated,) + self._subjects[i + 1 :])
            return True
        logger.debug(f"Subject {subject_id} not found")
        return False

    def add_subject(
        self,
        name: str,
        color: str | None = None,
        subject_id: str | None = None,
        expanded: bool = True,
    ) -> Subject | None:
        """Append a new subject. Refuses blank names and duplicate ids."""
        if not name.strip():
            logger.debug("Refusing subject with blank name")
            return None
        taken = {s.id for s in self._subjects}
        if subject_id is None:
            subject_id = self._fresh_id(taken)
        elif subject_id in taken:
            logger.debug(f"Refusing duplicate subject id {subject_id}")
            return None
        if color is None:
            color = self.subject_colors[len(self._subjects) % len(self.subject_colors)]
        subject = Subject(id=subject_id, name=name, color=color, expanded=expanded)
        self._set_subjects(self._subjects + (subject,))
        return subject

    def update_subject(self, subject_id: str, patch: SubjectPatch | dict) -> bool:
        """Merge the given fields into a subject."""
        if isinstance(patch, dict):
            patch = SubjectPatch.from_dict(patch)
        if patch.name is not None and not patch.name.strip():
            logger.debug("Refusing to blank subject name")
            return False
        return self._replace_subject(subject_id, patch.apply)

    def toggle_subject_expanded(self, subject_id: str) -> bool:
        return self._replace_subject(subject_id, lambda s: SubjectPatch(expanded=not s.expanded).apply(s))

    def delete_subject(self, subject_id: str) -> bool:
        """Remove a subject and every task it owns."""
        remaining = tuple(s for s in self._subjects if s.id != subject_id)
        if len(remaining) == len(self._subjects):
            logger.debug(f"Subject {subject_id} not found")
            return False
        self._set_subjects(remaining)
        return True

    # ============== Tasks ==============

    def _replace_task(
        self, subject_id: str, task_id: str, change: Callable[[Task], Task | None]
    ) -> bool:
        def change_subject(subject: Subject) -> Subject | None:
            for i, task in enumerate(subject.tasks):
                if task.id != task_id:
                    continue
                updated = change(task)
                if updated is None:
                    return None
                return _with_tasks(subject, subject.tasks[:i] + (updated,) + subject.tasks[i + 1 :])
            logger.debug(f"Task {task_id} not found in subject {subject_id}")
            return None

        return self._replace_subject(subject_id, change_subject)

    def add_task(
        self,
        subject_id: str,
        title: str,
        due_date: date | None = None,
        priority: Priority | str | None = None,
    ) -> Task | None:
        """
        Append a new task to a subject.

        Blank titles are refused. due_date defaults to today and priority to
        medium. Returns the new task, or None if nothing was added.
        """
        if not title.strip():
            logger.debug("Refusing task with blank title")
            return None
        subject = self.get_subject(subject_id)
        if subject is None:
            logger.debug(f"Subject {subject_id} not found")
            return None
        task = Task(
            id=self._fresh_id(self._all_task_ids()),
            title=title,
            due_date=due_date or self.clock.today(),
            priority=Priority.parse(priority) if priority else Priority.MEDIUM,
        )
        self._replace_subject(subject_id, lambda s: _with_tasks(s, s.tasks + (task,)))
        return task

    def update_task(self, subject_id: str, task_id: str, patch: TaskPatch | dict) -> bool:
        """Merge the given fields into a task; unspecified fields are kept."""
        if isinstance(patch, dict):
            patch = TaskPatch.from_dict(patch)
        if patch.title is not None and not patch.title.strip():
            logger.debug("Refusing to blank task title")
            return False
        return self._replace_task(subject_id, task_id, patch.apply)

    def toggle_task_completed(self, subject_id: str, task_id: str) -> bool:
        return self._replace_task(subject_id, task_id, lambda t: TaskPatch(completed=not t.completed).apply(t))

    def toggle_task_pinned(self, subject_id: str, task_id: str) -> bool:
        return self._replace_task(subject_id, task_id, lambda t: TaskPatch(pinned=not t.pinned).apply(t))

    def delete_task(self, subject_id: str, task_id: str) -> bool:
        def drop(subject: Subject) -> Subject | None:
            remaining = tuple(t for t in subject.tasks if t.id != task_id)
            if len(remaining) == len(subject.tasks):
                logger.debug(f"Task {task_id} not found in subject {subject_id}")
                return None
            return _with_tasks(subject, remaining)

        return self._replace_subject(subject_id, drop)

    # ============== Events ==============

    def add_event(self, title: str, event_date: date, **details: Any) -> Event | None:
        """
        Append a calendar event with a fresh id; extra fields are kept as-is.

        Details that cannot be stored as JSON are refused and None returned.
        """
        try:
            json.dumps(details)
        except (TypeError, ValueError) as e:
            logger.debug(f"Refusing event with unstorable details: {e}")
            return None
        event = Event(
            id=self._fresh_id({e.id for e in self._events}),
            title=title,
            date=event_date,
            details=details,
        )
        self._set_events(self._events + (event,))
        return event

    def delete_event(self, event_id: str) -> bool:
        remaining = tuple(e for e in self._events if e.id != event_id)
        if len(remaining) == len(self._events):
            logger.debug(f"Event {event_id} not found")
            return False
        self._set_events(remaining)
        return True

    # ============== Focus sessions ==============

    def add_focus_session(self, duration: int) -> FocusSession:
        """Record a focus session dated today and stamped with the current instant."""
        session = FocusSession(
            id=self._fresh_id({s.id for s in self._focus_sessions}),
            date=self.clock.today(),
            duration=duration,
            timestamp=self.clock.now(),
        )
        self._set_focus_sessions(self._focus_sessions + (session,))
        return session

    def delete_focus_session(self, timestamp: int) -> bool:
        """
        Remove the session recorded at timestamp.

        If several sessions share the timestamp, only the earliest recorded
        one is removed.
        """
        for i, session in enumerate(self._focus_sessions):
            if session.timestamp == timestamp:
                self._set_focus_sessions(self._focus_sessions[:i] + self._focus_sessions[i + 1 :])
                return True
        logger.debug(f"Focus session at {timestamp} not found")
        return False

    def delete_focus_session_by_id(self, session_id: str) -> bool:
        remaining = tuple(s for s in self._focus_sessions if s.id != session_id)
        if len(remaining) == len(self._focus_sessions):
            logger.debug(f"Focus session {session_id} not found")
            return False
        self._set_focus_sessions(remaining)
        return True


def _encode(items: Iterable) -> str:
    return json.dumps([item.to_dict() for item in items])


def _with_tasks(subject: Subject, tasks: tuple[Task, ...]) -> Subject:
    return replace(subject, tasks=tasks)
