"""Study planner CLI."""

import json
import logging
import sys
from datetime import date

import click

from .config import load_config
from .core.models import Priority, TaskPatch
from .core.views import (
    SORT_OPTIONS,
    TaskView,
    due_today_tasks,
    events_on,
    flatten_tasks,
    focus_minutes_by_date,
    overdue_tasks,
    pinned_tasks,
    sort_tasks,
    task_stats,
    total_focus,
)
from .store import PlanningStore
from .workflows import open_store

PRIORITY_CHOICE = click.Choice([p.value for p in Priority])
SORT_CHOICE = click.Choice(list(SORT_OPTIONS))


def _parse_date(ctx, param, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from None


def _store(ctx: click.Context) -> PlanningStore:
    return ctx.obj["store"]


def _task_json(t: TaskView) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "due_date": t.due_date.isoformat(),
        "completed": t.completed,
        "priority": t.priority.value,
        "pinned": t.pinned,
        "subject_id": t.subject_id,
        "subject": t.subject_name,
    }


def _format_task(t: TaskView, today: date, show_subject: bool = True) -> str:
    """Format a single task line."""
    check = "x" if t.completed else " "
    pin = "*" if t.pinned else " "
    days = t.days_until_due(today)
    if t.completed:
        urgency = f"due {t.due_date}"
    elif days < 0:
        urgency = f"OVERDUE by {-days}d"
    elif days == 0:
        urgency = "due TODAY"
    else:
        urgency = f"due in {days}d"
    subject = f" [{t.subject_name}]" if show_subject else ""
    return f"[{check}]{pin}{t.id}  {t.title} ({t.priority.value}, {urgency}){subject}"


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """Study planner - subjects, tasks, events and focus sessions."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config()
    if "store" not in ctx.obj:
        ctx.obj["store"] = open_store(ctx.obj["config"])


# ============== Subjects ==============


@main.command()
@click.option("--sort", "sort_by", type=SORT_CHOICE, default=None, help="Task order within subjects")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def subjects(ctx, sort_by: str | None, as_json: bool):
    """List subjects and their tasks."""
    store = _store(ctx)
    sort_by = sort_by or ctx.obj["config"].default_sort

    if as_json:
        click.echo(json.dumps([s.to_dict() for s in store.subjects], indent=2))
        return

    if not store.subjects:
        click.echo("No subjects.")
        return

    today = store.today()
    for subject in store.subjects:
        marker = "v" if subject.expanded else ">"
        click.echo(f"{marker} {subject.name} ({subject.id}, {len(subject.tasks)} tasks)")
        if not subject.expanded:
            continue
        for t in sort_tasks(flatten_tasks([subject]), sort_by):
            click.echo(f"    {_format_task(t, today, show_subject=False)}")


@main.command("add-subject")
@click.argument("name")
@click.option("--color", default=None, help="Color tag, e.g. bg-red-500")
@click.pass_context
def add_subject(ctx, name: str, color: str | None):
    """Add a new subject."""
    subject = _store(ctx).add_subject(name, color=color)
    if subject is None:
        _fail("subject name cannot be blank.")
    click.echo(f"Added subject {subject.name} ({subject.id})")


@main.command("rename-subject")
@click.argument("subject_id")
@click.argument("name")
@click.option("--color", default=None, help="New color tag")
@click.pass_context
def rename_subject(ctx, subject_id: str, name: str, color: str | None):
    """Rename (and optionally recolor) a subject."""
    if not _store(ctx).update_subject(subject_id, {"name": name, "color": color}):
        _fail(f"could not update subject {subject_id}.")
    click.echo(f"Updated subject {subject_id}")


@main.command("toggle-subject")
@click.argument("subject_id")
@click.pass_context
def toggle_subject(ctx, subject_id: str):
    """Expand or collapse a subject."""
    if not _store(ctx).toggle_subject_expanded(subject_id):
        _fail(f"subject {subject_id} not found.")


@main.command("remove-subject")
@click.argument("subject_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def remove_subject(ctx, subject_id: str, yes: bool):
    """Delete a subject and all of its tasks."""
    store = _store(ctx)
    subject = store.get_subject(subject_id)
    if subject is None:
        _fail(f"subject {subject_id} not found.")
    if not yes and not click.confirm(f"Delete {subject.name} and its {len(subject.tasks)} tasks?"):
        return
    store.delete_subject(subject_id)
    click.echo(f"Deleted subject {subject.name}")


# ============== Tasks ==============


@main.command("add")
@click.argument("subject_id")
@click.argument("title")
@click.option("--due", callback=_parse_date, default=None, help="Due date (YYYY-MM-DD), defaults to today")
@click.option("--priority", type=PRIORITY_CHOICE, default=None, help="Defaults to medium")
@click.pass_context
def add_task(ctx, subject_id: str, title: str, due: date | None, priority: str | None):
    """Add a task to a subject."""
    store = _store(ctx)
    if store.get_subject(subject_id) is None:
        _fail(f"subject {subject_id} not found.")
    task = store.add_task(subject_id, title, due, priority)
    if task is None:
        _fail("task title cannot be blank.")
    click.echo(f"Added task {task.id}: {task.title} (due {task.due_date})")


@main.command("edit")
@click.argument("subject_id")
@click.argument("task_id")
@click.option("--title", default=None)
@click.option("--due", callback=_parse_date, default=None, help="Due date (YYYY-MM-DD)")
@click.option("--priority", type=PRIORITY_CHOICE, default=None)
@click.pass_context
def edit_task(ctx, subject_id: str, task_id: str, title: str | None, due: date | None, priority: str | None):
    """Change a task's title, due date or priority."""
    patch = TaskPatch(title=title, due_date=due, priority=Priority.parse(priority) if priority else None)
    if not patch.changes():
        _fail("nothing to change; pass --title, --due or --priority.")
    if not _store(ctx).update_task(subject_id, task_id, patch):
        _fail(f"could not update task {task_id}.")
    click.echo(f"Updated task {task_id}")


@main.command("done")
@click.argument("subject_id")
@click.argument("task_id")
@click.pass_context
def toggle_done(ctx, subject_id: str, task_id: str):
    """Toggle a task's completed flag."""
    store = _store(ctx)
    if not store.toggle_task_completed(subject_id, task_id):
        _fail(f"task {task_id} not found.")
    task = store.get_task(subject_id, task_id)
    click.echo(f"{task.title}: {'completed' if task.completed else 'reopened'}")


@main.command("pin")
@click.argument("subject_id")
@click.argument("task_id")
@click.pass_context
def toggle_pin(ctx, subject_id: str, task_id: str):
    """Toggle a task's pinned flag."""
    store = _store(ctx)
    if not store.toggle_task_pinned(subject_id, task_id):
        _fail(f"task {task_id} not found.")
    task = store.get_task(subject_id, task_id)
    click.echo(f"{task.title}: {'pinned' if task.pinned else 'unpinned'}")


@main.command("remove")
@click.argument("subject_id")
@click.argument("task_id")
@click.pass_context
def remove_task(ctx, subject_id: str, task_id: str):
    """Delete a task."""
    if not _store(ctx).delete_task(subject_id, task_id):
        _fail(f"task {task_id} not found.")
    click.echo(f"Deleted task {task_id}")


@main.command()
@click.option("--sort", "sort_by", type=SORT_CHOICE, default=None)
@click.option("--pinned", "only_pinned", is_flag=True, help="Only pinned tasks")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def timeline(ctx, sort_by: str | None, only_pinned: bool, as_json: bool):
    """List every task across subjects."""
    store = _store(ctx)
    sort_by = sort_by or ctx.obj["config"].default_sort
    tasks = pinned_tasks(store.subjects) if only_pinned else flatten_tasks(store.subjects)
    tasks = sort_tasks(tasks, sort_by)

    if as_json:
        click.echo(json.dumps([_task_json(t) for t in tasks], indent=2))
        return

    if not tasks:
        click.echo("No tasks.")
        return

    today = store.today()
    for t in tasks:
        click.echo(_format_task(t, today))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def today(ctx, as_json: bool):
    """Show tasks due today, overdue tasks and today's events."""
    store = _store(ctx)
    now = store.today()
    due = due_today_tasks(store.subjects, now)
    overdue = overdue_tasks(store.subjects, now)
    events = events_on(store.events, now)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "date": now.isoformat(),
                    "due_today": [_task_json(t) for t in due],
                    "overdue": [_task_json(t) for t in overdue],
                    "events": [e.to_dict() for e in events],
                },
                indent=2,
            )
        )
        return

    click.echo(f"### {now.strftime('%A, %B %d')}")
    click.echo("\nDue today:")
    click.echo("\n".join(f"  {_format_task(t, now)}" for t in due) or "  None")
    click.echo("\nOverdue:")
    click.echo("\n".join(f"  {_format_task(t, now)}" for t in sort_tasks(overdue)) or "  None")
    click.echo("\nEvents:")
    click.echo("\n".join(f"  {e.title}" for e in events) or "  None")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, as_json: bool):
    """Show task completion stats."""
    s = task_stats(_store(ctx).subjects)
    if as_json:
        click.echo(json.dumps({"total": s.total, "completed": s.completed, "pending": s.pending}))
    else:
        click.echo(f"Total: {s.total}  Completed: {s.completed}  Pending: {s.pending}")


# ============== Events ==============


@main.group()
def event():
    """Manage calendar events."""
    pass


@event.command("add")
@click.argument("title")
@click.option("--date", "event_date", callback=_parse_date, default=None, help="Event date, defaults to today")
@click.option("--time", "event_time", default=None, help="Free-form time, e.g. 14:00")
@click.option("--description", default=None)
@click.pass_context
def event_add(ctx, title: str, event_date: date | None, event_time: str | None, description: str | None):
    """Add a calendar event."""
    store = _store(ctx)
    details = {}
    if event_time:
        details["time"] = event_time
    if description:
        details["description"] = description
    e = store.add_event(title, event_date or store.today(), **details)
    if e is None:
        _fail("event details could not be stored.")
    click.echo(f"Added event {e.id}: {e.title} on {e.date}")


@event.command("list")
@click.option("--date", "event_date", callback=_parse_date, default=None, help="Only events on this date")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def event_list(ctx, event_date: date | None, as_json: bool):
    """List calendar events."""
    store = _store(ctx)
    events = events_on(store.events, event_date) if event_date else list(store.events)

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in events], indent=2))
        return

    if not events:
        click.echo("No events.")
        return

    for e in sorted(events, key=lambda e: e.date):
        when = f" {e.details['time']}" if e.details.get("time") else ""
        click.echo(f"{e.id}  {e.date}{when}  {e.title}")


@event.command("remove")
@click.argument("event_id")
@click.pass_context
def event_remove(ctx, event_id: str):
    """Delete a calendar event."""
    if not _store(ctx).delete_event(event_id):
        _fail(f"event {event_id} not found.")
    click.echo(f"Deleted event {event_id}")


# ============== Focus sessions ==============


@main.group()
def focus():
    """Record and review focus sessions."""
    pass


@focus.command("add")
@click.argument("minutes", type=click.IntRange(min=1))
@click.pass_context
def focus_add(ctx, minutes: int):
    """Record a finished focus session of MINUTES."""
    session = _store(ctx).add_focus_session(minutes)
    click.echo(f"Recorded {session.duration} min focus session ({session.timestamp})")


@focus.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def focus_list(ctx, as_json: bool):
    """List recorded focus sessions."""
    sessions = _store(ctx).focus_sessions

    if as_json:
        click.echo(json.dumps([s.to_dict() for s in sessions], indent=2))
        return

    if not sessions:
        click.echo("No focus sessions.")
        return

    for s in sessions:
        click.echo(f"{s.timestamp}  {s.date}  {s.duration} min")


@focus.command("remove")
@click.argument("timestamp", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def focus_remove(ctx, timestamp: int, yes: bool):
    """Delete the focus session recorded at TIMESTAMP."""
    if not yes and not click.confirm("Delete this focus session? This cannot be undone."):
        return
    if not _store(ctx).delete_focus_session(timestamp):
        _fail(f"no focus session at {timestamp}.")
    click.echo("Deleted focus session")


@focus.command("summary")
@click.pass_context
def focus_summary(ctx):
    """Show focus minutes per day."""
    store = _store(ctx)
    by_day = focus_minutes_by_date(store.focus_sessions)
    if not by_day:
        click.echo("No focus sessions.")
        return
    for day, minutes in by_day.items():
        click.echo(f"{day}  {minutes} min")
    click.echo(f"Today: {total_focus(store.focus_sessions, on=store.today())} min")
    click.echo(f"All time: {total_focus(store.focus_sessions)} min")
