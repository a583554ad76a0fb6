"""Task assignment engine.

Every operation takes the current :class:`~neurowork.domain.Snapshot` and
returns a new one; nothing is mutated in place. Workload increments flow
through :func:`neurowork.core.workload.apply_workload_delta` and are recorded
in the snapshot's append-only workload ledger. Leaving a group or deleting a
task never reverses an increment.

The engine trusts the ``employee_id`` it is given. Checking that the caller
is allowed to act as that employee is the job of the application layer.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable
from uuid import uuid4

from neurowork.core.normalize import split_comma_list
from neurowork.core.validation import (
    InvalidOperation,
    NotFoundError,
    ValidationError,
    require_number,
    require_positive_int,
    require_positive_number,
    require_text,
)
from neurowork.core.workload import apply_workload_delta
from neurowork.domain import Snapshot, Task, TaskPriority, TaskStatus, TaskType, WorkloadEntry

MIN_GROUP_SIZE = 2


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def _get_task(snapshot: Snapshot, task_id: str) -> Task:
    task = snapshot.find_task(task_id)
    if task is None:
        raise NotFoundError(f"task {task_id} not found")
    return task


def derive_task_status(progress: float) -> TaskStatus:
    if progress >= 100:
        return TaskStatus.COMPLETED
    if progress > 0:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.PENDING


def clamp_progress(progress: float) -> float:
    return max(0, min(100, progress))


def _charge_workload(
    snapshot: Snapshot,
    employee_id: str,
    task_id: str,
    hours: float,
    reason: str,
    now: datetime,
) -> Snapshot:
    employee = snapshot.find_employee(employee_id)
    if employee is None:
        raise NotFoundError(f"employee {employee_id} not found")
    updated = apply_workload_delta(employee, hours)
    entry = WorkloadEntry(
        employee_id=employee_id,
        task_id=task_id,
        reason=reason,
        hours=hours,
        score_before=employee.workload_score,
        score_after=updated.workload_score,
        recorded_at=now,
    )
    snapshot = snapshot.with_employee(updated)
    return replace(snapshot, workload_ledger=snapshot.workload_ledger + (entry,))


# ----------------------------------------------------------------------
# assignment
# ----------------------------------------------------------------------
def assign_individual(
    snapshot: Snapshot,
    task_id: str,
    employee_id: str,
    *,
    now: datetime | None = None,
) -> Snapshot:
    """Hand an individual task to ``employee_id`` and charge its full hours.

    Re-assignment overwrites the previous holder, and completed tasks are
    accepted as well.
    """

    task = _get_task(snapshot, task_id)
    if task.is_group_task:
        raise InvalidOperation(f"task {task_id} is a group task; join it instead")
    if snapshot.find_employee(employee_id) is None:
        raise NotFoundError(f"employee {employee_id} not found")

    snapshot = snapshot.with_task(replace(task, assigned_to_id=employee_id))
    return _charge_workload(snapshot, employee_id, task.id, task.estimated_hours, "assign", _now(now))


def toggle_group_membership(
    snapshot: Snapshot,
    task_id: str,
    employee_id: str,
    *,
    now: datetime | None = None,
) -> Snapshot:
    """Join or leave a group task.

    Joining charges ``estimated_hours / required_people``. Leaving only
    removes the membership. Joining a full group returns ``snapshot``
    unchanged.
    """

    task = _get_task(snapshot, task_id)
    if not task.is_group_task:
        raise InvalidOperation(f"task {task_id} is not a group task")

    members = task.group_assignee_ids
    if employee_id in members:
        remaining = tuple(member for member in members if member != employee_id)
        return snapshot.with_task(replace(task, group_assignee_ids=remaining))

    if task.is_full:
        return snapshot
    if snapshot.find_employee(employee_id) is None:
        raise NotFoundError(f"employee {employee_id} not found")

    snapshot = snapshot.with_task(replace(task, group_assignee_ids=members + (employee_id,)))
    hours = task.estimated_hours / task.seats
    return _charge_workload(snapshot, employee_id, task.id, hours, "join", _now(now))


# ----------------------------------------------------------------------
# progress
# ----------------------------------------------------------------------
def update_progress(
    snapshot: Snapshot,
    task_id: str,
    progress: float,
    long_description: str | None = None,
    *,
    now: datetime | None = None,
) -> Snapshot:
    """Record progress and derive the task status from it.

    ``completed_at`` is stamped on the first transition into COMPLETED and is
    kept afterwards, even when progress later drops below 100.
    """

    task = _get_task(snapshot, task_id)
    value = clamp_progress(require_number(progress, "progress"))

    status = derive_task_status(value)
    completed_at = task.completed_at
    if status is TaskStatus.COMPLETED and completed_at is None:
        completed_at = _now(now)

    updated = replace(
        task,
        progress=value,
        status=status,
        completed_at=completed_at,
        long_description=task.long_description if long_description is None else long_description,
    )
    return snapshot.with_task(updated)


# ----------------------------------------------------------------------
# creation & removal
# ----------------------------------------------------------------------
def _parse_enum(enum_cls, value: object, field: str):
    if isinstance(value, enum_cls):
        return value
    raw = str(value or "").strip()
    for member in enum_cls:
        if raw.lower() in (member.name.lower(), str(member.value).lower()):
            return member
    raise ValidationError(f"{field} must be one of {', '.join(m.name for m in enum_cls)}")


def create_task(
    snapshot: Snapshot,
    *,
    title: str,
    description: str,
    type: TaskType | str,
    priority: TaskPriority | str,
    estimated_hours: float,
    required_skills: str | Iterable[str] | None = None,
    long_description: str | None = None,
    is_group_task: bool = False,
    required_people: int | None = None,
    now: datetime | None = None,
    task_id: str | None = None,
) -> tuple[Snapshot, Task]:
    """Validate the fields and prepend a fresh PENDING task."""

    title = require_text(title, "title")
    description = require_text(description, "description")
    task_type = _parse_enum(TaskType, type, "type")
    task_priority = _parse_enum(TaskPriority, priority, "priority")
    hours = require_positive_number(estimated_hours, "estimated_hours")

    people: int | None = None
    if is_group_task:
        people = require_positive_int(required_people, "required_people")
        if people < MIN_GROUP_SIZE:
            raise ValidationError(f"group tasks need at least {MIN_GROUP_SIZE} people")

    task = Task(
        id=task_id or f"t_{uuid4().hex[:12]}",
        title=title,
        description=description,
        long_description=(long_description or "").strip() or description,
        type=task_type,
        priority=task_priority,
        estimated_hours=hours,
        required_skills=split_comma_list(required_skills),
        created_at=_now(now),
        is_group_task=bool(is_group_task),
        required_people=people,
    )
    return replace(snapshot, tasks=(task,) + snapshot.tasks), task


def delete_task(snapshot: Snapshot, task_id: str) -> Snapshot:
    """Remove a task; workload already charged to its assignees stays."""

    _get_task(snapshot, task_id)
    return replace(snapshot, tasks=tuple(task for task in snapshot.tasks if task.id != task_id))


# ----------------------------------------------------------------------
# notes & attachments
# ----------------------------------------------------------------------
def add_note(snapshot: Snapshot, task_id: str, text: str, *, now: datetime | None = None) -> Snapshot:
    task = _get_task(snapshot, task_id)
    body = require_text(text, "note")
    stamp = _now(now).strftime("%Y-%m-%d %H:%M")
    return snapshot.with_task(replace(task, notes=task.notes + (f"{stamp}: {body}",)))


def add_file(snapshot: Snapshot, task_id: str, name: str) -> Snapshot:
    task = _get_task(snapshot, task_id)
    filename = require_text(name, "file name")
    return snapshot.with_task(replace(task, files=task.files + (filename,)))
