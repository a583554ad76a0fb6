"""Read-only task partitions used by the presentation layer."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable

from neurowork.domain import Task, TaskStatus, TaskType

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def active_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in tasks if task.status is not TaskStatus.COMPLETED]


def individual_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in active_tasks(tasks) if not task.is_group_task]


def group_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in active_tasks(tasks) if task.is_group_task]


def mandatory_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in active_tasks(tasks) if task.type is TaskType.MANDATORY]


def open_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in active_tasks(tasks) if task.type is TaskType.OPEN]


def completed_log(tasks: Iterable[Task]) -> list[Task]:
    """Completed tasks, most recently completed first."""

    done = [task for task in tasks if task.status is TaskStatus.COMPLETED]
    return sorted(done, key=lambda task: task.completed_at or _EPOCH, reverse=True)


def tasks_for_employee(tasks: Iterable[Task], employee_id: str) -> list[Task]:
    return [
        task
        for task in tasks
        if task.assigned_to_id == employee_id or employee_id in task.group_assignee_ids
    ]


VIEWS: dict[str, Callable[[Iterable[Task]], list[Task]]] = {
    "all": list,
    "active": active_tasks,
    "individual": individual_tasks,
    "group": group_tasks,
    "mandatory": mandatory_tasks,
    "open": open_tasks,
    "completed": completed_log,
}
