"""Domain entities for employees, tasks and product lines.

Entities are frozen: every change produces a new instance through
:func:`dataclasses.replace`, so a snapshot handed to a reader never changes
underneath it.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AccessLevel(str, Enum):
    CEO = "ceo"
    MANAGER = "manager"
    EMPLOYEE = "employee"

    @property
    def is_privileged(self) -> bool:
        return self in (AccessLevel.CEO, AccessLevel.MANAGER)


class EmployeeStatus(str, Enum):
    OPTIMAL = "OPTIMAL"
    OVERLOADED = "OVERLOADED"
    UNDERUTILIZED = "UNDERUTILIZED"


class TaskType(str, Enum):
    MANDATORY = "MANDATORY"
    OPEN = "OPEN"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True, slots=True)
class Employee:
    """A member of the organisation.

    ``status`` is normally one of :class:`EmployeeStatus`, but free-form text is
    allowed for display-only cases (the CEO card shows whatever is stored).
    """

    id: str
    name: str
    email: str
    role: str
    access_level: AccessLevel
    workload_score: float
    status: str
    joined_date: datetime
    skills: tuple[str, ...] = ()
    avatar: str = ""
    password: str | None = None
    bio: str | None = None
    resume_link: str | None = None
    portfolio_link: str | None = None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    type: TaskType
    priority: TaskPriority
    estimated_hours: float
    created_at: datetime
    status: TaskStatus = TaskStatus.PENDING
    progress: float = 0
    long_description: str | None = None
    assigned_to_id: str | None = None
    required_skills: tuple[str, ...] = ()
    completed_at: datetime | None = None
    notes: tuple[str, ...] = ()
    files: tuple[str, ...] = ()
    is_group_task: bool = False
    required_people: int | None = None
    group_assignee_ids: tuple[str, ...] = ()

    @property
    def seats(self) -> int:
        """Headcount a group task accepts; unset counts as one."""

        return self.required_people or 1

    @property
    def is_full(self) -> bool:
        return len(self.group_assignee_ids) >= self.seats


@dataclass(frozen=True, slots=True)
class ProductHistoryPoint:
    month: str
    traffic: float
    profit: float
    server_cost: float
    input_cost: float

    @property
    def revenue(self) -> float:
        return self.profit + self.server_cost + self.input_cost


@dataclass(frozen=True, slots=True)
class ProductCustomer:
    name: str
    type: str
    revenue_contribution: float


@dataclass(frozen=True, slots=True)
class ProductComment:
    id: str
    author: str
    text: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class ServerStatusLog:
    id: str
    type: str
    description: str
    date: datetime
    duration_minutes: int = 60


@dataclass(frozen=True, slots=True)
class BugReport:
    id: str
    severity: str
    title: str
    description: str
    reported_by: str
    date: datetime
    status: str = "OPEN"


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    tagline: str
    description: str
    status: str
    logo_color: str = ""
    history: tuple[ProductHistoryPoint, ...] = ()
    top_customers: tuple[ProductCustomer, ...] = ()
    dev_comments: tuple[ProductComment, ...] = ()
    server_logs: tuple[ServerStatusLog, ...] = ()
    bug_reports: tuple[BugReport, ...] = ()


@dataclass(frozen=True, slots=True)
class WorkloadEntry:
    """One-way record of a workload increment.

    Entries are only ever appended; leaving a group or deleting a task does
    not produce a compensating entry.
    """

    employee_id: str
    task_id: str
    reason: str
    hours: float
    score_before: float
    score_after: float
    recorded_at: datetime
