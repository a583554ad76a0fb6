"""Persisted snapshot schema.

Records accept both snake_case and the camelCase keys written by the
browser dashboard's local-storage blobs.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from neurowork.core.tasks import derive_task_status
from neurowork.core.workload import clamp_score
from neurowork.domain import (
    AccessLevel,
    BugReport,
    Employee,
    Product,
    ProductComment,
    ProductCustomer,
    ProductHistoryPoint,
    ServerStatusLog,
    Snapshot,
    Task,
    TaskPriority,
    TaskType,
    WorkloadEntry,
)

SCHEMA_VERSION = 1


def _ensure_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


Timestamp = Annotated[datetime, AfterValidator(_ensure_aware)]


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class EmployeeRecord(_Record):
    id: str
    name: str
    email: str
    role: str = ""
    access_level: AccessLevel
    workload_score: float = 0
    status: str
    joined_date: Timestamp = Field(default_factory=lambda: datetime.now(timezone.utc))
    skills: list[str] = Field(default_factory=list)
    avatar: str = ""
    password: str | None = None
    bio: str | None = None
    resume_link: str | None = None
    portfolio_link: str | None = None

    def to_domain(self) -> Employee:
        data = self.model_dump()
        data["workload_score"] = clamp_score(self.workload_score)
        data["skills"] = tuple(self.skills)
        return Employee(**data)


class TaskRecord(_Record):
    id: str
    title: str
    description: str
    long_description: str | None = None
    type: TaskType
    priority: TaskPriority
    estimated_hours: float = Field(gt=0)
    progress: float = Field(default=0, ge=0, le=100)
    assigned_to_id: str | None = None
    required_skills: list[str] = Field(default_factory=list)
    created_at: Timestamp
    completed_at: Timestamp | None = None
    notes: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    is_group_task: bool = False
    required_people: int | None = Field(default=None, ge=1)
    group_assignee_ids: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_assignees(self) -> "TaskRecord":
        if self.is_group_task:
            if self.assigned_to_id is not None:
                raise ValueError("group tasks cannot carry an individual assignee")
            if len(self.group_assignee_ids) > (self.required_people or 1):
                raise ValueError("group task has more members than required_people")
        elif self.group_assignee_ids:
            raise ValueError("individual tasks cannot carry group members")
        return self

    def to_domain(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            long_description=self.long_description,
            type=self.type,
            priority=self.priority,
            estimated_hours=self.estimated_hours,
            status=derive_task_status(self.progress),
            progress=self.progress,
            assigned_to_id=self.assigned_to_id,
            required_skills=tuple(self.required_skills),
            created_at=self.created_at,
            completed_at=self.completed_at,
            notes=tuple(self.notes),
            files=tuple(self.files),
            is_group_task=self.is_group_task,
            required_people=self.required_people if self.is_group_task else None,
            group_assignee_ids=tuple(self.group_assignee_ids),
        )


class HistoryPointRecord(_Record):
    month: str
    traffic: float = 0
    profit: float = 0
    server_cost: float = 0
    input_cost: float = 0


class CustomerRecord(_Record):
    name: str
    type: str
    revenue_contribution: float = 0


class CommentRecord(_Record):
    id: str
    author: str
    text: str
    timestamp: Timestamp


class ServerLogRecord(_Record):
    id: str
    type: Literal["MAINTENANCE", "OUTAGE", "OPERATIONAL"]
    description: str
    date: Timestamp
    duration_minutes: int = 60


class BugRecord(_Record):
    id: str
    severity: Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
    title: str
    description: str = ""
    reported_by: str = ""
    status: Literal["OPEN", "RESOLVED"] = "OPEN"
    date: Timestamp


class ProductRecord(_Record):
    id: str
    name: str
    tagline: str = ""
    description: str = ""
    status: str
    logo_color: str = ""
    history: list[HistoryPointRecord] = Field(default_factory=list)
    top_customers: list[CustomerRecord] = Field(default_factory=list)
    dev_comments: list[CommentRecord] = Field(default_factory=list)
    server_logs: list[ServerLogRecord] = Field(default_factory=list)
    bug_reports: list[BugRecord] = Field(default_factory=list)

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            tagline=self.tagline,
            description=self.description,
            status=self.status,
            logo_color=self.logo_color,
            history=tuple(ProductHistoryPoint(**item.model_dump()) for item in self.history),
            top_customers=tuple(ProductCustomer(**item.model_dump()) for item in self.top_customers),
            dev_comments=tuple(ProductComment(**item.model_dump()) for item in self.dev_comments),
            server_logs=tuple(ServerStatusLog(**item.model_dump()) for item in self.server_logs),
            bug_reports=tuple(BugReport(**item.model_dump()) for item in self.bug_reports),
        )


class WorkloadEntryRecord(_Record):
    employee_id: str
    task_id: str
    reason: Literal["assign", "join"]
    hours: float
    score_before: float
    score_after: float
    recorded_at: Timestamp

    def to_domain(self) -> WorkloadEntry:
        return WorkloadEntry(**self.model_dump())


class SnapshotDocument(_Record):
    schema_version: Literal[1] = SCHEMA_VERSION
    employees: list[EmployeeRecord] = Field(default_factory=list)
    tasks: list[TaskRecord] = Field(default_factory=list)
    products: list[ProductRecord] = Field(default_factory=list)
    workload_ledger: list[WorkloadEntryRecord] = Field(default_factory=list)

    def to_domain(self) -> Snapshot:
        return Snapshot(
            employees=tuple(item.to_domain() for item in self.employees),
            tasks=tuple(item.to_domain() for item in self.tasks),
            products=tuple(item.to_domain() for item in self.products),
            workload_ledger=tuple(item.to_domain() for item in self.workload_ledger),
        )
