"""Domain layer definitions."""

from .entities import (
    AccessLevel,
    BugReport,
    Employee,
    EmployeeStatus,
    Product,
    ProductComment,
    ProductCustomer,
    ProductHistoryPoint,
    ServerStatusLog,
    Task,
    TaskPriority,
    TaskStatus,
    TaskType,
    WorkloadEntry,
)
from .snapshot import Snapshot

__all__ = [
    "AccessLevel",
    "BugReport",
    "Employee",
    "EmployeeStatus",
    "Product",
    "ProductComment",
    "ProductCustomer",
    "ProductHistoryPoint",
    "ServerStatusLog",
    "Snapshot",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TaskType",
    "WorkloadEntry",
]
