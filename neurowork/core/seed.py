"""Default dataset used when no persisted snapshot is available."""
from __future__ import annotations

from datetime import datetime, timezone

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
    TaskStatus,
    TaskType,
)

DEFAULT_PASSWORD = "password123"


def _at(year: int, month: int, day: int, hour: int = 9) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def _employees() -> tuple[Employee, ...]:
    return (
        Employee(
            id="e_1",
            name="Jessica Pearson",
            email="jessica@neurowork.ai",
            password=DEFAULT_PASSWORD,
            role="Chief Executive Officer",
            access_level=AccessLevel.CEO,
            workload_score=95,
            status="UNSTOPPABLE",
            skills=("Strategy", "Negotiation", "Leadership"),
            bio="Founder. Sets direction and signs off on every product line.",
            joined_date=_at(2019, 3, 1),
        ),
        Employee(
            id="e_2",
            name="Sarah Chen",
            email="sarah@neurowork.ai",
            password=DEFAULT_PASSWORD,
            role="Engineering Manager",
            access_level=AccessLevel.MANAGER,
            workload_score=65,
            status="OPTIMAL",
            skills=("Project Management", "Python", "Hiring"),
            joined_date=_at(2020, 6, 15),
        ),
        Employee(
            id="e_3",
            name="Mike Ross",
            email="mike@neurowork.ai",
            password=DEFAULT_PASSWORD,
            role="Software Engineer",
            access_level=AccessLevel.EMPLOYEE,
            workload_score=45,
            status="OPTIMAL",
            skills=("React", "TypeScript", "Node.js"),
            joined_date=_at(2022, 1, 10),
        ),
        Employee(
            id="e_4",
            name="Priya Patel",
            email="priya@neurowork.ai",
            password=DEFAULT_PASSWORD,
            role="Data Engineer",
            access_level=AccessLevel.EMPLOYEE,
            workload_score=85,
            status="OVERLOADED",
            skills=("SQL", "Python", "Airflow"),
            joined_date=_at(2021, 9, 1),
        ),
        Employee(
            id="e_5",
            name="Tom Becker",
            email="tom@neurowork.ai",
            password=DEFAULT_PASSWORD,
            role="QA Analyst",
            access_level=AccessLevel.EMPLOYEE,
            workload_score=25,
            status="UNDERUTILIZED",
            skills=("Testing", "Automation", "Documentation"),
            joined_date=_at(2023, 4, 3),
        ),
    )


def _tasks() -> tuple[Task, ...]:
    return (
        Task(
            id="t_1",
            title="Quarterly security audit",
            description="Review access policies across production services.",
            type=TaskType.MANDATORY,
            priority=TaskPriority.CRITICAL,
            estimated_hours=12,
            required_skills=("Security", "Python"),
            created_at=_at(2025, 5, 2),
        ),
        Task(
            id="t_2",
            title="Migrate billing reports",
            description="Move monthly billing exports to the new warehouse.",
            type=TaskType.OPEN,
            priority=TaskPriority.HIGH,
            estimated_hours=8,
            required_skills=("SQL", "Airflow"),
            assigned_to_id="e_4",
            status=TaskStatus.IN_PROGRESS,
            progress=40,
            notes=("2025-05-05 10:30: Source tables mapped.",),
            created_at=_at(2025, 5, 3),
        ),
        Task(
            id="t_3",
            title="Dashboard redesign",
            description="Rebuild the workload board with the new design system.",
            type=TaskType.OPEN,
            priority=TaskPriority.MEDIUM,
            estimated_hours=30,
            required_skills=("React", "TypeScript"),
            is_group_task=True,
            required_people=3,
            group_assignee_ids=("e_3",),
            created_at=_at(2025, 5, 4),
        ),
        Task(
            id="t_4",
            title="Write onboarding guide",
            description="Document local setup for new engineers.",
            type=TaskType.OPEN,
            priority=TaskPriority.LOW,
            estimated_hours=4,
            required_skills=("Documentation",),
            created_at=_at(2025, 5, 6),
        ),
        Task(
            id="t_5",
            title="Fix login regression",
            description="Users were logged out after password reset.",
            type=TaskType.MANDATORY,
            priority=TaskPriority.HIGH,
            estimated_hours=3,
            required_skills=("Node.js",),
            assigned_to_id="e_3",
            status=TaskStatus.COMPLETED,
            progress=100,
            files=("session_trace.log",),
            created_at=_at(2025, 4, 28),
            completed_at=_at(2025, 4, 30, 16),
        ),
    )


def _history(base_traffic: float, base_profit: float, server: float, inputs: float) -> tuple[ProductHistoryPoint, ...]:
    months = ["Dec", "Jan", "Feb", "Mar", "Apr", "May"]
    return tuple(
        ProductHistoryPoint(
            month=month,
            traffic=round(base_traffic * (1 + 0.08 * index)),
            profit=round(base_profit * (1 + 0.05 * index)),
            server_cost=round(server * (1 + 0.03 * index)),
            input_cost=inputs,
        )
        for index, month in enumerate(months)
    )


def _products() -> tuple[Product, ...]:
    return (
        Product(
            id="p_1",
            name="PulseCRM",
            tagline="Customer relationships on autopilot",
            description="CRM suite for small sales teams.",
            status="Live",
            logo_color="bg-indigo-600",
            history=_history(42000, 18000, 3200, 9000),
            top_customers=(
                ProductCustomer(name="Northwind", type="Company", revenue_contribution=12000),
                ProductCustomer(name="City of Ashford", type="Government", revenue_contribution=8000),
            ),
            dev_comments=(
                ProductComment(id="c_1", author="Mike Ross", text="Search indexing moved to async workers.", timestamp=_at(2025, 5, 1)),
            ),
            server_logs=(
                ServerStatusLog(id="l_1", type="MAINTENANCE", description="Database minor upgrade.", date=_at(2025, 4, 20, 2), duration_minutes=45),
            ),
            bug_reports=(
                BugReport(
                    id="b_1",
                    severity="HIGH",
                    title="Export hangs on large accounts",
                    description="CSV export never finishes above 50k contacts.",
                    reported_by="Northwind",
                    date=_at(2025, 5, 2),
                ),
            ),
        ),
        Product(
            id="p_2",
            name="LearnLoop",
            tagline="Adaptive lessons for classrooms",
            description="Learning platform used by schools.",
            status="Beta",
            logo_color="bg-emerald-600",
            history=_history(15000, 4000, 2100, 6000),
            top_customers=(
                ProductCustomer(name="Riverside High", type="School", revenue_contribution=3000),
            ),
        ),
    )


def default_snapshot() -> Snapshot:
    return Snapshot(employees=_employees(), tasks=_tasks(), products=_products())
