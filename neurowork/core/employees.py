"""Employee lookups and profile editing."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from neurowork.core.normalize import normalize_email, split_comma_list
from neurowork.core.validation import NotFoundError
from neurowork.domain import AccessLevel, Employee, Snapshot

ROLE_ORDER = {AccessLevel.CEO: 0, AccessLevel.MANAGER: 1, AccessLevel.EMPLOYEE: 2}


def authenticate(snapshot: Snapshot, email: str, password: str) -> Employee | None:
    """Simulated login: exact password match against the stored profile."""

    wanted = normalize_email(email or "")
    for employee in snapshot.employees:
        if normalize_email(employee.email) == wanted and employee.password == password:
            return employee
    return None


def update_profile(
    snapshot: Snapshot,
    employee_id: str,
    *,
    bio: str | None = None,
    resume_link: str | None = None,
    portfolio_link: str | None = None,
    skills: str | Iterable[str] | None = None,
) -> Snapshot:
    """Edit the free-form profile fields; the workload score is not editable here."""

    employee = snapshot.find_employee(employee_id)
    if employee is None:
        raise NotFoundError(f"employee {employee_id} not found")

    updated = replace(
        employee,
        bio=employee.bio if bio is None else bio,
        resume_link=employee.resume_link if resume_link is None else resume_link,
        portfolio_link=employee.portfolio_link if portfolio_link is None else portfolio_link,
        skills=employee.skills if skills is None else split_comma_list(skills),
    )
    return snapshot.with_employee(updated)


def sorted_team(employees: Iterable[Employee]) -> list[Employee]:
    return sorted(employees, key=lambda item: (ROLE_ORDER.get(item.access_level, 99), item.name))
