"""Workload score policy.

A task's hours are weighted by :data:`HOURS_WEIGHT` and added to the
employee's score, which saturates at :data:`MAX_SCORE`. Once an employee sits
at the ceiling, further work no longer changes the score.
"""
from __future__ import annotations

from dataclasses import replace

from neurowork.domain import AccessLevel, Employee, EmployeeStatus

HOURS_WEIGHT = 2
MIN_SCORE = 0.0
MAX_SCORE = 100.0
OVERLOAD_THRESHOLD = 80


def clamp_score(value: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def derive_status(score: float) -> EmployeeStatus:
    """Map a score onto a status; UNDERUTILIZED is never derived here."""

    return EmployeeStatus.OVERLOADED if score > OVERLOAD_THRESHOLD else EmployeeStatus.OPTIMAL


def apply_workload_delta(employee: Employee, hours: float) -> Employee:
    """Return ``employee`` with ``hours`` of extra work folded into its score.

    The CEO keeps whatever status is stored (a display override); the score
    itself is tracked the same way as for everyone else.
    """

    score = clamp_score(employee.workload_score + hours * HOURS_WEIGHT)
    if employee.access_level is AccessLevel.CEO:
        status = employee.status
    else:
        status = derive_status(score).value
    return replace(employee, workload_score=score, status=status)
