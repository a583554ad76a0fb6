from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neurowork.core.workload import apply_workload_delta, derive_status
from neurowork.domain import AccessLevel, Employee


def _employee(score: float, *, access_level: AccessLevel = AccessLevel.EMPLOYEE, status: str = "OPTIMAL") -> Employee:
    return Employee(
        id="e_x",
        name="Test Person",
        email="test@neurowork.ai",
        role="Engineer",
        access_level=access_level,
        workload_score=score,
        status=status,
        joined_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_hours_are_weighted_and_added():
    updated = apply_workload_delta(_employee(50), 4)
    assert updated.workload_score == 58
    assert updated.status == "OPTIMAL"


def test_score_saturates_at_ceiling():
    updated = apply_workload_delta(_employee(90), 40)
    assert updated.workload_score == 100
    assert updated.status == "OVERLOADED"

    again = apply_workload_delta(updated, 10)
    assert again.workload_score == 100


def test_score_never_drops_below_zero():
    updated = apply_workload_delta(_employee(5), -20)
    assert updated.workload_score == 0


@pytest.mark.parametrize("score", [0, 12.5, 50, 79, 80, 81, 99, 100])
@pytest.mark.parametrize("hours", [0, 0.5, 3, 7.5, 60])
def test_score_stays_in_range_and_is_monotonic(score, hours):
    employee = _employee(score)
    smaller = apply_workload_delta(employee, hours)
    larger = apply_workload_delta(employee, hours + 1)
    assert 0 <= smaller.workload_score <= 100
    assert smaller.workload_score <= larger.workload_score


def test_threshold_is_strictly_above_eighty():
    assert derive_status(80) == "OPTIMAL"
    assert derive_status(80.5) == "OVERLOADED"


def test_underutilized_is_not_derived():
    updated = apply_workload_delta(_employee(10, status="UNDERUTILIZED"), 1)
    assert updated.workload_score == 12
    assert updated.status == "OPTIMAL"


def test_ceo_keeps_display_status_while_score_moves():
    ceo = _employee(70, access_level=AccessLevel.CEO, status="UNSTOPPABLE")
    updated = apply_workload_delta(ceo, 10)
    assert updated.workload_score == 90
    assert updated.status == "UNSTOPPABLE"


def test_input_employee_is_untouched():
    employee = _employee(40)
    apply_workload_delta(employee, 5)
    assert employee.workload_score == 40
