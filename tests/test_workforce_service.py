from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neurowork.application import WorkforceService
from neurowork.core import tasks as engine
from neurowork.core.validation import AuthorizationError, ValidationError
from neurowork.domain import Snapshot
from neurowork.infrastructure import NoOpAnalysisClient, SnapshotStore


class _InterleavingStore(SnapshotStore):
    """Lets another writer commit right after each of the caller's commits."""

    def apply_mutation(self, producer, *, expected_version=None) -> Snapshot:
        committed = super().apply_mutation(producer, expected_version=expected_version)
        super().apply_mutation(lambda snapshot: engine.add_file(snapshot, "t_4", "late.txt"))
        return committed


def _service(store: SnapshotStore | None = None) -> WorkforceService:
    return WorkforceService(store or SnapshotStore(), analysis_client=NoOpAnalysisClient)


BASE_FIELDS = {
    "title": "Rotate keys",
    "description": "Rotate API keys",
    "type": "OPEN",
    "priority": "High",
    "estimated_hours": 3,
}


@pytest.mark.parametrize(
    ("flag", "expected"),
    [(False, False), ("false", False), ("0", False), (None, False), (True, True), ("true", True)],
)
def test_group_flag_is_parsed_explicitly(flag, expected):
    service = _service()
    task = service.create_task("e_2", {**BASE_FIELDS, "is_group_task": flag, "required_people": 2})
    assert task.is_group_task is expected
    assert (task.required_people == 2) is expected


def test_unrecognised_group_flag_is_rejected():
    service = _service()
    version = service.store.version
    with pytest.raises(ValidationError):
        service.create_task("e_2", {**BASE_FIELDS, "is_group_task": "maybe", "required_people": 2})
    assert service.store.version == version


def test_results_come_from_the_callers_own_commit():
    service = _service(_InterleavingStore())

    task = service.add_note("e_5", "t_4", "Started")
    assert len(task.notes) == 1
    assert task.files == ()
    assert service.get_task("t_4").files == ("late.txt",)

    product = service.add_dev_comment("e_3", "p_1", "Deployed")
    assert product.dev_comments[0].text == "Deployed"


def test_actor_is_checked_against_the_committed_snapshot():
    store = SnapshotStore()
    service = _service(store)

    with pytest.raises(AuthorizationError):
        service.add_file("e_missing", "t_4", "plan.md")
    with pytest.raises(AuthorizationError):
        service.delete_task("e_3", "t_4")
    assert store.version == 0
    assert service.get_task("t_4").files == ()


def test_server_log_duration_must_be_a_positive_whole_number():
    service = _service()
    for duration in ("soon", -5, 0, 1.5):
        with pytest.raises(ValidationError):
            service.add_server_log("e_3", "p_1", "OUTAGE", "DB failover", duration)

    product = service.add_server_log("e_3", "p_1", "OUTAGE", "DB failover", "45")
    assert product.server_logs[0].duration_minutes == 45
