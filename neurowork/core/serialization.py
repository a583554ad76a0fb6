"""Full-snapshot serialisation for persistence collaborators.

Payloads carry a ``schema_version``. Version 0 is the unversioned blob the
browser dashboard kept in local storage (camelCase keys, no ledger); it is
upgraded on read. Anything else is rejected.
"""
from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Mapping

from pydantic import ValidationError as SchemaError

from neurowork.core.schema import SCHEMA_VERSION, SnapshotDocument
from neurowork.core.validation import ValidationError
from neurowork.domain import Snapshot


def serialize_snapshot(snapshot: Snapshot) -> dict[str, Any]:
    document = SnapshotDocument.model_validate({"schema_version": SCHEMA_VERSION, **asdict(snapshot)})
    return document.model_dump(mode="json")


def _upgrade_v0(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "employees": payload.get("employees") or [],
        "tasks": payload.get("tasks") or [],
        "products": payload.get("products") or [],
        "workload_ledger": [],
    }


def deserialize_snapshot(payload: Mapping[str, Any]) -> Snapshot:
    if not isinstance(payload, Mapping):
        raise ValidationError("snapshot payload must be an object")

    version = payload.get("schema_version", payload.get("schemaVersion", 0))
    if version == 0:
        payload = _upgrade_v0(payload)
    elif version != SCHEMA_VERSION:
        raise ValidationError(f"unsupported snapshot schema version: {version!r}")

    try:
        document = SnapshotDocument.model_validate(payload)
    except SchemaError as exc:
        raise ValidationError(f"invalid snapshot payload: {exc}") from exc
    return document.to_domain()


def dumps(snapshot: Snapshot) -> str:
    return json.dumps(serialize_snapshot(snapshot), ensure_ascii=False)


def loads(blob: str) -> Snapshot:
    try:
        payload = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"snapshot blob is not valid JSON: {exc}") from exc
    return deserialize_snapshot(payload)
