from __future__ import annotations

from fastapi import APIRouter, Header, HTTPException, Query, Response
from fastapi.encoders import jsonable_encoder

from neurowork.application import get_workforce_service

router = APIRouter(prefix="/tasks", tags=["tasks"])

TASK_FIELDS = (
    "title",
    "description",
    "long_description",
    "type",
    "priority",
    "estimated_hours",
    "required_skills",
    "is_group_task",
    "required_people",
)


@router.get("")
async def list_tasks(
    view: str = Query(default="all"),
    employee_id: str | None = Query(default=None),
) -> dict:
    service = get_workforce_service()
    tasks = service.list_tasks(view, employee_id=employee_id)
    return {"view": view, "items": jsonable_encoder(tasks)}


@router.post("", status_code=201)
async def create_task(payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    fields = {key: payload[key] for key in TASK_FIELDS if key in payload}
    service = get_workforce_service()
    task = service.create_task(x_employee_id, fields)
    return jsonable_encoder(task)


@router.get("/{task_id}")
async def get_task(task_id: str) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.get_task(task_id))


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: str, x_employee_id: str | None = Header(default=None)) -> Response:
    service = get_workforce_service()
    service.delete_task(x_employee_id, task_id)
    return Response(status_code=204)


@router.post("/{task_id}/assign")
async def assign_task(task_id: str, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.assign_task(x_employee_id, task_id))


@router.post("/{task_id}/group")
async def toggle_group_membership(task_id: str, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.toggle_group_membership(x_employee_id, task_id))


@router.put("/{task_id}/progress")
async def update_progress(task_id: str, payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    if "progress" not in payload:
        raise HTTPException(status_code=400, detail="progress is required")
    service = get_workforce_service()
    task = service.update_progress(
        x_employee_id,
        task_id,
        payload["progress"],
        payload.get("long_description"),
    )
    return jsonable_encoder(task)


@router.post("/{task_id}/notes")
async def add_note(task_id: str, payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.add_note(x_employee_id, task_id, str(payload.get("text") or "")))


@router.post("/{task_id}/files")
async def add_file(task_id: str, payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.add_file(x_employee_id, task_id, str(payload.get("name") or "")))
