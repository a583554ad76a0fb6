from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Header
from fastapi.encoders import jsonable_encoder

from neurowork.application import get_workforce_service
from neurowork.domain import Employee

router = APIRouter(prefix="/employees", tags=["employees"])


def public_employee(employee: Employee) -> dict[str, Any]:
    """Serialise an employee without its stored credentials."""

    data = asdict(employee)
    data.pop("password", None)
    return jsonable_encoder(data)


@router.get("")
async def list_employees() -> dict:
    service = get_workforce_service()
    return {"items": [public_employee(item) for item in service.list_employees()]}


@router.get("/{employee_id}")
async def get_employee(employee_id: str) -> dict:
    service = get_workforce_service()
    employee = service.get_employee(employee_id)
    tasks = service.list_tasks("all", employee_id=employee_id)
    return {"employee": public_employee(employee), "tasks": jsonable_encoder(tasks)}


@router.put("/{employee_id}")
async def update_profile(
    employee_id: str,
    payload: dict,
    x_employee_id: str | None = Header(default=None),
) -> dict:
    fields = {key: payload[key] for key in ("bio", "resume_link", "portfolio_link", "skills") if key in payload}
    service = get_workforce_service()
    employee = service.update_profile(x_employee_id, employee_id, fields)
    return public_employee(employee)
