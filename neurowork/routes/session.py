from __future__ import annotations

from fastapi import APIRouter, Header, HTTPException
from fastapi.encoders import jsonable_encoder

from neurowork.application import get_workforce_service

from .employees import public_employee

router = APIRouter(tags=["session"])


@router.post("/session/login")
async def login(payload: dict) -> dict:
    email = str(payload.get("email") or "")
    password = str(payload.get("password") or "")
    if not email or not password:
        raise HTTPException(status_code=400, detail="email and password are required")
    service = get_workforce_service()
    employee = service.login(email, password)
    if employee is None:
        raise HTTPException(status_code=401, detail="invalid credentials")
    return {"employee": public_employee(employee)}


@router.post("/snapshot/reset")
async def reset_snapshot(x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    service.reset_data(x_employee_id)
    return {"status": "ok", "version": service.store.version}


@router.get("/snapshot")
async def get_snapshot() -> dict:
    service = get_workforce_service()
    snapshot = service.snapshot()
    return {
        "version": service.store.version,
        "employees": [public_employee(item) for item in snapshot.employees],
        "tasks": jsonable_encoder(snapshot.tasks),
        "products": jsonable_encoder(snapshot.products),
        "workload_ledger": jsonable_encoder(snapshot.workload_ledger),
    }
