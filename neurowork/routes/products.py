from __future__ import annotations

from fastapi import APIRouter, Header
from fastapi.encoders import jsonable_encoder

from neurowork.application import get_workforce_service

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products() -> dict:
    service = get_workforce_service()
    return {"items": jsonable_encoder(service.list_products())}


@router.get("/overview")
async def company_overview() -> dict:
    service = get_workforce_service()
    return service.company_overview()


@router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.get_product(product_id))


@router.put("/{product_id}")
async def update_product(product_id: str, payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    product = service.update_product_description(x_employee_id, product_id, str(payload.get("description") or ""))
    return jsonable_encoder(product)


@router.post("/{product_id}/comments")
async def add_comment(product_id: str, payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    product = service.add_dev_comment(x_employee_id, product_id, str(payload.get("text") or ""))
    return jsonable_encoder(product)


@router.post("/{product_id}/server-logs")
async def add_server_log(product_id: str, payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    product = service.add_server_log(
        x_employee_id,
        product_id,
        str(payload.get("type") or ""),
        str(payload.get("description") or ""),
        payload.get("duration_minutes", 60),
    )
    return jsonable_encoder(product)


@router.post("/{product_id}/bugs")
async def report_bug(product_id: str, payload: dict, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.report_bug(x_employee_id, product_id, payload))


@router.post("/{product_id}/bugs/{bug_id}/toggle")
async def toggle_bug(product_id: str, bug_id: str, x_employee_id: str | None = Header(default=None)) -> dict:
    service = get_workforce_service()
    return jsonable_encoder(service.toggle_bug_status(x_employee_id, product_id, bug_id))
