from __future__ import annotations

from fastapi import APIRouter, HTTPException

from neurowork.application import get_workforce_service

router = APIRouter(tags=["analysis"])


@router.post("/analysis/workload")
def analyze_workload() -> dict:
    service = get_workforce_service()
    return service.analyze_workload().model_dump()


@router.post("/analysis/company")
def analyze_company() -> dict:
    service = get_workforce_service()
    return service.analyze_company().model_dump()


@router.post("/products/{product_id}/analysis")
def analyze_product(product_id: str) -> dict:
    service = get_workforce_service()
    return service.analyze_product(product_id).model_dump()


@router.post("/analysis/chat")
def chat(payload: dict) -> dict:
    message = str(payload.get("message") or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="message is required")
    history = payload.get("history") or []
    if not isinstance(history, list):
        raise HTTPException(status_code=400, detail="history must be a list")
    service = get_workforce_service()
    return {"reply": service.chat(message, history)}
