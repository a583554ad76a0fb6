"""Product editing and company-wide roll-ups.

Product changes never touch workload; they only replace the product inside
the snapshot.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable
from uuid import uuid4

import pandas as pd

from neurowork.core.validation import NotFoundError, ValidationError, require_positive_int, require_text
from neurowork.domain import BugReport, Product, ProductComment, ServerStatusLog, Snapshot

SERVER_LOG_TYPES = {"MAINTENANCE", "OUTAGE", "OPERATIONAL"}
BUG_SEVERITIES = {"LOW", "MEDIUM", "HIGH", "CRITICAL"}
HISTORY_METRICS = ["traffic", "profit", "server_cost", "input_cost"]


def _get_product(snapshot: Snapshot, product_id: str) -> Product:
    product = snapshot.find_product(product_id)
    if product is None:
        raise NotFoundError(f"product {product_id} not found")
    return product


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


def update_product_description(snapshot: Snapshot, product_id: str, description: str) -> Snapshot:
    product = _get_product(snapshot, product_id)
    return snapshot.with_product(replace(product, description=require_text(description, "description")))


def add_dev_comment(
    snapshot: Snapshot,
    product_id: str,
    author: str,
    text: str,
    *,
    now: datetime | None = None,
) -> Snapshot:
    product = _get_product(snapshot, product_id)
    comment = ProductComment(
        id=_new_id("c"),
        author=require_text(author, "author"),
        text=require_text(text, "comment"),
        timestamp=now or datetime.now(timezone.utc),
    )
    return snapshot.with_product(replace(product, dev_comments=(comment,) + product.dev_comments))


def add_server_log(
    snapshot: Snapshot,
    product_id: str,
    kind: str,
    description: str,
    *,
    duration_minutes: int | str = 60,
    now: datetime | None = None,
) -> Snapshot:
    product = _get_product(snapshot, product_id)
    log_type = str(kind or "").upper()
    if log_type not in SERVER_LOG_TYPES:
        raise ValidationError(f"server log type must be one of {', '.join(sorted(SERVER_LOG_TYPES))}")
    log = ServerStatusLog(
        id=_new_id("l"),
        type=log_type,
        description=require_text(description, "description"),
        date=now or datetime.now(timezone.utc),
        duration_minutes=require_positive_int(duration_minutes, "duration_minutes"),
    )
    return snapshot.with_product(replace(product, server_logs=(log,) + product.server_logs))


def report_bug(
    snapshot: Snapshot,
    product_id: str,
    *,
    severity: str,
    title: str,
    description: str,
    reported_by: str,
    now: datetime | None = None,
) -> Snapshot:
    product = _get_product(snapshot, product_id)
    level = str(severity or "").upper()
    if level not in BUG_SEVERITIES:
        raise ValidationError(f"severity must be one of {', '.join(sorted(BUG_SEVERITIES))}")
    bug = BugReport(
        id=_new_id("b"),
        severity=level,
        title=require_text(title, "title"),
        description=str(description or "").strip(),
        reported_by=require_text(reported_by, "reported_by"),
        date=now or datetime.now(timezone.utc),
    )
    return snapshot.with_product(replace(product, bug_reports=(bug,) + product.bug_reports))


def toggle_bug_status(snapshot: Snapshot, product_id: str, bug_id: str) -> Snapshot:
    product = _get_product(snapshot, product_id)
    if not any(bug.id == bug_id for bug in product.bug_reports):
        raise NotFoundError(f"bug {bug_id} not found")
    bugs = tuple(
        replace(bug, status="RESOLVED" if bug.status == "OPEN" else "OPEN") if bug.id == bug_id else bug
        for bug in product.bug_reports
    )
    return snapshot.with_product(replace(product, bug_reports=bugs))


# ----------------------------------------------------------------------
# roll-ups
# ----------------------------------------------------------------------
def product_margin(product: Product) -> float | None:
    """Net profit margin (percent) for the latest recorded month."""

    if not product.history:
        return None
    latest = product.history[-1]
    if not latest.revenue:
        return None
    return round(latest.profit / latest.revenue * 100, 1)


def aggregate_company_history(products: Iterable[Product]) -> list[dict[str, object]]:
    """Sum every product's monthly figures, keeping the first product's month order."""

    products = list(products)
    if not products or not products[0].history:
        return []

    months = [point.month for point in products[0].history]
    records = [
        {
            "month": point.month,
            "traffic": point.traffic,
            "profit": point.profit,
            "server_cost": point.server_cost,
            "input_cost": point.input_cost,
        }
        for product in products
        for point in product.history
    ]
    df = pd.DataFrame(records)
    totals = df.groupby("month", sort=False)[HISTORY_METRICS].sum().reindex(months).fillna(0)
    return [
        {"month": month, **{metric: float(row[metric]) for metric in HISTORY_METRICS}}
        for month, row in totals.iterrows()
    ]


def summarize_company(products: Iterable[Product]) -> dict[str, float]:
    history = aggregate_company_history(products)
    totals = {metric: sum(float(item[metric]) for item in history) for metric in HISTORY_METRICS}
    revenue = totals["profit"] + totals["server_cost"] + totals["input_cost"]
    totals["revenue"] = revenue
    totals["margin"] = round(totals["profit"] / revenue * 100, 1) if revenue else 0.0
    return totals
