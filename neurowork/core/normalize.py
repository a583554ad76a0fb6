from __future__ import annotations

import unicodedata
from typing import Iterable


def normalize_email(email: str) -> str:
    normalized = unicodedata.normalize("NFKC", email).strip().lower()
    return "".join(normalized.split())


def split_comma_list(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Parse a free-text comma list into trimmed, non-empty entries."""

    if value is None:
        return ()
    parts = value.split(",") if isinstance(value, str) else value
    return tuple(part.strip() for part in parts if part and part.strip())
