from __future__ import annotations

import math


class NeuroWorkError(Exception):
    """Base class for errors raised by the workforce core."""


class ValidationError(NeuroWorkError):
    """Raised when input fields fail domain validation."""


class InvalidOperation(NeuroWorkError):
    """Raised when an operation does not apply to the target's current shape."""


class AuthorizationError(NeuroWorkError):
    """Raised when the acting employee may not perform an operation."""


class NotFoundError(NeuroWorkError, KeyError):
    """Raised when a referenced employee, task or product does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


TRUE_FLAGS = {"true", "1", "yes", "on"}
FALSE_FLAGS = {"false", "0", "no", "off", ""}


def require_text(value: object, field: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field} must not be empty")
    return text


def require_number(value: object, field: str) -> float:
    """Convert ``value`` to a finite float; NaN and infinities are rejected."""

    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a number") from exc
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def require_positive_number(value: object, field: str) -> float:
    number = require_number(value, field)
    if number <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return number


def require_positive_int(value: object, field: str) -> int:
    number = require_positive_number(value, field)
    if not number.is_integer():
        raise ValidationError(f"{field} must be a whole number")
    return int(number)


def parse_flag(value: object, field: str) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_FLAGS:
            return True
        if text in FALSE_FLAGS:
            return False
    raise ValidationError(f"{field} must be true or false")
