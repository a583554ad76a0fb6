"""Application services."""

from .workforce import (
    WorkforceService,
    configure_workforce_service,
    get_workforce_service,
    reset_workforce_state,
)

__all__ = [
    "WorkforceService",
    "configure_workforce_service",
    "get_workforce_service",
    "reset_workforce_state",
]
