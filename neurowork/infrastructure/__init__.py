"""Infrastructure layer exports."""

from .analysis import (
    AnalysisClient,
    ExternalServiceError,
    NoOpAnalysisClient,
    ProductReport,
    WorkloadReport,
    configure_analysis_client,
    get_analysis_client,
)
from .gemini import GeminiAnalysisClient, GeminiError
from .persistence import InMemoryPersistence, JsonFilePersistence, SnapshotPersistence
from .store import SnapshotStore

__all__ = [
    "AnalysisClient",
    "ExternalServiceError",
    "GeminiAnalysisClient",
    "GeminiError",
    "InMemoryPersistence",
    "JsonFilePersistence",
    "NoOpAnalysisClient",
    "ProductReport",
    "SnapshotPersistence",
    "SnapshotStore",
    "WorkloadReport",
    "configure_analysis_client",
    "get_analysis_client",
]
