"""AI analysis integration hooks.

The analysis service is an external collaborator. This module defines the
report shapes, the client contract and the fallback reports returned whenever
the service cannot answer. Without configuration a no-op client is installed
that always fails, so every report degrades to its fallback.
"""
from __future__ import annotations

from typing import Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from neurowork.domain import Employee, Product, Task


class ExternalServiceError(RuntimeError):
    """Raised when the analysis service fails or returns an unusable answer."""


class _Report(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkloadReport(_Report):
    summary: str
    burnout_risk: list[str] = Field(default_factory=list)
    efficiency_score: float = Field(ge=0, le=100)
    recommendations: list[str] = Field(default_factory=list)


class ProductReport(_Report):
    summary: str
    future_outlook: str
    predicted_growth: float
    key_risks: list[str] = Field(default_factory=list)


ChatHistory = Sequence[dict[str, object]]

CHAT_FALLBACK = (
    "I am currently analyzing high volumes of data and cannot respond. "
    "Please check your API configuration."
)


def fallback_workload_report() -> WorkloadReport:
    return WorkloadReport(
        summary="System offline. Unable to calculate metrics.",
        burnout_risk=[],
        efficiency_score=0,
        recommendations=["Check API Key", "Retry Analysis"],
    )


def fallback_product_report() -> ProductReport:
    return ProductReport(summary="Unable to analyze.", future_outlook="N/A", predicted_growth=0, key_risks=["API Error"])


def fallback_company_report() -> ProductReport:
    return ProductReport(
        summary="Unable to analyze company data.",
        future_outlook="N/A",
        predicted_growth=0,
        key_risks=["API Error"],
    )


class AnalysisClient(Protocol):
    """Contract for AI analysis integrations."""

    def analyze_workload(self, employees: Sequence[Employee], tasks: Sequence[Task]) -> WorkloadReport: ...

    def analyze_product(self, product: Product) -> ProductReport: ...

    def analyze_company(self, products: Sequence[Product]) -> ProductReport: ...

    def chat(
        self,
        message: str,
        history: ChatHistory,
        employees: Sequence[Employee],
        tasks: Sequence[Task],
    ) -> str: ...


class NoOpAnalysisClient:
    """Client used when no analysis provider is configured."""

    def _unavailable(self) -> ExternalServiceError:
        return ExternalServiceError("AI analysis service not configured")

    def analyze_workload(self, employees: Sequence[Employee], tasks: Sequence[Task]) -> WorkloadReport:
        raise self._unavailable()

    def analyze_product(self, product: Product) -> ProductReport:
        raise self._unavailable()

    def analyze_company(self, products: Sequence[Product]) -> ProductReport:
        raise self._unavailable()

    def chat(self, message: str, history: ChatHistory, employees: Sequence[Employee], tasks: Sequence[Task]) -> str:
        raise self._unavailable()


_client: AnalysisClient = NoOpAnalysisClient()


def configure_analysis_client(client: AnalysisClient) -> None:
    """Install the analysis client used by the workforce service."""

    global _client
    _client = client


def get_analysis_client() -> AnalysisClient:
    """Return the currently configured analysis client."""

    return _client
