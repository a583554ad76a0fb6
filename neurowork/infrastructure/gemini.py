"""Integration with the Gemini ``generateContent`` REST API."""
from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Sequence
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from neurowork.domain import Employee, Product, Task

from .analysis import ChatHistory, ExternalServiceError, ProductReport, WorkloadReport

DEFAULT_MODEL = "gemini-2.5-flash"

WORKLOAD_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING"},
        "burnoutRisk": {"type": "ARRAY", "items": {"type": "STRING"}},
        "efficiencyScore": {"type": "INTEGER"},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["summary", "burnoutRisk", "efficiencyScore", "recommendations"],
}

PRODUCT_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING"},
        "futureOutlook": {"type": "STRING"},
        "predictedGrowth": {"type": "NUMBER"},
        "keyRisks": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["summary", "futureOutlook", "predictedGrowth", "keyRisks"],
}

WORKLOAD_PROMPT = """
Analyze the current workload data provided in the system instruction.
Return a JSON object with:
1. A short summary paragraph of the organization's health.
2. A list of names of employees at risk of burnout.
3. An efficiency score (0-100) based on resource utilization.
4. A list of 3 specific actionable recommendations to improve the situation.
"""


class GeminiError(ExternalServiceError):
    """Raised when the Gemini service returns an error or an unusable body."""


def _jsonable(items: Sequence[Any]) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    for item in items:
        data = asdict(item)
        data.pop("password", None)
        records.append(data)
    return records


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, default=str, ensure_ascii=False)


class GeminiAnalysisClient:
    """Client for the Gemini JSON-mode ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        api_base: str = "https://generativelanguage.googleapis.com",
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_key = api_key
        self._model = model
        self._request_url = f"{parsed.scheme}://{parsed.netloc}/v1beta/models/{model}:generateContent"
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _system_context(employees: Sequence[Employee], tasks: Sequence[Task]) -> str:
        return (
            "You are NeuroWork, an organizational intelligence system.\n"
            "Your goal is to optimize workload distribution, prevent employee burnout, "
            "and ensure skills are utilized correctly. Act as a neutral, data-driven manager.\n\n"
            f"EMPLOYEES:\n{_dump(_jsonable(employees))}\n\n"
            f"TASKS:\n{_dump(_jsonable(tasks))}\n\n"
            "When answering questions:\n"
            "1. Reference specific employees and tasks by name.\n"
            "2. Explain the reasoning behind each suggestion.\n"
            "3. If an employee is overloaded (score > 80), suggest relief.\n"
            "4. If an employee is underutilized (score < 40), suggest open tasks they can take.\n"
        )

    def _generate(
        self,
        contents: list[dict[str, Any]],
        *,
        system_instruction: str | None = None,
        response_schema: dict[str, Any] | None = None,
        temperature: float | None = None,
    ) -> str:
        payload: dict[str, Any] = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        generation_config: dict[str, Any] = {}
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema
        if temperature is not None:
            generation_config["temperature"] = temperature
        if generation_config:
            payload["generationConfig"] = generation_config

        try:
            response = self._client.post(
                self._request_url,
                headers={"x-goog-api-key": self._api_key},
                json=payload,
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GeminiError(f"Gemini request failed: {exc}") from exc

        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            raise GeminiError(str(error.get("message") if isinstance(error, dict) else error))

        candidates = body.get("candidates") if isinstance(body, dict) else None
        if not candidates:
            raise GeminiError("No response from AI")
        parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
        text = "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise GeminiError("No response from AI")
        return text

    @staticmethod
    def _user_turn(prompt: str) -> dict[str, Any]:
        return {"role": "user", "parts": [{"text": prompt}]}

    def _structured(self, prompt: str, schema: dict[str, Any], model_cls, *, system_instruction: str | None = None):
        text = self._generate(
            [self._user_turn(prompt)],
            system_instruction=system_instruction,
            response_schema=schema,
        )
        try:
            return model_cls.model_validate_json(text)
        except ValidationError as exc:
            raise GeminiError(f"Gemini returned an unexpected report shape: {exc}") from exc

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def analyze_workload(self, employees: Sequence[Employee], tasks: Sequence[Task]) -> WorkloadReport:
        return self._structured(
            WORKLOAD_PROMPT,
            WORKLOAD_SCHEMA,
            WorkloadReport,
            system_instruction=self._system_context(employees, tasks),
        )

    def analyze_product(self, product: Product) -> ProductReport:
        history = [asdict(point) for point in product.history]
        prompt = (
            "Analyze the following product data:\n"
            f"Name: {product.name}\n"
            f"Description: {product.description}\n"
            f"Monthly history: {_dump(history)}\n\n"
            "Provide a performance summary, a future outlook prediction based on the trend, "
            "a predicted growth percentage for the next month, and potential risks "
            "(e.g., increasing server costs)."
        )
        return self._structured(prompt, PRODUCT_SCHEMA, ProductReport)

    def analyze_company(self, products: Sequence[Product]) -> ProductReport:
        portfolio = [
            {"name": product.name, "status": product.status, "history": [asdict(point) for point in product.history]}
            for product in products
        ]
        prompt = (
            "Analyze the aggregated performance of the entire company based on these products:\n"
            f"{_dump(portfolio)}\n\n"
            "Provide an executive summary of the company's financial health (profit margins, cost efficiency), "
            "a future outlook for the portfolio, predicted total growth percentage, and company-wide risks."
        )
        return self._structured(prompt, PRODUCT_SCHEMA, ProductReport)

    def chat(
        self,
        message: str,
        history: ChatHistory,
        employees: Sequence[Employee],
        tasks: Sequence[Task],
    ) -> str:
        contents = [dict(turn) for turn in history]
        contents.append(self._user_turn(message))
        return self._generate(
            contents,
            system_instruction=self._system_context(employees, tasks),
            temperature=0.7,
        )

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


__all__ = ["GeminiAnalysisClient", "GeminiError"]
