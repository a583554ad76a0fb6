from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neurowork.application import WorkforceService
from neurowork.core.seed import default_snapshot
from neurowork.infrastructure import (
    GeminiAnalysisClient,
    GeminiError,
    NoOpAnalysisClient,
    SnapshotStore,
)


def _gemini_body(payload: dict | str) -> dict:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def _client(handler) -> tuple[GeminiAnalysisClient, httpx.Client]:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return GeminiAnalysisClient("secret-key", model="gemini-test", http_client=http_client), http_client


def test_workload_analysis_parses_structured_report():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["key"] = request.headers.get("x-goog-api-key")
        captured["body"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(
            200,
            json=_gemini_body(
                {
                    "summary": "Two people are carrying the team.",
                    "burnoutRisk": ["Priya Patel"],
                    "efficiencyScore": 72,
                    "recommendations": ["Move billing work to Tom", "Split the redesign", "Review estimates"],
                }
            ),
        )

    client, http_client = _client(handler)
    snapshot = default_snapshot()
    report = client.analyze_workload(snapshot.employees, snapshot.tasks)

    assert captured["url"].endswith("/v1beta/models/gemini-test:generateContent")
    assert captured["key"] == "secret-key"
    body = captured["body"]
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert "efficiencyScore" in body["generationConfig"]["responseSchema"]["properties"]
    system_text = body["systemInstruction"]["parts"][0]["text"]
    assert "Priya Patel" in system_text
    assert "password123" not in system_text

    assert report.burnout_risk == ["Priya Patel"]
    assert report.efficiency_score == 72
    assert len(report.recommendations) == 3
    http_client.close()


def test_product_analysis_sends_history():
    def handler(request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["contents"][0]["parts"][0]["text"]
        assert "PulseCRM" in prompt
        assert "server_cost" in prompt
        return httpx.Response(
            200,
            json=_gemini_body(
                {"summary": "Healthy", "futureOutlook": "Up", "predictedGrowth": 4.5, "keyRisks": ["Server cost"]}
            ),
        )

    client, http_client = _client(handler)
    report = client.analyze_product(default_snapshot().find_product("p_1"))
    assert report.predicted_growth == 4.5
    assert report.key_risks == ["Server cost"]
    http_client.close()


def test_chat_sends_history_and_returns_text():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert [turn["role"] for turn in body["contents"]] == ["user", "model", "user"]
        assert body["generationConfig"]["temperature"] == 0.7
        return httpx.Response(200, json=_gemini_body("Tom has capacity for the onboarding guide."))

    client, http_client = _client(handler)
    snapshot = default_snapshot()
    history = [
        {"role": "user", "parts": [{"text": "Who is free?"}]},
        {"role": "model", "parts": [{"text": "Let me check."}]},
    ]
    reply = client.chat("Anyone for docs?", history, snapshot.employees, snapshot.tasks)
    assert reply.startswith("Tom has capacity")
    http_client.close()


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": {"message": "internal"}}),
        httpx.Response(200, json={"candidates": []}),
        httpx.Response(200, json=_gemini_body("not json at all")),
        httpx.Response(200, json=_gemini_body({"summary": "x"})),
        httpx.Response(200, json=_gemini_body({"summary": "x", "burnoutRisk": [], "efficiencyScore": 140, "recommendations": []})),
    ],
)
def test_unusable_responses_raise_gemini_error(response):
    client, http_client = _client(lambda request: response)
    snapshot = default_snapshot()
    with pytest.raises(GeminiError):
        client.analyze_workload(snapshot.employees, snapshot.tasks)
    http_client.close()


def test_transport_failure_raises_gemini_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client, http_client = _client(handler)
    with pytest.raises(GeminiError):
        client.analyze_company(default_snapshot().products)
    http_client.close()


# ----------------------------------------------------------------------
# service boundary
# ----------------------------------------------------------------------
class _ExplodingClient(NoOpAnalysisClient):
    def analyze_workload(self, employees, tasks):
        raise TimeoutError("analysis timed out")


def test_scenario_f_failure_degrades_to_fallback_report():
    store = SnapshotStore()
    service = WorkforceService(store, analysis_client=_ExplodingClient)
    before = store.snapshot

    report = service.analyze_workload()

    assert report.efficiency_score == 0
    assert report.burnout_risk == []
    assert report.recommendations
    assert store.snapshot is before
    assert store.version == 0


def test_unconfigured_service_uses_fallbacks():
    service = WorkforceService(SnapshotStore(), analysis_client=NoOpAnalysisClient)
    assert service.analyze_product("p_1").key_risks == ["API Error"]
    assert service.analyze_company().summary == "Unable to analyze company data."
    assert "cannot respond" in service.chat("hello")


def test_service_passes_snapshot_to_working_client():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=_gemini_body(
                {"summary": "Portfolio growing", "futureOutlook": "Positive", "predictedGrowth": 6, "keyRisks": []}
            ),
        )

    client, http_client = _client(handler)
    service = WorkforceService(SnapshotStore(), analysis_client=lambda: client)
    assert service.analyze_company().summary == "Portfolio growing"
    http_client.close()
