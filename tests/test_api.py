"""Tests for the FastAPI routes with mocked model providers."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from garment_catalog.config.settings import Settings
from garment_catalog.services.catalog import CatalogService
from garment_catalog.storage import MemoryKeyValueStore
from garment_catalog.web.main import app as default_app, create_app

PRICE_TEXT = (
    'Segue a estimativa: {"min_price": 90, "max_price": 180, "suggested_price": 120, '
    '"justification": "Vestidos Farm similares no Enjoei custam entre R$ 90 e R$ 180."}'
)


def _gemini_response(text: str) -> dict[str, Any]:
    return {
        "candidates": [
            {
                "content": {
                    "role": "model",
                    "parts": [{"text": "Pensando sobre a peça...", "thought": True}, {"text": text}],
                },
                "finishReason": "STOP",
            },
        ],
        "usageMetadata": {
            "promptTokenCount": 1500,
            "candidatesTokenCount": 600,
            "thoughtsTokenCount": 200,
            "totalTokenCount": 2300,
        },
    }


def _gemini_handler(classification: dict[str, Any], calls: list[dict[str, Any]]):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        calls.append(body)
        assert request.headers["x-goog-api-key"] == "test-gemini"
        assert request.url.path == "/v1beta/models/gemini-2.5-flash:generateContent"
        if "responseSchema" in body.get("generationConfig", {}):
            return httpx.Response(200, json=_gemini_response(json.dumps(classification)))
        return httpx.Response(200, json=_gemini_response(PRICE_TEXT))

    return handler


def _client(settings: Settings, handler) -> TestClient:
    service = CatalogService.create(
        settings,
        store=MemoryKeyValueStore(),
        gemini_http=httpx.AsyncClient(base_url=settings.gemini_base_url, transport=httpx.MockTransport(handler)),
        vertex_http=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500))),
    )
    return TestClient(create_app(settings, service))


@pytest.fixture
def gemini_calls() -> list[dict[str, Any]]:
    return []


@pytest.fixture
def client(settings: Settings, dress_payload: dict[str, Any], gemini_calls: list[dict[str, Any]]) -> Iterator[TestClient]:
    with _client(settings, _gemini_handler(dress_payload, gemini_calls)) as test_client:
        yield test_client


def test_health_returns_ok() -> None:
    client = TestClient(default_app)
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analysis_flow(client: TestClient, png_data_url: str, gemini_calls: list[dict[str, Any]]) -> None:
    response = client.post("/analyses", json={"images": [png_data_url], "hint": "vestido da Farm"})

    assert response.status_code == 201
    entry = response.json()
    assert entry["categories"]["main"] == "clothing"
    assert entry["imagePreviews"][0].startswith("data:image/jpeg;base64,")
    assert entry["usage"]["totalTokenCount"] == 2300
    request_body = gemini_calls[0]
    assert request_body["generationConfig"]["temperature"] == 0.2
    assert request_body["generationConfig"]["responseMimeType"] == "application/json"
    assert "vestido da Farm" in request_body["contents"][0]["parts"][0]["text"]
    assert request_body["contents"][0]["parts"][1]["inlineData"]["mimeType"] == "image/png"

    listed = client.get("/analyses", params={"q": "tubinho"}).json()["entries"]
    assert [item["id"] for item in listed] == [entry["id"]]
    assert client.get("/analyses", params={"main_category": "shoes"}).json()["entries"] == []
    assert client.get(f"/analyses/{entry['id']}").json()["suggestedTitle"] == entry["suggestedTitle"]

    actions = client.get("/actions").json()
    assert actions["analysis"]["status"] == "succeeded"
    assert actions["try_on"]["status"] == "idle"


def test_invalid_images_are_rejected(client: TestClient) -> None:
    empty = client.post("/analyses", json={"images": []})
    not_data_url = client.post("/analyses", json={"images": ["https://example.com/a.png"]})

    assert empty.status_code == 400
    assert empty.json()["error"] == "invalid_input"
    assert not_data_url.status_code == 400


def test_unknown_analysis_is_404(client: TestClient) -> None:
    response = client.get("/analyses/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "not_found", "message": "Item não encontrado no histórico."}
    assert client.delete("/analyses/missing").status_code == 404


def test_price_flow_survives_analysis_deletion(
    client: TestClient,
    png_data_url: str,
    gemini_calls: list[dict[str, Any]],
) -> None:
    analysis_id = client.post("/analyses", json={"images": [png_data_url]}).json()["id"]

    created = client.post(f"/analyses/{analysis_id}/price-estimates", json={"quality": "gentilmente usada"})

    assert created.status_code == 201
    assert created.json()["suggestedPrice"] == 120
    assert created.json()["condition"] == "gentilmente usada"
    assert gemini_calls[-1]["tools"] == [{"googleSearch": {}}]
    history = client.get(f"/analyses/{analysis_id}/price-estimates").json()
    assert history["averages"]["count"] == 1
    assert history["averages"]["avg_suggested"] == 120

    assert client.delete(f"/analyses/{analysis_id}").status_code == 204

    orphaned = client.get("/price-estimates").json()["entries"]
    assert orphaned[0]["display"]["has_parent"] is False
    assert orphaned[0]["display"]["title"] == created.json()["suggestedTitle"]
    assert client.get(f"/analyses/{analysis_id}/price-estimates").json()["averages"]["count"] == 1

    assert client.delete(f"/price-estimates/{created.json()['id']}").status_code == 204
    assert client.get(f"/analyses/{analysis_id}/price-estimates").json()["averages"] is None


def test_try_on_without_gcp_configuration_is_503(
    settings: Settings,
    dress_payload: dict[str, Any],
    png_data_url: str,
) -> None:
    unconfigured = dataclasses.replace(settings, gcp_project_id="")
    with _client(unconfigured, _gemini_handler(dress_payload, [])) as client:
        analysis_id = client.post("/analyses", json={"images": [png_data_url]}).json()["id"]

        response = client.post(f"/analyses/{analysis_id}/try-ons", json={"personImage": png_data_url})

        assert response.status_code == 503
        assert response.json()["error"] == "configuration_error"
        assert client.get(f"/analyses/{analysis_id}/try-ons").json()["totals"]["count"] == 0


def test_provider_failure_is_502(settings: Settings, png_data_url: str) -> None:
    with _client(settings, lambda request: httpx.Response(500, text="internal")) as client:
        response = client.post("/analyses", json={"images": [png_data_url]})

        assert response.status_code == 502
        assert response.json()["error"] == "provider_error"
        assert client.get("/actions").json()["analysis"]["status"] == "failed"


def test_usage_summary(client: TestClient, png_data_url: str) -> None:
    client.post("/analyses", json={"images": [png_data_url]})

    summary = client.get("/usage").json()

    assert summary["analyses"]["calls"] == 1
    assert summary["analyses"]["thoughts_tokens"] == 200
    assert summary["tryOns"]["count"] == 0
    assert client.get("/reference-models").json() == {"models": []}
