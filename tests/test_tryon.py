"""Tests for the virtual try-on workflow against a mocked Vertex AI endpoint."""

from __future__ import annotations

import base64
import dataclasses
import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from garment_catalog.api.vertex_client import VertexTryOnClient
from garment_catalog.catalog.models import AnalysisEntry
from garment_catalog.config.settings import Settings
from garment_catalog.errors import (
    ConfigurationError,
    EntryNotFound,
    InvalidImageData,
    InvalidInput,
    NoPrediction,
    ProviderRequestError,
)
from garment_catalog.services.tryon import TryOnService
from garment_catalog.storage import HistoryStore

Handler = Callable[[httpx.Request], httpx.Response]


def _service(settings: Settings, history: HistoryStore, handler: Handler) -> TryOnService:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TryOnService(settings, VertexTryOnClient(settings, http_client=http_client), history)


def _prediction_handler(result_png: bytes, requests: list[httpx.Request]) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={"predictions": [{"bytesBase64Encoded": base64.b64encode(result_png).decode("ascii")}]},
        )

    return handler


@pytest.mark.asyncio
async def test_generate_calls_vertex_and_records_history(
    settings: Settings,
    history: HistoryStore,
    dress_entry: AnalysisEntry,
    image_factory,
) -> None:
    await history.analyses.prepend(dress_entry)
    result_png = image_factory(size=(768, 1024), color=(10, 10, 200))
    person = image_factory(size=(3000, 1500), color=(0, 0, 0, 0), mode="RGBA")
    requests: list[httpx.Request] = []
    service = _service(settings, history, _prediction_handler(result_png, requests))

    outcome = await service.generate(dress_entry.id, person)

    assert outcome.image_png == result_png
    request = requests[0]
    assert request.url.path == (
        "/v1/projects/resale-project/locations/us-central1/publishers/google/models/"
        "virtual-try-on-preview-08-04:predict"
    )
    assert request.url.host == "us-central1-aiplatform.googleapis.com"
    assert request.headers["Authorization"] == "Bearer test-token"
    body: dict[str, Any] = json.loads(request.content)
    assert body["parameters"] == {"sampleCount": 1}
    instance = body["instances"][0]
    assert instance["personImage"]["image"]["bytesBase64Encoded"]
    assert len(instance["productImages"]) == 1

    item = outcome.item
    assert item.analysis_id == dress_entry.id
    assert item.estimated_cost_usd == pytest.approx(0.05)
    assert item.estimated_cost_brl == pytest.approx(0.29)
    assert item.elapsed_ms >= 0
    for image in (item.product_image, item.person_image, item.result_image):
        assert image.startswith("data:image/jpeg;base64,")
    stored = await history.load_try_on_history_for_item(dress_entry.id)
    assert [entry.id for entry in stored] == [item.id]
    assert outcome.data_url.startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_missing_configuration_fails_before_any_request(
    settings: Settings,
    history: HistoryStore,
    dress_entry: AnalysisEntry,
    png_bytes: bytes,
) -> None:
    await history.analyses.prepend(dress_entry)
    requests: list[httpx.Request] = []
    unconfigured = dataclasses.replace(settings, gcp_access_token="")
    service = _service(unconfigured, history, _prediction_handler(png_bytes, requests))

    with pytest.raises(ConfigurationError):
        await service.generate(dress_entry.id, png_bytes)

    assert requests == []
    assert await history.try_ons.load_all() == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "error"),
    [
        ({}, NoPrediction),
        ({"predictions": []}, NoPrediction),
        ({"predictions": [{}]}, InvalidImageData),
        ({"predictions": [{"bytesBase64Encoded": "***"}]}, InvalidImageData),
        ({"predictions": [{"bytesBase64Encoded": base64.b64encode(b"not an image").decode()}]}, InvalidImageData),
    ],
)
async def test_unusable_predictions(
    settings: Settings,
    history: HistoryStore,
    dress_entry: AnalysisEntry,
    png_bytes: bytes,
    payload: dict[str, Any],
    error: type[Exception],
) -> None:
    await history.analyses.prepend(dress_entry)
    service = _service(settings, history, lambda request: httpx.Response(200, json=payload))

    with pytest.raises(error):
        await service.generate(dress_entry.id, png_bytes)

    assert await history.try_ons.load_all() == []


@pytest.mark.asyncio
async def test_provider_error_carries_status(
    settings: Settings,
    history: HistoryStore,
    dress_entry: AnalysisEntry,
    png_bytes: bytes,
) -> None:
    await history.analyses.prepend(dress_entry)
    service = _service(settings, history, lambda request: httpx.Response(403, text="token expired"))

    with pytest.raises(ProviderRequestError) as exc_info:
        await service.generate(dress_entry.id, png_bytes)

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_unknown_analysis(settings: Settings, history: HistoryStore, png_bytes: bytes) -> None:
    service = _service(settings, history, lambda request: httpx.Response(500))

    with pytest.raises(EntryNotFound):
        await service.generate("missing", png_bytes)


@pytest.mark.asyncio
async def test_reference_model_as_person_image(
    settings: Settings,
    history: HistoryStore,
    dress_entry: AnalysisEntry,
    image_factory,
) -> None:
    models_dir = Path(settings.reference_models_dir)
    models_dir.mkdir(parents=True)
    (models_dir / "modelo-1.png").write_bytes(image_factory(size=(400, 800)))
    (models_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    await history.analyses.prepend(dress_entry)
    requests: list[httpx.Request] = []
    service = _service(settings, history, _prediction_handler(image_factory(), requests))

    assert service.list_reference_models() == ["modelo-1.png"]
    await service.generate(dress_entry.id, reference_model="modelo-1.png")
    await service.generate(dress_entry.id, "modelo-1.png")

    assert len(requests) == 2
    with pytest.raises(InvalidInput):
        await service.generate(dress_entry.id, reference_model="../secrets.png")
    with pytest.raises(InvalidInput):
        await service.generate(dress_entry.id)
