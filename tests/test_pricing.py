"""Tests for the pricing prompt, parser and estimation workflow."""

from __future__ import annotations

import dataclasses

import pytest
import pytest_mock

from garment_catalog.api.gemini_client import GOOGLE_SEARCH_TOOL, GeminiClient, GenerationResult
from garment_catalog.catalog.models import AnalysisEntry, PriceEstimateEntry
from garment_catalog.catalog.schema import build_price_schema
from garment_catalog.config.settings import Settings
from garment_catalog.errors import EmptyResponse, EntryNotFound, MalformedResult, NoJsonFound
from garment_catalog.pricing import (
    DEFAULT_MARKETPLACES,
    PricingPromptBuilder,
    PricingSubject,
    extract_json_object,
    parse_price_estimate,
)
from garment_catalog.services.pricing import PriceEstimator
from garment_catalog.storage import HistoryStore

PRICE_TEXT = (
    "Pesquisei no Enjoei e no Repassa.\n```json\n"
    '{"min_price": 80, "max_price": 150, "suggested_price": 110, '
    '"justification": "Peças similares da Farm {vestido} custam entre R$ 90 e R$ 180."}\n```\nBoa venda!'
)


def test_extract_json_object_ignores_prose_and_fences() -> None:
    extracted = extract_json_object(PRICE_TEXT)

    assert extracted.startswith('{"min_price"')
    assert extracted.endswith('R$ 180."}')


def test_extract_json_object_respects_strings_and_escapes() -> None:
    text = 'Resultado: {"a": "fecha } aqui", "b": "aspas \\" e {", "c": {"d": 1}} fim }'

    assert extract_json_object(text) == '{"a": "fecha } aqui", "b": "aspas \\" e {", "c": {"d": 1}}'


@pytest.mark.parametrize("text", ["sem nenhum objeto", "abre { e nunca fecha"])
def test_extract_json_object_raises_when_absent(text: str) -> None:
    with pytest.raises(NoJsonFound) as exc_info:
        extract_json_object(text)

    assert exc_info.value.message == "Não foi possível extrair JSON da resposta."


def test_parse_price_estimate_english_keys() -> None:
    estimate = parse_price_estimate(PRICE_TEXT)

    assert (estimate.min_price, estimate.suggested_price, estimate.max_price) == (80, 110, 150)
    assert "Farm" in estimate.justification


def test_parse_price_estimate_portuguese_keys() -> None:
    text = '{"precoMinimo": 50.5, "precoMaximo": 90, "precoSugerido": 70, "justificativa": "Estado muito bom."}'

    estimate = parse_price_estimate(text)

    assert estimate.min_price == 50.5
    assert estimate.suggested_price == 70
    assert estimate.to_wire() == {
        "min_price": 50.5,
        "max_price": 90.0,
        "suggested_price": 70.0,
        "justification": "Estado muito bom.",
    }


def test_parse_price_estimate_errors() -> None:
    with pytest.raises(EmptyResponse):
        parse_price_estimate("  ")
    with pytest.raises(NoJsonFound):
        parse_price_estimate("Não encontrei preços.")
    with pytest.raises(MalformedResult):
        parse_price_estimate('{"min_price": 10, "max_price": 20}')
    with pytest.raises(MalformedResult):
        parse_price_estimate('{"min_price": "barato", "max_price": 20, "suggested_price": 15, "justification": "x"}')


def test_subject_derived_from_entry(dress_entry: AnalysisEntry) -> None:
    subject = PricingSubject.from_entry(dress_entry)

    assert subject.title == "Vestido Midi Preto Tubinho com Fenda"
    assert subject.brand == "Farm"
    assert subject.condition == "excellent"
    assert subject.category_label == "clothing (dresses)"
    assert subject.composition == "polyester 95%, elastane 5%"
    assert subject.shape == ["sheath"]


def test_subject_caller_overrides_and_default_brand(dress_entry: AnalysisEntry) -> None:
    overridden = PricingSubject.from_entry(dress_entry, quality="gentilmente usada", brand="Animale")
    unbranded = PricingSubject.from_entry(dress_entry.model_copy(update={"brand": None}))

    assert overridden.condition == "gentilmente usada"
    assert overridden.brand == "Animale"
    assert unbranded.brand == "sem marca"


def test_prompt_reflects_subject_and_marketplaces(dress_entry: AnalysisEntry) -> None:
    subject = PricingSubject.from_entry(dress_entry, quality="tão boa quanto nova")
    builder = PricingPromptBuilder()

    searched = builder.build(subject)
    offline = builder.build(subject, web_search=False)

    for marketplace in DEFAULT_MARKETPLACES:
        assert marketplace in searched
    assert "- **Condition:** tão boa quanto nova" in searched
    assert "- **Brand:** Farm" in searched
    assert "Google Search" in searched
    assert "Google Search" not in offline
    assert "Portuguese (pt-BR)" in offline
    assert '"suggested_price": number' in searched


def test_price_entry_reads_portuguese_keys() -> None:
    entry = PriceEstimateEntry.model_validate(
        {
            "id": "p1",
            "analysisId": "a1",
            "category": "vestido",
            "marca": "Farm",
            "qualidade": "gentilmente usada",
            "precoMinimo": 60,
            "precoSugerido": 80,
            "precoMaximo": 100,
            "justificativa": "Referências do Enjoei.",
            "estimatedAt": "2024-05-01T12:00:00Z",
        },
    )

    assert entry.brand == "Farm"
    assert entry.condition == "gentilmente usada"
    assert entry.suggested_price == 80
    assert entry.to_wire()["minPrice"] == 60
    assert "precoMinimo" not in entry.to_wire()


def _gemini_mock(mocker: pytest_mock.MockerFixture, text: str) -> GeminiClient:
    client = mocker.Mock(spec=GeminiClient)
    client.supports_schema_with_tools = False
    client.generate_content = mocker.AsyncMock(
        return_value=GenerationResult(
            text=text,
            usage_metadata={"promptTokenCount": 800, "candidatesTokenCount": 200, "totalTokenCount": 1000},
        ),
    )
    return client


@pytest.mark.asyncio
async def test_estimator_uses_search_tool_and_free_text(
    mocker: pytest_mock.MockerFixture,
    settings: Settings,
    history: HistoryStore,
    dress_entry: AnalysisEntry,
) -> None:
    await history.analyses.prepend(dress_entry)
    client = _gemini_mock(mocker, PRICE_TEXT)
    estimator = PriceEstimator(settings, client, history)

    entry = await estimator.estimate(dress_entry.id, quality="gentilmente usada")

    kwargs = client.generate_content.await_args.kwargs
    assert kwargs["tools"] == [GOOGLE_SEARCH_TOOL]
    assert kwargs["response_schema"] is None
    assert kwargs["temperature"] == 0.3
    assert entry.analysis_id == dress_entry.id
    assert entry.condition == "gentilmente usada"
    assert entry.suggested_price == 110
    assert entry.usage is not None and entry.usage.total_token_count == 1000
    assert [item.id for item in await history.load_price_history_for_item(dress_entry.id)] == [entry.id]


@pytest.mark.asyncio
async def test_estimator_uses_schema_without_web_search(
    mocker: pytest_mock.MockerFixture,
    settings: Settings,
    history: HistoryStore,
    dress_entry: AnalysisEntry,
) -> None:
    await history.analyses.prepend(dress_entry)
    client = _gemini_mock(mocker, '{"min_price": 1, "max_price": 3, "suggested_price": 2, "justification": "ok"}')
    estimator = PriceEstimator(dataclasses.replace(settings, pricing_web_search=False), client, history)

    await estimator.estimate(dress_entry.id)

    kwargs = client.generate_content.await_args.kwargs
    assert kwargs["tools"] is None
    assert kwargs["response_schema"] == build_price_schema()


@pytest.mark.asyncio
async def test_estimator_unknown_analysis(
    mocker: pytest_mock.MockerFixture,
    settings: Settings,
    history: HistoryStore,
) -> None:
    client = _gemini_mock(mocker, PRICE_TEXT)
    estimator = PriceEstimator(settings, client, history)

    with pytest.raises(EntryNotFound):
        await estimator.estimate("missing")

    client.generate_content.assert_not_awaited()
    assert estimator.action.state.status.value == "failed"
