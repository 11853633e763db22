"""Token usage and cost accounting for model calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from garment_catalog.catalog.models import AnalysisUsage
from garment_catalog.config.settings import Settings

TOKENS_PER_UNIT = 1_000_000


@dataclass(frozen=True, slots=True)
class TokenRates:
    """USD list prices per one million tokens plus the BRL exchange rate."""

    input_per_million: float = 0.15
    output_per_million: float = 0.60
    thinking_per_million: float = 3.50
    usd_to_brl: float = 5.80

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenRates":
        return cls(
            input_per_million=settings.price_input_per_million,
            output_per_million=settings.price_output_per_million,
            thinking_per_million=settings.price_thinking_per_million,
            usd_to_brl=settings.usd_to_brl,
        )


def _count(metadata: Mapping[str, Any], key: str) -> int:
    value = metadata.get(key)
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def build_usage(metadata: Mapping[str, Any] | None, rates: TokenRates | None = None) -> AnalysisUsage:
    """Derive token counts and cost from Gemini ``usageMetadata``.

    Output tokens are ``candidates - thoughts`` and are not clamped at zero.
    """

    rates = rates or TokenRates()
    metadata = metadata or {}
    prompt_tokens = _count(metadata, "promptTokenCount")
    candidates_tokens = _count(metadata, "candidatesTokenCount")
    thoughts_tokens = _count(metadata, "thoughtsTokenCount")
    total_tokens = _count(metadata, "totalTokenCount")

    output_tokens = candidates_tokens - thoughts_tokens
    cost_usd = (
        prompt_tokens / TOKENS_PER_UNIT * rates.input_per_million
        + output_tokens / TOKENS_PER_UNIT * rates.output_per_million
        + thoughts_tokens / TOKENS_PER_UNIT * rates.thinking_per_million
    )
    return AnalysisUsage(
        prompt_token_count=prompt_tokens,
        candidates_token_count=candidates_tokens,
        thoughts_token_count=thoughts_tokens,
        total_token_count=total_tokens,
        estimated_cost_usd=cost_usd,
        estimated_cost_brl=cost_usd * rates.usd_to_brl,
    )


__all__ = ["TokenRates", "build_usage"]
