"""Summaries computed over the history collections."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from garment_catalog.catalog.models import AnalysisEntry, AnalysisUsage, PriceEstimateEntry, TryOnHistoryItem


@dataclass(frozen=True, slots=True)
class PriceAverages:
    """Mean prices across the estimates of one item."""

    count: int
    avg_min: float
    avg_suggested: float
    avg_max: float


@dataclass(frozen=True, slots=True)
class TryOnTotals:
    count: int
    total_cost_usd: float
    total_cost_brl: float
    total_elapsed_ms: int


@dataclass(frozen=True, slots=True)
class UsageTotals:
    """Cumulative token spend over every entry that carries a usage snapshot."""

    calls: int = 0
    prompt_tokens: int = 0
    output_tokens: int = 0
    thoughts_tokens: int = 0
    total_tokens: int = 0
    cost_usd: float = 0.0
    cost_brl: float = 0.0


@dataclass(frozen=True, slots=True)
class PriceDisplayContext:
    """What to show next to a price estimate, whether or not its analysis still exists."""

    title: str
    brand: str
    condition: str
    category: str
    preview: str | None
    has_parent: bool


def compute_item_averages(entries: Iterable[PriceEstimateEntry]) -> PriceAverages | None:
    """Return the mean min/suggested/max prices, or ``None`` when there are no entries.

    ``math.fsum`` keeps the result independent of entry order.
    """

    entries = list(entries)
    if not entries:
        return None
    count = len(entries)
    return PriceAverages(
        count=count,
        avg_min=math.fsum(entry.min_price for entry in entries) / count,
        avg_suggested=math.fsum(entry.suggested_price for entry in entries) / count,
        avg_max=math.fsum(entry.max_price for entry in entries) / count,
    )


def summarize_try_ons(entries: Iterable[TryOnHistoryItem]) -> TryOnTotals:
    entries = list(entries)
    return TryOnTotals(
        count=len(entries),
        total_cost_usd=math.fsum(entry.estimated_cost_usd for entry in entries),
        total_cost_brl=math.fsum(entry.estimated_cost_brl for entry in entries),
        total_elapsed_ms=sum(entry.elapsed_ms for entry in entries),
    )


def summarize_usage(entries: Iterable[AnalysisEntry | PriceEstimateEntry]) -> UsageTotals:
    usages: list[AnalysisUsage] = [entry.usage for entry in entries if entry.usage is not None]
    return UsageTotals(
        calls=len(usages),
        prompt_tokens=sum(usage.prompt_token_count for usage in usages),
        output_tokens=sum(usage.output_token_count for usage in usages),
        thoughts_tokens=sum(usage.thoughts_token_count for usage in usages),
        total_tokens=sum(usage.total_token_count for usage in usages),
        cost_usd=math.fsum(usage.estimated_cost_usd for usage in usages),
        cost_brl=math.fsum(usage.estimated_cost_brl for usage in usages),
    )


def price_display_context(entry: PriceEstimateEntry, parent: AnalysisEntry | None) -> PriceDisplayContext:
    """Join a price estimate with its analysis, falling back to the entry's own snapshot."""

    if parent is None:
        return PriceDisplayContext(
            title=entry.suggested_title,
            brand=entry.brand,
            condition=entry.condition,
            category=entry.category,
            preview=None,
            has_parent=False,
        )
    return PriceDisplayContext(
        title=parent.suggested_title or entry.suggested_title,
        brand=entry.brand or parent.brand or "",
        condition=entry.condition or parent.condition.value,
        category=entry.category or parent.categories.main.value,
        preview=parent.primary_preview,
        has_parent=True,
    )


__all__ = [
    "PriceAverages",
    "PriceDisplayContext",
    "TryOnTotals",
    "UsageTotals",
    "compute_item_averages",
    "price_display_context",
    "summarize_try_ons",
    "summarize_usage",
]
