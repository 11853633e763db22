"""Resale price estimation workflow."""

from __future__ import annotations

import logging

from garment_catalog.api.gemini_client import GOOGLE_SEARCH_TOOL, GeminiClient
from garment_catalog.catalog.models import PriceEstimateEntry, new_entry_id, utcnow
from garment_catalog.catalog.schema import build_price_schema
from garment_catalog.config.settings import Settings
from garment_catalog.errors import EntryNotFound
from garment_catalog.pricing.parser import parse_price_estimate
from garment_catalog.pricing.prompt_builder import PricingPromptBuilder, PricingSubject
from garment_catalog.services.actions import SingleFlightAction
from garment_catalog.storage.repository import HistoryStore
from garment_catalog.usage import TokenRates, build_usage

logger = logging.getLogger(__name__)


class PriceEstimator:
    """Estimates a resale price for an analysed item and records it."""

    def __init__(
        self,
        settings: Settings,
        client: GeminiClient,
        history: HistoryStore,
        *,
        prompt_builder: PricingPromptBuilder | None = None,
        rates: TokenRates | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._history = history
        self._prompt_builder = prompt_builder or PricingPromptBuilder()
        self._rates = rates or TokenRates.from_settings(settings)
        self.action: SingleFlightAction[PriceEstimateEntry] = SingleFlightAction("price_estimate")

    async def estimate(
        self,
        analysis_id: str,
        *,
        quality: str | None = None,
        brand: str | None = None,
    ) -> PriceEstimateEntry:
        """Estimate a price for ``analysis_id``; ``quality``/``brand`` override the analysed values."""

        return await self.action.run(lambda: self._estimate(analysis_id, quality, brand))

    async def _estimate(self, analysis_id: str, quality: str | None, brand: str | None) -> PriceEstimateEntry:
        analysis = await self._history.get_analysis(analysis_id)
        if analysis is None:
            raise EntryNotFound()

        subject = PricingSubject.from_entry(analysis, quality=quality, brand=brand)
        web_search = self._settings.pricing_web_search
        prompt = self._prompt_builder.build(subject, web_search=web_search)

        tools = [GOOGLE_SEARCH_TOOL] if web_search else None
        # Without schema support alongside tools the answer is free text.
        use_schema = not web_search or self._client.supports_schema_with_tools
        result = await self._client.generate_content(
            [{"text": prompt}],
            response_schema=build_price_schema() if use_schema else None,
            tools=tools,
            temperature=self._settings.pricing_temperature,
        )
        estimate = parse_price_estimate(result.text)
        if not estimate.min_price <= estimate.suggested_price <= estimate.max_price:
            logger.warning(
                "Price estimate for %s is not ordered: %s / %s / %s",
                analysis_id,
                estimate.min_price,
                estimate.suggested_price,
                estimate.max_price,
            )

        entry = PriceEstimateEntry(
            id=new_entry_id(),
            analysis_id=analysis.id,
            category=subject.category_label,
            brand=subject.brand,
            condition=subject.condition,
            suggested_title=subject.title,
            min_price=estimate.min_price,
            suggested_price=estimate.suggested_price,
            max_price=estimate.max_price,
            justification=estimate.justification,
            estimated_at=utcnow(),
            usage=build_usage(result.usage_metadata, self._rates),
        )
        await self._history.price_estimates.prepend(entry)
        logger.info("Stored price estimate %s for analysis %s", entry.id, analysis.id)
        return entry
