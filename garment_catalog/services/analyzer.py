"""Garment classification workflow."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from garment_catalog.api.gemini_client import GeminiClient
from garment_catalog.catalog.models import AnalysisEntry
from garment_catalog.catalog.parser import parse_classification
from garment_catalog.catalog.prompt_builder import ClassificationPromptBuilder, ImagePart
from garment_catalog.config.settings import Settings
from garment_catalog.imgproc.normalize import make_thumbnail_data_url
from garment_catalog.services.actions import SingleFlightAction
from garment_catalog.storage.repository import HistoryStore
from garment_catalog.usage import TokenRates, build_usage

logger = logging.getLogger(__name__)


class GarmentAnalyzer:
    """Classifies garment photos and records the result in the analysis history."""

    def __init__(
        self,
        settings: Settings,
        client: GeminiClient,
        history: HistoryStore,
        *,
        prompt_builder: ClassificationPromptBuilder | None = None,
        rates: TokenRates | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._history = history
        self._prompt_builder = prompt_builder or ClassificationPromptBuilder(settings.catalog_language)
        self._rates = rates or TokenRates.from_settings(settings)
        self.action: SingleFlightAction[AnalysisEntry] = SingleFlightAction("analysis")

    async def analyze(self, images: Sequence[ImagePart], hint: str | None = None) -> AnalysisEntry:
        """Classify ``images`` and prepend the new entry to the history."""

        return await self.action.run(lambda: self._analyze(images, hint))

    async def _analyze(self, images: Sequence[ImagePart], hint: str | None) -> AnalysisEntry:
        request = self._prompt_builder.build(images, hint)
        # Previews first: an undecodable upload fails before the paid call.
        previews = await asyncio.gather(
            *(
                asyncio.to_thread(
                    make_thumbnail_data_url,
                    image.data,
                    self._settings.preview_max_dimension,
                    self._settings.preview_quality,
                )
                for image in request.images
            ),
        )

        result = await self._client.generate_content(
            request.to_parts(),
            response_schema=request.response_schema,
            temperature=self._settings.classification_temperature,
        )
        classification = parse_classification(result.text)
        usage = build_usage(result.usage_metadata, self._rates)

        entry = AnalysisEntry.from_classification(classification, image_previews=previews, usage=usage)
        await self._history.analyses.prepend(entry)
        logger.info(
            "Stored analysis %s (%s, %d tokens, US$ %.6f)",
            entry.id,
            entry.categories.main.value,
            usage.total_token_count,
            usage.estimated_cost_usd,
        )
        return entry
