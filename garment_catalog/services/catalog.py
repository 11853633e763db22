"""Wiring of clients, storage and workflows into one service object."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import httpx

from garment_catalog.api.gemini_client import GeminiClient
from garment_catalog.api.vertex_client import VertexTryOnClient
from garment_catalog.config.settings import Settings, get_settings
from garment_catalog.services.actions import ActionState
from garment_catalog.services.analyzer import GarmentAnalyzer
from garment_catalog.services.pricing import PriceEstimator
from garment_catalog.services.tryon import TryOnService
from garment_catalog.storage.keyvalue import FileKeyValueStore, KeyValueStore
from garment_catalog.storage.repository import HistoryStore


@dataclass(slots=True)
class CatalogService:
    """Container for objects shared across the HTTP routes."""

    settings: Settings
    history: HistoryStore
    gemini: GeminiClient
    vertex: VertexTryOnClient
    analyzer: GarmentAnalyzer
    pricing: PriceEstimator
    tryon: TryOnService

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        *,
        store: KeyValueStore | None = None,
        gemini_http: httpx.AsyncClient | None = None,
        vertex_http: httpx.AsyncClient | None = None,
    ) -> "CatalogService":
        settings = settings or get_settings()
        history = HistoryStore(store or FileKeyValueStore(Path(settings.storage_root)))
        gemini = GeminiClient(settings, http_client=gemini_http)
        vertex = VertexTryOnClient(settings, http_client=vertex_http)
        return cls(
            settings=settings,
            history=history,
            gemini=gemini,
            vertex=vertex,
            analyzer=GarmentAnalyzer(settings, gemini, history),
            pricing=PriceEstimator(settings, gemini, history),
            tryon=TryOnService(settings, vertex, history),
        )

    def action_states(self) -> dict[str, ActionState]:
        return {
            action.name: action.state
            for action in (self.analyzer.action, self.pricing.action, self.tryon.action)
        }

    async def close(self) -> None:
        """Release HTTP resources."""

        await self.gemini.close()
        await self.vertex.close()
