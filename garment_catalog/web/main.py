"""FastAPI entrypoint and HTTP routes."""

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from garment_catalog.aggregation import (
    compute_item_averages,
    price_display_context,
    summarize_try_ons,
    summarize_usage,
)
from garment_catalog.catalog.filters import HistoryFilter, filter_analyses
from garment_catalog.catalog.prompt_builder import ImagePart
from garment_catalog.config.settings import Settings, get_settings
from garment_catalog.errors import (
    ActionInProgress,
    CatalogError,
    ConfigurationError,
    EntryNotFound,
    InvalidInput,
)
from garment_catalog.monitoring.logging import configure_logging
from garment_catalog.services.actions import ActionState
from garment_catalog.services.catalog import CatalogService

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[CatalogError], int] = {
    InvalidInput: 400,
    EntryNotFound: 404,
    ActionInProgress: 409,
    ConfigurationError: 503,
}
DEFAULT_ERROR_STATUS = 502


class AnalysisRequest(BaseModel):
    images: list[str]
    hint: str | None = None


class PriceEstimateRequest(BaseModel):
    quality: str | None = None
    brand: str | None = None


class TryOnRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    person_image: str | None = Field(default=None, alias="personImage")
    reference_model: str | None = Field(default=None, alias="referenceModel")
    product_image: str | None = Field(default=None, alias="productImage")


def error_status(exc: CatalogError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return DEFAULT_ERROR_STATUS


def _action_payload(state: ActionState) -> dict[str, Any]:
    return {
        "status": state.status.value,
        "message": state.message,
        "startedAt": state.started_at.isoformat() if state.started_at else None,
        "finishedAt": state.finished_at.isoformat() if state.finished_at else None,
    }


def create_app(settings: Settings | None = None, service: CatalogService | None = None) -> FastAPI:
    """Initialise the FastAPI application."""

    settings = settings or (service.settings if service else get_settings())
    configure_logging(settings)
    catalog = service or CatalogService.create(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await catalog.close()

    app = FastAPI(
        title="Garment Catalog API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.state.catalog = catalog

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(_: Request, exc: CatalogError) -> JSONResponse:
        status = error_status(exc)
        if status >= 500:
            logger.error("%s: %s", exc.code, exc)
        return JSONResponse(status_code=status, content={"error": exc.code, "message": exc.message})

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/actions", tags=["system"])
    async def list_actions() -> dict[str, Any]:
        return {name: _action_payload(state) for name, state in catalog.action_states().items()}

    @app.post("/analyses", tags=["analyses"], status_code=201)
    async def create_analysis(body: AnalysisRequest) -> dict[str, Any]:
        images = [ImagePart.from_data_url(image) for image in body.images]
        entry = await catalog.analyzer.analyze(images, body.hint)
        return entry.to_wire()

    @app.get("/analyses", tags=["analyses"])
    async def list_analyses(
        q: str | None = None,
        main_category: str | None = None,
        sub_category: str | None = None,
        department: str | None = None,
        condition: str | None = None,
        color: str | None = None,
        aesthetic: str | None = None,
        occasion: str | None = None,
    ) -> dict[str, Any]:
        criteria = HistoryFilter(
            query=q,
            main_category=main_category,
            sub_category=sub_category,
            department=department,
            condition=condition,
            color=color,
            aesthetic=aesthetic,
            occasion=occasion,
        )
        entries = filter_analyses(await catalog.history.analyses.load_all(), criteria)
        return {"entries": [entry.to_wire() for entry in entries]}

    @app.delete("/analyses", tags=["analyses"], status_code=204)
    async def clear_analyses() -> None:
        await catalog.history.analyses.clear()

    @app.get("/analyses/{analysis_id}", tags=["analyses"])
    async def get_analysis(analysis_id: str) -> dict[str, Any]:
        entry = await catalog.history.get_analysis(analysis_id)
        if entry is None:
            raise EntryNotFound()
        return entry.to_wire()

    @app.delete("/analyses/{analysis_id}", tags=["analyses"], status_code=204)
    async def delete_analysis(analysis_id: str) -> None:
        if not await catalog.history.analyses.delete_by_id(analysis_id):
            raise EntryNotFound()

    @app.post("/analyses/{analysis_id}/price-estimates", tags=["pricing"], status_code=201)
    async def create_price_estimate(analysis_id: str, body: PriceEstimateRequest | None = None) -> dict[str, Any]:
        body = body or PriceEstimateRequest()
        entry = await catalog.pricing.estimate(analysis_id, quality=body.quality, brand=body.brand)
        return entry.to_wire()

    @app.get("/analyses/{analysis_id}/price-estimates", tags=["pricing"])
    async def list_item_price_estimates(analysis_id: str) -> dict[str, Any]:
        entries = await catalog.history.load_price_history_for_item(analysis_id)
        averages = compute_item_averages(entries)
        return {
            "entries": [entry.to_wire() for entry in entries],
            "averages": asdict(averages) if averages else None,
        }

    @app.get("/price-estimates", tags=["pricing"])
    async def list_price_estimates() -> dict[str, Any]:
        analyses = {entry.id: entry for entry in await catalog.history.analyses.load_all()}
        entries = await catalog.history.price_estimates.load_all()
        return {
            "entries": [
                {
                    **entry.to_wire(),
                    "display": asdict(price_display_context(entry, analyses.get(entry.analysis_id))),
                }
                for entry in entries
            ],
        }

    @app.delete("/price-estimates/{entry_id}", tags=["pricing"], status_code=204)
    async def delete_price_estimate(entry_id: str) -> None:
        if not await catalog.history.price_estimates.delete_by_id(entry_id):
            raise EntryNotFound()

    @app.post("/analyses/{analysis_id}/try-ons", tags=["try-on"], status_code=201)
    async def create_try_on(analysis_id: str, body: TryOnRequest) -> dict[str, Any]:
        outcome = await catalog.tryon.generate(
            analysis_id,
            body.person_image,
            product_image=body.product_image,
            reference_model=body.reference_model,
        )
        return {"item": outcome.item.to_wire(), "image": outcome.data_url}

    @app.get("/analyses/{analysis_id}/try-ons", tags=["try-on"])
    async def list_item_try_ons(analysis_id: str) -> dict[str, Any]:
        entries = await catalog.history.load_try_on_history_for_item(analysis_id)
        return {
            "entries": [entry.to_wire() for entry in entries],
            "totals": asdict(summarize_try_ons(entries)),
        }

    @app.delete("/try-ons/{entry_id}", tags=["try-on"], status_code=204)
    async def delete_try_on(entry_id: str) -> None:
        if not await catalog.history.try_ons.delete_by_id(entry_id):
            raise EntryNotFound()

    @app.get("/reference-models", tags=["try-on"])
    async def list_reference_models() -> dict[str, list[str]]:
        return {"models": catalog.tryon.list_reference_models()}

    @app.get("/usage", tags=["system"])
    async def usage_summary() -> dict[str, Any]:
        analyses = await catalog.history.analyses.load_all()
        prices = await catalog.history.price_estimates.load_all()
        try_ons = await catalog.history.try_ons.load_all()
        return {
            "analyses": asdict(summarize_usage(analyses)),
            "priceEstimates": asdict(summarize_usage(prices)),
            "tryOns": asdict(summarize_try_ons(try_ons)),
        }

    return app


app = create_app()
