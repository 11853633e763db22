"""Connectivity checks for the Gemini and Vertex AI providers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from garment_catalog.api.gemini_client import GeminiClient
from garment_catalog.api.vertex_client import VertexTryOnClient
from garment_catalog.config.settings import Settings, get_settings
from garment_catalog.errors import ConfigurationError, ProviderRequestError


@dataclass(slots=True)
class IntegrationCheckResult:
    """Outcome of one provider check.

    ``configured`` is ``False`` when the provider's credentials are missing;
    such a check is reported but not counted as an outage.
    """

    name: str
    success: bool
    message: str
    configured: bool = True

    @property
    def failed(self) -> bool:
        return self.configured and not self.success


async def _run_check(
    name: str,
    ping: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        reachable = await ping()
    except ConfigurationError as exc:
        return IntegrationCheckResult(name=name, success=False, message=f"Not configured: {exc}", configured=False)
    except ProviderRequestError as exc:
        status = f"HTTP {exc.status_code}" if exc.status_code else "no response"
        return IntegrationCheckResult(name=name, success=False, message=f"{status}: {exc}")
    except Exception as exc:
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if reachable:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Service responded with non-success status.",
    )


async def check_gemini(settings: Settings | None = None) -> IntegrationCheckResult:
    """List the Gemini models with the configured API key."""

    settings = settings or get_settings()
    client = GeminiClient(settings)

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Gemini",
        ping=_ping,
        success_message=f"Gemini API is reachable (model {settings.gemini_model}).",
    )


async def check_vertex(settings: Settings | None = None) -> IntegrationCheckResult:
    """Fetch the try-on model metadata from Vertex AI."""

    settings = settings or get_settings()
    client = VertexTryOnClient(settings)

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Vertex AI try-on",
        ping=_ping,
        success_message=f"Vertex AI model {settings.tryon_model_id} is reachable in {settings.gcp_location}.",
    )


async def run_all_checks(settings: Settings | None = None) -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    settings = settings or get_settings()
    return list(await asyncio.gather(check_gemini(settings), check_vertex(settings)))
