"""Async wrapper around the Vertex AI virtual try-on ``predict`` endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from garment_catalog.config.settings import Settings
from garment_catalog.errors import ConfigurationError, ProviderRequestError

logger = logging.getLogger(__name__)

PROVIDER = "vertex"


class VertexTryOnClient:
    """Sends person/product image pairs to the try-on model."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = http_client or httpx.AsyncClient(timeout=settings.request_timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    def ensure_configured(self) -> None:
        if not self._settings.vertex_configured:
            raise ConfigurationError(
                "Configuração GCP ausente. Defina GCP_PROJECT_ID, GCP_LOCATION e GCP_ACCESS_TOKEN.",
            )

    @property
    def endpoint(self) -> str:
        settings = self._settings
        return (
            f"https://{settings.gcp_location}-aiplatform.googleapis.com/v1/projects/{settings.gcp_project_id}"
            f"/locations/{settings.gcp_location}/publishers/google/models/{settings.tryon_model_id}:predict"
        )

    async def _request_json(self, url: str, json_body: Mapping[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(
                url,
                json=json_body,
                headers={"Authorization": f"Bearer {self._settings.gcp_access_token}"},
            )
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:  # pragma: no cover - network safeguard
            raise ProviderRequestError(
                "Tempo esgotado aguardando a resposta da Vertex AI.",
                provider=PROVIDER,
            ) from exc
        except httpx.HTTPStatusError as exc:
            logger.error("Vertex AI returned %s: %s", exc.response.status_code, exc.response.text)
            raise ProviderRequestError(
                f"Erro da API Vertex AI ({exc.response.status_code}).",
                provider=PROVIDER,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderRequestError(
                "Não foi possível conectar à Vertex AI.",
                provider=PROVIDER,
            ) from exc

    async def predict(self, person_b64: str, product_b64: str, *, sample_count: int = 1) -> dict[str, Any]:
        """Request a try-on composite and return the raw prediction payload."""

        self.ensure_configured()
        body = {
            "instances": [
                {
                    "personImage": {"image": {"bytesBase64Encoded": person_b64}},
                    "productImages": [{"image": {"bytesBase64Encoded": product_b64}}],
                },
            ],
            "parameters": {"sampleCount": sample_count},
        }
        return await self._request_json(self.endpoint, body)

    async def ping(self) -> bool:
        """Return ``True`` if the try-on model metadata is reachable."""

        self.ensure_configured()
        settings = self._settings
        url = (
            f"https://{settings.gcp_location}-aiplatform.googleapis.com/v1/publishers/google"
            f"/models/{settings.tryon_model_id}"
        )
        try:
            response = await self._client.get(
                url,
                headers={"Authorization": f"Bearer {settings.gcp_access_token}"},
            )
        except httpx.HTTPError as exc:
            raise ProviderRequestError("Não foi possível conectar à Vertex AI.", provider=PROVIDER) from exc
        return response.status_code < 400
