"""Async wrapper around the Gemini ``generateContent`` REST endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import httpx

from garment_catalog.config.settings import Settings
from garment_catalog.errors import ConfigurationError, ProviderRequestError

logger = logging.getLogger(__name__)

PROVIDER = "gemini"
GOOGLE_SEARCH_TOOL = {"googleSearch": {}}


@dataclass(slots=True)
class GenerationResult:
    """Text and token accounting extracted from one ``generateContent`` call."""

    text: str | None
    usage_metadata: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)


class GeminiClient:
    """Issues classification and pricing calls against the Gemini API."""

    # Gemini rejects responseSchema combined with the googleSearch tool.
    supports_schema_with_tools = False

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = http_client or httpx.AsyncClient(
            base_url=settings.gemini_base_url.rstrip("/"),
            timeout=settings.request_timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self._settings.gemini_api_key)

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method,
                endpoint,
                json=json_body,
                headers={"x-goog-api-key": self._settings.gemini_api_key},
            )
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:  # pragma: no cover - network safeguard
            raise ProviderRequestError(
                "Tempo esgotado aguardando a resposta do Gemini.",
                provider=PROVIDER,
            ) from exc
        except httpx.HTTPStatusError as exc:
            logger.error("Gemini returned %s: %s", exc.response.status_code, exc.response.text)
            raise ProviderRequestError(
                f"O Gemini retornou erro {exc.response.status_code}.",
                provider=PROVIDER,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderRequestError(
                "Não foi possível conectar ao Gemini.",
                provider=PROVIDER,
            ) from exc

    async def generate_content(
        self,
        parts: Sequence[Mapping[str, Any]],
        *,
        response_schema: Mapping[str, Any] | None = None,
        tools: Sequence[Mapping[str, Any]] | None = None,
        temperature: float | None = None,
        model: str | None = None,
    ) -> GenerationResult:
        """Send one user turn and return the response text and usage metadata."""

        if not self.configured:
            raise ConfigurationError("Configuração ausente. Defina GEMINI_API_KEY.")

        generation_config: dict[str, Any] = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = dict(response_schema)

        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": list(parts)}]}
        if generation_config:
            payload["generationConfig"] = generation_config
        if tools:
            payload["tools"] = list(tools)

        model_name = model or self._settings.gemini_model
        data = await self._request_json("POST", f"/models/{model_name}:generateContent", json_body=payload)
        return GenerationResult(
            text=self.response_text(data),
            usage_metadata=dict(data.get("usageMetadata") or {}),
            raw=data,
        )

    @staticmethod
    def response_text(payload: Mapping[str, Any]) -> str | None:
        """Concatenate the non-thought text parts of the first candidate."""

        candidates = payload.get("candidates") or []
        if not candidates:
            logger.warning("Gemini response has no candidates: %s", payload.get("promptFeedback"))
            return None
        content = candidates[0].get("content") or {}
        texts = [
            part["text"]
            for part in content.get("parts") or []
            if isinstance(part, Mapping) and isinstance(part.get("text"), str) and not part.get("thought")
        ]
        if not texts:
            logger.warning("Gemini candidate has no text parts (finishReason=%s)", candidates[0].get("finishReason"))
            return None
        return "".join(texts)

    async def ping(self) -> bool:
        """Return ``True`` if the API lists at least one model."""

        if not self.configured:
            raise ConfigurationError("Configuração ausente. Defina GEMINI_API_KEY.")
        data = await self._request_json("GET", "/models")
        return bool(data.get("models"))
