"""Virtual try-on workflow."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import time
from dataclasses import dataclass
from pathlib import Path

from garment_catalog.api.vertex_client import VertexTryOnClient
from garment_catalog.catalog.models import TryOnHistoryItem, new_entry_id, utcnow
from garment_catalog.config.settings import Settings
from garment_catalog.errors import EntryNotFound, InvalidImageData, InvalidInput, NoPrediction
from garment_catalog.imgproc.normalize import (
    ImageNormalizer,
    compress_image,
    decode_data_url,
    encode_data_url,
)
from garment_catalog.services.actions import SingleFlightAction
from garment_catalog.storage.repository import HistoryStore

logger = logging.getLogger(__name__)

REFERENCE_MODEL_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".webp"})
ImageSource = bytes | str


@dataclass(slots=True)
class TryOnOutcome:
    """Full-resolution composite plus the compressed history record."""

    image_png: bytes
    item: TryOnHistoryItem

    @property
    def data_url(self) -> str:
        return encode_data_url(self.image_png, "image/png")


class TryOnService:
    """Dresses a person photo with an analysed garment through Vertex AI."""

    def __init__(
        self,
        settings: Settings,
        client: VertexTryOnClient,
        history: HistoryStore,
        *,
        normalizer: ImageNormalizer | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._history = history
        self._normalizer = normalizer or ImageNormalizer(settings.tryon_max_dimension)
        self._reference_dir = Path(settings.reference_models_dir)
        self.action: SingleFlightAction[TryOnOutcome] = SingleFlightAction("try_on")

    def list_reference_models(self) -> list[str]:
        """Names of the preselected model photos available as person images."""

        if not self._reference_dir.is_dir():
            return []
        return sorted(
            path.name
            for path in self._reference_dir.iterdir()
            if path.is_file() and path.suffix.lower() in REFERENCE_MODEL_SUFFIXES
        )

    async def load_reference_model(self, name: str) -> bytes:
        if name not in self.list_reference_models():
            raise InvalidInput("Modelo de referência não encontrado.")
        return await asyncio.to_thread((self._reference_dir / name).read_bytes)

    async def generate(
        self,
        analysis_id: str,
        person_image: ImageSource | None = None,
        *,
        product_image: ImageSource | None = None,
        reference_model: str | None = None,
    ) -> TryOnOutcome:
        """Generate a try-on for ``analysis_id`` and prepend it to the try-on history.

        ``person_image`` may be raw bytes, a data URL or the name of a reference
        model photo; ``product_image`` defaults to the analysis' first preview.
        """

        return await self.action.run(
            lambda: self._generate(analysis_id, person_image, product_image, reference_model),
        )

    async def _generate(
        self,
        analysis_id: str,
        person_image: ImageSource | None,
        product_image: ImageSource | None,
        reference_model: str | None,
    ) -> TryOnOutcome:
        self._client.ensure_configured()

        analysis = await self._history.get_analysis(analysis_id)
        if analysis is None:
            raise EntryNotFound()

        person_bytes = await self._resolve_person(person_image, reference_model)
        if product_image is not None:
            product_bytes = self._as_bytes(product_image)
        elif analysis.primary_preview:
            product_bytes, _ = decode_data_url(analysis.primary_preview)
        else:
            raise InvalidInput("A análise não possui imagem da peça.")

        person_b64, product_b64 = await asyncio.gather(
            asyncio.to_thread(self._normalizer.normalize_base64, person_bytes),
            asyncio.to_thread(self._normalizer.normalize_base64, product_bytes),
        )

        started = time.perf_counter()
        payload = await self._client.predict(person_b64, product_b64)
        elapsed_ms = round((time.perf_counter() - started) * 1000)

        image_png = self._extract_image(payload)
        cost_usd = self._settings.tryon_cost_per_image_usd
        item = TryOnHistoryItem(
            id=new_entry_id(),
            analysis_id=analysis.id,
            product_image=await self._compress(product_bytes),
            person_image=await self._compress(person_bytes),
            result_image=await self._compress_result(image_png),
            estimated_cost_usd=cost_usd,
            estimated_cost_brl=cost_usd * self._settings.usd_to_brl,
            elapsed_ms=elapsed_ms,
            created_at=utcnow(),
        )
        await self._history.try_ons.prepend(item)
        logger.info("Stored try-on %s for analysis %s (%d ms)", item.id, analysis.id, elapsed_ms)
        return TryOnOutcome(image_png=image_png, item=item)

    async def _resolve_person(self, person_image: ImageSource | None, reference_model: str | None) -> bytes:
        if reference_model:
            return await self.load_reference_model(reference_model)
        if isinstance(person_image, str) and not person_image.startswith("data:"):
            return await self.load_reference_model(person_image)
        if person_image is None:
            raise InvalidInput("Envie uma foto da pessoa ou escolha um modelo de referência.")
        return self._as_bytes(person_image)

    @staticmethod
    def _as_bytes(source: ImageSource) -> bytes:
        if isinstance(source, bytes):
            if not source:
                raise InvalidInput("A imagem enviada está vazia.")
            return source
        data, _ = decode_data_url(source)
        return data

    @staticmethod
    def _extract_image(payload: dict) -> bytes:
        predictions = payload.get("predictions") or []
        if not predictions:
            raise NoPrediction()
        first = predictions[0]
        encoded = first.get("bytesBase64Encoded") if isinstance(first, dict) else None
        if not encoded or not isinstance(encoded, str):
            raise InvalidImageData()
        try:
            image = base64.b64decode(encoded, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise InvalidImageData() from exc
        if not image:
            raise InvalidImageData()
        return image

    async def _compress(self, image_bytes: bytes) -> str:
        compressed = await asyncio.to_thread(
            compress_image,
            image_bytes,
            self._settings.tryon_history_max_dimension,
            self._settings.tryon_history_quality,
        )
        return encode_data_url(compressed, "image/jpeg")

    async def _compress_result(self, image_png: bytes) -> str:
        try:
            return await self._compress(image_png)
        except InvalidInput as exc:
            raise InvalidImageData() from exc
