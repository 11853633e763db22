"""Image normalisation helpers."""

from __future__ import annotations

import base64
import binascii
import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from garment_catalog.errors import InvalidInput

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """Split a ``data:<mime>;base64,<payload>`` string into bytes and media type."""

    header, sep, payload = data_url.strip().partition(",")
    if not sep or not header.startswith("data:") or ";base64" not in header:
        raise InvalidInput("A imagem enviada não é um data URL base64 válido.")
    mime_type = header[len("data:"):].split(";", 1)[0].strip().lower()
    try:
        data = base64.b64decode(payload, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise InvalidInput("A imagem enviada não é um data URL base64 válido.") from exc
    return data, mime_type


def encode_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def sniff_media_type(data: bytes) -> str | None:
    """Return the media type Pillow detects for ``data``, or ``None``."""

    try:
        with Image.open(BytesIO(data)) as img:
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


def _open(image_bytes: bytes) -> Image.Image:
    if not image_bytes:
        raise InvalidInput("A imagem enviada está vazia.")
    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidInput() from exc
    return img


def _flatten(img: Image.Image) -> Image.Image:
    """Apply EXIF orientation and composite any transparency onto white."""

    img = ImageOps.exif_transpose(img)
    if img.mode == "P" and "transparency" in img.info:
        img = img.convert("RGBA")
    if img.mode in ("RGBA", "LA"):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, WHITE)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return img.convert("RGB")


class ImageNormalizer:
    """Ensures consistent orientation, size and colour mode."""

    def __init__(self, max_dimension: int = 1024) -> None:
        self._max_dimension = max_dimension

    def normalize(self, image_bytes: bytes) -> bytes:
        """Return PNG bytes with no alpha, longest side at most ``max_dimension``."""

        with _open(image_bytes) as source:
            img = _flatten(source)
        img.thumbnail((self._max_dimension, self._max_dimension), Image.Resampling.LANCZOS)
        buffer = BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    def normalize_base64(self, image_bytes: bytes) -> str:
        return base64.b64encode(self.normalize(image_bytes)).decode("ascii")


def compress_image(image_bytes: bytes, max_dimension: int, quality: int) -> bytes:
    """Downscale and re-encode as JPEG for storage in history."""

    with _open(image_bytes) as source:
        img = _flatten(source)
    img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


def make_thumbnail_data_url(image_bytes: bytes, max_dimension: int = 200, quality: int = 70) -> str:
    """Return a JPEG data URL preview of the image."""

    return encode_data_url(compress_image(image_bytes, max_dimension, quality), "image/jpeg")


__all__ = [
    "ImageNormalizer",
    "compress_image",
    "decode_data_url",
    "encode_data_url",
    "make_thumbnail_data_url",
    "sniff_media_type",
]
