"""Extraction of the price object from a free-text model response."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from garment_catalog.catalog.models import PriceEstimate
from garment_catalog.errors import EmptyResponse, MalformedResult, NoJsonFound

logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> str:
    """Return the first balanced ``{...}`` substring of ``text``.

    Braces inside JSON string literals (including escaped quotes) do not count
    towards the balance, so prose around the object and markdown fences are
    ignored.
    """

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]
        # Unbalanced from this brace onwards; try the next opening brace.
        start = text.find("{", start + 1)
    raise NoJsonFound()


def parse_price_estimate(text: str | None) -> PriceEstimate:
    """Decode a price estimate from the pricing model's response text."""

    if text is None or not text.strip():
        raise EmptyResponse()

    candidate = extract_json_object(text)
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("Price estimate JSON could not be decoded: %s", exc)
        raise MalformedResult() from exc
    if not isinstance(payload, dict):
        raise MalformedResult()

    try:
        return PriceEstimate.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Price estimate failed validation: %s", exc.errors(include_url=False))
        raise MalformedResult() from exc


__all__ = ["extract_json_object", "parse_price_estimate"]
