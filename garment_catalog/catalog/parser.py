"""Decoding and normalisation of the classification response."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from garment_catalog.catalog.models import COMPOSITION_TOLERANCE, TITLE_MAX_LENGTH, GarmentClassification
from garment_catalog.errors import EmptyResponse, MalformedResult

logger = logging.getLogger(__name__)

# Wire names of the fields the model may leave out.
OPTIONAL_FIELDS = ("analysis_reasoning", "brand", "shape", "fit", "sleeve", "neckline", "backDetails")


def parse_classification(text: str | None) -> GarmentClassification:
    """Decode the model's JSON text into a normalised classification."""

    if text is None or not text.strip():
        raise EmptyResponse()

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Classification response is not valid JSON: %s", exc)
        raise MalformedResult() from exc
    if not isinstance(payload, dict):
        logger.warning("Classification response is a %s, expected an object", type(payload).__name__)
        raise MalformedResult()

    payload = normalize_payload(payload)
    try:
        classification = GarmentClassification.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Classification response failed validation: %s", exc.errors(include_url=False))
        raise MalformedResult() from exc
    return classification.without_inapplicable_fields()


def normalize_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Repair the recoverable deviations before validation."""

    payload = dict(payload)
    for key in OPTIONAL_FIELDS:
        value = payload.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            payload.pop(key, None)

    title = payload.get("suggestedTitle")
    if isinstance(title, str) and len(title) > TITLE_MAX_LENGTH:
        payload["suggestedTitle"] = title[:TITLE_MAX_LENGTH].rstrip()

    composition = payload.get("composition")
    if isinstance(composition, list):
        payload["composition"] = rescale_composition(composition)
    return payload


def rescale_composition(parts: list[Any]) -> list[Any]:
    """Scale percentages to sum to 100, putting the rounding remainder on the largest share.

    Inputs that are already consistent, empty, non-positive or non-numeric are
    returned unchanged and left for validation to judge.
    """

    if not parts or not all(
        isinstance(part, dict) and isinstance(part.get("percentage"), (int, float)) for part in parts
    ):
        return parts
    total = sum(part["percentage"] for part in parts)
    if total <= 0 or abs(total - 100) <= COMPOSITION_TOLERANCE:
        return parts

    logger.info("Rescaling fabric composition that sums to %s", total)
    scaled = [{**part, "percentage": round(part["percentage"] * 100 / total, 2)} for part in parts]
    largest = max(range(len(scaled)), key=lambda index: scaled[index]["percentage"])
    remainder = 100 - sum(part["percentage"] for part in scaled)
    scaled[largest]["percentage"] = round(scaled[largest]["percentage"] + remainder, 2)
    return scaled


__all__ = ["normalize_payload", "parse_classification", "rescale_composition"]
