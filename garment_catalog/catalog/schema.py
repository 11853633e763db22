"""Response schemas in the OpenAPI subset accepted by Gemini ``responseSchema``.

The schemas are written out by hand rather than generated from the pydantic
models: Gemini rejects ``$ref``/``$defs`` and needs uppercase type names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from garment_catalog.catalog.models import TITLE_MAX_LENGTH
from garment_catalog.catalog.taxonomy import (
    Aesthetic,
    BackDetail,
    Closure,
    Color,
    Condition,
    Department,
    FabricFiber,
    Finish,
    Fit,
    Length,
    MainCategory,
    Neckline,
    Occasion,
    Pattern,
    PocketType,
    Shape,
    SleeveConstruction,
    SleeveLength,
    SleeveType,
    SubCategory,
    values,
)


def _enum(enum_cls: type[Enum], description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "STRING", "enum": values(enum_cls)}
    if description:
        schema["description"] = description
    return schema


def _enum_list(enum_cls: type[Enum], description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "ARRAY", "items": _enum(enum_cls)}
    if description:
        schema["description"] = description
    return schema


def _object(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": properties,
        "required": required,
        "propertyOrdering": list(properties),
    }


# Required fields of the classification; sleeve, neckline, backDetails, shape
# and fit are left optional so the model can omit them per garment region.
CLASSIFICATION_REQUIRED_FIELDS = [
    "suggestedTitle",
    "suggestedDescription",
    "color",
    "categories",
    "condition",
    "aesthetics",
    "occasion",
    "length",
    "finish",
    "closure",
    "composition",
    "pockets",
]


def build_classification_schema() -> dict[str, Any]:
    """Return the schema constraining the classification response."""

    properties: dict[str, Any] = {
        # First, so the model reasons before committing to the enum fields.
        "analysis_reasoning": {
            "type": "STRING",
            "description": "Short reasoning about the visual evidence behind the classification.",
        },
        "suggestedTitle": {"type": "STRING", "maxLength": TITLE_MAX_LENGTH},
        "suggestedDescription": {"type": "STRING"},
        "brand": {"type": "STRING"},
        "color": _object(
            {
                "primary": _enum(Color),
                "secondary": _enum_list(Color),
                "pattern": _enum_list(Pattern),
                "is_multicolor": {"type": "BOOLEAN"},
            },
            ["primary", "secondary", "pattern", "is_multicolor"],
        ),
        "categories": _object(
            {
                "department": _enum_list(Department),
                "main": _enum(MainCategory),
                "sub": _enum_list(SubCategory),
            },
            ["department", "main", "sub"],
        ),
        "shape": _enum_list(Shape, "Omit for shoes, accessories, jewelry and bags."),
        "fit": _enum_list(Fit, "Omit for shoes, accessories, jewelry and bags."),
        "condition": _enum(Condition),
        "sleeve": {
            **_object(
                {
                    "length": _enum(SleeveLength),
                    "type": _enum_list(SleeveType),
                    "construction": _enum(SleeveConstruction),
                },
                ["length", "type", "construction"],
            ),
            "description": "Omit for bottoms, skirts, shorts and non-apparel.",
        },
        "aesthetics": _enum_list(Aesthetic),
        "occasion": _enum_list(Occasion),
        "length": _enum(Length),
        "neckline": _enum(Neckline, "Omit for bottoms, skirts, shorts and non-apparel."),
        "backDetails": _enum_list(BackDetail, "Omit for bottoms, skirts, shorts and non-apparel."),
        "finish": _enum_list(Finish),
        "closure": _enum_list(Closure),
        "composition": {
            "type": "ARRAY",
            "items": _object(
                {
                    "fiber": _enum(FabricFiber),
                    "percentage": {"type": "NUMBER"},
                },
                ["fiber", "percentage"],
            ),
        },
        "pockets": _object(
            {
                "has_pockets": {"type": "BOOLEAN"},
                "quantity": {"type": "INTEGER", "minimum": 0},
                "types": _enum_list(PocketType),
            },
            ["has_pockets", "quantity", "types"],
        ),
    }
    return _object(properties, list(CLASSIFICATION_REQUIRED_FIELDS))


def build_price_schema() -> dict[str, Any]:
    """Return the schema for the price object when the host can enforce one."""

    return _object(
        {
            "min_price": {"type": "NUMBER"},
            "max_price": {"type": "NUMBER"},
            "suggested_price": {"type": "NUMBER"},
            "justification": {"type": "STRING"},
        },
        ["min_price", "max_price", "suggested_price", "justification"],
    )


__all__ = [
    "CLASSIFICATION_REQUIRED_FIELDS",
    "build_classification_schema",
    "build_price_schema",
]
