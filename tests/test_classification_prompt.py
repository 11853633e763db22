"""Tests for the classification request builder and response schema."""

from __future__ import annotations

import base64
import json

import pytest

from garment_catalog.catalog.prompt_builder import ClassificationPromptBuilder, ImagePart
from garment_catalog.catalog.schema import CLASSIFICATION_REQUIRED_FIELDS, build_classification_schema
from garment_catalog.catalog.taxonomy import Color, SleeveLength, SubCategory, values
from garment_catalog.errors import InvalidInput


def test_build_returns_instruction_schema_and_ordered_images(png_bytes: bytes) -> None:
    front = ImagePart(png_bytes, "image/png")
    back = ImagePart(b"jpeg-bytes", "image/jpeg")

    request = ClassificationPromptBuilder().build([front, back])

    parts = request.to_parts()
    assert parts[0] == {"text": request.instruction}
    assert parts[1]["inlineData"] == {
        "mimeType": "image/png",
        "data": base64.b64encode(png_bytes).decode("ascii"),
    }
    assert parts[2]["inlineData"]["mimeType"] == "image/jpeg"
    assert request.response_schema == build_classification_schema()


def test_instruction_enumerates_vocabularies_and_region_rules(png_bytes: bytes) -> None:
    request = ClassificationPromptBuilder().build([ImagePart(png_bytes, "image/png")])

    for token in values(Color) + values(SleeveLength) + values(SubCategory):
        assert token in request.instruction
    assert "omita sleeve, neckline e backDetails" in request.instruction
    assert 'types ["none"]' in request.instruction
    assert "pt-BR" in request.instruction


def test_hint_clause_only_for_non_blank_hint(png_bytes: bytes) -> None:
    builder = ClassificationPromptBuilder()
    images = [ImagePart(png_bytes, "image/png")]

    without_hint = builder.build(images, hint="   ")
    with_hint = builder.build(images, hint="  vestido de festa da Farm ")

    assert "INFORMAÇÃO ADICIONAL DO USUÁRIO" not in without_hint.instruction
    assert without_hint.instruction == builder.build(images).instruction
    assert '"vestido de festa da Farm"' in with_hint.instruction
    assert "nunca substitui o schema" in with_hint.instruction


@pytest.mark.parametrize("count", [0, 4])
def test_build_rejects_wrong_image_count(png_bytes: bytes, count: int) -> None:
    images = [ImagePart(png_bytes, "image/png")] * count

    with pytest.raises(InvalidInput):
        ClassificationPromptBuilder().build(images)


def test_build_rejects_non_image_and_empty_parts(png_bytes: bytes) -> None:
    builder = ClassificationPromptBuilder()

    with pytest.raises(InvalidInput):
        builder.build([ImagePart(b"%PDF-1.4", "application/pdf")])
    with pytest.raises(InvalidInput):
        builder.build([ImagePart(b"", "image/png")])


def test_image_part_from_data_url(png_data_url: str, png_bytes: bytes) -> None:
    part = ImagePart.from_data_url(png_data_url)

    assert part.mime_type == "image/png"
    assert part.data == png_bytes

    with pytest.raises(InvalidInput):
        ImagePart.from_data_url("https://example.com/photo.png")


def test_schema_uses_gemini_subset() -> None:
    schema = build_classification_schema()
    encoded = json.dumps(schema)

    assert "$ref" not in encoded
    assert schema["type"] == "OBJECT"
    assert schema["propertyOrdering"][0] == "analysis_reasoning"
    assert schema["required"] == CLASSIFICATION_REQUIRED_FIELDS
    for optional in ("sleeve", "neckline", "backDetails", "shape", "fit", "brand"):
        assert optional not in schema["required"]
    assert schema["properties"]["pockets"]["required"] == ["has_pockets", "quantity", "types"]
    assert schema["properties"]["sleeve"]["properties"]["length"]["enum"] == values(SleeveLength)
