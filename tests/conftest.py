"""Shared fixtures for the catalog tests."""

from __future__ import annotations

import base64
import json
from io import BytesIO
from pathlib import Path
from typing import Any, Callable

import pytest
from PIL import Image

from garment_catalog.catalog.models import AnalysisEntry, AnalysisUsage
from garment_catalog.catalog.parser import parse_classification
from garment_catalog.config.settings import Settings
from garment_catalog.storage import HistoryStore, MemoryKeyValueStore

ImageFactory = Callable[..., bytes]


def _make_image(
    size: tuple[int, int] = (64, 48),
    color: tuple[int, ...] = (200, 30, 30),
    mode: str = "RGB",
    fmt: str = "PNG",
) -> bytes:
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_factory() -> ImageFactory:
    return _make_image


@pytest.fixture
def png_bytes() -> bytes:
    return _make_image()


@pytest.fixture
def png_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        gemini_api_key="test-gemini",
        gemini_base_url="https://gemini.test/v1beta",
        gcp_project_id="resale-project",
        gcp_location="us-central1",
        gcp_access_token="test-token",
        storage_root=str(tmp_path / "history"),
        reference_models_dir=str(tmp_path / "reference_models"),
    )


@pytest.fixture
def history() -> HistoryStore:
    return HistoryStore(MemoryKeyValueStore())


@pytest.fixture
def dress_payload() -> dict[str, Any]:
    return {
        "analysis_reasoning": "Vestido preto de tecido liso com leve brilho, sem alças.",
        "suggestedTitle": "Vestido Midi Preto Tubinho com Fenda",
        "suggestedDescription": "Vestido tubinho preto em crepe, ideal para festas e eventos.",
        "brand": "Farm",
        "color": {"primary": "black", "secondary": [], "pattern": ["solid"], "is_multicolor": False},
        "categories": {"department": ["women"], "main": "clothing", "sub": ["dresses"]},
        "shape": ["sheath"],
        "fit": ["slim"],
        "condition": "excellent",
        "sleeve": {"length": "strapless", "type": [], "construction": "set-in"},
        "aesthetics": ["minimalist", "glam"],
        "occasion": ["party"],
        "length": "midi",
        "neckline": "strapless",
        "backDetails": ["closed"],
        "finish": ["smooth"],
        "closure": ["hidden_zipper"],
        "composition": [
            {"fiber": "polyester", "percentage": 95},
            {"fiber": "elastane", "percentage": 5},
        ],
        "pockets": {"has_pockets": False, "quantity": 0, "types": ["none"]},
    }


@pytest.fixture
def trousers_payload() -> dict[str, Any]:
    return {
        "suggestedTitle": "Calça Jeans Reta Azul Marinho",
        "suggestedDescription": "Calça jeans de corte reto com bolsos frontais.",
        "color": {"primary": "navy_blue", "secondary": [], "pattern": ["solid"], "is_multicolor": False},
        "categories": {"department": ["women"], "main": "clothing", "sub": ["bottoms"]},
        "shape": ["straight"],
        "fit": ["regular"],
        "condition": "very_good",
        "sleeve": {"length": "long", "type": ["classic"], "construction": "set-in"},
        "aesthetics": ["classic"],
        "occasion": ["casual", "work"],
        "length": "standard",
        "neckline": "round-neck",
        "backDetails": ["closed"],
        "finish": ["textured"],
        "closure": ["button", "zipper"],
        "composition": [
            {"fiber": "cotton", "percentage": 98},
            {"fiber": "elastane", "percentage": 2},
        ],
        "pockets": {"has_pockets": True, "quantity": 4, "types": ["front_pockets", "back_pockets"]},
    }


@pytest.fixture
def dress_entry(dress_payload: dict[str, Any], png_data_url: str) -> AnalysisEntry:
    classification = parse_classification(json.dumps(dress_payload))
    return AnalysisEntry.from_classification(
        classification,
        image_previews=[png_data_url],
        usage=AnalysisUsage(prompt_token_count=1200, candidates_token_count=400, total_token_count=1600),
    )
