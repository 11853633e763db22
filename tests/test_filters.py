"""Tests for history filtering."""

from __future__ import annotations

import json
from typing import Any

from garment_catalog.catalog.filters import HistoryFilter, filter_analyses
from garment_catalog.catalog.models import AnalysisEntry
from garment_catalog.catalog.parser import parse_classification


def _entries(dress_entry: AnalysisEntry, trousers_payload: dict[str, Any]) -> list[AnalysisEntry]:
    trousers = AnalysisEntry.from_classification(
        parse_classification(json.dumps(trousers_payload)),
        image_previews=["data:image/jpeg;base64,AA"],
        entry_id="trousers",
    )
    return [trousers, dress_entry]


def test_empty_filter_keeps_everything(dress_entry: AnalysisEntry, trousers_payload: dict[str, Any]) -> None:
    entries = _entries(dress_entry, trousers_payload)

    assert filter_analyses(entries) == entries
    assert filter_analyses(entries, HistoryFilter(query="  ")) == entries


def test_query_matches_title_description_and_brand(
    dress_entry: AnalysisEntry,
    trousers_payload: dict[str, Any],
) -> None:
    entries = _entries(dress_entry, trousers_payload)

    assert [e.id for e in filter_analyses(entries, HistoryFilter(query="JEANS"))] == ["trousers"]
    assert [e.id for e in filter_analyses(entries, HistoryFilter(query="farm"))] == [dress_entry.id]


def test_criteria_are_combined(dress_entry: AnalysisEntry, trousers_payload: dict[str, Any]) -> None:
    entries = _entries(dress_entry, trousers_payload)

    by_sub = filter_analyses(entries, HistoryFilter(sub_category="bottoms"))
    by_occasion = filter_analyses(entries, HistoryFilter(occasion="work", department="women"))
    none = filter_analyses(entries, HistoryFilter(color="navy_blue", condition="excellent"))

    assert [e.id for e in by_sub] == ["trousers"]
    assert [e.id for e in by_occasion] == ["trousers"]
    assert none == []
