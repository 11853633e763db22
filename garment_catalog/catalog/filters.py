"""Criteria used to narrow the analysis history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from garment_catalog.catalog.models import AnalysisEntry


@dataclass(slots=True)
class HistoryFilter:
    """Optional criteria; an entry must satisfy every one that is set."""

    query: str | None = None
    main_category: str | None = None
    sub_category: str | None = None
    department: str | None = None
    condition: str | None = None
    color: str | None = None
    aesthetic: str | None = None
    occasion: str | None = None

    def is_empty(self) -> bool:
        return not any(
            (
                self.query and self.query.strip(),
                self.main_category,
                self.sub_category,
                self.department,
                self.condition,
                self.color,
                self.aesthetic,
                self.occasion,
            ),
        )

    def matches(self, entry: AnalysisEntry) -> bool:
        query = (self.query or "").strip().lower()
        if query:
            haystack = " ".join(
                part for part in (entry.suggested_title, entry.suggested_description, entry.brand) if part
            ).lower()
            if query not in haystack:
                return False
        if self.main_category and entry.categories.main.value != self.main_category:
            return False
        if self.sub_category and self.sub_category not in {sub.value for sub in entry.categories.sub}:
            return False
        if self.department and self.department not in {dep.value for dep in entry.categories.department}:
            return False
        if self.condition and entry.condition.value != self.condition:
            return False
        if self.color:
            colors = {entry.color.primary.value, *(color.value for color in entry.color.secondary)}
            if self.color not in colors:
                return False
        if self.aesthetic and self.aesthetic not in {item.value for item in entry.aesthetics}:
            return False
        if self.occasion and self.occasion not in {item.value for item in entry.occasion}:
            return False
        return True


def filter_analyses(entries: Iterable[AnalysisEntry], criteria: HistoryFilter | None = None) -> list[AnalysisEntry]:
    """Return the entries matching ``criteria``, preserving order."""

    entries = list(entries)
    if criteria is None or criteria.is_empty():
        return entries
    return [entry for entry in entries if criteria.matches(entry)]


__all__ = ["HistoryFilter", "filter_analyses"]
