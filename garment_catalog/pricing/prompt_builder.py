"""Prompt construction for the resale price estimate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from garment_catalog.catalog.models import AnalysisEntry

DEFAULT_MARKETPLACES = ("Enjoei", "Repassa", "Troc", "Mercado Livre", "OLX")
DEFAULT_BRAND = "sem marca"
NOT_AVAILABLE = "N/A"


@dataclass(slots=True)
class PricingSubject:
    """The item attributes that drive a price estimate."""

    title: str
    brand: str = DEFAULT_BRAND
    condition: str = ""
    main_category: str = ""
    sub_categories: list[str] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)
    shape: list[str] = field(default_factory=list)
    fit: list[str] = field(default_factory=list)
    composition: str = "não identificada"
    aesthetics: list[str] = field(default_factory=list)

    @classmethod
    def from_entry(
        cls,
        entry: AnalysisEntry,
        quality: str | None = None,
        brand: str | None = None,
    ) -> "PricingSubject":
        """Derive the subject from an analysis.

        ``quality`` and ``brand`` are the free-text values older callers
        supplied by hand; when given they win over the analysed values.
        """

        composition = ", ".join(
            f"{part.fiber.value} {part.percentage:g}%" for part in entry.composition
        )
        return cls(
            title=entry.suggested_title,
            brand=(brand or "").strip() or entry.brand or DEFAULT_BRAND,
            condition=(quality or "").strip() or entry.condition.value,
            main_category=entry.categories.main.value,
            sub_categories=[sub.value for sub in entry.categories.sub],
            patterns=[pattern.value for pattern in entry.color.pattern],
            shape=[shape.value for shape in entry.shape or []],
            fit=[fit.value for fit in entry.fit or []],
            composition=composition or "não identificada",
            aesthetics=[aesthetic.value for aesthetic in entry.aesthetics],
        )

    @property
    def category_label(self) -> str:
        if not self.sub_categories:
            return self.main_category
        return f"{self.main_category} ({', '.join(self.sub_categories)})"


class PricingPromptBuilder:
    """Builds the market-research instruction for the pricing call."""

    def __init__(self, marketplaces: Sequence[str] = DEFAULT_MARKETPLACES) -> None:
        self._marketplaces = list(marketplaces)

    def build(self, subject: PricingSubject, *, web_search: bool = True) -> str:
        """Return the instruction text for ``subject``."""

        if len(self._marketplaces) > 1:
            platforms = ", ".join(self._marketplaces[:-1]) + f", and {self._marketplaces[-1]}"
        else:
            platforms = "".join(self._marketplaces)

        if web_search:
            research = (
                "### STEP 1: MARKET RESEARCH (MANDATORY)\n"
                f'Use the Google Search tool to find current prices for: "{subject.title}" '
                "and similar items from the same brand.\n"
                f"Target platforms: {platforms}.\n"
                "Identify the price range (min/max) currently being asked for this type of garment."
            )
        else:
            research = (
                "### STEP 1: MARKET REFERENCE\n"
                f'Recall typical asking prices for: "{subject.title}" and similar items from the same brand '
                f"on {platforms}.\n"
                "Identify the price range (min/max) usually asked for this type of garment."
            )

        details = ", ".join(
            [
                ", ".join(subject.patterns) or NOT_AVAILABLE,
                ", ".join(subject.shape) or NOT_AVAILABLE,
                ", ".join(subject.fit) or NOT_AVAILABLE,
            ],
        )
        context = "\n".join(
            [
                "### STEP 2: PRODUCT CONTEXT",
                f"- **Title:** {subject.title}",
                f"- **Brand:** {subject.brand}",
                f"- **Condition:** {subject.condition}",
                f"- **Category:** {subject.category_label}",
                f"- **Details:** {details}",
                f"- **Composition:** {subject.composition}",
                f"- **Aesthetics:** {', '.join(subject.aesthetics) or NOT_AVAILABLE}",
            ],
        )
        reference = "prices found during your Google Search" if web_search else "reference prices above"
        logic = (
            "### STEP 3: PRICING LOGIC\n"
            f"1. **Reference Base:** Start with the {reference}.\n"
            "2. **Brand Weight:** Adjust based on the brand's market position (Mass market, Premium, or Luxury).\n"
            "3. **Depreciation:** Apply discounts based on the provided quality/condition.\n"
            "4. **Suggested Price:** Define a value that balances fast-selling potential with fair market value."
        )
        output = (
            "### STEP 4: OUTPUT RULES\n"
            "- All currency values must be in BRL (numeric).\n"
            "- The 'justification' must be in **Portuguese (pt-BR)**, explaining the logic and citing "
            "the price references observed.\n"
            "- min_price <= suggested_price <= max_price.\n"
            "- RETURN ONLY A RAW JSON OBJECT. NO MARKDOWN, NO PREAMBLE.\n\n"
            "### OUTPUT SCHEMA (JSON)\n"
            "{\n"
            '  "min_price": number,\n'
            '  "max_price": number,\n'
            '  "suggested_price": number,\n'
            '  "justification": "string (in pt-BR)"\n'
            "}"
        )
        intro = (
            "You are a specialist in the Brazilian second-hand fashion market. "
            "Your goal is to provide a precise price estimation based on current market data."
        )
        return "\n\n".join([intro, research, context, logic, output])


__all__ = ["DEFAULT_BRAND", "DEFAULT_MARKETPLACES", "PricingPromptBuilder", "PricingSubject"]
