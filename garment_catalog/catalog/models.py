"""Pydantic models for classifications and the three history collections.

Attribute names are snake_case; aliases carry the wire/persisted key names.
Optional fields that do not apply are ``None`` in memory and absent on the
wire (see :meth:`WireModel.to_wire`).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from garment_catalog.catalog.taxonomy import (
    OMITTED_FIELDS,
    Aesthetic,
    BackDetail,
    Closure,
    Color,
    Condition,
    Department,
    FabricFiber,
    Finish,
    Fit,
    GarmentRegion,
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
    garment_region,
)

TITLE_MAX_LENGTH = 80
COMPOSITION_TOLERANCE = 0.01

# Validation context for records read back from history: the title length
# and composition sum are enforced on fresh model output only.
STORED_RECORD_CONTEXT = {"stored": True}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_entry_id() -> str:
    return uuid4().hex


def _is_stored_record(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("stored"))


class WireModel(BaseModel):
    """Base model accepting both attribute names and wire aliases."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        """Serialise to the persisted JSON shape, dropping absent fields."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ColorProfile(WireModel):
    primary: Color
    secondary: list[Color] = Field(default_factory=list)
    pattern: list[Pattern] = Field(default_factory=list)
    is_multicolor: bool = False


class CategoryAssignment(WireModel):
    department: list[Department] = Field(default_factory=list)
    main: MainCategory
    sub: list[SubCategory] = Field(default_factory=list)


class SleeveDetails(WireModel):
    length: SleeveLength
    types: list[SleeveType] = Field(default_factory=list, alias="type")
    construction: SleeveConstruction


class FabricComposition(WireModel):
    fiber: FabricFiber
    percentage: float = Field(ge=0, le=100)


class PocketInfo(WireModel):
    has_pockets: bool = False
    quantity: int = Field(default=0, ge=0)
    types: list[PocketType] = Field(default_factory=lambda: [PocketType.NONE])

    @model_validator(mode="after")
    def _absent_pockets_are_explicit(self) -> "PocketInfo":
        if not self.has_pockets:
            self.quantity = 0
            self.types = [PocketType.NONE]
        return self


class GarmentClassification(WireModel):
    """Canonical structured description of one garment."""

    analysis_reasoning: str | None = None
    suggested_title: str = Field(alias="suggestedTitle")
    suggested_description: str = Field(alias="suggestedDescription")
    brand: str | None = None

    color: ColorProfile
    categories: CategoryAssignment

    shape: list[Shape] | None = None
    fit: list[Fit] | None = None
    condition: Condition

    sleeve: SleeveDetails | None = None

    aesthetics: list[Aesthetic] = Field(default_factory=list)
    occasion: list[Occasion] = Field(default_factory=list)

    length: Length = Length.STANDARD
    neckline: Neckline | None = None
    back_details: list[BackDetail] | None = Field(default=None, alias="backDetails")
    finish: list[Finish] = Field(default_factory=list)
    closure: list[Closure] = Field(default_factory=list)
    composition: list[FabricComposition] = Field(default_factory=list)

    pockets: PocketInfo = Field(default_factory=PocketInfo)

    @field_validator("suggested_title")
    @classmethod
    def _title_fits_listing(cls, value: str, info: ValidationInfo) -> str:
        if len(value) > TITLE_MAX_LENGTH and not _is_stored_record(info):
            raise ValueError(f"suggestedTitle has {len(value)} characters, at most {TITLE_MAX_LENGTH} allowed")
        return value

    @field_validator("composition")
    @classmethod
    def _composition_sums_to_100(
        cls,
        value: list[FabricComposition],
        info: ValidationInfo,
    ) -> list[FabricComposition]:
        if value and not _is_stored_record(info):
            total = sum(part.percentage for part in value)
            if abs(total - 100) > COMPOSITION_TOLERANCE:
                raise ValueError(f"composition percentages sum to {total}, expected 100")
        return value

    @property
    def region(self) -> GarmentRegion:
        return garment_region(self.categories.main, self.categories.sub)

    def without_inapplicable_fields(self) -> "GarmentClassification":
        """Return a copy with the fields that do not apply to its region cleared."""

        omitted = OMITTED_FIELDS[self.region]
        if not omitted:
            return self
        update = {
            name: None
            for name, field in type(self).model_fields.items()
            if (field.alias or name) in omitted
        }
        return self.model_copy(update=update)


class AnalysisUsage(WireModel):
    """Token counts and derived cost for one model call."""

    prompt_token_count: int = Field(default=0, alias="promptTokenCount")
    candidates_token_count: int = Field(default=0, alias="candidatesTokenCount")
    thoughts_token_count: int = Field(default=0, alias="thoughtsTokenCount")
    total_token_count: int = Field(default=0, alias="totalTokenCount")
    estimated_cost_usd: float = Field(default=0.0, alias="estimatedCostUSD")
    estimated_cost_brl: float = Field(default=0.0, alias="estimatedCostBRL")

    @property
    def output_token_count(self) -> int:
        """Candidate tokens without thinking tokens, as used by the cost formula."""

        return self.candidates_token_count - self.thoughts_token_count

    @property
    def display_output_token_count(self) -> int:
        return max(0, self.output_token_count)


class AnalysisEntry(GarmentClassification):
    """A persisted classification with its thumbnails and usage snapshot."""

    id: str
    image_previews: list[str] = Field(default_factory=list, alias="imagePreviews")
    analyzed_at: datetime = Field(alias="analyzedAt")
    usage: AnalysisUsage | None = None

    @classmethod
    def from_classification(
        cls,
        classification: GarmentClassification,
        *,
        image_previews: Iterable[str],
        usage: AnalysisUsage | None = None,
        entry_id: str | None = None,
        analyzed_at: datetime | None = None,
    ) -> "AnalysisEntry":
        return cls(
            **dict(classification),
            id=entry_id or new_entry_id(),
            image_previews=list(image_previews),
            analyzed_at=analyzed_at or utcnow(),
            usage=usage,
        )

    @property
    def primary_preview(self) -> str | None:
        return self.image_previews[0] if self.image_previews else None


class PriceEstimate(WireModel):
    """Price object returned by the pricing model."""

    min_price: float = Field(
        ge=0,
        validation_alias=AliasChoices("min_price", "precoMinimo", "minPrice"),
        serialization_alias="min_price",
    )
    max_price: float = Field(
        ge=0,
        validation_alias=AliasChoices("max_price", "precoMaximo", "maxPrice"),
        serialization_alias="max_price",
    )
    suggested_price: float = Field(
        ge=0,
        validation_alias=AliasChoices("suggested_price", "precoSugerido", "suggestedPrice"),
        serialization_alias="suggested_price",
    )
    justification: str = Field(
        validation_alias=AliasChoices("justification", "justificativa"),
        serialization_alias="justification",
    )


class PriceEstimateEntry(WireModel):
    """One pricing inference, with a snapshot of the item it was made for."""

    id: str
    analysis_id: str = Field(
        validation_alias=AliasChoices("analysisId", "analysis_id"),
        serialization_alias="analysisId",
    )
    category: str = ""
    brand: str = Field(
        default="",
        validation_alias=AliasChoices("brand", "marca"),
        serialization_alias="brand",
    )
    condition: str = Field(
        default="",
        validation_alias=AliasChoices("condition", "qualidade"),
        serialization_alias="condition",
    )
    suggested_title: str = Field(
        default="",
        validation_alias=AliasChoices("suggestedTitle", "titulo_sugerido"),
        serialization_alias="suggestedTitle",
    )
    min_price: float = Field(
        validation_alias=AliasChoices("minPrice", "precoMinimo", "min_price"),
        serialization_alias="minPrice",
    )
    suggested_price: float = Field(
        validation_alias=AliasChoices("suggestedPrice", "precoSugerido", "suggested_price"),
        serialization_alias="suggestedPrice",
    )
    max_price: float = Field(
        validation_alias=AliasChoices("maxPrice", "precoMaximo", "max_price"),
        serialization_alias="maxPrice",
    )
    justification: str = Field(
        default="",
        validation_alias=AliasChoices("justification", "justificativa"),
        serialization_alias="justification",
    )
    estimated_at: datetime = Field(
        validation_alias=AliasChoices("estimatedAt", "estimated_at"),
        serialization_alias="estimatedAt",
    )
    usage: AnalysisUsage | None = None


class TryOnHistoryItem(WireModel):
    """One try-on generation, with compressed copies of the images involved."""

    id: str
    analysis_id: str = Field(alias="analysisId")
    product_image: str = Field(alias="productImage")
    person_image: str = Field(alias="personImage")
    result_image: str = Field(alias="resultImage")
    estimated_cost_usd: float = Field(default=0.0, alias="estimatedCostUSD")
    estimated_cost_brl: float = Field(default=0.0, alias="estimatedCostBRL")
    elapsed_ms: int = Field(default=0, alias="elapsedMs")
    created_at: datetime = Field(alias="createdAt")


__all__ = [
    "AnalysisEntry",
    "AnalysisUsage",
    "CategoryAssignment",
    "COMPOSITION_TOLERANCE",
    "ColorProfile",
    "FabricComposition",
    "GarmentClassification",
    "PocketInfo",
    "PriceEstimate",
    "PriceEstimateEntry",
    "SleeveDetails",
    "STORED_RECORD_CONTEXT",
    "TITLE_MAX_LENGTH",
    "TryOnHistoryItem",
    "WireModel",
    "new_entry_id",
    "utcnow",
]
