"""Garment taxonomy, classification contract and history models."""

from .models import (
    AnalysisEntry,
    AnalysisUsage,
    GarmentClassification,
    PriceEstimate,
    PriceEstimateEntry,
    TryOnHistoryItem,
)
from .parser import parse_classification
from .prompt_builder import ClassificationPromptBuilder, ClassificationRequest, ImagePart

__all__ = [
    "AnalysisEntry",
    "AnalysisUsage",
    "ClassificationPromptBuilder",
    "ClassificationRequest",
    "GarmentClassification",
    "ImagePart",
    "PriceEstimate",
    "PriceEstimateEntry",
    "TryOnHistoryItem",
    "parse_classification",
]
