"""Catalog workflows: analysis, pricing and try-on."""

from .actions import ActionState, ActionStatus, SingleFlightAction
from .analyzer import GarmentAnalyzer
from .catalog import CatalogService
from .pricing import PriceEstimator
from .tryon import TryOnOutcome, TryOnService

__all__ = [
    "ActionState",
    "ActionStatus",
    "CatalogService",
    "GarmentAnalyzer",
    "PriceEstimator",
    "SingleFlightAction",
    "TryOnOutcome",
    "TryOnService",
]
