"""Price estimation prompt and response handling."""

from .parser import extract_json_object, parse_price_estimate
from .prompt_builder import DEFAULT_MARKETPLACES, PricingPromptBuilder, PricingSubject

__all__ = [
    "DEFAULT_MARKETPLACES",
    "PricingPromptBuilder",
    "PricingSubject",
    "extract_json_object",
    "parse_price_estimate",
]
