"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash"
    classification_temperature: float = 0.2
    pricing_temperature: float = 0.3
    pricing_web_search: bool = True
    catalog_language: str = "pt-BR"

    # Gemini 2.5 Flash list prices per 1M tokens (USD)
    price_input_per_million: float = 0.15
    price_output_per_million: float = 0.60
    price_thinking_per_million: float = 3.50
    usd_to_brl: float = 5.80

    gcp_project_id: str = ""
    gcp_location: str = ""
    gcp_access_token: str = ""
    tryon_model_id: str = "virtual-try-on-preview-08-04"
    tryon_cost_per_image_usd: float = 0.05
    tryon_max_dimension: int = 1024
    tryon_history_max_dimension: int = 512
    tryon_history_quality: int = 60

    preview_max_dimension: int = 200
    preview_quality: int = 70

    storage_root: str = "data/history"
    reference_models_dir: str = "data/reference_models"
    request_timeout: float = 120.0

    @property
    def vertex_configured(self) -> bool:
        return bool(self.gcp_project_id and self.gcp_location and self.gcp_access_token)


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_base_url=os.getenv(
            "GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta",
        ),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        classification_temperature=float(os.getenv("CLASSIFICATION_TEMPERATURE", "0.2")),
        pricing_temperature=float(os.getenv("PRICING_TEMPERATURE", "0.3")),
        pricing_web_search=_env_bool("PRICING_WEB_SEARCH", True),
        catalog_language=os.getenv("CATALOG_LANGUAGE", "pt-BR"),
        price_input_per_million=float(os.getenv("PRICE_INPUT_PER_MILLION", "0.15")),
        price_output_per_million=float(os.getenv("PRICE_OUTPUT_PER_MILLION", "0.60")),
        price_thinking_per_million=float(os.getenv("PRICE_THINKING_PER_MILLION", "3.50")),
        usd_to_brl=float(os.getenv("USD_TO_BRL", "5.80")),
        gcp_project_id=os.getenv("GCP_PROJECT_ID", ""),
        gcp_location=os.getenv("GCP_LOCATION", ""),
        gcp_access_token=os.getenv("GCP_ACCESS_TOKEN", ""),
        tryon_model_id=os.getenv("TRYON_MODEL_ID", "virtual-try-on-preview-08-04"),
        tryon_cost_per_image_usd=float(os.getenv("TRYON_COST_PER_IMAGE_USD", "0.05")),
        tryon_max_dimension=int(os.getenv("TRYON_MAX_DIMENSION", "1024")),
        tryon_history_max_dimension=int(os.getenv("TRYON_HISTORY_MAX_DIMENSION", "512")),
        tryon_history_quality=int(os.getenv("TRYON_HISTORY_QUALITY", "60")),
        preview_max_dimension=int(os.getenv("PREVIEW_MAX_DIMENSION", "200")),
        preview_quality=int(os.getenv("PREVIEW_QUALITY", "70")),
        storage_root=os.getenv("STORAGE_ROOT", "data/history"),
        reference_models_dir=os.getenv("REFERENCE_MODELS_DIR", "data/reference_models"),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "120")),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
