"""Integration check helpers."""

from .checks import (
    IntegrationCheckResult,
    check_gemini,
    check_vertex,
    run_all_checks,
)

__all__ = [
    "IntegrationCheckResult",
    "check_gemini",
    "check_vertex",
    "run_all_checks",
]
