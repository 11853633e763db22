"""Run connectivity checks against the Gemini and Vertex AI providers."""

from __future__ import annotations

import asyncio
from typing import Iterable

from garment_catalog.integrations import IntegrationCheckResult, run_all_checks
from garment_catalog.monitoring.logging import configure_logging


def _format_result(result: IntegrationCheckResult) -> str:
    if not result.configured:
        status = "⚪"
    else:
        status = "✅" if result.success else "❌"
    return f"{status} {result.name}: {result.message}"


def print_results(results: Iterable[IntegrationCheckResult]) -> None:
    for result in results:
        print(_format_result(result))


def main() -> int:
    configure_logging()
    results = asyncio.run(run_all_checks())
    print_results(results)
    return 1 if any(result.failed for result in results) else 0


if __name__ == "__main__":
    raise SystemExit(main())
