"""Load-time upgrades of persisted analysis records."""

from __future__ import annotations

from typing import Any, Mapping

from garment_catalog.catalog.legacy import is_legacy_classification, upcast_legacy_record


def migrate_analysis_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one stored analysis record to the current shape.

    - a single ``imagePreview`` string becomes ``imagePreviews=[...]``;
    - flat legacy classifications are upcast to the structured fields.
    """

    migrated = dict(record)
    preview = migrated.get("imagePreview")
    if isinstance(preview, str) and migrated.get("imagePreviews") is None:
        migrated["imagePreviews"] = [preview]
        del migrated["imagePreview"]
    if is_legacy_classification(migrated):
        migrated = upcast_legacy_record(migrated)
    return migrated


__all__ = ["migrate_analysis_record"]
