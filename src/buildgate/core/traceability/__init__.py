# src/buildgate/core/traceability/__init__.py
"""
Rastreabilidade das runs de CI (Manifest + Event Log).
"""

from .manifest import (
    BuildManifest,
    add_event,
    create_manifest,
    load_manifest,
    record_outcome,
    save_manifest,
    stage_failed,
    stage_finished,
    stage_started,
)

__all__ = [
    "BuildManifest",
    "add_event",
    "create_manifest",
    "load_manifest",
    "record_outcome",
    "save_manifest",
    "stage_failed",
    "stage_finished",
    "stage_started",
]
