"""Routing of decoded instructions through the protocol processors.

This package provides:
- AlertPipeline / build_pipeline for program-id routing
- NDJSON record loading for replaying decoded instructions
"""

from rayalert.orchestration.pipeline import AlertPipeline, PipelineStats, build_pipeline
from rayalert.orchestration.records import RecordError, iter_updates, load_update

__all__ = [
    "AlertPipeline",
    "PipelineStats",
    "build_pipeline",
    "RecordError",
    "iter_updates",
    "load_update",
]
