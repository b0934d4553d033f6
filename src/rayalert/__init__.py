"""rayalert: normalized alerts for Raydium CPMM, CLMM and AMM-V4 activity."""

from __future__ import annotations

from rayalert.core import (
    AlertsConfig,
    DexProtocol,
    EventBuildError,
    EventType,
    OutputFormat,
    SwapDirection,
    SwapEvent,
    TokenInfo,
    WebhookConfig,
)
from rayalert.filters import EventFilter
from rayalert.orchestration import AlertPipeline, build_pipeline
from rayalert.output import WebhookNotifier

__version__ = "0.1.0"

__all__ = [
    "AlertsConfig",
    "DexProtocol",
    "EventBuildError",
    "EventType",
    "OutputFormat",
    "SwapDirection",
    "SwapEvent",
    "TokenInfo",
    "WebhookConfig",
    "EventFilter",
    "AlertPipeline",
    "build_pipeline",
    "WebhookNotifier",
]
