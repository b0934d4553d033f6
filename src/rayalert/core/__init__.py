"""Core data models, configurations, and interfaces.

This package provides:
- Event models (SwapEvent, TokenInfo, SwapEventBuilder)
- Configuration classes (AlertsConfig, WebhookConfig)
- Sink / notifier interfaces
"""

from rayalert.core.config import AlertsConfig, MarketType, OutputFormat, WebhookConfig
from rayalert.core.interfaces import IEventNotifier, IEventSink
from rayalert.core.models import (
    DexProtocol,
    EventBuildError,
    EventType,
    SwapDirection,
    SwapEvent,
    SwapEventBuilder,
    TokenInfo,
)

__all__ = [
    "AlertsConfig",
    "MarketType",
    "OutputFormat",
    "WebhookConfig",
    "IEventNotifier",
    "IEventSink",
    "DexProtocol",
    "EventBuildError",
    "EventType",
    "SwapDirection",
    "SwapEvent",
    "SwapEventBuilder",
    "TokenInfo",
]
