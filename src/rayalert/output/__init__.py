"""Event rendering and delivery.

This package provides:
- Text / JSON formatters
- Local sinks (rich console, in-memory)
- WebhookNotifier (queued HTTP delivery with retries)
"""

from rayalert.output.formatters import format_event, format_json, format_json_pretty, format_text
from rayalert.output.sink import ConsoleSink, MemorySink
from rayalert.output.webhook import DeliveryStats, NotifierClosedError, WebhookNotifier

__all__ = [
    "format_event",
    "format_json",
    "format_json_pretty",
    "format_text",
    "ConsoleSink",
    "MemorySink",
    "DeliveryStats",
    "NotifierClosedError",
    "WebhookNotifier",
]
