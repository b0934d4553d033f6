from __future__ import annotations

from typing import Protocol, runtime_checkable

from rayalert.core.models import SwapEvent


# ---------------------------------------------------------------------------
# IEventSink
# ---------------------------------------------------------------------------

@runtime_checkable
class IEventSink(Protocol):
    """
    Local line-oriented destination for rendered events.

    Domain expectations:
    - It receives one already-formatted record per event (text or JSON).
    - It must not block for long; it is called inline by processors.
    """

    def write(self, rendered: str) -> None:
        """
        Write one rendered event.

        Implementations:
        - ConsoleSink (rich console on stdout)
        - In-memory list sink for testing
        """
        ...


# ---------------------------------------------------------------------------
# IEventNotifier
# ---------------------------------------------------------------------------

@runtime_checkable
class IEventNotifier(Protocol):
    """
    Asynchronous delivery of normalized events to an external endpoint.

    Domain expectations:
    - `try_send` never suspends; it raises when the queue is full or closed.
    - Delivery, retries and backoff happen in the background.
    """

    def try_send(self, event: SwapEvent) -> None:
        """
        Queue an event without blocking.

        Implementations:
        - WebhookNotifier (httpx POST with exponential backoff)
        - AsyncMock / recording notifier for testing
        """
        ...
