"""Asynchronous webhook delivery for normalized events.

This module provides:
- `WebhookNotifier`: bounded FIFO queue + one background worker that POSTs
  each event as JSON and retries with exponential backoff.
- `DeliveryStats`: counters mutated by the worker.

Per-event lifecycle::

    queued -> sending -> delivered
                      -> retrying -> sending ...
                      -> exhausted (dropped after logging)

Design notes
------------
- Exactly one worker, strictly sequential: an event is fully resolved
  (delivered or exhausted) before the next one is attempted.
- `try_send` never suspends; processors use it so webhook backpressure
  cannot stall event processing.
- `aclose()` stops intake, drains what is already queued (full retry policy
  still applies) and then stops the worker. In-flight retries are not
  cancelled.
- Backoff doubles after every failed attempt, with no jitter and no cap.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
import structlog

from rayalert.constants import WEBHOOK_QUEUE_CAPACITY
from rayalert.core.config import WebhookConfig
from rayalert.core.interfaces import IEventNotifier
from rayalert.core.models import SwapEvent

JSON_HEADERS = {"Content-Type": "application/json"}


class NotifierClosedError(RuntimeError):
    """Raised when an event is queued after the notifier was closed."""


@dataclass(kw_only=True)
class DeliveryStats:
    """Counters for the delivery worker."""

    queued: int = 0
    delivered: int = 0
    exhausted: int = 0
    dropped: int = 0  # unserializable events
    attempts: int = 0


class WebhookNotifier(IEventNotifier):
    """Queue-backed webhook notifier.

    Must be constructed inside a running event loop: the worker task is
    started immediately.

    Parameters
    ----------
    config : WebhookConfig
        URL, per-attempt timeout, retry limit and initial backoff.
    client : httpx.AsyncClient | None
        HTTP client to use; by default one is created with the configured
        timeout and owned (closed) by the notifier.
    logger : structlog.stdlib.BoundLogger | None
        Injected logger.
    sleep : Callable[[float], Awaitable[None]]
        Backoff sleep; injectable for tests.
    capacity : int
        Queue bound (1000 by default).
    """

    def __init__(
        self,
        config: WebhookConfig,
        *,
        client: httpx.AsyncClient | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        capacity: int = WEBHOOK_QUEUE_CAPACITY,
    ) -> None:
        self.config = config
        self.capacity = capacity
        self.stats = DeliveryStats()
        self._log = (logger or structlog.get_logger(__name__)).bind(webhook_url=config.url)
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_s),
        )
        self._queue: asyncio.Queue[SwapEvent | None] = asyncio.Queue(maxsize=capacity)
        self._closed = False
        self._client_closed = False
        self._pending_sends = 0
        self._sends_done = asyncio.Event()
        self._sends_done.set()
        self._worker = asyncio.get_running_loop().create_task(self._run(), name="webhook-delivery")

    # ---- intake ----

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: SwapEvent) -> None:
        """Queue an event, waiting for room when the queue is full."""
        if self._closed:
            raise NotifierClosedError("webhook notifier is closed")
        self._pending_sends += 1
        self._sends_done.clear()
        try:
            await self._queue.put(event)
        finally:
            self._pending_sends -= 1
            if not self._pending_sends:
                self._sends_done.set()
        self.stats.queued += 1

    def try_send(self, event: SwapEvent) -> None:
        """Queue an event without waiting.

        Raises
        ------
        asyncio.QueueFull
            The queue holds `capacity` events.
        NotifierClosedError
            `aclose()` was already called.
        """
        if self._closed:
            raise NotifierClosedError("webhook notifier is closed")
        self._queue.put_nowait(event)
        self.stats.queued += 1

    def queue_len(self) -> int:
        return self._queue.qsize()

    def is_queue_empty(self) -> bool:
        return self._queue.empty()

    async def join(self) -> None:
        """Wait until every event queued so far is delivered or exhausted."""
        await self._queue.join()

    # ---- lifecycle ----

    async def aclose(self) -> None:
        """Stop intake, drain queued events, stop the worker, close the client."""
        if not self._closed:
            self._closed = True
            # blocked send() calls land before the sentinel
            await self._sends_done.wait()
            await self._queue.put(None)
        await self._worker
        if self._owns_client and not self._client_closed:
            self._client_closed = True
            await self._client.aclose()

    # ---- worker ----

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                if event is None:
                    break
                await self.deliver(event)
            except Exception:
                # keep the worker alive; the event is lost like an exhausted one
                self.stats.dropped += 1
                self._log.exception("webhook_delivery_crashed")
            finally:
                self._queue.task_done()
        self._log.info("webhook_worker_stopped", **vars(self.stats))

    async def deliver(self, event: SwapEvent) -> bool:
        """Deliver one event with retries. Returns True on a 2xx response."""
        log = self._log.bind(signature=event.signature)
        try:
            body = event.to_json()
        except (TypeError, ValueError) as e:
            self.stats.dropped += 1
            log.error("webhook_serialize_failed", error=str(e))
            return False

        max_attempts = self.config.max_attempts
        backoff = self.config.retry_backoff_s
        attempt = 0
        while True:
            attempt += 1
            self.stats.attempts += 1
            try:
                resp = await self._client.post(self.config.url, content=body, headers=JSON_HEADERS)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                log.warning(
                    "webhook_error",
                    error=f"{type(e).__name__}: {e}",
                    attempt=attempt,
                    max_attempts=max_attempts,
                )
            else:
                if resp.is_success:
                    self.stats.delivered += 1
                    log.debug("webhook_delivered", status=resp.status_code, attempt=attempt)
                    return True
                log.warning(
                    "webhook_failed",
                    status=resp.status_code,
                    attempt=attempt,
                    max_attempts=max_attempts,
                )

            if attempt >= max_attempts:
                self.stats.exhausted += 1
                log.error("webhook_exhausted", attempts=attempt)
                return False

            await self._sleep(backoff)
            backoff *= 2
