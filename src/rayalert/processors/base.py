"""Shared machinery for protocol processors.

A processor turns one decoded `InstructionUpdate` into at most one
`SwapEvent`. Subclasses implement `dispatch` as a single `match` over their
protocol's instruction union; this base class owns:

- the per-variant `Route` table (`ROUTES`), used for observability and
  checked in tests to cover every union member,
- filter checks and account arrangement with skip logging,
- emission: format -> sink -> non-blocking notifier hand-off.
"""

from __future__ import annotations

import abc
import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

import structlog

from rayalert.core.config import OutputFormat
from rayalert.core.interfaces import IEventNotifier, IEventSink
from rayalert.core.models import DexProtocol, SwapEvent, SwapEventBuilder
from rayalert.decoding.accounts import arrange_accounts
from rayalert.decoding.trace import InstructionUpdate
from rayalert.filters import EventFilter
from rayalert.output.formatters import format_event
from rayalert.output.webhook import NotifierClosedError


class Route(str, Enum):
    """What a processor does with an instruction variant."""

    FILTERED_SWAP = "filtered_swap"  # emitted if the filter accepts
    UNCONDITIONAL_EVENT = "unconditional_event"  # always emitted
    LOG_ONLY = "log_only"  # informational log line, no event
    IGNORED = "ignored"  # administrative noise


@dataclass(kw_only=True)
class ProcessorStats:
    """Per-processor counters."""

    received: int = 0
    emitted: int = 0
    filtered: int = 0
    skipped: int = 0  # accounts could not be arranged
    logged: int = 0
    ignored: int = 0
    notify_failed: int = 0
    render_failed: int = 0


class BaseProcessor(abc.ABC):
    """Common state and helpers for CPMM / CLMM / AMM-V4 processors."""

    protocol: ClassVar[DexProtocol]
    program_id: ClassVar[str]
    ROUTES: ClassVar[Mapping[type, Route]]

    def __init__(
        self,
        *,
        event_filter: EventFilter | None = None,
        output_format: OutputFormat = OutputFormat.TEXT,
        sink: IEventSink,
        notifier: IEventNotifier | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.event_filter = event_filter or EventFilter()
        self.output_format = output_format
        self.sink = sink
        self.notifier = notifier
        self.stats = ProcessorStats()
        self.log = (logger or structlog.get_logger(__name__)).bind(protocol=self.protocol.label)

    # ---- entry point ----

    async def process(self, update: InstructionUpdate) -> SwapEvent | None:
        """Handle one update; return the emitted event, if any."""
        self.stats.received += 1
        event = self.dispatch(update)
        if event is not None:
            self.emit(event)
        return event

    @abc.abstractmethod
    def dispatch(self, update: InstructionUpdate) -> SwapEvent | None:
        """Route one update to its variant handler."""

    def route_of(self, instruction: Any) -> Route | None:
        return self.ROUTES.get(type(instruction))

    # ---- helpers for dispatch ----

    def builder(self, update: InstructionUpdate) -> SwapEventBuilder:
        """Builder pre-filled with protocol and transaction metadata."""
        return (
            SwapEvent.builder()
            .protocol(self.protocol)
            .signature(update.signature)
            .slot(update.slot)
            .timestamp(update.block_time)
            .market_cap_usd(update.market_cap_usd)
        )

    def accounts(self, update: InstructionUpdate) -> dict[str, str] | None:
        roles = arrange_accounts(update.instruction, update.accounts)
        if roles is None:
            self.stats.skipped += 1
            self.log.debug(
                "accounts_unavailable",
                instruction=type(update.instruction).__name__,
                signature=update.signature,
                accounts=len(update.accounts),
            )
        return roles

    def accepted(self, pool: str, input_mint: str | None = None, output_mint: str | None = None) -> bool:
        if self.event_filter.matches(pool, input_mint, output_mint):
            return True
        self.stats.filtered += 1
        self.log.debug("event_filtered", pool=pool)
        return False

    def accepted_pool(self, pool: str) -> bool:
        if self.event_filter.matches_pool(pool):
            return True
        self.stats.filtered += 1
        self.log.debug("event_filtered", pool=pool)
        return False

    def observed(self, update: InstructionUpdate, **fields: Any) -> None:
        """Log-only route."""
        self.stats.logged += 1
        self.log.info(
            "instruction_observed",
            instruction=type(update.instruction).__name__,
            signature=update.signature,
            **fields,
        )

    def ignored(self, update: InstructionUpdate) -> None:
        self.stats.ignored += 1
        self.log.debug(
            "instruction_ignored",
            instruction=type(update.instruction).__name__,
            signature=update.signature,
        )

    # ---- emission ----

    def emit(self, event: SwapEvent) -> None:
        """Render to the sink, then hand off to the notifier without waiting."""
        self.stats.emitted += 1
        try:
            self.sink.write(format_event(event, self.output_format))
        except ValueError as e:
            self.stats.render_failed += 1
            self.log.warning("event_render_failed", signature=event.signature, error=str(e))
        if self.notifier is None:
            return
        try:
            self.notifier.try_send(event)
        except asyncio.QueueFull:
            self.stats.notify_failed += 1
            self.log.warning("webhook_queue_full", signature=event.signature)
        except NotifierClosedError:
            self.stats.notify_failed += 1
            self.log.warning("webhook_queue_closed", signature=event.signature)
