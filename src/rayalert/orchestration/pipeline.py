"""Routing of decoded instructions to protocol processors.

Two layers, like the rest of the package:

1) `AlertPipeline`: depends only on already-built processors; routes each
   `InstructionUpdate` by program id and awaits it fully before the next.
2) `build_pipeline(...)`: wires processors from an `AlertsConfig` (enabled
   markets, filters, output format) plus a sink and optional notifier.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass

import structlog

from rayalert.core.config import AlertsConfig, MarketType
from rayalert.core.interfaces import IEventNotifier, IEventSink
from rayalert.core.models import SwapEvent
from rayalert.decoding.trace import InstructionUpdate
from rayalert.filters import EventFilter
from rayalert.processors import AmmV4Processor, BaseProcessor, ClmmProcessor, CpmmProcessor

PROCESSOR_TYPES: dict[MarketType, type[BaseProcessor]] = {
    MarketType.CPMM: CpmmProcessor,
    MarketType.CLMM: ClmmProcessor,
    MarketType.AMM_V4: AmmV4Processor,
}


@dataclass(kw_only=True)
class PipelineStats:
    updates: int = 0
    events: int = 0
    unrouted: int = 0  # program not enabled


class AlertPipeline:
    """Sequential program-id router."""

    def __init__(
        self,
        processors: Iterable[BaseProcessor],
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.processors: dict[str, BaseProcessor] = {p.program_id: p for p in processors}
        self.stats = PipelineStats()
        self.log = logger or structlog.get_logger(__name__)

    async def process(self, update: InstructionUpdate) -> SwapEvent | None:
        self.stats.updates += 1
        processor = self.processors.get(update.program_id)
        if processor is None:
            self.stats.unrouted += 1
            self.log.debug("update_unrouted", program_id=update.program_id, signature=update.signature)
            return None
        event = await processor.process(update)
        if event is not None:
            self.stats.events += 1
        return event

    async def process_many(
        self,
        updates: Iterable[InstructionUpdate] | AsyncIterable[InstructionUpdate],
    ) -> PipelineStats:
        """Process updates in order; returns the cumulative stats."""
        if isinstance(updates, AsyncIterable):
            async for update in updates:
                await self.process(update)
        else:
            for update in updates:
                await self.process(update)
        return self.stats


def build_pipeline(
    config: AlertsConfig,
    *,
    sink: IEventSink,
    notifier: IEventNotifier | None = None,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> AlertPipeline:
    """One processor per enabled market, all sharing sink and notifier.

    AMM V4 instructions expose no mints, so its processor only receives the
    pool allow-list.
    """
    log = logger or structlog.get_logger(__name__)
    full = EventFilter.of(tokens=config.token_filter, pools=config.pool_filter)
    pools_only = EventFilter.of(pools=config.pool_filter)

    processors: list[BaseProcessor] = []
    for market in MarketType:
        if market not in config.markets:
            continue
        processors.append(
            PROCESSOR_TYPES[market](
                event_filter=pools_only if market is MarketType.AMM_V4 else full,
                output_format=config.output_format,
                sink=sink,
                notifier=notifier,
                logger=log,
            )
        )
    log.info("pipeline_built", markets=[m.value for m in MarketType if m in config.markets])
    return AlertPipeline(processors, logger=log)
