import asyncio
import time
from dataclasses import replace
from typing import TextIO

import click
import structlog
from rich.console import Console

from rayalert.core.config import AlertsConfig, MarketType, OutputFormat
from rayalert.logging_config import setup_logging
from rayalert.orchestration import build_pipeline, iter_updates
from rayalert.orchestration.records import PROGRAM_IDS
from rayalert.output import ConsoleSink, WebhookNotifier
from rayalert.settings import AlertSettings

# stdout carries events; banners and summaries go to stderr
console = Console(stderr=True)


def _load(output_format: str | None) -> tuple[AlertSettings, AlertsConfig]:
    settings = AlertSettings()
    setup_logging(settings.log_level, settings.log_json)
    try:
        config = settings.to_config(logger=structlog.get_logger("rayalert.settings"))
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    if output_format:
        config = replace(config, output_format=OutputFormat.parse(output_format))
    return settings, config


def print_config(config: AlertsConfig) -> None:
    console.print("[bold]Raydium alerts[/]")
    for market in MarketType:
        if market in config.markets:
            console.print(f"  [green]listening[/] {market.value:<7} {PROGRAM_IDS[market]}")

    if config.token_filter:
        console.print(f"  token filter: {len(config.token_filter)} mint(s)")
        for mint in sorted(config.token_filter):
            console.print(f"    - {mint}")
    else:
        console.print("  token filter: [dim]none (all tokens)[/]")

    if config.pool_filter:
        console.print(f"  pool filter: {len(config.pool_filter)} pool(s)")
        for pool in sorted(config.pool_filter):
            console.print(f"    - {pool}")
    else:
        console.print("  pool filter: [dim]none (all pools)[/]")

    console.print(f"  output format: {config.output_format.value}")

    if config.webhook is not None:
        wh = config.webhook
        console.print(
            f"  webhook: [green]enabled[/] {wh.url} "
            f"(timeout={wh.timeout_s:g}s, max_retries={wh.max_retries}, backoff={wh.retry_backoff_s * 1000:g}ms)"
        )
    else:
        console.print("  webhook: [dim]disabled[/]")


@click.group()
def cli() -> None:
    """rayalert: Raydium swap and liquidity alerts."""


@cli.command("show-config")
def show_config_cmd() -> None:
    """Print the effective configuration read from the environment."""
    _, config = _load(None)
    print_config(config)


@cli.command("replay")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "json_pretty"]),
    default=None,
    help="Override OUTPUT_FORMAT",
)
def replay_cmd(source: TextIO, output_format: str | None) -> None:
    """Run decoded-instruction records (NDJSON, '-' for stdin) through the processors."""
    _, config = _load(output_format)
    print_config(config)

    async def run() -> None:
        t0 = time.time()
        notifier = WebhookNotifier(config.webhook) if config.webhook is not None else None
        pipeline = build_pipeline(config, sink=ConsoleSink(), notifier=notifier)
        try:
            stats = await pipeline.process_many(iter_updates(source))
        finally:
            if notifier is not None:
                await notifier.aclose()

        elapsed = time.time() - t0
        console.print(f"[bold]done[/]: {stats.updates} updates • {elapsed:.2f}s")
        console.print(
            f"[bold]summary[/]: "
            f"[green]events[/]={stats.events}  "
            f"[yellow]unrouted[/]={stats.unrouted}"
        )
        if notifier is not None:
            ds = notifier.stats
            console.print(
                f"[bold]webhook[/]: "
                f"[green]delivered[/]={ds.delivered}  "
                f"[red]exhausted[/]={ds.exhausted}  "
                f"[yellow]dropped[/]={ds.dropped}"
            )

    asyncio.run(run())


if __name__ == "__main__":
    cli()
