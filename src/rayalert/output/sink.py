"""Local sinks for rendered events."""

from __future__ import annotations

from rich.console import Console

from rayalert.core.interfaces import IEventSink


class ConsoleSink(IEventSink):
    """Write rendered events to a rich console (stdout by default).

    Markup and highlighting are disabled so JSON and addresses are printed
    verbatim.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False, soft_wrap=True)

    def write(self, rendered: str) -> None:
        self.console.print(rendered, markup=False, emoji=False)


class MemorySink(IEventSink):
    """Collect rendered events in a list (replay summaries, tests)."""

    def __init__(self) -> None:
        self.records: list[str] = []

    def write(self, rendered: str) -> None:
        self.records.append(rendered)
