"""Allow-list filtering of events by pool and token mint."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class EventFilter:
    """Pool / token allow-lists; an empty set means unrestricted.

    Built once at startup and shared read-only by every processor.
    """

    tokens: frozenset[str] = field(default_factory=frozenset)
    pools: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, tokens: Iterable[str] = (), pools: Iterable[str] = ()) -> EventFilter:
        return cls(tokens=frozenset(tokens), pools=frozenset(pools))

    @property
    def unrestricted(self) -> bool:
        return not self.tokens and not self.pools

    def matches(
        self,
        pool: str,
        input_mint: str | None = None,
        output_mint: str | None = None,
    ) -> bool:
        """OR across criteria: pool listed, or either supplied mint listed."""
        if self.unrestricted:
            return True
        if pool in self.pools:
            return True
        return any(m is not None and m in self.tokens for m in (input_mint, output_mint))

    def matches_pool(self, pool: str) -> bool:
        """Filter for events that carry no mints.

        Token filters cannot apply, so only a configured pool filter rejects.
        """
        if not self.pools:
            return True
        return pool in self.pools
