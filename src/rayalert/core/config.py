from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MarketType(str, Enum):
    """Raydium market programs that can be enabled independently."""

    CPMM = "cpmm"
    CLMM = "clmm"
    AMM_V4 = "amm_v4"

    @classmethod
    def parse(cls, value: str) -> MarketType:
        """Parse a market name (case-insensitive, several amm_v4 spellings)."""
        key = value.strip().lower()
        if key in ("amm_v4", "ammv4", "amm-v4", "v4"):
            return cls.AMM_V4
        for market in cls:
            if market.value == key:
                return market
        raise ValueError(f"Unknown market type: '{value}'. Valid options: cpmm, clmm, amm_v4")


ALL_MARKETS: frozenset[MarketType] = frozenset(MarketType)


class OutputFormat(str, Enum):
    """Rendering used for the local sink."""

    TEXT = "text"
    JSON = "json"
    JSON_PRETTY = "json_pretty"

    @classmethod
    def parse(cls, value: str) -> OutputFormat:
        key = value.strip().lower()
        if key in ("text", "txt"):
            return cls.TEXT
        if key == "json":
            return cls.JSON
        if key in ("json_pretty", "json-pretty", "jsonpretty"):
            return cls.JSON_PRETTY
        raise ValueError(f"Unknown output format: '{value}'. Valid options: text, json, json_pretty")


@dataclass(frozen=True)
class WebhookConfig:
    """Configuration for webhook delivery."""

    url: str
    timeout_s: float = 10.0
    max_retries: int = 3
    retry_backoff_s: float = 0.5

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


@dataclass(frozen=True)
class AlertsConfig:
    """Effective runtime configuration (markets, filters, output, webhook)."""

    markets: frozenset[MarketType] = ALL_MARKETS
    token_filter: frozenset[str] = field(default_factory=frozenset)
    pool_filter: frozenset[str] = field(default_factory=frozenset)
    output_format: OutputFormat = OutputFormat.TEXT
    webhook: WebhookConfig | None = None  # None disables delivery entirely
