"""Environment configuration.

`AlertSettings` holds the raw environment values (read once at startup,
`.env` supported); `to_config()` turns them into the typed `AlertsConfig`.
Invalid entries are dropped or replaced by defaults with a warning. The
one exception is a malformed WEBHOOK_URL, which aborts startup.
"""

from __future__ import annotations

import base58
import structlog
from pydantic import Field, HttpUrl, TypeAdapter, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rayalert.core.config import ALL_MARKETS, AlertsConfig, MarketType, OutputFormat, WebhookConfig

PUBKEY_LEN = 32


_HTTP_URL = TypeAdapter(HttpUrl)


def split_list(raw: str) -> list[str]:
    """Comma-separated list, entries trimmed, empties dropped."""
    return [s.strip() for s in raw.split(",") if s.strip()]


def is_valid_pubkey(value: str) -> bool:
    """True when `value` is base58 decoding to exactly 32 bytes."""
    try:
        return len(base58.b58decode(value)) == PUBKEY_LEN
    except ValueError:
        return False


def check_webhook_url(url: str) -> str:
    """Return `url` unchanged, or raise ValueError unless it is an absolute http(s) URL."""
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError as e:
        raise ValueError(f"WEBHOOK_URL is not a valid http(s) URL: {url!r}") from e
    return url


def parse_markets(raw: str, *, logger: structlog.stdlib.BoundLogger | None = None) -> frozenset[MarketType]:
    """Unset, empty or all-invalid means every market."""
    log = logger or structlog.get_logger(__name__)
    entries = split_list(raw)
    if not entries:
        return ALL_MARKETS
    markets: set[MarketType] = set()
    for entry in entries:
        try:
            markets.add(MarketType.parse(entry))
        except ValueError as e:
            log.warning("invalid_market", value=entry, error=str(e))
    if not markets:
        log.warning("no_valid_markets", value=raw, fallback="all")
        return ALL_MARKETS
    return frozenset(markets)


def parse_pubkeys(raw: str, var: str, *, logger: structlog.stdlib.BoundLogger | None = None) -> frozenset[str]:
    log = logger or structlog.get_logger(__name__)
    keys: set[str] = set()
    for entry in split_list(raw):
        if is_valid_pubkey(entry):
            keys.add(entry)
        else:
            log.warning("invalid_pubkey", var=var, value=entry)
    return frozenset(keys)


def parse_output_format(raw: str, *, logger: structlog.stdlib.BoundLogger | None = None) -> OutputFormat:
    if not raw.strip():
        return OutputFormat.TEXT
    try:
        return OutputFormat.parse(raw)
    except ValueError as e:
        (logger or structlog.get_logger(__name__)).warning("invalid_output_format", value=raw, error=str(e))
        return OutputFormat.TEXT


def _number(raw: str, default: float, var: str, log: structlog.stdlib.BoundLogger, cast: type = float):
    if not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        log.warning("invalid_number", var=var, value=raw, default=default)
        return default
    if value < 0:
        log.warning("invalid_number", var=var, value=raw, default=default)
        return default
    return value


class AlertSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Market and filter selection
    filter_markets: str = Field(default="", alias="FILTER_MARKETS", description="cpmm, clmm, amm_v4 (default: all)")
    filter_tokens: str = Field(default="", alias="FILTER_TOKENS", description="Token mints to track")
    filter_amms: str = Field(default="", alias="FILTER_AMMS", description="Pool addresses to track")

    # Output
    output_format: str = Field(default="text", alias="OUTPUT_FORMAT", description="text, json, json_pretty")

    # Webhook delivery (raw strings: unparseable values fall back to defaults)
    webhook_url: str = Field(default="", alias="WEBHOOK_URL", description="Webhook endpoint; empty disables")
    webhook_timeout_secs: str = Field(default="", alias="WEBHOOK_TIMEOUT_SECS")
    webhook_max_retries: str = Field(default="", alias="WEBHOOK_MAX_RETRIES")
    webhook_retry_backoff_ms: str = Field(default="", alias="WEBHOOK_RETRY_BACKOFF_MS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    def webhook_config(self, *, logger: structlog.stdlib.BoundLogger | None = None) -> WebhookConfig | None:
        """None when WEBHOOK_URL is unset or empty; ValueError when it is malformed."""
        url = self.webhook_url.strip()
        if not url:
            return None
        check_webhook_url(url)
        log = logger or structlog.get_logger(__name__)
        defaults = WebhookConfig(url=url)
        timeout = _number(self.webhook_timeout_secs, defaults.timeout_s, "WEBHOOK_TIMEOUT_SECS", log)
        retries = _number(self.webhook_max_retries, defaults.max_retries, "WEBHOOK_MAX_RETRIES", log, int)
        backoff_ms = _number(
            self.webhook_retry_backoff_ms, defaults.retry_backoff_s * 1000, "WEBHOOK_RETRY_BACKOFF_MS", log, int
        )
        return WebhookConfig(
            url=url,
            timeout_s=float(timeout),
            max_retries=int(retries),
            retry_backoff_s=backoff_ms / 1000,
        )

    def to_config(self, *, logger: structlog.stdlib.BoundLogger | None = None) -> AlertsConfig:
        log = logger or structlog.get_logger(__name__)
        return AlertsConfig(
            markets=parse_markets(self.filter_markets, logger=log),
            token_filter=parse_pubkeys(self.filter_tokens, "FILTER_TOKENS", logger=log),
            pool_filter=parse_pubkeys(self.filter_amms, "FILTER_AMMS", logger=log),
            output_format=parse_output_format(self.output_format, logger=log),
            webhook=self.webhook_config(logger=log),
        )
