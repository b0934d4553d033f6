import pytest
from structlog.testing import capture_logs

from rayalert.constants import CPMM_PROGRAM_ID, USDC_MINT, WSOL_MINT
from rayalert.core.config import ALL_MARKETS, MarketType, OutputFormat, WebhookConfig
from rayalert.settings import AlertSettings, check_webhook_url, is_valid_pubkey, parse_markets, split_list

ENV_VARS = (
    "FILTER_MARKETS",
    "FILTER_TOKENS",
    "FILTER_AMMS",
    "OUTPUT_FORMAT",
    "WEBHOOK_URL",
    "WEBHOOK_TIMEOUT_SECS",
    "WEBHOOK_MAX_RETRIES",
    "WEBHOOK_RETRY_BACKOFF_MS",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def load() -> AlertSettings:
    return AlertSettings(_env_file=None)


def test_defaults() -> None:
    config = load().to_config()
    assert config.markets == ALL_MARKETS
    assert config.token_filter == frozenset()
    assert config.pool_filter == frozenset()
    assert config.output_format is OutputFormat.TEXT
    assert config.webhook is None


def test_split_list() -> None:
    assert split_list(" a, ,b ,,c ") == ["a", "b", "c"]
    assert split_list("") == []


def test_market_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FILTER_MARKETS", "CPMM, amm-v4")
    assert load().to_config().markets == {MarketType.CPMM, MarketType.AMM_V4}


def test_invalid_markets_fall_back_to_all() -> None:
    with capture_logs() as logs:
        markets = parse_markets("orca, meteora")
    assert markets == ALL_MARKETS
    assert [e["event"] for e in logs].count("invalid_market") == 2
    assert any(e["event"] == "no_valid_markets" for e in logs)


def test_partially_invalid_markets_keep_valid_ones() -> None:
    assert parse_markets("clmm,orca") == {MarketType.CLMM}


def test_is_valid_pubkey() -> None:
    assert is_valid_pubkey(WSOL_MINT)
    assert is_valid_pubkey(CPMM_PROGRAM_ID)
    assert not is_valid_pubkey("abc")  # decodes, but not 32 bytes
    assert not is_valid_pubkey("0OIl" * 11)  # not base58


def test_invalid_pubkeys_are_dropped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FILTER_TOKENS", f"{WSOL_MINT}, not-a-key ,{USDC_MINT}")
    monkeypatch.setenv("FILTER_AMMS", "garbage")

    with capture_logs() as logs:
        config = load().to_config()

    assert config.token_filter == {WSOL_MINT, USDC_MINT}
    assert config.pool_filter == frozenset()
    invalid = [e for e in logs if e["event"] == "invalid_pubkey"]
    assert {(e["var"], e["value"]) for e in invalid} == {("FILTER_TOKENS", "not-a-key"), ("FILTER_AMMS", "garbage")}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("json", OutputFormat.JSON),
        ("json-pretty", OutputFormat.JSON_PRETTY),
        ("JsonPretty", OutputFormat.JSON_PRETTY),
        ("txt", OutputFormat.TEXT),
        ("xml", OutputFormat.TEXT),
    ],
)
def test_output_format(monkeypatch: pytest.MonkeyPatch, raw: str, expected: OutputFormat) -> None:
    monkeypatch.setenv("OUTPUT_FORMAT", raw)
    assert load().to_config().output_format is expected


def test_webhook_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.test/x")
    assert load().webhook_config() == WebhookConfig(
        url="https://hooks.example.test/x",
        timeout_s=10.0,
        max_retries=3,
        retry_backoff_s=0.5,
    )


def test_webhook_custom_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.test/x")
    monkeypatch.setenv("WEBHOOK_TIMEOUT_SECS", "5")
    monkeypatch.setenv("WEBHOOK_MAX_RETRIES", "7")
    monkeypatch.setenv("WEBHOOK_RETRY_BACKOFF_MS", "250")

    webhook = load().to_config().webhook

    assert webhook.timeout_s == 5.0
    assert webhook.max_retries == 7
    assert webhook.retry_backoff_s == 0.25
    assert webhook.max_attempts == 8


def test_webhook_unparseable_values_use_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.test/x")
    monkeypatch.setenv("WEBHOOK_MAX_RETRIES", "three")
    monkeypatch.setenv("WEBHOOK_RETRY_BACKOFF_MS", "-5")

    with capture_logs() as logs:
        webhook = load().webhook_config()

    assert webhook.max_retries == 3
    assert webhook.retry_backoff_s == 0.5
    assert [e["var"] for e in logs if e["event"] == "invalid_number"] == [
        "WEBHOOK_MAX_RETRIES",
        "WEBHOOK_RETRY_BACKOFF_MS",
    ]


def test_blank_webhook_url_disables_delivery(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBHOOK_URL", "   ")
    assert load().webhook_config() is None


def test_logging_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_JSON", "true")
    settings = load()
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True


@pytest.mark.parametrize("url", ["not a url", "ftp://hooks.example.test/x", "https://", "hooks.example.test/x"])
def test_malformed_webhook_url_is_rejected(monkeypatch: pytest.MonkeyPatch, url: str) -> None:
    monkeypatch.setenv("WEBHOOK_URL", url)
    with pytest.raises(ValueError, match="WEBHOOK_URL"):
        load().to_config()


def test_check_webhook_url_keeps_value() -> None:
    assert check_webhook_url("http://localhost:8080/hook") == "http://localhost:8080/hook"
