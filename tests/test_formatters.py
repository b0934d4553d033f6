import json

import pytest

from rayalert.constants import WSOL_MINT
from rayalert.core.config import OutputFormat
from rayalert.core.models import DexProtocol, EventType, SwapEvent, TokenInfo
from rayalert.output.formatters import format_event, format_number, format_text, short_address

MACARON_MINT = "MACARONmint1111111111111111111111111111111"


def _swap(**kwargs) -> SwapEvent:
    builder = (
        SwapEvent.builder()
        .protocol(kwargs.pop("protocol", DexProtocol.CPMM))
        .signature(kwargs.pop("signature", "5abc123def456789xyz"))
        .pool("PoolAddr")
    )
    for name, value in kwargs.items():
        args = value if isinstance(value, tuple) else (value,)
        getattr(builder, name)(*args)
    return builder.build()


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0.00"),
        (999.994, "999.99"),
        (1_500, "1.50K"),
        (615_340, "615.34K"),
        (2_500_000, "2.50M"),
        (3_200_000_000, "3.20B"),
    ],
)
def test_format_number(value: float, expected: str) -> None:
    assert format_number(value) == expected


def test_short_address() -> None:
    assert short_address("7xKXtQRzdP9WmUHQzNJJfJnRhPs8") == "7xKXtQ...hPs8"
    assert short_address("abcdefghijkl") == "abcdefghijkl"


def test_text_layout_puts_base_asset_first() -> None:
    sol = TokenInfo(mint=WSOL_MINT, amount_raw=11_988_000_000, symbol="SOL").with_decimals(9).with_usd_value(1491.19)
    macaron = TokenInfo(mint=MACARON_MINT, amount_raw=115_007_000, symbol="MACARON").with_decimals(4)
    event = _swap(
        input_token=macaron,
        output_token=sol,
        maker="7xKXtQRzdP9WmUHQzNJJfJnRhPs8",
        market_cap_usd=615_340.0,
        fee=2500,
    )

    assert format_text(event) == "\n".join(
        [
            "🔄 SWAP [CPMM]",
            "🔷 SOL 11.9880 ($1491.19)",
            "🪙 MACARON 11500.7000",
            "🔎 Maker: 7xKXtQ...hPs8",
            "📈 MCap: $615.34K",
            "💰 Fee: 2500",
            "🔗 https://solscan.io/tx/5abc123def45...",
        ]
    )


def test_text_keeps_input_first_without_base_asset() -> None:
    event = _swap(
        input_mint_amount=("MintAAAAAAAAAAAA", 10),
        output_mint_amount=("MintBBBBBBBBBBBB", 20),
    )
    lines = format_text(event).splitlines()
    # no symbol: first 8 chars of the mint; no decimals: raw amount
    assert lines[1] == "🔷 MintAAAA 10"
    assert lines[2] == "🪙 MintBBBB 20"


def test_text_optional_lines_are_omitted() -> None:
    event = _swap(signature="shortsig", event_type=EventType.CREATE_POOL, protocol=DexProtocol.AMM_V4)
    assert format_text(event).splitlines() == [
        "🆕 CREATE_POOL [AMM-V4]",
        "🔗 https://solscan.io/tx/shortsig",
    ]


def test_liquidity_headers() -> None:
    add = _swap(event_type=EventType.ADD_LIQUIDITY, protocol=DexProtocol.CLMM)
    remove = _swap(event_type=EventType.REMOVE_LIQUIDITY)
    assert format_text(add).startswith("💧 ADD_LP [CLMM]")
    assert format_text(remove).startswith("🔥 REMOVE_LP [CPMM]")


def test_format_event_dispatch(sol_usdc_event: SwapEvent) -> None:
    compact = format_event(sol_usdc_event, OutputFormat.JSON)
    pretty = format_event(sol_usdc_event, OutputFormat.JSON_PRETTY)
    assert json.loads(compact) == sol_usdc_event.to_dict()
    assert pretty.startswith("{\n  ")
    assert format_event(sol_usdc_event, OutputFormat.TEXT).startswith("🔄 SWAP [CPMM]")
