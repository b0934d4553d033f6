"""Text and JSON renderings of SwapEvent.

Text layout (one multi-line record per event)::

    🔄 SWAP [CPMM]
    🔷 SOL 11.9880 ($1491.19)
    🪙 MACARON 11500.7000
    🔎 Maker: 7xKXtQ...hPs8
    📈 MCap: $615.34K
    💰 Fee: 2500
    🔗 https://solscan.io/tx/5abc123def45...
"""

from __future__ import annotations

from rayalert.constants import EXPLORER_TX_URL
from rayalert.core.config import OutputFormat
from rayalert.core.models import EventType, SwapEvent, TokenInfo

EVENT_EMOJI: dict[EventType, str] = {
    EventType.SWAP: "🔄",
    EventType.ADD_LIQUIDITY: "💧",
    EventType.REMOVE_LIQUIDITY: "🔥",
    EventType.CREATE_POOL: "🆕",
}


def format_number(n: float) -> str:
    """Abbreviate with K/M/B suffixes, two decimals."""
    if n >= 1_000_000_000:
        return f"{n / 1_000_000_000:.2f}B"
    if n >= 1_000_000:
        return f"{n / 1_000_000:.2f}M"
    if n >= 1_000:
        return f"{n / 1_000:.2f}K"
    return f"{n:.2f}"


def short_address(addr: str) -> str:
    """Elide to first 6 + last 4 characters when longer than 12."""
    if len(addr) > 12:
        return f"{addr[:6]}...{addr[-4:]}"
    return addr


def format_token(token: TokenInfo, *, is_base: bool) -> str:
    emoji = "🔷" if is_base else "🪙"
    symbol = token.symbol or token.mint[:8]
    amount = f"{token.amount:.4f}" if token.amount is not None else str(token.amount_raw)
    if token.amount_usd is not None:
        return f"{emoji} {symbol} {amount} (${token.amount_usd:.2f})"
    return f"{emoji} {symbol} {amount}"


def base_quote_order(event: SwapEvent) -> tuple[TokenInfo | None, TokenInfo | None]:
    """Order the two sides so a base asset is shown first."""
    inp, out = event.input_token, event.output_token
    if inp is not None and out is not None:
        if out.is_base_token() and not inp.is_base_token():
            return out, inp
        return inp, out
    if inp is not None:
        return inp, None
    if out is not None:
        return out, None
    return None, None


def format_text(event: SwapEvent) -> str:
    lines = [f"{EVENT_EMOJI[event.event_type]} {event.event_type.label} [{event.protocol.label}]"]

    base, quote = base_quote_order(event)
    if base is not None:
        lines.append(format_token(base, is_base=True))
    if quote is not None:
        lines.append(format_token(quote, is_base=False))

    if event.maker is not None:
        lines.append(f"🔎 Maker: {short_address(event.maker)}")
    if event.market_cap_usd is not None:
        lines.append(f"📈 MCap: ${format_number(event.market_cap_usd)}")
    if event.fee is not None:
        lines.append(f"💰 Fee: {event.fee}")

    sig = event.signature
    short_sig = f"{sig[:12]}..." if len(sig) > 12 else sig
    lines.append(f"🔗 {EXPLORER_TX_URL}{short_sig}")
    return "\n".join(lines)


def format_json(event: SwapEvent) -> str:
    return event.to_json()


def format_json_pretty(event: SwapEvent) -> str:
    return event.to_json(pretty=True)


def format_event(event: SwapEvent, fmt: OutputFormat) -> str:
    match fmt:
        case OutputFormat.TEXT:
            return format_text(event)
        case OutputFormat.JSON:
            return format_json(event)
        case OutputFormat.JSON_PRETTY:
            return format_json_pretty(event)
    raise ValueError(f"Unsupported output format: {fmt!r}")
