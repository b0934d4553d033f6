"""Protocol-agnostic event model.

This module defines:
- `TokenInfo`: one side of an event (mint, raw amount, optional metadata).
- `SwapEvent`: the normalized record emitted for swaps, liquidity changes
   and pool creations across CPMM, CLMM and AMM-V4.
- `SwapEventBuilder`: accumulates fields and fails fast on missing
   required ones.

Design notes
------------
- Records are frozen; they flow by value through filtering, formatting and
  delivery.
- `to_dict` omits absent optional fields instead of emitting nulls, and
  enum values are snake_case strings on the wire.
- Derived amounts are pure functions of `amount_raw` and `decimals`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from rayalert.constants import BASE_MINTS


class DexProtocol(str, Enum):
    CPMM = "cpmm"
    CLMM = "clmm"
    AMM_V4 = "amm_v4"

    @property
    def label(self) -> str:
        return {"cpmm": "CPMM", "clmm": "CLMM", "amm_v4": "AMM-V4"}[self.value]


class SwapDirection(str, Enum):
    EXACT_INPUT = "exact_input"
    EXACT_OUTPUT = "exact_output"
    UNKNOWN = "unknown"


class EventType(str, Enum):
    SWAP = "swap"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    CREATE_POOL = "create_pool"

    @property
    def label(self) -> str:
        return {
            "swap": "SWAP",
            "add_liquidity": "ADD_LP",
            "remove_liquidity": "REMOVE_LP",
            "create_pool": "CREATE_POOL",
        }[self.value]


class EventBuildError(ValueError):
    """Raised when a SwapEvent is built without its required fields."""


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# === Token side ===


@dataclass(slots=True, frozen=True)
class TokenInfo:
    """Token amount with optional metadata."""

    mint: str
    amount_raw: int  # smallest units
    symbol: str | None = None
    decimals: int | None = None
    amount: float | None = None  # amount_raw / 10**decimals
    amount_usd: float | None = None

    def with_symbol(self, symbol: str) -> TokenInfo:
        return replace(self, symbol=symbol)

    def with_decimals(self, decimals: int) -> TokenInfo:
        """Set decimals and derive the human-readable amount."""
        return replace(self, decimals=decimals, amount=self.amount_raw / 10**decimals)

    def with_usd_value(self, usd: float) -> TokenInfo:
        return replace(self, amount_usd=usd)

    def is_base_token(self) -> bool:
        """True for well-known reference assets (wSOL, USDC, USDT)."""
        return self.mint in BASE_MINTS

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "mint": self.mint,
                "symbol": self.symbol,
                "decimals": self.decimals,
                "amount_raw": self.amount_raw,
                "amount": self.amount,
                "amount_usd": self.amount_usd,
            }
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TokenInfo:
        return cls(
            mint=d["mint"],
            amount_raw=int(d["amount_raw"]),
            symbol=d.get("symbol"),
            decimals=d.get("decimals"),
            amount=d.get("amount"),
            amount_usd=d.get("amount_usd"),
        )


# === Normalized event ===


@dataclass(slots=True, frozen=True)
class SwapEvent:
    """Normalized swap / liquidity / pool-creation event."""

    event_type: EventType
    protocol: DexProtocol
    signature: str
    pool: str
    input_token: TokenInfo | None = None
    output_token: TokenInfo | None = None
    direction: SwapDirection = SwapDirection.UNKNOWN
    fee: int | None = None  # raw token units
    maker: str | None = None
    market_cap_usd: float | None = None
    slot: int = 0
    timestamp: int | None = None  # unix seconds

    @staticmethod
    def builder() -> SwapEventBuilder:
        return SwapEventBuilder()

    # ---- derived accessors ----

    def price(self) -> float | None:
        """Output per input in human units, None if unknown or input is zero."""
        if self.input_token is None or self.output_token is None:
            return None
        inp, out = self.input_token.amount, self.output_token.amount
        if inp is None or out is None or inp == 0:
            return None
        return out / inp

    def inverse_price(self) -> float | None:
        """Input per output in human units, None if unknown or output is zero."""
        if self.input_token is None or self.output_token is None:
            return None
        inp, out = self.input_token.amount, self.output_token.amount
        if inp is None or out is None or out == 0:
            return None
        return inp / out

    def usd_value(self) -> float | None:
        for token in (self.input_token, self.output_token):
            if token is not None and token.amount_usd is not None:
                return token.amount_usd
        return None

    # ---- serialization ----

    def to_dict(self) -> dict[str, Any]:
        """Structural dict with absent optional fields omitted."""
        return _drop_none(
            {
                "event_type": self.event_type.value,
                "protocol": self.protocol.value,
                "signature": self.signature,
                "pool": self.pool,
                "input_token": self.input_token.to_dict() if self.input_token else None,
                "output_token": self.output_token.to_dict() if self.output_token else None,
                "direction": self.direction.value,
                "fee": self.fee,
                "maker": self.maker,
                "market_cap_usd": self.market_cap_usd,
                "slot": self.slot,
                "timestamp": self.timestamp,
            }
        )

    def to_json(self, *, pretty: bool = False) -> str:
        """Strict JSON; raises ValueError for NaN or infinite floats."""
        if pretty:
            return json.dumps(self.to_dict(), indent=2, ensure_ascii=False, allow_nan=False)
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False, allow_nan=False)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SwapEvent:
        inp = d.get("input_token")
        out = d.get("output_token")
        return cls(
            event_type=EventType(d.get("event_type", EventType.SWAP.value)),
            protocol=DexProtocol(d["protocol"]),
            signature=d["signature"],
            pool=d["pool"],
            input_token=TokenInfo.from_dict(inp) if inp is not None else None,
            output_token=TokenInfo.from_dict(out) if out is not None else None,
            direction=SwapDirection(d.get("direction", SwapDirection.UNKNOWN.value)),
            fee=d.get("fee"),
            maker=d.get("maker"),
            market_cap_usd=d.get("market_cap_usd"),
            slot=int(d.get("slot", 0)),
            timestamp=d.get("timestamp"),
        )

    @classmethod
    def from_json(cls, text: str) -> SwapEvent:
        return cls.from_dict(json.loads(text))


# === Builder ===


_REQUIRED = ("protocol", "signature", "pool")


class SwapEventBuilder:
    """Fluent builder for SwapEvent.

    `build()` raises `EventBuildError` when protocol, signature or pool were
    never set; it never defaults them.
    """

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {
            "event_type": EventType.SWAP,
            "direction": SwapDirection.UNKNOWN,
            "slot": 0,
        }

    def _set(self, name: str, value: Any) -> SwapEventBuilder:
        self._fields[name] = value
        return self

    def event_type(self, event_type: EventType) -> SwapEventBuilder:
        return self._set("event_type", event_type)

    def protocol(self, protocol: DexProtocol) -> SwapEventBuilder:
        return self._set("protocol", protocol)

    def signature(self, signature: str) -> SwapEventBuilder:
        return self._set("signature", signature)

    def pool(self, pool: str) -> SwapEventBuilder:
        return self._set("pool", pool)

    def input_token(self, token: TokenInfo) -> SwapEventBuilder:
        return self._set("input_token", token)

    def input_mint_amount(self, mint: str, amount: int) -> SwapEventBuilder:
        return self._set("input_token", TokenInfo(mint=mint, amount_raw=amount))

    def output_token(self, token: TokenInfo) -> SwapEventBuilder:
        return self._set("output_token", token)

    def output_mint_amount(self, mint: str, amount: int) -> SwapEventBuilder:
        return self._set("output_token", TokenInfo(mint=mint, amount_raw=amount))

    def direction(self, direction: SwapDirection) -> SwapEventBuilder:
        return self._set("direction", direction)

    def fee(self, fee: int) -> SwapEventBuilder:
        return self._set("fee", fee)

    def maker(self, maker: str) -> SwapEventBuilder:
        return self._set("maker", maker)

    def market_cap_usd(self, mcap: float | None) -> SwapEventBuilder:
        return self._set("market_cap_usd", mcap)

    def slot(self, slot: int) -> SwapEventBuilder:
        return self._set("slot", slot)

    def timestamp(self, ts: int | None) -> SwapEventBuilder:
        return self._set("timestamp", ts)

    def build(self) -> SwapEvent:
        missing = [name for name in _REQUIRED if self._fields.get(name) is None]
        if missing:
            raise EventBuildError(f"SwapEvent is missing required field(s): {', '.join(missing)}")
        return SwapEvent(**self._fields)
