from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from rayalert.constants import USDC_MINT, WSOL_MINT
from rayalert.core.models import DexProtocol, SwapDirection, SwapEvent, TokenInfo
from rayalert.decoding.trace import InstructionUpdate
from rayalert.output.sink import MemorySink

from factories import SIGNATURE


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def notifier() -> MagicMock:
    n = MagicMock()
    n.try_send = MagicMock(return_value=None)
    return n


@pytest.fixture
def make_update() -> Callable[..., InstructionUpdate]:
    def _make(instruction: Any, program_id: str = "program", **kwargs: Any) -> InstructionUpdate:
        kwargs.setdefault("signature", SIGNATURE)
        kwargs.setdefault("slot", 250_000_000)
        return InstructionUpdate(program_id=program_id, instruction=instruction, **kwargs)

    return _make


@pytest.fixture
def sol_usdc_event() -> SwapEvent:
    return (
        SwapEvent.builder()
        .protocol(DexProtocol.CPMM)
        .signature(SIGNATURE)
        .pool("PoolAddress1111")
        .input_token(TokenInfo(mint=WSOL_MINT, amount_raw=2_000_000_000, symbol="SOL").with_decimals(9))
        .output_token(TokenInfo(mint=USDC_MINT, amount_raw=300_000_000, symbol="USDC").with_decimals(6))
        .direction(SwapDirection.EXACT_INPUT)
        .slot(42)
        .build()
    )
