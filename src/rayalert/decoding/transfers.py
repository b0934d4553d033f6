"""SPL token transfer extraction from nested instruction traces.

Swap instructions often carry only slippage bounds (`minimum_amount_out`,
`max_amount_in`). The settled amounts live in the SPL Token transfers the
swap program invokes, so they are recovered here from the nested trace.

Instruction formats
-------------------
- Transfer (3):         [3, amount u64 LE]            accounts: [source, destination, authority, ...]
- TransferChecked (12): [12, amount u64 LE, decimals] accounts: [source, mint, destination, authority, ...]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import structlog

from rayalert.constants import (
    TOKEN_PROGRAM_IDS,
    TRANSFER_CHECKED_DISCRIMINATOR,
    TRANSFER_DISCRIMINATOR,
)
from rayalert.decoding.trace import InstructionNode, Trace, walk


@dataclass(slots=True, frozen=True)
class TokenTransfer:
    """One token transfer found in a trace."""

    source: str
    destination: str
    amount: int
    mint: str | None = None  # TransferChecked only
    decimals: int | None = None  # TransferChecked only


def _u64_le(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 8], "little", signed=False)


def parse_token_transfer(node: InstructionNode) -> TokenTransfer | None:
    """Parse one instruction payload as Transfer / TransferChecked.

    Does not check the program id; returns None for any other discriminator
    or for short payloads / account lists.
    """
    data, accounts = node.data, node.accounts
    if not data:
        return None

    match data[0]:
        case d if d == TRANSFER_DISCRIMINATOR:
            if len(data) < 9 or len(accounts) < 2:
                return None
            return TokenTransfer(
                source=accounts[0],
                destination=accounts[1],
                amount=_u64_le(data, 1),
            )
        case d if d == TRANSFER_CHECKED_DISCRIMINATOR:
            if len(data) < 10 or len(accounts) < 3:
                return None
            return TokenTransfer(
                source=accounts[0],
                mint=accounts[1],
                destination=accounts[2],
                amount=_u64_le(data, 1),
                decimals=data[9],
            )
    return None


def iter_token_transfers(trace: Trace) -> Iterator[TokenTransfer]:
    """Yield token-program transfers in execution (pre-order) order."""
    for node in walk(trace):
        if node.program_id not in TOKEN_PROGRAM_IDS:
            continue
        transfer = parse_token_transfer(node)
        if transfer is not None:
            yield transfer


def find_swap_amounts(
    transfers: Iterable[TokenTransfer],
    user_source: str,
    user_destination: str,
) -> tuple[int | None, int | None]:
    """Match transfers against the user's token accounts.

    The last transfer out of `user_source` is the input amount and the last
    transfer into `user_destination` is the output amount.
    """
    input_amount: int | None = None
    output_amount: int | None = None
    for t in transfers:
        if t.source == user_source:
            input_amount = t.amount
        if t.destination == user_destination:
            output_amount = t.amount
    return input_amount, output_amount


def extract_swap_amounts(
    trace: Trace,
    user_source: str,
    user_destination: str,
    fallback_input: int,
    fallback_output: int,
    *,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> tuple[int, int]:
    """Return (input_amount, output_amount), falling back per side when unmatched."""
    log = logger or structlog.get_logger(__name__)
    transfers = list(iter_token_transfers(trace))

    log.debug("token_transfers_parsed", transfers=len(transfers), top_level=len(trace))
    for i, t in enumerate(transfers):
        log.debug(
            "token_transfer",
            index=i,
            source=t.source[:8],
            destination=t.destination[:8],
            amount=t.amount,
        )

    found_in, found_out = find_swap_amounts(transfers, user_source, user_destination)
    return (
        fallback_input if found_in is None else found_in,
        fallback_output if found_out is None else found_out,
    )
