"""Nested instruction traces and the processor input record.

- `InstructionNode`: one executed instruction plus the instructions it
   invoked (an owned tree, no back-references).
- `InstructionUpdate`: one decoded top-level instruction handed to a
   protocol processor, with its raw accounts and nested trace.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any


def bytes_from_hex(data_hex: str) -> bytes:
    """Decode a "0x"-prefixed (or bare) hex payload."""
    h = data_hex[2:] if data_hex.lower().startswith("0x") else data_hex
    return bytes.fromhex(h) if h else b""


@dataclass(slots=True, frozen=True)
class InstructionNode:
    """One executed instruction in a nested trace."""

    program_id: str
    accounts: tuple[str, ...]
    data: bytes
    inner: tuple[InstructionNode, ...] = ()


Trace = Sequence[InstructionNode]


def walk(trace: Trace) -> Iterator[InstructionNode]:
    """Yield every node depth-first, pre-order (parent before children).

    Uses an explicit stack so deeply nested traces cannot exhaust recursion.
    """
    stack: list[InstructionNode] = list(reversed(trace))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.inner))


@dataclass(slots=True, frozen=True)
class InstructionUpdate:
    """A decoded instruction as delivered by the transport/decoder layer."""

    program_id: str
    signature: str
    slot: int
    instruction: Any  # one variant of a protocol's instruction union
    accounts: tuple[str, ...] = ()
    inner: tuple[InstructionNode, ...] = field(default_factory=tuple)
    block_time: int | None = None
    market_cap_usd: float | None = None  # pre-computed upstream, optional
