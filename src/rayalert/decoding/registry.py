"""Instruction registries: variant name -> variant class, per market.

Used to materialize decoded instructions delivered as JSON records
(`{"name": "SwapBaseInput", "args": {...}}`).
"""

from __future__ import annotations

import dataclasses
import functools
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

from rayalert.core.config import MarketType
from rayalert.decoding.instructions import AmmV4Instructions, ClmmInstructions, CpmmInstructions

InstructionRegistry = dict[str, type]


def make_instruction_registry(namespace: type) -> InstructionRegistry:
    """Collect every dataclass variant nested in a namespace class."""
    reg: InstructionRegistry = {}
    for name, value in vars(namespace).items():
        if isinstance(value, type) and dataclasses.is_dataclass(value):
            reg[name] = value
    return reg


REGISTRIES: dict[MarketType, InstructionRegistry] = {
    MarketType.CPMM: make_instruction_registry(CpmmInstructions),
    MarketType.CLMM: make_instruction_registry(ClmmInstructions),
    MarketType.AMM_V4: make_instruction_registry(AmmV4Instructions),
}


@functools.cache
def _adapter(cls: type) -> TypeAdapter[Any]:
    return TypeAdapter(cls)


def decode_instruction(market: MarketType, name: str, args: Mapping[str, Any] | None = None) -> Any | None:
    """Instantiate a variant by name, or return None if the name is unknown.

    Args are validated strictly against the variant's field types (no
    "5" for an int, no 1 for a bool). Raises ValueError for unknown
    fields and pydantic's ValidationError (also a ValueError) for missing
    or mistyped ones.
    """
    cls = REGISTRIES[market].get(name)
    if cls is None:
        return None
    args = dict(args or {})
    unknown = set(args) - {f.name for f in dataclasses.fields(cls)}
    if unknown:
        raise ValueError(f"{name}: unknown fields {sorted(unknown)}")
    return _adapter(cls).validate_python(args, strict=True)
