"""Decoded-instruction records (NDJSON) -> InstructionUpdate.

Record shape::

    {
      "program": "cpmm" | "clmm" | "amm_v4",
      "signature": "...",
      "slot": 123,
      "block_time": 1700000000,          # optional
      "market_cap_usd": 615340.0,        # optional
      "instruction": {"name": "SwapBaseInput", "args": {...}},
      "accounts": ["...", ...],
      "inner_instructions": [{"program_id": "...", "accounts": [...], "data": "0x..", "inner": [...]}]
    }
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rayalert.constants import AMM_V4_PROGRAM_ID, CLMM_PROGRAM_ID, CPMM_PROGRAM_ID
from rayalert.core.config import MarketType
from rayalert.decoding.registry import decode_instruction
from rayalert.decoding.trace import InstructionNode, InstructionUpdate, bytes_from_hex

PROGRAM_IDS: dict[MarketType, str] = {
    MarketType.CPMM: CPMM_PROGRAM_ID,
    MarketType.CLMM: CLMM_PROGRAM_ID,
    MarketType.AMM_V4: AMM_V4_PROGRAM_ID,
}


class RecordError(ValueError):
    """A record cannot be turned into an InstructionUpdate."""


class InstructionRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class InnerInstructionRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    program_id: str
    accounts: list[str] = Field(default_factory=list)
    data: str = ""
    inner: list[InnerInstructionRecord] = Field(default_factory=list)

    @field_validator("data")
    @classmethod
    def _hex(cls, v: str) -> str:
        bytes_from_hex(v)
        return v

    def to_node(self) -> InstructionNode:
        return InstructionNode(
            program_id=self.program_id,
            accounts=tuple(self.accounts),
            data=bytes_from_hex(self.data),
            inner=tuple(n.to_node() for n in self.inner),
        )


class UpdateRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    program: str
    signature: str
    slot: int = Field(default=0, ge=0)
    block_time: int | None = None
    market_cap_usd: float | None = Field(default=None, allow_inf_nan=False)
    instruction: InstructionRecord
    accounts: list[str] = Field(default_factory=list)
    inner_instructions: list[InnerInstructionRecord] = Field(default_factory=list)

    @field_validator("program")
    @classmethod
    def _market(cls, v: str) -> str:
        MarketType.parse(v)
        return v

    def to_update(self) -> InstructionUpdate | None:
        market = MarketType.parse(self.program)
        instruction = decode_instruction(market, self.instruction.name, self.instruction.args)
        if instruction is None:
            return None
        return InstructionUpdate(
            program_id=PROGRAM_IDS[market],
            signature=self.signature,
            slot=self.slot,
            instruction=instruction,
            accounts=tuple(self.accounts),
            inner=tuple(n.to_node() for n in self.inner_instructions),
            block_time=self.block_time,
            market_cap_usd=self.market_cap_usd,
        )


def _to_update(record: UpdateRecord) -> InstructionUpdate | None:
    try:
        return record.to_update()
    except ValueError as e:
        raise RecordError(str(e)) from e


def load_update(record: dict[str, Any]) -> InstructionUpdate | None:
    """Build an update from one record.

    Returns None when the instruction name is not a known variant of the
    record's program. Raises RecordError for invalid records, including
    fields of the wrong type.
    """
    try:
        parsed = UpdateRecord.model_validate(record)
    except ValidationError as e:
        raise RecordError(str(e)) from e
    return _to_update(parsed)


def iter_updates(
    lines: Iterable[str],
    *,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> Iterator[InstructionUpdate]:
    """Parse NDJSON lines; blank, malformed and unknown records are skipped."""
    log = logger or structlog.get_logger(__name__)
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = UpdateRecord.model_validate_json(line)
            update = _to_update(record)
        except (ValidationError, RecordError) as e:
            log.warning("record_malformed", line=lineno, error=str(e))
            continue
        if update is None:
            log.debug("record_unknown_instruction", line=lineno, instruction=record.instruction.name)
            continue
        yield update
