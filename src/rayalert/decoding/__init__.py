"""Decoded instruction inputs and nested-trace transfer extraction.

This package provides:
- Tagged unions of decoded Raydium instruction variants
- Account-role arrangement for raw account lists
- Nested instruction traces and SPL token transfer extraction
- Name-based registries for loading decoded instructions
"""

from rayalert.decoding.accounts import arrange_accounts
from rayalert.decoding.instructions import (
    AmmV4Instruction,
    AmmV4Instructions,
    ClmmInstruction,
    ClmmInstructions,
    CpmmInstruction,
    CpmmInstructions,
)
from rayalert.decoding.registry import REGISTRIES, decode_instruction
from rayalert.decoding.trace import InstructionNode, InstructionUpdate, walk
from rayalert.decoding.transfers import (
    TokenTransfer,
    extract_swap_amounts,
    find_swap_amounts,
    iter_token_transfers,
    parse_token_transfer,
)

__all__ = [
    "arrange_accounts",
    "AmmV4Instruction",
    "AmmV4Instructions",
    "ClmmInstruction",
    "ClmmInstructions",
    "CpmmInstruction",
    "CpmmInstructions",
    "REGISTRIES",
    "decode_instruction",
    "InstructionNode",
    "InstructionUpdate",
    "walk",
    "TokenTransfer",
    "extract_swap_amounts",
    "find_swap_amounts",
    "iter_token_transfers",
    "parse_token_transfer",
]
