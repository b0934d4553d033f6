"""Raydium CPMM (constant product) processor."""

from __future__ import annotations

from rayalert.constants import CPMM_PROGRAM_ID
from rayalert.core.models import DexProtocol, EventType, SwapDirection, SwapEvent
from rayalert.decoding.instructions import CpmmInstructions as Ix
from rayalert.decoding.trace import InstructionUpdate
from rayalert.processors.base import BaseProcessor, Route


class CpmmProcessor(BaseProcessor):
    """Swaps are filtered by pool or mint; liquidity changes always emit."""

    protocol = DexProtocol.CPMM
    program_id = CPMM_PROGRAM_ID

    ROUTES = {
        Ix.SwapBaseInput: Route.FILTERED_SWAP,
        Ix.SwapBaseOutput: Route.FILTERED_SWAP,
        Ix.SwapEvent: Route.FILTERED_SWAP,
        Ix.Deposit: Route.UNCONDITIONAL_EVENT,
        Ix.Withdraw: Route.UNCONDITIONAL_EVENT,
        Ix.LpChangeEvent: Route.UNCONDITIONAL_EVENT,
        Ix.Initialize: Route.LOG_ONLY,
        Ix.CreateAmmConfig: Route.IGNORED,
        Ix.UpdateAmmConfig: Route.IGNORED,
        Ix.UpdatePoolStatus: Route.IGNORED,
        Ix.CollectProtocolFee: Route.IGNORED,
        Ix.CollectFundFee: Route.IGNORED,
    }

    def dispatch(self, update: InstructionUpdate) -> SwapEvent | None:
        ix = update.instruction
        match ix:
            case Ix.SwapBaseInput(amount_in=amount_in, minimum_amount_out=amount_out):
                return self._swap(update, amount_in, amount_out, SwapDirection.EXACT_INPUT)
            case Ix.SwapBaseOutput(max_amount_in=amount_in, amount_out=amount_out):
                return self._swap(update, amount_in, amount_out, SwapDirection.EXACT_OUTPUT)
            case Ix.SwapEvent():
                if not self.accepted(ix.pool_id, ix.input_mint, ix.output_mint):
                    return None
                return (
                    self.builder(update)
                    .pool(ix.pool_id)
                    .input_mint_amount(ix.input_mint, ix.input_amount)
                    .output_mint_amount(ix.output_mint, ix.output_amount)
                    .direction(SwapDirection.UNKNOWN)
                    .fee(ix.trade_fee)
                    .build()
                )
            case Ix.Deposit():
                return self._liquidity(
                    update, EventType.ADD_LIQUIDITY, ix.maximum_token_0_amount, ix.maximum_token_1_amount
                )
            case Ix.Withdraw():
                return self._liquidity(
                    update, EventType.REMOVE_LIQUIDITY, ix.minimum_token_0_amount, ix.minimum_token_1_amount
                )
            case Ix.LpChangeEvent():
                event_type = EventType.ADD_LIQUIDITY if ix.change_type == 0 else EventType.REMOVE_LIQUIDITY
                # the event carries no mints; the pool stands in for both sides
                return (
                    self.builder(update)
                    .event_type(event_type)
                    .pool(ix.pool_id)
                    .input_mint_amount(ix.pool_id, ix.token_0_amount)
                    .output_mint_amount(ix.pool_id, ix.token_1_amount)
                    .build()
                )
            case Ix.Initialize():
                self.observed(update, init_amount_0=ix.init_amount_0, init_amount_1=ix.init_amount_1)
            case _:
                self.ignored(update)
        return None

    def _swap(
        self,
        update: InstructionUpdate,
        amount_in: int,
        amount_out: int,
        direction: SwapDirection,
    ) -> SwapEvent | None:
        acc = self.accounts(update)
        if acc is None:
            return None
        if not self.accepted(acc["pool_state"], acc["input_token_mint"], acc["output_token_mint"]):
            return None
        return (
            self.builder(update)
            .pool(acc["pool_state"])
            .input_mint_amount(acc["input_token_mint"], amount_in)
            .output_mint_amount(acc["output_token_mint"], amount_out)
            .direction(direction)
            .maker(acc["payer"])
            .build()
        )

    def _liquidity(
        self,
        update: InstructionUpdate,
        event_type: EventType,
        amount_0: int,
        amount_1: int,
    ) -> SwapEvent | None:
        acc = self.accounts(update)
        if acc is None:
            return None
        return (
            self.builder(update)
            .event_type(event_type)
            .pool(acc["pool_state"])
            .input_mint_amount(acc["vault_0_mint"], amount_0)
            .output_mint_amount(acc["vault_1_mint"], amount_1)
            .maker(acc["owner"])
            .build()
        )
