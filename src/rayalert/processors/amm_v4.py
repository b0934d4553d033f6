"""Raydium AMM V4 processor.

AMM V4 swap instructions only carry slippage bounds, so settled amounts are
recovered from the SPL token transfers in the nested trace. Instructions
expose no mints either: the user's token accounts stand in for them and
only the pool (amm) filter applies.
"""

from __future__ import annotations

from rayalert.constants import AMM_V4_PROGRAM_ID
from rayalert.core.models import DexProtocol, SwapDirection, SwapEvent
from rayalert.decoding.instructions import AmmV4Instructions as Ix
from rayalert.decoding.trace import InstructionUpdate
from rayalert.decoding.transfers import extract_swap_amounts
from rayalert.processors.base import BaseProcessor, Route


class AmmV4Processor(BaseProcessor):
    protocol = DexProtocol.AMM_V4
    program_id = AMM_V4_PROGRAM_ID

    ROUTES = {
        Ix.SwapBaseIn: Route.FILTERED_SWAP,
        Ix.SwapBaseInV2: Route.FILTERED_SWAP,
        Ix.SwapBaseOut: Route.FILTERED_SWAP,
        Ix.SwapBaseOutV2: Route.FILTERED_SWAP,
        Ix.Initialize: Route.LOG_ONLY,
        Ix.Initialize2: Route.LOG_ONLY,
        Ix.Deposit: Route.LOG_ONLY,
        Ix.Withdraw: Route.LOG_ONLY,
        Ix.PreInitialize: Route.IGNORED,
        Ix.MonitorStep: Route.IGNORED,
        Ix.SetParams: Route.IGNORED,
        Ix.WithdrawPnl: Route.IGNORED,
        Ix.SimulateInfo: Route.IGNORED,
        Ix.AdminCancelOrders: Route.IGNORED,
        Ix.CreateConfigAccount: Route.IGNORED,
        Ix.UpdateConfigAccount: Route.IGNORED,
    }

    def dispatch(self, update: InstructionUpdate) -> SwapEvent | None:
        ix = update.instruction
        match ix:
            case Ix.SwapBaseIn() | Ix.SwapBaseInV2():
                return self._swap(update, ix.amount_in, ix.minimum_amount_out, SwapDirection.EXACT_INPUT)
            case Ix.SwapBaseOut() | Ix.SwapBaseOutV2():
                return self._swap(update, ix.max_amount_in, ix.amount_out, SwapDirection.EXACT_OUTPUT)
            case Ix.Initialize():
                self.observed(update, nonce=ix.nonce)
            case Ix.Initialize2():
                self.observed(update, nonce=ix.nonce, open_time=ix.open_time)
            case Ix.Deposit():
                self.observed(
                    update,
                    max_coin=ix.max_coin_amount,
                    max_pc=ix.max_pc_amount,
                    base_side=ix.base_side,
                )
            case Ix.Withdraw():
                self.observed(update, amount=ix.amount)
            case _:
                self.ignored(update)
        return None

    def _swap(
        self,
        update: InstructionUpdate,
        fallback_input: int,
        fallback_output: int,
        direction: SwapDirection,
    ) -> SwapEvent | None:
        acc = self.accounts(update)
        if acc is None or not self.accepted_pool(acc["amm"]):
            return None

        source = acc["user_source_token_account"]
        destination = acc["user_destination_token_account"]
        actual_input, actual_output = extract_swap_amounts(
            update.inner,
            source,
            destination,
            fallback_input,
            fallback_output,
            logger=self.log,
        )
        self.log.debug(
            "swap_amounts",
            instruction=type(update.instruction).__name__,
            signature=update.signature,
            amm=acc["amm"],
            input=actual_input,
            input_bound=fallback_input,
            output=actual_output,
            output_bound=fallback_output,
        )
        return (
            self.builder(update)
            .pool(acc["amm"])
            .input_mint_amount(source, actual_input)
            .output_mint_amount(destination, actual_output)
            .direction(direction)
            .maker(acc["user_source_owner"])
            .build()
        )
