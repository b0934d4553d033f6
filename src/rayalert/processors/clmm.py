"""Raydium CLMM (concentrated liquidity) processor.

The legacy `Swap` instruction and the `SwapEvent` log carry no mint
addresses, so for them only a pool filter can reject; `SwapV2` is filtered
by pool or mint like CPMM swaps. Liquidity and position changes are logged,
not emitted.
"""

from __future__ import annotations

from rayalert.constants import CLMM_PROGRAM_ID
from rayalert.core.models import DexProtocol, EventType, SwapDirection, SwapEvent
from rayalert.decoding.instructions import ClmmInstructions as Ix
from rayalert.decoding.trace import InstructionUpdate
from rayalert.processors.base import BaseProcessor, Route


def _swap_sides(amount: int, other_amount_threshold: int, is_base_input: bool) -> tuple[int, int, SwapDirection]:
    if is_base_input:
        return amount, other_amount_threshold, SwapDirection.EXACT_INPUT
    return other_amount_threshold, amount, SwapDirection.EXACT_OUTPUT


class ClmmProcessor(BaseProcessor):
    protocol = DexProtocol.CLMM
    program_id = CLMM_PROGRAM_ID

    ROUTES = {
        Ix.Swap: Route.FILTERED_SWAP,
        Ix.SwapV2: Route.FILTERED_SWAP,
        Ix.SwapEvent: Route.FILTERED_SWAP,
        Ix.CreatePool: Route.UNCONDITIONAL_EVENT,
        Ix.PoolCreatedEvent: Route.LOG_ONLY,
        Ix.IncreaseLiquidity: Route.LOG_ONLY,
        Ix.IncreaseLiquidityV2: Route.LOG_ONLY,
        Ix.DecreaseLiquidity: Route.LOG_ONLY,
        Ix.DecreaseLiquidityV2: Route.LOG_ONLY,
        Ix.LiquidityChangeEvent: Route.LOG_ONLY,
        Ix.OpenPosition: Route.LOG_ONLY,
        Ix.OpenPositionV2: Route.LOG_ONLY,
        Ix.ClosePosition: Route.LOG_ONLY,
        Ix.CreateAmmConfig: Route.IGNORED,
        Ix.UpdateAmmConfig: Route.IGNORED,
        Ix.UpdatePoolStatus: Route.IGNORED,
        Ix.CollectProtocolFee: Route.IGNORED,
        Ix.CollectFundFee: Route.IGNORED,
        Ix.SwapRouterBaseIn: Route.IGNORED,
    }

    def dispatch(self, update: InstructionUpdate) -> SwapEvent | None:
        ix = update.instruction
        match ix:
            case Ix.Swap():
                acc = self.accounts(update)
                if acc is None or not self.accepted_pool(acc["pool_state"]):
                    return None
                amount_in, amount_out, direction = _swap_sides(ix.amount, ix.other_amount_threshold, ix.is_base_input)
                pool = acc["pool_state"]
                return (
                    self.builder(update)
                    .pool(pool)
                    .input_mint_amount(pool, amount_in)
                    .output_mint_amount(pool, amount_out)
                    .direction(direction)
                    .maker(acc["payer"])
                    .build()
                )
            case Ix.SwapV2():
                acc = self.accounts(update)
                if acc is None:
                    return None
                if not self.accepted(acc["pool_state"], acc["input_vault_mint"], acc["output_vault_mint"]):
                    return None
                amount_in, amount_out, direction = _swap_sides(ix.amount, ix.other_amount_threshold, ix.is_base_input)
                return (
                    self.builder(update)
                    .pool(acc["pool_state"])
                    .input_mint_amount(acc["input_vault_mint"], amount_in)
                    .output_mint_amount(acc["output_vault_mint"], amount_out)
                    .direction(direction)
                    .maker(acc["payer"])
                    .build()
                )
            case Ix.SwapEvent():
                if not self.accepted_pool(ix.pool_state):
                    return None
                if ix.zero_for_one:
                    amount_in, amount_out = ix.amount0, ix.amount1
                else:
                    amount_in, amount_out = ix.amount1, ix.amount0
                return (
                    self.builder(update)
                    .pool(ix.pool_state)
                    .input_mint_amount(ix.token_account0, amount_in)
                    .output_mint_amount(ix.token_account1, amount_out)
                    .direction(SwapDirection.UNKNOWN)
                    .maker(ix.sender)
                    .build()
                )
            case Ix.CreatePool():
                acc = self.accounts(update)
                if acc is None:
                    return None
                self.log.info(
                    "pool_created",
                    signature=update.signature,
                    sqrt_price_x64=ix.sqrt_price_x64,
                    open_time=ix.open_time,
                )
                return (
                    self.builder(update)
                    .event_type(EventType.CREATE_POOL)
                    .pool(acc["pool_state"])
                    .input_mint_amount(acc["token_mint0"], 0)
                    .output_mint_amount(acc["token_mint1"], 0)
                    .maker(acc["pool_creator"])
                    .build()
                )
            case Ix.PoolCreatedEvent():
                self.observed(
                    update,
                    pool=ix.pool_state,
                    tick_spacing=ix.tick_spacing,
                    sqrt_price_x64=ix.sqrt_price_x64,
                )
            case Ix.IncreaseLiquidity() | Ix.IncreaseLiquidityV2():
                self.observed(
                    update,
                    liquidity=ix.liquidity,
                    amount0_max=ix.amount0_max,
                    amount1_max=ix.amount1_max,
                )
            case Ix.DecreaseLiquidity() | Ix.DecreaseLiquidityV2():
                self.observed(
                    update,
                    liquidity=ix.liquidity,
                    amount0_min=ix.amount0_min,
                    amount1_min=ix.amount1_min,
                )
            case Ix.LiquidityChangeEvent():
                change = (
                    EventType.ADD_LIQUIDITY
                    if ix.liquidity_after > ix.liquidity_before
                    else EventType.REMOVE_LIQUIDITY
                )
                self.observed(
                    update,
                    pool=ix.pool_state,
                    change=change.value,
                    liquidity_delta=abs(ix.liquidity_after - ix.liquidity_before),
                    tick=ix.tick,
                )
            case Ix.OpenPosition() | Ix.OpenPositionV2():
                self.observed(update, tick_lower=ix.tick_lower_index, tick_upper=ix.tick_upper_index)
            case Ix.ClosePosition():
                self.observed(update)
            case _:
                self.ignored(update)
        return None
