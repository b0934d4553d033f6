"""Decoded Raydium instruction variants (tagged unions per protocol).

Each protocol's closed set of variants lives in a namespace class
(`CpmmInstructions`, `ClmmInstructions`, `AmmV4Instructions`); the union
aliases (`CpmmInstruction`, ...) are what processors `match` on.

`ACCOUNTS` lists the account roles of a variant in on-chain order; anchor
event variants (`SwapEvent`, `LpChangeEvent`, ...) carry their addresses in
their own fields and declare no accounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

# ---------------------------------------------------------------------------
# CPMM
# ---------------------------------------------------------------------------

_CPMM_SWAP_ACCOUNTS = (
    "payer",
    "authority",
    "amm_config",
    "pool_state",
    "input_token_account",
    "output_token_account",
    "input_vault",
    "output_vault",
    "input_token_program",
    "output_token_program",
    "input_token_mint",
    "output_token_mint",
    "observation_state",
)

_CPMM_LP_ACCOUNTS = (
    "owner",
    "authority",
    "pool_state",
    "owner_lp_token",
    "token_0_account",
    "token_1_account",
    "token_0_vault",
    "token_1_vault",
    "token_program",
    "token_program_2022",
    "vault_0_mint",
    "vault_1_mint",
    "lp_mint",
)


class CpmmInstructions:
    @dataclass(kw_only=True, frozen=True)
    class SwapBaseInput:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _CPMM_SWAP_ACCOUNTS
        amount_in: int
        minimum_amount_out: int

    @dataclass(kw_only=True, frozen=True)
    class SwapBaseOutput:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _CPMM_SWAP_ACCOUNTS
        max_amount_in: int
        amount_out: int

    @dataclass(kw_only=True, frozen=True)
    class SwapEvent:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        pool_id: str
        input_mint: str
        output_mint: str
        input_amount: int
        output_amount: int
        trade_fee: int
        base_input: bool = True

    @dataclass(kw_only=True, frozen=True)
    class Deposit:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _CPMM_LP_ACCOUNTS
        lp_token_amount: int
        maximum_token_0_amount: int
        maximum_token_1_amount: int

    @dataclass(kw_only=True, frozen=True)
    class Withdraw:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _CPMM_LP_ACCOUNTS + ("memo_program",)
        lp_token_amount: int
        minimum_token_0_amount: int
        minimum_token_1_amount: int

    @dataclass(kw_only=True, frozen=True)
    class LpChangeEvent:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        pool_id: str
        token_0_amount: int
        token_1_amount: int
        change_type: int  # 0 = add, 1 = remove
        lp_amount_before: int = 0

    @dataclass(kw_only=True, frozen=True)
    class Initialize:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        init_amount_0: int
        init_amount_1: int
        open_time: int = 0

    @dataclass(kw_only=True, frozen=True)
    class CreateAmmConfig:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        index: int = 0
        trade_fee_rate: int = 0

    @dataclass(kw_only=True, frozen=True)
    class UpdateAmmConfig:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        param: int = 0
        value: int = 0

    @dataclass(kw_only=True, frozen=True)
    class UpdatePoolStatus:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        status: int = 0

    @dataclass(kw_only=True, frozen=True)
    class CollectProtocolFee:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        amount_0_requested: int = 0
        amount_1_requested: int = 0

    @dataclass(kw_only=True, frozen=True)
    class CollectFundFee:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        amount_0_requested: int = 0
        amount_1_requested: int = 0


CpmmInstruction = (
    CpmmInstructions.SwapBaseInput
    | CpmmInstructions.SwapBaseOutput
    | CpmmInstructions.SwapEvent
    | CpmmInstructions.Deposit
    | CpmmInstructions.Withdraw
    | CpmmInstructions.LpChangeEvent
    | CpmmInstructions.Initialize
    | CpmmInstructions.CreateAmmConfig
    | CpmmInstructions.UpdateAmmConfig
    | CpmmInstructions.UpdatePoolStatus
    | CpmmInstructions.CollectProtocolFee
    | CpmmInstructions.CollectFundFee
)


# ---------------------------------------------------------------------------
# CLMM
# ---------------------------------------------------------------------------

_CLMM_SWAP_ACCOUNTS = (
    "payer",
    "amm_config",
    "pool_state",
    "input_token_account",
    "output_token_account",
    "input_vault",
    "output_vault",
    "observation_state",
    "token_program",
    "tick_array",
)

_CLMM_SWAP_V2_ACCOUNTS = (
    "payer",
    "amm_config",
    "pool_state",
    "input_token_account",
    "output_token_account",
    "input_vault",
    "output_vault",
    "observation_state",
    "token_program",
    "token_program_2022",
    "memo_program",
    "input_vault_mint",
    "output_vault_mint",
)

_CLMM_CREATE_POOL_ACCOUNTS = (
    "pool_creator",
    "amm_config",
    "pool_state",
    "token_mint0",
    "token_mint1",
    "token_vault0",
    "token_vault1",
    "observation_state",
    "tick_array_bitmap",
    "token_program0",
    "token_program1",
    "system_program",
    "rent",
)


class ClmmInstructions:
    @dataclass(kw_only=True, frozen=True)
    class Swap:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _CLMM_SWAP_ACCOUNTS
        amount: int
        other_amount_threshold: int
        sqrt_price_limit_x64: int = 0
        is_base_input: bool = True

    @dataclass(kw_only=True, frozen=True)
    class SwapV2:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _CLMM_SWAP_V2_ACCOUNTS
        amount: int
        other_amount_threshold: int
        sqrt_price_limit_x64: int = 0
        is_base_input: bool = True

    @dataclass(kw_only=True, frozen=True)
    class SwapEvent:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        pool_state: str
        sender: str
        token_account0: str
        token_account1: str
        amount0: int
        amount1: int
        zero_for_one: bool
        transfer_fee0: int = 0
        transfer_fee1: int = 0
        sqrt_price_x64: int = 0
        liquidity: int = 0
        tick: int = 0

    @dataclass(kw_only=True, frozen=True)
    class CreatePool:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _CLMM_CREATE_POOL_ACCOUNTS
        sqrt_price_x64: int
        open_time: int = 0

    @dataclass(kw_only=True, frozen=True)
    class PoolCreatedEvent:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        pool_state: str
        token_mint0: str
        token_mint1: str
        tick_spacing: int
        sqrt_price_x64: int
        tick: int = 0

    @dataclass(kw_only=True, frozen=True)
    class IncreaseLiquidity:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        liquidity: int
        amount0_max: int
        amount1_max: int

    @dataclass(kw_only=True, frozen=True)
    class IncreaseLiquidityV2:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        liquidity: int
        amount0_max: int
        amount1_max: int
        base_flag: bool | None = None

    @dataclass(kw_only=True, frozen=True)
    class DecreaseLiquidity:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        liquidity: int
        amount0_min: int
        amount1_min: int

    @dataclass(kw_only=True, frozen=True)
    class DecreaseLiquidityV2:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        liquidity: int
        amount0_min: int
        amount1_min: int

    @dataclass(kw_only=True, frozen=True)
    class LiquidityChangeEvent:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        pool_state: str
        tick: int
        tick_lower: int
        tick_upper: int
        liquidity_before: int
        liquidity_after: int

    @dataclass(kw_only=True, frozen=True)
    class OpenPosition:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        tick_lower_index: int
        tick_upper_index: int
        liquidity: int = 0
        amount0_max: int = 0
        amount1_max: int = 0

    @dataclass(kw_only=True, frozen=True)
    class OpenPositionV2:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        tick_lower_index: int
        tick_upper_index: int
        liquidity: int = 0
        amount0_max: int = 0
        amount1_max: int = 0

    @dataclass(kw_only=True, frozen=True)
    class ClosePosition:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()

    @dataclass(kw_only=True, frozen=True)
    class CreateAmmConfig:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        index: int = 0
        tick_spacing: int = 0

    @dataclass(kw_only=True, frozen=True)
    class UpdateAmmConfig:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        param: int = 0
        value: int = 0

    @dataclass(kw_only=True, frozen=True)
    class UpdatePoolStatus:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        status: int = 0

    @dataclass(kw_only=True, frozen=True)
    class CollectProtocolFee:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        amount0_requested: int = 0
        amount1_requested: int = 0

    @dataclass(kw_only=True, frozen=True)
    class CollectFundFee:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        amount0_requested: int = 0
        amount1_requested: int = 0

    @dataclass(kw_only=True, frozen=True)
    class SwapRouterBaseIn:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        amount_in: int = 0
        amount_out_minimum: int = 0


ClmmInstruction = (
    ClmmInstructions.Swap
    | ClmmInstructions.SwapV2
    | ClmmInstructions.SwapEvent
    | ClmmInstructions.CreatePool
    | ClmmInstructions.PoolCreatedEvent
    | ClmmInstructions.IncreaseLiquidity
    | ClmmInstructions.IncreaseLiquidityV2
    | ClmmInstructions.DecreaseLiquidity
    | ClmmInstructions.DecreaseLiquidityV2
    | ClmmInstructions.LiquidityChangeEvent
    | ClmmInstructions.OpenPosition
    | ClmmInstructions.OpenPositionV2
    | ClmmInstructions.ClosePosition
    | ClmmInstructions.CreateAmmConfig
    | ClmmInstructions.UpdateAmmConfig
    | ClmmInstructions.UpdatePoolStatus
    | ClmmInstructions.CollectProtocolFee
    | ClmmInstructions.CollectFundFee
    | ClmmInstructions.SwapRouterBaseIn
)


# ---------------------------------------------------------------------------
# AMM V4
# ---------------------------------------------------------------------------

# Legacy swaps routed through the Serum/OpenBook market
_AMM_V4_SWAP_ACCOUNTS = (
    "token_program",
    "amm",
    "amm_authority",
    "amm_open_orders",
    "amm_target_orders",
    "pool_coin_token_account",
    "pool_pc_token_account",
    "serum_program",
    "serum_market",
    "serum_bids",
    "serum_asks",
    "serum_event_queue",
    "serum_coin_vault_account",
    "serum_pc_vault_account",
    "serum_vault_signer",
    "user_source_token_account",
    "user_destination_token_account",
    "user_source_owner",
)

_AMM_V4_SWAP_V2_ACCOUNTS = (
    "token_program",
    "amm",
    "amm_authority",
    "amm_coin_vault",
    "amm_pc_vault",
    "user_source_token_account",
    "user_destination_token_account",
    "user_source_owner",
)


class AmmV4Instructions:
    @dataclass(kw_only=True, frozen=True)
    class SwapBaseIn:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _AMM_V4_SWAP_ACCOUNTS
        amount_in: int
        minimum_amount_out: int

    @dataclass(kw_only=True, frozen=True)
    class SwapBaseOut:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _AMM_V4_SWAP_ACCOUNTS
        max_amount_in: int
        amount_out: int

    @dataclass(kw_only=True, frozen=True)
    class SwapBaseInV2:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _AMM_V4_SWAP_V2_ACCOUNTS
        amount_in: int
        minimum_amount_out: int

    @dataclass(kw_only=True, frozen=True)
    class SwapBaseOutV2:
        ACCOUNTS: ClassVar[tuple[str, ...]] = _AMM_V4_SWAP_V2_ACCOUNTS
        max_amount_in: int
        amount_out: int

    @dataclass(kw_only=True, frozen=True)
    class Initialize:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        nonce: int
        open_time: int = 0

    @dataclass(kw_only=True, frozen=True)
    class Initialize2:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        nonce: int
        open_time: int
        init_pc_amount: int = 0
        init_coin_amount: int = 0

    @dataclass(kw_only=True, frozen=True)
    class Deposit:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        max_coin_amount: int
        max_pc_amount: int
        base_side: int
        other_amount_min: int | None = None

    @dataclass(kw_only=True, frozen=True)
    class Withdraw:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        amount: int
        min_coin_amount: int | None = None
        min_pc_amount: int | None = None

    @dataclass(kw_only=True, frozen=True)
    class PreInitialize:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        nonce: int = 0

    @dataclass(kw_only=True, frozen=True)
    class MonitorStep:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        plan_order_limit: int = 0
        place_order_limit: int = 0
        cancel_order_limit: int = 0

    @dataclass(kw_only=True, frozen=True)
    class SetParams:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        param: int = 0
        value: int | None = None

    @dataclass(kw_only=True, frozen=True)
    class WithdrawPnl:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()

    @dataclass(kw_only=True, frozen=True)
    class SimulateInfo:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        param: int = 0

    @dataclass(kw_only=True, frozen=True)
    class AdminCancelOrders:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        limit: int = 0

    @dataclass(kw_only=True, frozen=True)
    class CreateConfigAccount:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()

    @dataclass(kw_only=True, frozen=True)
    class UpdateConfigAccount:
        ACCOUNTS: ClassVar[tuple[str, ...]] = ()
        param: int = 0
        owner: str | None = None


AmmV4Instruction = (
    AmmV4Instructions.SwapBaseIn
    | AmmV4Instructions.SwapBaseOut
    | AmmV4Instructions.SwapBaseInV2
    | AmmV4Instructions.SwapBaseOutV2
    | AmmV4Instructions.Initialize
    | AmmV4Instructions.Initialize2
    | AmmV4Instructions.Deposit
    | AmmV4Instructions.Withdraw
    | AmmV4Instructions.PreInitialize
    | AmmV4Instructions.MonitorStep
    | AmmV4Instructions.SetParams
    | AmmV4Instructions.WithdrawPnl
    | AmmV4Instructions.SimulateInfo
    | AmmV4Instructions.AdminCancelOrders
    | AmmV4Instructions.CreateConfigAccount
    | AmmV4Instructions.UpdateConfigAccount
)
