import json

import pytest
from structlog.testing import capture_logs

from rayalert.constants import AMM_V4_PROGRAM_ID, CLMM_PROGRAM_ID, CPMM_PROGRAM_ID, SPL_TOKEN_PROGRAM_ID
from rayalert.core.config import AlertsConfig, MarketType, OutputFormat
from rayalert.decoding.instructions import AmmV4Instructions, ClmmInstructions, CpmmInstructions
from rayalert.orchestration import RecordError, build_pipeline, iter_updates, load_update
from rayalert.output.sink import MemorySink

from factories import SIGNATURE, role_accounts


def swap_record(**overrides) -> dict:
    record = {
        "program": "cpmm",
        "signature": SIGNATURE,
        "slot": 300,
        "block_time": 1_700_000_000,
        "instruction": {"name": "SwapBaseInput", "args": {"amount_in": 10, "minimum_amount_out": 9}},
        "accounts": list(role_accounts(CpmmInstructions.SwapBaseInput)),
    }
    record.update(overrides)
    return record


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def test_build_pipeline_only_enabled_markets(sink: MemorySink) -> None:
    pipeline = build_pipeline(AlertsConfig(markets=frozenset({MarketType.CPMM, MarketType.AMM_V4})), sink=sink)
    assert set(pipeline.processors) == {CPMM_PROGRAM_ID, AMM_V4_PROGRAM_ID}


def test_build_pipeline_gives_amm_v4_pool_filter_only(sink: MemorySink) -> None:
    config = AlertsConfig(token_filter=frozenset({"MintX"}), pool_filter=frozenset({"PoolY"}))
    pipeline = build_pipeline(config, sink=sink)

    cpmm = pipeline.processors[CPMM_PROGRAM_ID].event_filter
    amm = pipeline.processors[AMM_V4_PROGRAM_ID].event_filter
    assert cpmm.tokens == {"MintX"} and cpmm.pools == {"PoolY"}
    assert amm.tokens == frozenset() and amm.pools == {"PoolY"}


@pytest.mark.asyncio
async def test_pipeline_routes_by_program_id(sink: MemorySink, notifier, make_update) -> None:
    config = AlertsConfig(markets=frozenset({MarketType.CPMM}), output_format=OutputFormat.JSON)
    pipeline = build_pipeline(config, sink=sink, notifier=notifier)

    cpmm_update = make_update(
        CpmmInstructions.SwapBaseInput(amount_in=5, minimum_amount_out=4),
        program_id=CPMM_PROGRAM_ID,
        accounts=role_accounts(CpmmInstructions.SwapBaseInput),
    )
    clmm_update = make_update(
        ClmmInstructions.Swap(amount=1, other_amount_threshold=1),
        program_id=CLMM_PROGRAM_ID,
        accounts=role_accounts(ClmmInstructions.Swap),
    )

    stats = await pipeline.process_many([cpmm_update, clmm_update])

    assert stats.updates == 2
    assert stats.events == 1
    assert stats.unrouted == 1
    assert json.loads(sink.records[0])["protocol"] == "cpmm"
    assert notifier.try_send.call_count == 1


@pytest.mark.asyncio
async def test_pipeline_accepts_async_iterables(sink: MemorySink, make_update) -> None:
    pipeline = build_pipeline(AlertsConfig(), sink=sink)
    ix = AmmV4Instructions.SwapBaseInV2(amount_in=3, minimum_amount_out=2)

    async def updates():
        for _ in range(3):
            yield make_update(
                ix,
                program_id=AMM_V4_PROGRAM_ID,
                accounts=role_accounts(AmmV4Instructions.SwapBaseInV2),
            )

    stats = await pipeline.process_many(updates())

    assert stats.events == 3
    assert len(sink.records) == 3


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def test_load_update_from_record() -> None:
    record = swap_record(
        market_cap_usd=1234.5,
        inner_instructions=[
            {
                "program_id": SPL_TOKEN_PROGRAM_ID,
                "accounts": ["a", "b", "c"],
                "data": "0x03" + (10).to_bytes(8, "little").hex(),
                "inner": [],
            }
        ],
    )

    update = load_update(record)

    assert update.program_id == CPMM_PROGRAM_ID
    assert update.instruction == CpmmInstructions.SwapBaseInput(amount_in=10, minimum_amount_out=9)
    assert update.accounts == role_accounts(CpmmInstructions.SwapBaseInput)
    assert update.block_time == 1_700_000_000
    assert update.market_cap_usd == 1234.5
    assert update.inner[0].data[0] == 3
    assert len(update.inner[0].data) == 9


def test_load_update_accepts_market_aliases() -> None:
    record = swap_record(
        program="v4",
        instruction={"name": "Withdraw", "args": {"amount": 5}},
        accounts=[],
    )
    update = load_update(record)
    assert update.program_id == AMM_V4_PROGRAM_ID
    assert update.instruction == AmmV4Instructions.Withdraw(amount=5)


def test_load_update_unknown_instruction() -> None:
    assert load_update(swap_record(instruction={"name": "NotAVariant", "args": {}})) is None


@pytest.mark.parametrize(
    "record",
    [
        swap_record(program="orca"),
        swap_record(instruction={"name": "SwapBaseInput", "args": {"bogus": 1}}),
        {k: v for k, v in swap_record().items() if k != "signature"},
        swap_record(inner_instructions=[{"program_id": "x", "data": "0xzz"}]),
        swap_record(instruction={"name": "SwapBaseInput", "args": {"amount_in": "10", "minimum_amount_out": 9}}),
        swap_record(accounts=[1, 2, 3]),
        swap_record(slot="300"),
        swap_record(market_cap_usd=float("nan")),
    ],
)
def test_load_update_malformed(record: dict) -> None:
    with pytest.raises(RecordError):
        load_update(record)


def test_iter_updates_skips_bad_lines() -> None:
    lines = [
        json.dumps(swap_record()),
        "",
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps(swap_record(instruction={"name": "NotAVariant"})),
        json.dumps(swap_record(signature="second")),
    ]

    with capture_logs() as logs:
        updates = list(iter_updates(lines))

    assert [u.signature for u in updates] == [SIGNATURE, "second"]
    malformed = [e for e in logs if e["event"] == "record_malformed"]
    assert [e["line"] for e in malformed] == [3, 4]


@pytest.mark.asyncio
async def test_mistyped_record_does_not_halt_replay(sink: MemorySink) -> None:
    bad = {
        "program": "clmm",
        "signature": "bad",
        "instruction": {
            "name": "LiquidityChangeEvent",
            "args": {
                "pool_state": "Pool",
                "tick": 0,
                "tick_lower": -10,
                "tick_upper": 10,
                "liquidity_before": 1,
                "liquidity_after": "5",
            },
        },
    }
    lines = [json.dumps(bad), json.dumps(swap_record())]
    pipeline = build_pipeline(AlertsConfig(output_format=OutputFormat.JSON), sink=sink)

    with capture_logs() as logs:
        stats = await pipeline.process_many(iter_updates(lines))

    assert stats.updates == 1
    assert stats.events == 1
    assert json.loads(sink.records[0])["signature"] == SIGNATURE
    assert [e["line"] for e in logs if e["event"] == "record_malformed"] == [1]
