from rayalert.constants import SPL_TOKEN_2022_PROGRAM_ID
from rayalert.decoding.trace import InstructionNode, walk
from rayalert.decoding.transfers import (
    TokenTransfer,
    extract_swap_amounts,
    find_swap_amounts,
    iter_token_transfers,
    parse_token_transfer,
)

from factories import transfer_checked_ix, transfer_ix

USER_SRC = "UserSourceAta"
USER_DST = "UserDestAta"


def test_extracts_both_sides() -> None:
    trace = [
        transfer_ix(USER_SRC, "PoolVaultIn", 1_000),
        transfer_ix("PoolVaultOut", USER_DST, 2_500),
    ]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 1, 2) == (1_000, 2_500)


def test_no_transfers_falls_back() -> None:
    assert extract_swap_amounts([], USER_SRC, USER_DST, 111, 222) == (111, 222)


def test_unmatched_side_falls_back_independently() -> None:
    trace = [transfer_ix(USER_SRC, "PoolVaultIn", 900)]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 1, 222) == (900, 222)


def test_last_match_wins() -> None:
    trace = [
        transfer_ix(USER_SRC, "VaultA", 10),
        transfer_ix("VaultB", USER_DST, 20),
        transfer_ix(USER_SRC, "VaultC", 30),
        transfer_ix("VaultD", USER_DST, 40),
    ]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 0, 0) == (30, 40)


def test_nested_transfers_follow_execution_order() -> None:
    # Router (not a token program) invokes the swap, which invokes transfers
    nested = InstructionNode(
        program_id="RouterProgram",
        accounts=(),
        data=b"\x09",
        inner=(
            InstructionNode(
                program_id="SwapProgram",
                accounts=(),
                data=b"",
                inner=(transfer_ix(USER_SRC, "Vault", 5),),
            ),
        ),
    )
    trace = [nested, transfer_ix(USER_SRC, "Vault", 7)]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 0, 0) == (7, 0)

    trace = [transfer_ix(USER_SRC, "Vault", 7), nested]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 0, 0) == (5, 0)


def test_walk_is_pre_order() -> None:
    def node(name: str, *inner: InstructionNode) -> InstructionNode:
        return InstructionNode(program_id=name, accounts=(), data=b"", inner=inner)

    trace = [node("A", node("B", node("C")), node("D")), node("E")]
    assert [n.program_id for n in walk(trace)] == ["A", "B", "C", "D", "E"]


def test_walk_handles_deep_nesting() -> None:
    leaf = transfer_ix(USER_SRC, "Vault", 99)
    for _ in range(2_000):
        leaf = InstructionNode(program_id="Wrapper", accounts=(), data=b"", inner=(leaf,))
    assert extract_swap_amounts([leaf], USER_SRC, USER_DST, 0, 0) == (99, 0)


def test_transfer_checked_ten_bytes() -> None:
    ix = transfer_checked_ix(USER_SRC, "MintX", "Vault", 123_456, 6)
    assert len(ix.data) == 10
    assert parse_token_transfer(ix) == TokenTransfer(
        source=USER_SRC,
        destination="Vault",
        amount=123_456,
        mint="MintX",
        decimals=6,
    )


def test_transfer_checked_destination_is_third_account() -> None:
    trace = [transfer_checked_ix("VaultOut", "MintY", USER_DST, 777, 9)]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 1, 2) == (1, 777)


def test_short_payloads_are_skipped() -> None:
    short_transfer = InstructionNode(
        program_id=transfer_ix("a", "b", 0).program_id,
        accounts=(USER_SRC, "Vault", "authority"),
        data=bytes([3]) + (5).to_bytes(8, "little")[:7],
    )
    short_checked = InstructionNode(
        program_id=short_transfer.program_id,
        accounts=(USER_SRC, "Mint", "Vault", "authority"),
        data=bytes([12]) + (5).to_bytes(8, "little"),  # decimals byte missing
    )
    assert parse_token_transfer(short_transfer) is None
    assert parse_token_transfer(short_checked) is None
    assert extract_swap_amounts([short_transfer, short_checked], USER_SRC, USER_DST, 8, 9) == (8, 9)


def test_too_few_accounts_are_skipped() -> None:
    ix = InstructionNode(
        program_id=transfer_ix("a", "b", 0).program_id,
        accounts=(USER_SRC,),
        data=bytes([3]) + (5).to_bytes(8, "little"),
    )
    assert parse_token_transfer(ix) is None


def test_other_discriminators_and_empty_data_are_skipped() -> None:
    approve = InstructionNode(
        program_id=transfer_ix("a", "b", 0).program_id,
        accounts=(USER_SRC, "Delegate", "Owner"),
        data=bytes([4]) + (5).to_bytes(8, "little"),
    )
    empty = InstructionNode(program_id=approve.program_id, accounts=(USER_SRC, "Vault"), data=b"")
    assert list(iter_token_transfers([approve, empty])) == []


def test_token_2022_transfers_are_recognized() -> None:
    trace = [transfer_ix(USER_SRC, "Vault", 64, program_id=SPL_TOKEN_2022_PROGRAM_ID)]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 0, 0) == (64, 0)


def test_non_token_program_is_ignored() -> None:
    # Same layout as a Transfer, but emitted by an unrelated program
    trace = [transfer_ix(USER_SRC, "Vault", 64, program_id="SomeOtherProgram1111")]
    assert extract_swap_amounts(trace, USER_SRC, USER_DST, 3, 4) == (3, 4)


def test_find_swap_amounts_reports_unmatched_as_none() -> None:
    transfers = [TokenTransfer(source="x", destination=USER_DST, amount=5)]
    assert find_swap_amounts(transfers, USER_SRC, USER_DST) == (None, 5)


def test_amount_is_little_endian_u64() -> None:
    big = 2**64 - 1
    ix = transfer_ix(USER_SRC, "Vault", big)
    transfer = parse_token_transfer(ix)
    assert transfer is not None
    assert transfer.amount == big
