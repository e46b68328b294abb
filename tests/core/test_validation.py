# [TESTER] v1

from __future__ import annotations

import pytest

from cpamm.core.validation import (
    SwapDirection,
    Violation,
    check_initialize,
    check_pool_accounts,
    check_swap_route,
    raise_first,
    swap_direction,
)
from cpamm.errors import IdenticalMints, InvalidLpMint, InvalidMintOrder, InvalidVault
from cpamm.state.addressing import derive_pool_address
from cpamm.state.custody import MintInfo, TokenAccountInfo
from cpamm.state.pools import Pool


MINT_A = "0x" + "11" * 32
MINT_B = "0x" + "22" * 32
LP_MINT = "0x" + "33" * 32
POOL_ADDRESS, POOL_BUMP = derive_pool_address(MINT_A, MINT_B)

VAULT_A = TokenAccountInfo(address="vault-a", mint=MINT_A, owner=POOL_ADDRESS, amount=0)
VAULT_B = TokenAccountInfo(address="vault-b", mint=MINT_B, owner=POOL_ADDRESS, amount=0)
LP = MintInfo(address=LP_MINT, supply=0, mint_authority=POOL_ADDRESS)

POOL = Pool(
    address=POOL_ADDRESS,
    mint_a=MINT_A,
    mint_b=MINT_B,
    vault_a="vault-a",
    vault_b="vault-b",
    lp_mint=LP_MINT,
    fee_bps=30,
    bump=POOL_BUMP,
)


def _errors(violations: list[Violation]) -> list[type]:
    return [v.error for v in violations]


def test_check_initialize_accepts_well_formed_accounts() -> None:
    assert check_initialize(
        pool_address=POOL_ADDRESS, mint_a=MINT_A, mint_b=MINT_B, vault_a=VAULT_A, vault_b=VAULT_B, lp_mint=LP
    ) == []


def test_check_initialize_mint_errors_short_circuit() -> None:
    bad_vault = TokenAccountInfo(address="x", mint="y", owner="z", amount=0)
    out = check_initialize(
        pool_address=POOL_ADDRESS, mint_a=MINT_A, mint_b=MINT_A, vault_a=bad_vault, vault_b=bad_vault, lp_mint=LP
    )
    assert _errors(out) == [IdenticalMints]
    out = check_initialize(
        pool_address=POOL_ADDRESS, mint_a=MINT_B, mint_b=MINT_A, vault_a=bad_vault, vault_b=bad_vault, lp_mint=LP
    )
    assert _errors(out) == [InvalidMintOrder]


def test_check_initialize_collects_all_account_violations() -> None:
    swapped_a = TokenAccountInfo(address="vault-a", mint=MINT_B, owner=POOL_ADDRESS, amount=0)
    foreign_lp = MintInfo(address=LP_MINT, supply=0, mint_authority=None)
    out = check_initialize(
        pool_address=POOL_ADDRESS, mint_a=MINT_A, mint_b=MINT_B, vault_a=swapped_a, vault_b=VAULT_B, lp_mint=foreign_lp
    )
    assert _errors(out) == [InvalidVault, InvalidLpMint]
    assert out[0].code == 6006


def test_check_initialize_rejects_lp_mint_equal_to_pool_mint() -> None:
    lp_is_a = MintInfo(address=MINT_A, supply=0, mint_authority=POOL_ADDRESS)
    out = check_initialize(
        pool_address=POOL_ADDRESS, mint_a=MINT_A, mint_b=MINT_B, vault_a=VAULT_A, vault_b=VAULT_B, lp_mint=lp_is_a
    )
    assert _errors(out) == [InvalidLpMint]


def test_check_pool_accounts_matches_record() -> None:
    assert check_pool_accounts(POOL, vault_a=VAULT_A, vault_b=VAULT_B, lp_mint=LP) == []
    other_lp = MintInfo(address="0x" + "44" * 32, supply=0, mint_authority=POOL_ADDRESS)
    assert _errors(check_pool_accounts(POOL, vault_a=VAULT_A, vault_b=VAULT_B, lp_mint=other_lp)) == [InvalidLpMint]
    assert InvalidVault in _errors(check_pool_accounts(POOL, vault_a=VAULT_B, vault_b=VAULT_A, lp_mint=LP))


def test_swap_route_and_direction() -> None:
    assert check_swap_route(POOL, vault_in="vault-a", vault_out="vault-b") == []
    assert swap_direction(POOL, vault_in="vault-a", vault_out="vault-b") is SwapDirection.A_TO_B
    assert swap_direction(POOL, vault_in="vault-b", vault_out="vault-a") is SwapDirection.B_TO_A
    assert _errors(check_swap_route(POOL, vault_in="vault-a", vault_out="vault-a")) == [InvalidVault]
    assert _errors(check_swap_route(POOL, vault_in="x", vault_out="y")) == [InvalidVault, InvalidVault]


def test_raise_first() -> None:
    raise_first([])
    with pytest.raises(InvalidLpMint, match="first"):
        raise_first([Violation(InvalidLpMint, "first"), Violation(InvalidVault, "second")])
