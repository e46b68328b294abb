# [TESTER] v1

from __future__ import annotations

import pytest

from cpamm.core.cpmm import get_amount_out
from cpamm.core.directives import Burn, MintTo, Pull, Push
from cpamm.core.lifecycle import (
    PoolSnapshot,
    plan_add_liquidity,
    plan_initialize,
    plan_remove_liquidity,
    plan_swap,
)
from cpamm.core.validation import SwapDirection
from cpamm.errors import (
    IdenticalMints,
    InsufficientLiquidity,
    InvalidLpMint,
    InvalidMintOrder,
    InvalidVault,
    MathOverflow,
    SlippageExceeded,
    ZeroLiquidity,
)
from cpamm.kernels.python.fixed_point_v1 import U64_MAX
from cpamm.state.addressing import DEFAULT_PROGRAM_ID, derive_pool_address
from cpamm.state.custody import MintInfo, TokenAccountInfo
from cpamm.state.pools import PoolStatus


MINT_A = "0x" + "11" * 32
MINT_B = "0x" + "22" * 32
LP_MINT = "0x" + "33" * 32
POOL_ADDRESS, POOL_BUMP = derive_pool_address(MINT_A, MINT_B)
USER = "alice"


def _accounts(
    reserve_a: int = 0,
    reserve_b: int = 0,
    lp_supply: int = 0,
    *,
    owner: str = POOL_ADDRESS,
    lp_authority: str | None = POOL_ADDRESS,
) -> tuple[TokenAccountInfo, TokenAccountInfo, MintInfo]:
    return (
        TokenAccountInfo(address="vault-a", mint=MINT_A, owner=owner, amount=reserve_a),
        TokenAccountInfo(address="vault-b", mint=MINT_B, owner=owner, amount=reserve_b),
        MintInfo(address=LP_MINT, supply=lp_supply, mint_authority=lp_authority),
    )


def _init(**overrides):
    vault_a, vault_b, lp_mint = _accounts()
    kwargs = dict(
        pool_address=POOL_ADDRESS,
        bump=POOL_BUMP,
        program_id=DEFAULT_PROGRAM_ID,
        mint_a=MINT_A,
        mint_b=MINT_B,
        vault_a=vault_a,
        vault_b=vault_b,
        lp_mint=lp_mint,
    )
    kwargs.update(overrides)
    return plan_initialize(**kwargs)


def _snapshot(reserve_a: int, reserve_b: int, lp_supply: int) -> PoolSnapshot:
    vault_a, vault_b, lp_mint = _accounts(reserve_a, reserve_b, lp_supply)
    return PoolSnapshot(vault_a=vault_a, vault_b=vault_b, lp_mint=lp_mint)


def test_initialize_builds_active_record_with_default_fee() -> None:
    pool = _init()
    assert pool.address == POOL_ADDRESS
    assert pool.fee_bps == 30
    assert pool.status is PoolStatus.ACTIVE
    assert pool.authority.pool_address == POOL_ADDRESS


def test_initialize_rejects_bad_mints() -> None:
    with pytest.raises(IdenticalMints):
        _init(mint_b=MINT_A)
    with pytest.raises(InvalidMintOrder):
        _init(mint_a=MINT_B, mint_b=MINT_A)


def test_initialize_rejects_foreign_vault_owner() -> None:
    vault_a, vault_b, _ = _accounts(owner="someone-else")
    with pytest.raises(InvalidVault, match="owned by"):
        _init(vault_a=vault_a, vault_b=vault_b)


def test_initialize_rejects_shared_vault() -> None:
    vault_a, _, _ = _accounts()
    with pytest.raises(InvalidVault):
        _init(vault_b=vault_a)


def test_initialize_rejects_lp_mint_without_pool_authority() -> None:
    _, _, lp_mint = _accounts(lp_authority="someone-else")
    with pytest.raises(InvalidLpMint):
        _init(lp_mint=lp_mint)


def test_add_liquidity_bootstrap_plan() -> None:
    pool = _init()
    plan = plan_add_liquidity(pool, _snapshot(0, 0, 0), user=USER, amount_a=1000, amount_b=4000, min_lp_tokens=2000)
    assert plan.lp_tokens == 2000
    assert plan.directives == (
        Pull(amount=1000, user=USER, vault="vault-a"),
        Pull(amount=4000, user=USER, vault="vault-b"),
        MintTo(amount=2000, lp_mint=LP_MINT, user=USER),
    )


def test_add_liquidity_slippage() -> None:
    pool = _init()
    with pytest.raises(SlippageExceeded):
        plan_add_liquidity(pool, _snapshot(0, 0, 0), user=USER, amount_a=1000, amount_b=4000, min_lp_tokens=2001)


def test_add_liquidity_zero_amount_reported_before_account_checks() -> None:
    pool = _init()
    vault_a, vault_b, lp_mint = _accounts(owner="someone-else")
    snap = PoolSnapshot(vault_a=vault_a, vault_b=vault_b, lp_mint=lp_mint)
    with pytest.raises(ZeroLiquidity):
        plan_add_liquidity(pool, snap, user=USER, amount_a=0, amount_b=1, min_lp_tokens=0)
    with pytest.raises(InvalidVault):
        plan_add_liquidity(pool, snap, user=USER, amount_a=1, amount_b=1, min_lp_tokens=0)


def test_add_liquidity_rejects_wrong_vault_in_snapshot() -> None:
    pool = _init()
    _, vault_b, lp_mint = _accounts()
    stray = TokenAccountInfo(address="other-vault", mint=MINT_A, owner=POOL_ADDRESS, amount=0)
    with pytest.raises(InvalidVault):
        plan_add_liquidity(
            pool,
            PoolSnapshot(vault_a=stray, vault_b=vault_b, lp_mint=lp_mint),
            user=USER,
            amount_a=1,
            amount_b=1,
            min_lp_tokens=0,
        )


def test_add_liquidity_rejects_reserve_overflow() -> None:
    pool = _init()
    near = U64_MAX - 5
    with pytest.raises(MathOverflow):
        plan_add_liquidity(pool, _snapshot(near, near, near), user=USER, amount_a=10, amount_b=10, min_lp_tokens=0)


def test_remove_liquidity_plan() -> None:
    pool = _init()
    plan = plan_remove_liquidity(
        pool, _snapshot(1100, 3638, 2000), user=USER, lp_amount=1000, min_amount_a=550, min_amount_b=1819
    )
    assert (plan.amount_a, plan.amount_b) == (550, 1819)
    assert plan.directives == (
        Burn(amount=1000, lp_mint=LP_MINT, user=USER),
        Push(amount=550, vault="vault-a", user=USER),
        Push(amount=1819, vault="vault-b", user=USER),
    )


def test_remove_liquidity_slippage_per_side() -> None:
    pool = _init()
    snap = _snapshot(1100, 3638, 2000)
    with pytest.raises(SlippageExceeded, match="amount_a"):
        plan_remove_liquidity(pool, snap, user=USER, lp_amount=1000, min_amount_a=551, min_amount_b=0)
    with pytest.raises(SlippageExceeded, match="amount_b"):
        plan_remove_liquidity(pool, snap, user=USER, lp_amount=1000, min_amount_a=0, min_amount_b=1820)


def test_remove_liquidity_rejects_zero() -> None:
    pool = _init()
    with pytest.raises(ZeroLiquidity):
        plan_remove_liquidity(pool, _snapshot(1100, 3638, 2000), user=USER, lp_amount=0, min_amount_a=0, min_amount_b=0)


def test_swap_a_to_b_plan() -> None:
    pool = _init()
    plan = plan_swap(
        pool, _snapshot(1000, 4000, 2000), user=USER, vault_in="vault-a", vault_out="vault-b",
        amount_in=100, minimum_amount_out=362,
    )
    assert plan.direction is SwapDirection.A_TO_B
    assert plan.amount_out == 362
    assert plan.directives == (
        Pull(amount=100, user=USER, vault="vault-a"),
        Push(amount=362, vault="vault-b", user=USER),
    )


def test_swap_b_to_a_uses_reversed_reserves() -> None:
    pool = _init()
    plan = plan_swap(
        pool, _snapshot(1000, 4000, 2000), user=USER, vault_in="vault-b", vault_out="vault-a",
        amount_in=400, minimum_amount_out=0,
    )
    assert plan.direction is SwapDirection.B_TO_A
    assert (plan.reserve_in, plan.reserve_out) == (4000, 1000)
    assert plan.amount_out == get_amount_out(400, 4000, 1000, 30)


def test_swap_slippage() -> None:
    pool = _init()
    with pytest.raises(SlippageExceeded):
        plan_swap(
            pool, _snapshot(1000, 4000, 2000), user=USER, vault_in="vault-a", vault_out="vault-b",
            amount_in=100, minimum_amount_out=363,
        )


def test_swap_rounding_to_zero_output() -> None:
    pool = _init()
    snap = _snapshot(1_000_000, 10, 100)
    with pytest.raises(InsufficientLiquidity, match="rounds to zero"):
        plan_swap(pool, snap, user=USER, vault_in="vault-a", vault_out="vault-b", amount_in=1, minimum_amount_out=0)
    with pytest.raises(SlippageExceeded):
        plan_swap(pool, snap, user=USER, vault_in="vault-a", vault_out="vault-b", amount_in=1, minimum_amount_out=1)


def test_swap_against_empty_pool() -> None:
    pool = _init()
    with pytest.raises(InsufficientLiquidity):
        plan_swap(
            pool, _snapshot(0, 0, 0), user=USER, vault_in="vault-a", vault_out="vault-b",
            amount_in=100, minimum_amount_out=0,
        )


def test_swap_rejects_bad_route() -> None:
    pool = _init()
    snap = _snapshot(1000, 4000, 2000)
    with pytest.raises(InvalidVault, match="same"):
        plan_swap(pool, snap, user=USER, vault_in="vault-a", vault_out="vault-a", amount_in=1, minimum_amount_out=0)
    with pytest.raises(InvalidVault, match="not in pool"):
        plan_swap(pool, snap, user=USER, vault_in="vault-x", vault_out="vault-b", amount_in=1, minimum_amount_out=0)


def test_swap_rejects_input_reserve_overflow() -> None:
    pool = _init()
    with pytest.raises(MathOverflow):
        plan_swap(
            pool, _snapshot(U64_MAX - 1, U64_MAX, 1), user=USER, vault_in="vault-a", vault_out="vault-b",
            amount_in=10, minimum_amount_out=0,
        )
