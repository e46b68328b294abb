"""
Pool lifecycle planning (functional core).

Each planner takes the pool record plus a `PoolSnapshot` of live custody
state and returns a plan: the computed amounts and the ordered directives
that realize them. Planners never touch custody, so the same inputs always
yield the same plan.

State machine: UNINITIALIZED -> ACTIVE. A pool is ACTIVE once its record
exists; there is no pause or close.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..errors import InsufficientLiquidity, SlippageExceeded, ZeroLiquidity
from ..kernels.python.fixed_point_v1 import U64_MAX, checked_add, require_u64
from ..state.custody import MintInfo, TokenAccountInfo
from ..state.pools import DEFAULT_FEE_BPS, Pool, validate_fee_bps
from .cpmm import swap_exact_in
from .directives import Burn, Directive, MintTo, Pull, Push
from .liquidity import compute_mint_amount, compute_withdraw_amounts
from .validation import SwapDirection, check_initialize, check_pool_accounts, raise_first, swap_direction


@dataclass(frozen=True)
class PoolSnapshot:
    """Live custody view of one pool, read fresh for every operation."""

    vault_a: TokenAccountInfo
    vault_b: TokenAccountInfo
    lp_mint: MintInfo

    @property
    def reserve_a(self) -> int:
        return self.vault_a.amount

    @property
    def reserve_b(self) -> int:
        return self.vault_b.amount

    @property
    def lp_supply(self) -> int:
        return self.lp_mint.supply


@dataclass(frozen=True)
class AddLiquidityPlan:
    amount_a: int
    amount_b: int
    lp_tokens: int
    directives: Tuple[Directive, ...]


@dataclass(frozen=True)
class RemoveLiquidityPlan:
    lp_amount: int
    amount_a: int
    amount_b: int
    directives: Tuple[Directive, ...]


@dataclass(frozen=True)
class SwapPlan:
    direction: SwapDirection
    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int
    directives: Tuple[Directive, ...]


def _require_accounts(pool: Pool, snapshot: PoolSnapshot) -> None:
    raise_first(
        check_pool_accounts(
            pool,
            vault_a=snapshot.vault_a,
            vault_b=snapshot.vault_b,
            lp_mint=snapshot.lp_mint,
        )
    )


def plan_initialize(
    *,
    pool_address: str,
    bump: int,
    program_id: str,
    mint_a: str,
    mint_b: str,
    vault_a: TokenAccountInfo,
    vault_b: TokenAccountInfo,
    lp_mint: MintInfo,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> Pool:
    """
    Validate initialize arguments and build the pool record.

    Raises:
        IdenticalMints, InvalidMintOrder: On bad mint arguments
        InvalidVault: If a vault is not owned by the pool or holds the wrong mint
        InvalidLpMint: If the LP mint's authority is not the pool
    """
    validate_fee_bps(fee_bps)
    raise_first(
        check_initialize(
            pool_address=pool_address,
            mint_a=mint_a,
            mint_b=mint_b,
            vault_a=vault_a,
            vault_b=vault_b,
            lp_mint=lp_mint,
        )
    )
    return Pool(
        address=pool_address,
        mint_a=mint_a,
        mint_b=mint_b,
        vault_a=vault_a.address,
        vault_b=vault_b.address,
        lp_mint=lp_mint.address,
        fee_bps=fee_bps,
        bump=bump,
        program_id=program_id,
    )


def plan_add_liquidity(
    pool: Pool,
    snapshot: PoolSnapshot,
    *,
    user: str,
    amount_a: int,
    amount_b: int,
    min_lp_tokens: int,
) -> AddLiquidityPlan:
    """
    Deposit both assets and mint LP tokens.

    Directives: pull amount_a, pull amount_b, mint lp_tokens.
    """
    require_u64("amount_a", amount_a)
    require_u64("amount_b", amount_b)
    require_u64("min_lp_tokens", min_lp_tokens)
    if amount_a == 0 or amount_b == 0:
        raise ZeroLiquidity(f"deposit ({amount_a}, {amount_b})")

    _require_accounts(pool, snapshot)

    lp_tokens = compute_mint_amount(
        amount_a,
        amount_b,
        snapshot.reserve_a,
        snapshot.reserve_b,
        snapshot.lp_supply,
    )
    if lp_tokens < min_lp_tokens:
        raise SlippageExceeded(f"lp_tokens {lp_tokens} < min_lp_tokens {min_lp_tokens}")

    # Post-state must stay representable before anything moves.
    checked_add(snapshot.reserve_a, amount_a, limit=U64_MAX)
    checked_add(snapshot.reserve_b, amount_b, limit=U64_MAX)
    checked_add(snapshot.lp_supply, lp_tokens, limit=U64_MAX)

    return AddLiquidityPlan(
        amount_a=amount_a,
        amount_b=amount_b,
        lp_tokens=lp_tokens,
        directives=(
            Pull(amount=amount_a, user=user, vault=pool.vault_a),
            Pull(amount=amount_b, user=user, vault=pool.vault_b),
            MintTo(amount=lp_tokens, lp_mint=pool.lp_mint, user=user),
        ),
    )


def plan_remove_liquidity(
    pool: Pool,
    snapshot: PoolSnapshot,
    *,
    user: str,
    lp_amount: int,
    min_amount_a: int,
    min_amount_b: int,
) -> RemoveLiquidityPlan:
    """
    Burn LP tokens for a proportional share of both reserves.

    Directives: burn lp_amount, push amount_a, push amount_b.
    """
    require_u64("lp_amount", lp_amount)
    require_u64("min_amount_a", min_amount_a)
    require_u64("min_amount_b", min_amount_b)
    if lp_amount == 0:
        raise ZeroLiquidity("lp_amount must be positive")

    _require_accounts(pool, snapshot)

    amount_a, amount_b = compute_withdraw_amounts(
        lp_amount,
        snapshot.reserve_a,
        snapshot.reserve_b,
        snapshot.lp_supply,
    )
    if amount_a < min_amount_a:
        raise SlippageExceeded(f"amount_a {amount_a} < min_amount_a {min_amount_a}")
    if amount_b < min_amount_b:
        raise SlippageExceeded(f"amount_b {amount_b} < min_amount_b {min_amount_b}")

    return RemoveLiquidityPlan(
        lp_amount=lp_amount,
        amount_a=amount_a,
        amount_b=amount_b,
        directives=(
            Burn(amount=lp_amount, lp_mint=pool.lp_mint, user=user),
            Push(amount=amount_a, vault=pool.vault_a, user=user),
            Push(amount=amount_b, vault=pool.vault_b, user=user),
        ),
    )


def plan_swap(
    pool: Pool,
    snapshot: PoolSnapshot,
    *,
    user: str,
    vault_in: str,
    vault_out: str,
    amount_in: int,
    minimum_amount_out: int,
) -> SwapPlan:
    """
    Exact-in swap through the pool.

    Direction comes from matching `vault_in`/`vault_out` against the record.
    Directives: pull amount_in into vault_in, push amount_out from vault_out.
    """
    require_u64("amount_in", amount_in)
    require_u64("minimum_amount_out", minimum_amount_out)
    if amount_in == 0:
        raise ZeroLiquidity("amount_in must be positive")

    direction = swap_direction(pool, vault_in=vault_in, vault_out=vault_out)
    _require_accounts(pool, snapshot)

    if direction is SwapDirection.A_TO_B:
        reserve_in, reserve_out = snapshot.reserve_a, snapshot.reserve_b
    else:
        reserve_in, reserve_out = snapshot.reserve_b, snapshot.reserve_a

    res = swap_exact_in(amount_in, reserve_in, reserve_out, pool.fee_bps)
    amount_out = res.amount_out

    if amount_out < minimum_amount_out:
        raise SlippageExceeded(f"amount_out {amount_out} < minimum_amount_out {minimum_amount_out}")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(f"amount_out {amount_out} would drain reserve {reserve_out}")
    if amount_out == 0:
        raise InsufficientLiquidity("swap output rounds to zero")
    checked_add(reserve_in, amount_in, limit=U64_MAX)

    return SwapPlan(
        direction=direction,
        amount_in=amount_in,
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        directives=(
            Pull(amount=amount_in, user=user, vault=vault_in),
            Push(amount=amount_out, vault=vault_out, user=user),
        ),
    )
