"""
Constant Product Market Maker (CPMM) pricing engine.

Pure functions over (amount, reserves, fee). No state is read or written here;
the lifecycle layer supplies live reserves and enforces slippage and the
"never drain a reserve" bound on the result.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per quote
- Space Complexity: O(1) auxiliary
- Invariant: (reserve_in + amount_in) * (reserve_out - amount_out) >= reserve_in * reserve_out,
  strictly greater when fee_bps > 0
"""

from __future__ import annotations

from ..errors import InsufficientLiquidity, InvariantViolation
from ..kernels.python import cpmm_swap_v1 as _swap_kernel
from ..kernels.python.cpmm_swap_v1 import SwapResult
from ..kernels.python.fixed_point_v1 import BPS_DENOM, checked_mul_div, require_u64


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    Compute the output of an exact-in swap.

    Formula:
        fee_complement = 10_000 - fee_bps
        amount_in_net = amount_in * fee_complement
        amount_out = floor(reserve_out * amount_in_net / (reserve_in * 10_000 + amount_in_net))

    Args:
        amount_in: Exact input amount (u64, > 0)
        reserve_in: Live reserve of the input asset (u64, > 0)
        reserve_out: Live reserve of the output asset (u64, > 0)
        fee_bps: Fee in basis points

    Returns:
        amount_out (u64)

    Raises:
        InsufficientLiquidity: If either reserve is zero
        ZeroLiquidity: If amount_in is zero
        MathOverflow: If any intermediate leaves u128 or the result leaves u64
    """
    return _swap_kernel.amount_out(
        amount_in=amount_in,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        fee_bps=fee_bps,
    )


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """
    Proportional conversion `floor(amount_a * reserve_b / reserve_a)`.

    Advisory only (UI prices, deposit planning). Never used to move funds.
    """
    require_u64("amount_a", amount_a)
    require_u64("reserve_a", reserve_a)
    require_u64("reserve_b", reserve_b)
    if reserve_a == 0:
        raise InsufficientLiquidity("reserve_a is zero")
    return checked_mul_div(amount_a, reserve_b, reserve_a)


def swap_exact_in(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> SwapResult:
    """
    Quote a swap and report the post-swap reserves.

    Verifies the constant-product invariant on the result; a violation here
    would mean the kernel is wrong, so it fails closed.
    """
    res = _swap_kernel.swap_exact_in(
        amount_in=amount_in,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        fee_bps=fee_bps,
    )

    violations = []
    if res.k_after < res.k_before:
        violations.append(f"k_decreased({res.k_after} < {res.k_before})")
    if fee_bps > 0 and res.k_after == res.k_before:
        violations.append("k_not_increased_with_fee")
    if violations:
        raise InvariantViolation(violations)

    return res


def price_impact_bps(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    Shortfall of the execution rate against the spot rate, in bps (rounded up).

    Spot rate is `reserve_out / reserve_in`; execution rate is
    `amount_out / amount_in`. Includes the fee.
    """
    out = get_amount_out(amount_in, reserve_in, reserve_out, fee_bps)
    ideal = amount_in * reserve_out
    shortfall = ideal - out * reserve_in
    return (shortfall * BPS_DENOM + ideal - 1) // ideal
