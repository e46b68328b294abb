"""
CPMM swap kernel (v1 semantics).

Fee-adjusted constant product, fee applied multiplicatively on the input:
    fee_complement = 10_000 - fee_bps
    amount_in_net  = amount_in * fee_complement
    amount_out     = floor(reserve_out * amount_in_net / (reserve_in * 10_000 + amount_in_net))

Every intermediate is checked against u128 and the output is narrowed to u64.
The whole input stays in the pool, so `k` never decreases.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InsufficientLiquidity, MathOverflow, ZeroLiquidity
from .fixed_point_v1 import (
    BPS_DENOM,
    checked_add,
    checked_mul,
    checked_sub,
    require_u16,
    require_u64,
    to_u64,
)


@dataclass(frozen=True)
class SwapResult:
    amount_in: int
    amount_out: int
    fee_complement: int
    amount_in_net: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def amount_out(*, amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    Output amount only; the hot path for pricing.
    """
    require_u64("amount_in", amount_in)
    require_u64("reserve_in", reserve_in)
    require_u64("reserve_out", reserve_out)
    require_u16("fee_bps", fee_bps)

    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity(f"reserves ({reserve_in}, {reserve_out})")
    if amount_in == 0:
        raise ZeroLiquidity("amount_in must be positive")

    fee_complement = checked_sub(BPS_DENOM, fee_bps)
    amount_in_net = checked_mul(amount_in, fee_complement)
    numerator = checked_mul(reserve_out, amount_in_net)
    denominator = checked_add(checked_mul(reserve_in, BPS_DENOM), amount_in_net)
    if denominator == 0:
        raise MathOverflow("division by zero")
    return to_u64(numerator // denominator)


def swap_exact_in(*, amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> SwapResult:
    """
    Exact-in quote plus the post-swap reserves and constant products.

    Post reserves are widened (u128) so a quote against nearly full reserves is
    still reported; range checks on the u64 vault balances happen where the
    transfer is planned.
    """
    out = amount_out(amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps)
    fee_complement = BPS_DENOM - fee_bps

    # amount_out < reserve_out whenever reserve_in > 0, so the out side stays positive.
    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - out

    return SwapResult(
        amount_in=amount_in,
        amount_out=out,
        fee_complement=fee_complement,
        amount_in_net=amount_in * fee_complement,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )
