"""
Liquidity math kernel (v1 semantics).

Pure functions with explicit floor rounding:
- bootstrap mint: `integer_sqrt(amount_a * amount_b)` (no locked minimum),
- proportional mint: `min(amount_a * supply // reserve_a, amount_b * supply // reserve_b)`,
- burn: `lp_amount * reserve_x // supply` per side.

Deposits are not trimmed to the pool ratio. Whatever the caller supplies is
pulled in full and only the smaller proportional share is credited.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InsufficientLiquidity, ZeroLiquidity
from .fixed_point_v1 import checked_mul, checked_mul_div, integer_sqrt, require_u64, to_u64


@dataclass(frozen=True)
class MintResult:
    lp_tokens: int
    lp_from_a: int
    lp_from_b: int
    bootstrap: bool


@dataclass(frozen=True)
class BurnResult:
    amount_a: int
    amount_b: int


def mint_initial(*, amount_a: int, amount_b: int) -> MintResult:
    require_u64("amount_a", amount_a)
    require_u64("amount_b", amount_b)
    if amount_a == 0 or amount_b == 0:
        raise ZeroLiquidity("deposit amounts must be positive")

    lp = to_u64(integer_sqrt(checked_mul(amount_a, amount_b)))
    if lp == 0:
        raise ZeroLiquidity("deposit too small to mint any share")
    return MintResult(lp_tokens=lp, lp_from_a=lp, lp_from_b=lp, bootstrap=True)


def mint_proportional(
    *,
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    lp_supply: int,
) -> MintResult:
    for name, v in (
        ("amount_a", amount_a),
        ("amount_b", amount_b),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("lp_supply", lp_supply),
    ):
        require_u64(name, v)

    if amount_a == 0 or amount_b == 0:
        raise ZeroLiquidity("deposit amounts must be positive")
    if lp_supply == 0:
        raise InsufficientLiquidity("lp_supply is zero; use the bootstrap mint")
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientLiquidity(f"reserves ({reserve_a}, {reserve_b}) with lp_supply {lp_supply}")

    lp_a = checked_mul_div(amount_a, lp_supply, reserve_a)
    lp_b = checked_mul_div(amount_b, lp_supply, reserve_b)
    lp = min(lp_a, lp_b)
    if lp == 0:
        raise ZeroLiquidity("deposit too small to mint any share")
    return MintResult(lp_tokens=lp, lp_from_a=lp_a, lp_from_b=lp_b, bootstrap=False)


def burn(*, lp_amount: int, reserve_a: int, reserve_b: int, lp_supply: int) -> BurnResult:
    for name, v in (
        ("lp_amount", lp_amount),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("lp_supply", lp_supply),
    ):
        require_u64(name, v)

    if lp_amount == 0:
        raise ZeroLiquidity("lp_amount must be positive")
    if lp_supply == 0:
        raise InsufficientLiquidity("lp_supply is zero")
    if lp_amount > lp_supply:
        raise InsufficientLiquidity(f"lp_amount {lp_amount} exceeds lp_supply {lp_supply}")

    amount_a = checked_mul_div(lp_amount, reserve_a, lp_supply)
    amount_b = checked_mul_div(lp_amount, reserve_b, lp_supply)

    # No single-sided or empty withdrawals.
    if amount_a == 0 or amount_b == 0:
        raise InsufficientLiquidity(f"withdrawal rounds to ({amount_a}, {amount_b})")
    if amount_a > reserve_a or amount_b > reserve_b:
        raise InsufficientLiquidity("withdrawal exceeds reserves")
    return BurnResult(amount_a=amount_a, amount_b=amount_b)
