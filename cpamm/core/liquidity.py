"""
Liquidity engine: LP mint amounts on deposit, proportional amounts on redemption.
"""

from __future__ import annotations

from typing import Tuple

from ..kernels.python.fixed_point_v1 import require_u64
from ..kernels.python.lp_math_v1 import burn, mint_initial, mint_proportional
from .cpmm import quote


def compute_mint_amount(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    lp_supply: int,
) -> int:
    """
    Compute LP tokens to mint for a deposit of (amount_a, amount_b).

    For the first deposit (lp_supply == 0), reserves are ignored:
        lp = integer_sqrt(amount_a * amount_b)

    For subsequent deposits:
        lp = min(floor(amount_a * lp_supply / reserve_a),
                 floor(amount_b * lp_supply / reserve_b))

    Off-ratio deposits are credited for the smaller side only; the excess of the
    other asset is still pulled in full and accrues to existing holders.

    Raises:
        ZeroLiquidity: If an amount is zero or the deposit mints nothing
        InsufficientLiquidity: If lp_supply > 0 but a reserve is zero
        MathOverflow: On any width overflow
    """
    if lp_supply == 0:
        return mint_initial(amount_a=amount_a, amount_b=amount_b).lp_tokens
    return mint_proportional(
        amount_a=amount_a,
        amount_b=amount_b,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        lp_supply=lp_supply,
    ).lp_tokens


def compute_withdraw_amounts(
    lp_amount: int,
    reserve_a: int,
    reserve_b: int,
    lp_supply: int,
) -> Tuple[int, int]:
    """
    Compute asset amounts returned for burning `lp_amount`.

    Formula:
        amount_x = floor(lp_amount * reserve_x / lp_supply)

    Raises:
        ZeroLiquidity: If lp_amount is zero
        InsufficientLiquidity: If lp_supply is zero, lp_amount exceeds it, or
            either side rounds down to zero
    """
    res = burn(lp_amount=lp_amount, reserve_a=reserve_a, reserve_b=reserve_b, lp_supply=lp_supply)
    return res.amount_a, res.amount_b


def optimal_deposit(
    amount_a_desired: int,
    amount_b_desired: int,
    reserve_a: int,
    reserve_b: int,
) -> Tuple[int, int]:
    """
    Largest ratio-matched pair within the desired amounts.

    Advisory helper for callers who want to avoid donating the excess side.
    For an empty pool every desired amount is used.
    """
    require_u64("amount_a_desired", amount_a_desired)
    require_u64("amount_b_desired", amount_b_desired)
    require_u64("reserve_a", reserve_a)
    require_u64("reserve_b", reserve_b)
    if reserve_a == 0 or reserve_b == 0:
        return amount_a_desired, amount_b_desired

    b_for_a = quote(amount_a_desired, reserve_a, reserve_b)
    if b_for_a <= amount_b_desired:
        return amount_a_desired, b_for_a
    return quote(amount_b_desired, reserve_b, reserve_a), amount_b_desired
