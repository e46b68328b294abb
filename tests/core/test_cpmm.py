# [TESTER] v1

from __future__ import annotations

import pytest

from cpamm.core.cpmm import get_amount_out, price_impact_bps, quote, swap_exact_in
from cpamm.errors import InsufficientLiquidity, MathOverflow, ZeroLiquidity
from cpamm.kernels.python.fixed_point_v1 import U64_MAX


def test_get_amount_out_reference_swap() -> None:
    # (100 * 9970 * 4000) / (1000 * 10000 + 100 * 9970) = 362.6...
    assert get_amount_out(100, 1000, 4000, 30) == 362


def test_get_amount_out_overflow_is_closed() -> None:
    with pytest.raises(MathOverflow):
        get_amount_out(U64_MAX, U64_MAX, U64_MAX, 0)


def test_get_amount_out_rejects_empty_pool_and_zero_input() -> None:
    with pytest.raises(InsufficientLiquidity):
        get_amount_out(100, 0, 0, 30)
    with pytest.raises(ZeroLiquidity):
        get_amount_out(0, 1000, 4000, 30)


def test_get_amount_out_is_monotonic_in_fee() -> None:
    outs = [get_amount_out(10_000, 1_000_000, 1_000_000, fee) for fee in (0, 5, 30, 100, 1000)]
    assert outs == sorted(outs, reverse=True)


def test_quote_is_proportional() -> None:
    assert quote(100, 1000, 4000) == 400
    assert quote(1, 3, 2) == 0


def test_quote_rejects_empty_reserve() -> None:
    with pytest.raises(InsufficientLiquidity):
        quote(1, 0, 5)


def test_swap_exact_in_grows_k() -> None:
    res = swap_exact_in(100, 1000, 4000, 30)
    assert res.amount_out == 362
    assert res.k_after > res.k_before


def test_price_impact_includes_fee() -> None:
    # Spot would give 400; 362 is a 9.5% shortfall.
    assert price_impact_bps(100, 1000, 4000, 30) == 950
    # A tiny trade against deep reserves pays roughly the fee alone.
    assert 30 <= price_impact_bps(1_000_000, 10**15, 10**15, 30) <= 31
