# [TESTER] v1

from __future__ import annotations

import pytest

from cpamm.core.liquidity import compute_mint_amount, compute_withdraw_amounts, optimal_deposit
from cpamm.errors import InsufficientLiquidity, ZeroLiquidity


def test_bootstrap_deposit_mints_geometric_mean() -> None:
    assert compute_mint_amount(1000, 4000, 0, 0, 0) == 2000


def test_bootstrap_ignores_reserves() -> None:
    # Donated balances sitting in the vaults do not change the first mint.
    assert compute_mint_amount(1000, 4000, 7, 9, 0) == 2000


def test_subsequent_deposit_takes_minimum_side() -> None:
    # 100 A would be worth 200 LP, 100 B only 50; the excess A is donated.
    assert compute_mint_amount(100, 100, 1000, 4000, 2000) == 50


def test_subsequent_deposit_in_ratio() -> None:
    assert compute_mint_amount(100, 400, 1000, 4000, 2000) == 200


def test_deposit_rejects_zero_amounts() -> None:
    with pytest.raises(ZeroLiquidity):
        compute_mint_amount(0, 100, 0, 0, 0)
    with pytest.raises(ZeroLiquidity):
        compute_mint_amount(100, 0, 1000, 4000, 2000)


def test_deposit_rejects_supply_without_reserves() -> None:
    with pytest.raises(InsufficientLiquidity):
        compute_mint_amount(10, 10, 0, 4000, 2000)


def test_withdraw_is_proportional() -> None:
    assert compute_withdraw_amounts(1000, 1100, 3638, 2000) == (550, 1819)
    assert compute_withdraw_amounts(2000, 1100, 3638, 2000) == (1100, 3638)


def test_withdraw_edge_cases() -> None:
    with pytest.raises(ZeroLiquidity):
        compute_withdraw_amounts(0, 10, 10, 10)
    with pytest.raises(InsufficientLiquidity):
        compute_withdraw_amounts(1, 0, 0, 0)
    with pytest.raises(InsufficientLiquidity):
        compute_withdraw_amounts(11, 10, 10, 10)
    with pytest.raises(InsufficientLiquidity):
        compute_withdraw_amounts(1, 1, 1000, 1000)


def test_optimal_deposit_matches_ratio() -> None:
    assert optimal_deposit(100, 1000, 1000, 4000) == (100, 400)
    assert optimal_deposit(100, 200, 1000, 4000) == (50, 200)


def test_optimal_deposit_empty_pool_uses_desired() -> None:
    assert optimal_deposit(3, 7, 0, 0) == (3, 7)
