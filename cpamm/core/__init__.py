"""
Core pool algorithms: pricing, liquidity, validation and lifecycle planning
"""

from .cpmm import get_amount_out, price_impact_bps, quote, swap_exact_in
from .directives import Burn, MintTo, Pull, Push, execute_directives
from .liquidity import compute_mint_amount, compute_withdraw_amounts, optimal_deposit
from .lifecycle import (
    AddLiquidityPlan,
    PoolSnapshot,
    RemoveLiquidityPlan,
    SwapPlan,
    plan_add_liquidity,
    plan_initialize,
    plan_remove_liquidity,
    plan_swap,
)
from .validation import SwapDirection, Violation, check_initialize, check_pool_accounts, check_swap_route

__all__ = [
    "get_amount_out",
    "price_impact_bps",
    "quote",
    "swap_exact_in",
    "Burn",
    "MintTo",
    "Pull",
    "Push",
    "execute_directives",
    "compute_mint_amount",
    "compute_withdraw_amounts",
    "optimal_deposit",
    "AddLiquidityPlan",
    "PoolSnapshot",
    "RemoveLiquidityPlan",
    "SwapPlan",
    "plan_add_liquidity",
    "plan_initialize",
    "plan_remove_liquidity",
    "plan_swap",
    "SwapDirection",
    "Violation",
    "check_initialize",
    "check_pool_accounts",
    "check_swap_route",
]
