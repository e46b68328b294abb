"""
Pool engine (imperative shell).

Wraps the functional core:
- Looks up the pool record at the address derived from the canonical pair.
- Reads reserves and LP supply fresh from custody for every operation.
- Calls the pure planners in `cpamm.core.lifecycle`.
- Executes the planned directives inside `custody.atomic()` under the pool's
  authority.

Operations on the same pool are serialized by a per-pool lock. Different pools
plan concurrently and only meet inside the custody host, whose `atomic()`
block commits or rolls back one directive tuple at a time.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, TypeVar

from ..core.cpmm import get_amount_out
from ..core.directives import Directive, execute_directives
from ..core.lifecycle import (
    AddLiquidityPlan,
    PoolSnapshot,
    RemoveLiquidityPlan,
    SwapPlan,
    plan_add_liquidity,
    plan_initialize,
    plan_remove_liquidity,
    plan_swap,
)
from ..core.validation import SwapDirection, swap_direction
from ..errors import AmmError, ConfigAlreadyExists, PoolAlreadyExists, PoolNotReady, Unauthorized
from ..state.addressing import derive_config_address, derive_pool_address
from ..state.custody import Custody
from ..state.pools import ConfigRecord, Pool, PoolStatus, pool_from_dict
from .config import AmmConfig
from .operations import (
    AddLiquidityOp,
    InitializeConfigOp,
    InitializePoolOp,
    Operation,
    RemoveLiquidityOp,
    SwapOp,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")


class AmmEngine:
    """Record store plus the four pool operations over a custody host."""

    def __init__(self, custody: Custody, config: Optional[AmmConfig] = None) -> None:
        self.custody = custody
        self.config = config or AmmConfig()
        self.pools: Dict[str, Pool] = {}
        self.config_record: Optional[ConfigRecord] = None
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    # -- helpers -----------------------------------------------------------

    @contextmanager
    def _pool_lock(self, address: str) -> Iterator[None]:
        with self._registry_lock:
            lock = self._locks.setdefault(address, threading.Lock())
        with lock:
            yield

    def _run(self, name: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except AmmError as exc:
            logger.warning("%s rejected: [%d] %s", name, exc.code, exc)
            raise
        except Exception as exc:
            # Host failures (e.g. a short user holding) carry no AMM code.
            logger.warning("%s rejected: %s: %s", name, type(exc).__name__, exc)
            raise

    def _address(self, mint_a: str, mint_b: str) -> Tuple[str, int]:
        return derive_pool_address(mint_a, mint_b, self.config.program_id)

    def _pool_at(self, address: str, mint_a: str, mint_b: str) -> Pool:
        pool = self.pools.get(address)
        if pool is None:
            raise PoolNotReady(f"{mint_a}/{mint_b}")
        return pool

    def _snapshot(self, pool: Pool) -> PoolSnapshot:
        return PoolSnapshot(
            vault_a=self.custody.vault_info(pool.vault_a),
            vault_b=self.custody.vault_info(pool.vault_b),
            lp_mint=self.custody.mint_info(pool.lp_mint),
        )

    def _execute(self, pool: Pool, directives: Sequence[Directive]) -> None:
        with self.custody.atomic():
            execute_directives(self.custody, pool.authority, directives)

    # -- reads -------------------------------------------------------------

    def get_pool(self, mint_a: str, mint_b: str) -> Pool:
        address, _ = self._address(mint_a, mint_b)
        return self._pool_at(address, mint_a, mint_b)

    def pool_status(self, mint_a: str, mint_b: str) -> PoolStatus:
        address, _ = self._address(mint_a, mint_b)
        return PoolStatus.ACTIVE if address in self.pools else PoolStatus.UNINITIALIZED

    def reserves(self, mint_a: str, mint_b: str) -> Tuple[int, int, int]:
        """Live (reserve_a, reserve_b, lp_supply)."""
        snap = self._snapshot(self.get_pool(mint_a, mint_b))
        return snap.reserve_a, snap.reserve_b, snap.lp_supply

    def quote_swap(self, mint_a: str, mint_b: str, *, vault_in: str, vault_out: str, amount_in: int) -> int:
        """Advisory exact-in quote against live reserves. Moves nothing."""
        pool = self.get_pool(mint_a, mint_b)
        direction = swap_direction(pool, vault_in=vault_in, vault_out=vault_out)
        snap = self._snapshot(pool)
        if direction is SwapDirection.A_TO_B:
            return get_amount_out(amount_in, snap.reserve_a, snap.reserve_b, pool.fee_bps)
        return get_amount_out(amount_in, snap.reserve_b, snap.reserve_a, pool.fee_bps)

    def export_pools(self) -> List[Dict[str, Any]]:
        """Pool records in logical dict form, sorted by address."""
        with self._registry_lock:
            return [self.pools[addr].to_dict() for addr in sorted(self.pools)]

    def import_pools(self, records: Sequence[Mapping[str, Any]]) -> None:
        """
        Load pool records exported by `export_pools` (e.g. after a restart).

        Every record must derive to its own address under this engine's
        program id. Nothing is loaded unless all records are valid.

        Raises:
            ValueError: On a malformed, foreign or duplicate record
            AmmError: If a record fails the pool record's own checks
            PoolAlreadyExists: If a record's pair already has a pool here
        """
        loaded: Dict[str, Pool] = {}
        for obj in records:
            pool = pool_from_dict(obj)
            expected, bump = self._address(pool.mint_a, pool.mint_b)
            if pool.program_id != self.config.program_id or (pool.address, pool.bump) != (expected, bump):
                raise ValueError(f"pool record {pool.address} does not derive under this program id")
            if pool.address in loaded:
                raise ValueError(f"duplicate pool record {pool.address}")
            loaded[pool.address] = pool
        with self._registry_lock:
            for address in loaded:
                if address in self.pools:
                    raise PoolAlreadyExists(address)
            self.pools.update(loaded)
        logger.info("imported %d pool records", len(loaded))

    # -- operations --------------------------------------------------------

    def initialize_config(self, admin: str) -> ConfigRecord:
        def _do() -> ConfigRecord:
            with self._registry_lock:
                if self.config_record is not None:
                    raise ConfigAlreadyExists(self.config_record.address)
                address, bump = derive_config_address(self.config.program_id)
                self.config_record = ConfigRecord(address=address, admin=admin, bump=bump)
            logger.info("config initialized: address=%s admin=%s", address, admin)
            return self.config_record

        return self._run("initialize_config", _do)

    def initialize_pool(
        self,
        payer: str,
        mint_a: str,
        mint_b: str,
        vault_a: str,
        vault_b: str,
        lp_mint: str,
    ) -> Pool:
        """
        Create the pool record for a canonical pair.

        Raises:
            IdenticalMints, InvalidMintOrder: On bad mint arguments
            Unauthorized: If pool creation is admin-gated and payer is not admin
            PoolAlreadyExists: If the pair already has a record
            InvalidVault, InvalidLpMint: On bad account linkage
        """

        def _do() -> Pool:
            address, bump = self._address(mint_a, mint_b)
            if self.config.require_admin_for_pool_creation and self.config_record is not None:
                if payer != self.config_record.admin:
                    raise Unauthorized(f"{payer} is not the admin")
            with self._pool_lock(address):
                if address in self.pools:
                    raise PoolAlreadyExists(f"{mint_a}/{mint_b}")
                pool = plan_initialize(
                    pool_address=address,
                    bump=bump,
                    program_id=self.config.program_id,
                    mint_a=mint_a,
                    mint_b=mint_b,
                    vault_a=self.custody.vault_info(vault_a),
                    vault_b=self.custody.vault_info(vault_b),
                    lp_mint=self.custody.mint_info(lp_mint),
                    fee_bps=self.config.default_fee_bps,
                )
                self.pools[address] = pool
            logger.info("pool initialized: address=%s mints=%s/%s fee_bps=%d", address, mint_a, mint_b, pool.fee_bps)
            return pool

        return self._run("initialize_pool", _do)

    def add_liquidity(
        self,
        user: str,
        mint_a: str,
        mint_b: str,
        amount_a: int,
        amount_b: int,
        min_lp_tokens: int,
    ) -> AddLiquidityPlan:
        def _do() -> AddLiquidityPlan:
            address, _ = self._address(mint_a, mint_b)
            with self._pool_lock(address):
                pool = self._pool_at(address, mint_a, mint_b)
                plan = plan_add_liquidity(
                    pool,
                    self._snapshot(pool),
                    user=user,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    min_lp_tokens=min_lp_tokens,
                )
                self._execute(pool, plan.directives)
            logger.info(
                "add_liquidity: pool=%s user=%s amounts=(%d, %d) lp_minted=%d",
                address, user, plan.amount_a, plan.amount_b, plan.lp_tokens,
            )
            return plan

        return self._run("add_liquidity", _do)

    def remove_liquidity(
        self,
        user: str,
        mint_a: str,
        mint_b: str,
        lp_amount: int,
        min_amount_a: int,
        min_amount_b: int,
    ) -> RemoveLiquidityPlan:
        def _do() -> RemoveLiquidityPlan:
            address, _ = self._address(mint_a, mint_b)
            with self._pool_lock(address):
                pool = self._pool_at(address, mint_a, mint_b)
                plan = plan_remove_liquidity(
                    pool,
                    self._snapshot(pool),
                    user=user,
                    lp_amount=lp_amount,
                    min_amount_a=min_amount_a,
                    min_amount_b=min_amount_b,
                )
                self._execute(pool, plan.directives)
            logger.info(
                "remove_liquidity: pool=%s user=%s lp_burned=%d amounts=(%d, %d)",
                address, user, plan.lp_amount, plan.amount_a, plan.amount_b,
            )
            return plan

        return self._run("remove_liquidity", _do)

    def swap(
        self,
        user: str,
        mint_a: str,
        mint_b: str,
        vault_in: str,
        vault_out: str,
        amount_in: int,
        minimum_amount_out: int,
    ) -> SwapPlan:
        def _do() -> SwapPlan:
            address, _ = self._address(mint_a, mint_b)
            with self._pool_lock(address):
                pool = self._pool_at(address, mint_a, mint_b)
                plan = plan_swap(
                    pool,
                    self._snapshot(pool),
                    user=user,
                    vault_in=vault_in,
                    vault_out=vault_out,
                    amount_in=amount_in,
                    minimum_amount_out=minimum_amount_out,
                )
                self._execute(pool, plan.directives)
            logger.info(
                "swap: pool=%s user=%s direction=%s in=%d out=%d",
                address, user, plan.direction.value, plan.amount_in, plan.amount_out,
            )
            return plan

        return self._run("swap", _do)

    def apply(self, op: Operation):
        """Dispatch a parsed operation (see `operations.parse_operation`)."""
        if isinstance(op, InitializeConfigOp):
            return self.initialize_config(op.admin)
        if isinstance(op, InitializePoolOp):
            return self.initialize_pool(op.payer, op.mint_a, op.mint_b, op.vault_a, op.vault_b, op.lp_mint)
        if isinstance(op, AddLiquidityOp):
            return self.add_liquidity(op.user, op.mint_a, op.mint_b, op.amount_a, op.amount_b, op.min_lp_tokens)
        if isinstance(op, RemoveLiquidityOp):
            return self.remove_liquidity(
                op.user, op.mint_a, op.mint_b, op.lp_amount, op.min_amount_a, op.min_amount_b
            )
        if isinstance(op, SwapOp):
            return self.swap(
                op.user, op.mint_a, op.mint_b, op.vault_in, op.vault_out, op.amount_in, op.minimum_amount_out
            )
        raise TypeError(f"not an operation: {type(op).__name__}")
