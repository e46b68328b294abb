"""
Custody collaborator: token balances, vaults, LP mints, and the four
directives (pull, push, mint_to, burn).

The core never moves tokens itself. It reads `vault_info` / `mint_info` and
hands an ordered list of directives, signed by the pool's `Authority`, to a
`Custody` implementation. `InMemoryCustody` is the reference host used by the
engine, the demo tool and the tests.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Dict, Iterator

from ..errors import InsufficientLiquidity, InvalidLpMint, InvalidVault, MathOverflow, Unauthorized
from ..kernels.python.fixed_point_v1 import U64_MAX, require_u64
from .addressing import Authority
from .balances import Address, BalanceTable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenAccountInfo:
    """Live view of a token account (vault)."""

    address: Address
    mint: Address
    owner: Address
    amount: int


@dataclass(frozen=True)
class MintInfo:
    """Live view of a mint."""

    address: Address
    supply: int
    mint_authority: Address | None


class Custody:
    """Interface the pool core needs from the token custody layer."""

    def vault_info(self, address: Address) -> TokenAccountInfo:
        raise NotImplementedError

    def mint_info(self, address: Address) -> MintInfo:
        raise NotImplementedError

    def pull(self, authority: Authority, amount: int, user: Address, vault: Address) -> None:
        """Move `amount` from the user's holding into a pool vault."""
        raise NotImplementedError

    def push(self, authority: Authority, amount: int, vault: Address, user: Address) -> None:
        """Move `amount` from a pool vault to the user."""
        raise NotImplementedError

    def mint_to(self, authority: Authority, amount: int, lp_mint: Address, user: Address) -> None:
        raise NotImplementedError

    def burn(self, authority: Authority, amount: int, lp_mint: Address, user: Address) -> None:
        raise NotImplementedError

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Transactional boundary for a directive sequence.

        Either every directive in the block commits or none does, and a
        rollback never undoes directives committed by another block. Hosts
        without their own transactions must override this; the default
        provides no rollback.
        """
        yield


class InMemoryCustody(Custody):
    """
    Dict-backed custody host.

    - Vaults are token accounts with an explicit owner and mint.
    - User holdings (underlying tokens and LP tokens alike) live in one
      `BalanceTable` keyed by (owner, mint).
    - `atomic()` snapshots everything and restores it if the block raises.
      The host lock is held for the whole block, so a rollback can only ever
      undo the block's own directives; other pools wait instead of
      interleaving.
    """

    def __init__(self) -> None:
        self._vaults: Dict[Address, TokenAccountInfo] = {}
        self._mints: Dict[Address, MintInfo] = {}
        self._holdings = BalanceTable()
        # Reentrant: directives and reads run inside atomic() on the same thread.
        self._lock = threading.RLock()

    # -- setup -------------------------------------------------------------

    def create_mint(self, address: Address, mint_authority: Address | None = None) -> MintInfo:
        with self._lock:
            if address in self._mints:
                raise ValueError(f"mint already exists: {address}")
            info = MintInfo(address=address, supply=0, mint_authority=mint_authority)
            self._mints[address] = info
            return info

    def create_vault(self, address: Address, mint: Address, owner: Address) -> TokenAccountInfo:
        with self._lock:
            if address in self._vaults:
                raise ValueError(f"vault already exists: {address}")
            if mint not in self._mints:
                raise ValueError(f"unknown mint: {mint}")
            info = TokenAccountInfo(address=address, mint=mint, owner=owner, amount=0)
            self._vaults[address] = info
            return info

    def fund(self, user: Address, mint: Address, amount: int) -> None:
        """Faucet: credit a user holding and grow the mint's supply."""
        require_u64("amount", amount)
        with self._lock:
            info = self._require_mint(mint)
            new_supply = info.supply + amount
            if new_supply > U64_MAX:
                raise MathOverflow(f"supply of {mint} would exceed u64")
            self._holdings.add(user, mint, amount)
            self._mints[mint] = replace(info, supply=new_supply)

    def balance_of(self, user: Address, mint: Address) -> int:
        with self._lock:
            return self._holdings.get(user, mint)

    # -- reads -------------------------------------------------------------

    def vault_info(self, address: Address) -> TokenAccountInfo:
        with self._lock:
            try:
                return self._vaults[address]
            except KeyError:
                raise InvalidVault(f"unknown vault: {address}") from None

    def mint_info(self, address: Address) -> MintInfo:
        with self._lock:
            try:
                return self._mints[address]
            except KeyError:
                raise InvalidLpMint(f"unknown mint: {address}") from None

    # -- directives --------------------------------------------------------

    def pull(self, authority: Authority, amount: int, user: Address, vault: Address) -> None:
        require_u64("amount", amount)
        with self._lock:
            info = self._owned_vault(authority, vault)
            new_amount = info.amount + amount
            if new_amount > U64_MAX:
                raise MathOverflow(f"vault {vault} balance would exceed u64")
            self._holdings.subtract(user, info.mint, amount)
            self._vaults[vault] = replace(info, amount=new_amount)
        logger.debug("pull %d of %s from %s into %s", amount, info.mint, user, vault)

    def push(self, authority: Authority, amount: int, vault: Address, user: Address) -> None:
        require_u64("amount", amount)
        with self._lock:
            info = self._owned_vault(authority, vault)
            if amount > info.amount:
                raise InsufficientLiquidity(f"vault {vault} holds {info.amount} < {amount}")
            self._holdings.add(user, info.mint, amount)
            self._vaults[vault] = replace(info, amount=info.amount - amount)
        logger.debug("push %d of %s from %s to %s", amount, info.mint, vault, user)

    def mint_to(self, authority: Authority, amount: int, lp_mint: Address, user: Address) -> None:
        require_u64("amount", amount)
        with self._lock:
            info = self._controlled_mint(authority, lp_mint)
            new_supply = info.supply + amount
            if new_supply > U64_MAX:
                raise MathOverflow(f"supply of {lp_mint} would exceed u64")
            self._holdings.add(user, lp_mint, amount)
            self._mints[lp_mint] = replace(info, supply=new_supply)
        logger.debug("mint %d of %s to %s", amount, lp_mint, user)

    def burn(self, authority: Authority, amount: int, lp_mint: Address, user: Address) -> None:
        require_u64("amount", amount)
        with self._lock:
            info = self._controlled_mint(authority, lp_mint)
            if amount > info.supply:
                raise InsufficientLiquidity(f"burn {amount} exceeds supply {info.supply}")
            self._holdings.subtract(user, lp_mint, amount)
            self._mints[lp_mint] = replace(info, supply=info.supply - amount)
        logger.debug("burn %d of %s from %s", amount, lp_mint, user)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            vaults = dict(self._vaults)
            mints = dict(self._mints)
            holdings = self._holdings.copy()
            try:
                yield
            except BaseException:
                self._vaults = vaults
                self._mints = mints
                self._holdings = holdings
                logger.debug("custody rolled back")
                raise

    # -- helpers -----------------------------------------------------------

    def _require_mint(self, mint: Address) -> MintInfo:
        try:
            return self._mints[mint]
        except KeyError:
            raise ValueError(f"unknown mint: {mint}") from None

    def _owned_vault(self, authority: Authority, vault: Address) -> TokenAccountInfo:
        authority.verify()
        info = self.vault_info(vault)
        if info.owner != authority.pool_address:
            raise Unauthorized(f"vault {vault} is not owned by {authority.pool_address}")
        return info

    def _controlled_mint(self, authority: Authority, lp_mint: Address) -> MintInfo:
        authority.verify()
        info = self.mint_info(lp_mint)
        if info.mint_authority != authority.pool_address:
            raise Unauthorized(f"mint {lp_mint} is not controlled by {authority.pool_address}")
        return info
