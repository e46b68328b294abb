"""Pre-flight validation of account linkages.

Each ``check_*`` function is pure: it takes the pool record (or the
initialize arguments) plus live account views and returns the list of
violated invariants, empty when the operation may proceed. ``raise_first``
turns the first violation into its typed error.

Checks are ordered input-first so the reported error is the most basic one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Type

from ..errors import AmmError, IdenticalMints, InvalidLpMint, InvalidMintOrder, InvalidVault
from ..state.custody import MintInfo, TokenAccountInfo
from ..state.pools import Pool


@dataclass(frozen=True)
class Violation:
    error: Type[AmmError]
    detail: str

    @property
    def code(self) -> int:
        return self.error.code

    def __str__(self) -> str:
        return f"{self.error.__name__}: {self.detail}"


class SwapDirection(Enum):
    A_TO_B = "A_TO_B"
    B_TO_A = "B_TO_A"


def raise_first(violations: Sequence[Violation]) -> None:
    if violations:
        first = violations[0]
        raise first.error(first.detail)


def _check_vault(
    out: List[Violation],
    label: str,
    vault: TokenAccountInfo,
    *,
    expected_mint: str,
    expected_owner: str,
) -> None:
    if vault.mint != expected_mint:
        out.append(Violation(InvalidVault, f"{label} holds {vault.mint}, expected {expected_mint}"))
    if vault.owner != expected_owner:
        out.append(Violation(InvalidVault, f"{label} owned by {vault.owner}, expected {expected_owner}"))


def _check_lp_mint(out: List[Violation], lp_mint: MintInfo, *, pool_address: str) -> None:
    if lp_mint.mint_authority != pool_address:
        out.append(Violation(InvalidLpMint, f"lp_mint authority is {lp_mint.mint_authority}, expected {pool_address}"))


def check_initialize(
    *,
    pool_address: str,
    mint_a: str,
    mint_b: str,
    vault_a: TokenAccountInfo,
    vault_b: TokenAccountInfo,
    lp_mint: MintInfo,
) -> List[Violation]:
    """Validate the accounts supplied to initialize a pool at `pool_address`."""
    out: List[Violation] = []
    if mint_a == mint_b:
        out.append(Violation(IdenticalMints, f"{mint_a} == {mint_b}"))
        return out
    if mint_a > mint_b:
        out.append(Violation(InvalidMintOrder, f"{mint_a} > {mint_b}"))
        return out

    if vault_a.address == vault_b.address:
        out.append(Violation(InvalidVault, "vault_a and vault_b are the same account"))
    _check_vault(out, "vault_a", vault_a, expected_mint=mint_a, expected_owner=pool_address)
    _check_vault(out, "vault_b", vault_b, expected_mint=mint_b, expected_owner=pool_address)

    if lp_mint.address in (mint_a, mint_b):
        out.append(Violation(InvalidLpMint, "lp_mint must differ from the pool mints"))
    _check_lp_mint(out, lp_mint, pool_address=pool_address)
    return out


def check_pool_accounts(
    pool: Pool,
    *,
    vault_a: TokenAccountInfo,
    vault_b: TokenAccountInfo,
    lp_mint: MintInfo,
) -> List[Violation]:
    """Validate that live accounts are the ones the pool record names."""
    out: List[Violation] = []
    if vault_a.address != pool.vault_a:
        out.append(Violation(InvalidVault, f"vault_a is {vault_a.address}, pool records {pool.vault_a}"))
    if vault_b.address != pool.vault_b:
        out.append(Violation(InvalidVault, f"vault_b is {vault_b.address}, pool records {pool.vault_b}"))
    _check_vault(out, "vault_a", vault_a, expected_mint=pool.mint_a, expected_owner=pool.address)
    _check_vault(out, "vault_b", vault_b, expected_mint=pool.mint_b, expected_owner=pool.address)

    if lp_mint.address != pool.lp_mint:
        out.append(Violation(InvalidLpMint, f"lp_mint is {lp_mint.address}, pool records {pool.lp_mint}"))
    _check_lp_mint(out, lp_mint, pool_address=pool.address)
    return out


def check_swap_route(pool: Pool, *, vault_in: str, vault_out: str) -> List[Violation]:
    """Input/output vaults must be the pool's two vaults, one each."""
    out: List[Violation] = []
    if vault_in == vault_out:
        out.append(Violation(InvalidVault, "input and output vault are the same"))
        return out
    if vault_in not in (pool.vault_a, pool.vault_b):
        out.append(Violation(InvalidVault, f"input vault {vault_in} not in pool"))
    if vault_out not in (pool.vault_a, pool.vault_b):
        out.append(Violation(InvalidVault, f"output vault {vault_out} not in pool"))
    return out


def swap_direction(pool: Pool, *, vault_in: str, vault_out: str) -> SwapDirection:
    raise_first(check_swap_route(pool, vault_in=vault_in, vault_out=vault_out))
    return SwapDirection.A_TO_B if vault_in == pool.vault_a else SwapDirection.B_TO_A
