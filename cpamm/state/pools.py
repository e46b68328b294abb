"""
Pool and config records.

The pool record holds identities and the fee only. Reserves and LP supply are
never cached here; they are read live from custody for every operation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from ..errors import IdenticalMints, InvalidLpMint, InvalidMintOrder, InvalidVault
from ..kernels.python.fixed_point_v1 import BPS_DENOM
from .addressing import DEFAULT_PROGRAM_ID, Authority


DEFAULT_FEE_BPS = 30


class PoolStatus(Enum):
    """Pool status enumeration."""
    UNINITIALIZED = "UNINITIALIZED"
    ACTIVE = "ACTIVE"


def canonical_pair(mint_x: str, mint_y: str) -> Tuple[str, str]:
    """
    Order two mints ascending.

    Raises:
        IdenticalMints: If both identifiers are equal
    """
    if mint_x == mint_y:
        raise IdenticalMints(mint_x)
    return (mint_x, mint_y) if mint_x < mint_y else (mint_y, mint_x)


def validate_fee_bps(fee_bps: int) -> int:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps < BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")
    return fee_bps


@dataclass(frozen=True)
class Pool:
    """
    Persistent state of one pool.

    Attributes:
        address: Derived storage address of the pool (also its authority)
        mint_a: First token mint (must be < mint_b)
        mint_b: Second token mint
        vault_a: Custody account holding mint_a reserves
        vault_b: Custody account holding mint_b reserves
        lp_mint: LP claim token mint; its authority is the pool
        fee_bps: Trading fee in basis points, fixed at creation
        bump: Bump that derives `address` from the pair
        program_id: Namespace the address was derived in
    """
    address: str
    mint_a: str
    mint_b: str
    vault_a: str
    vault_b: str
    lp_mint: str
    fee_bps: int
    bump: int
    program_id: str = DEFAULT_PROGRAM_ID

    def __post_init__(self) -> None:
        if self.mint_a == self.mint_b:
            raise IdenticalMints(self.mint_a)
        if self.mint_a > self.mint_b:
            raise InvalidMintOrder(f"{self.mint_a} > {self.mint_b}")
        if self.vault_a == self.vault_b:
            raise InvalidVault("vault_a and vault_b must differ")
        if self.lp_mint in (self.vault_a, self.vault_b, self.mint_a, self.mint_b):
            raise InvalidLpMint("lp_mint must be a distinct account")
        validate_fee_bps(self.fee_bps)
        if not isinstance(self.bump, int) or isinstance(self.bump, bool) or not (0 <= self.bump <= 255):
            raise ValueError(f"bump must be in [0, 255]: {self.bump!r}")

    @property
    def status(self) -> PoolStatus:
        # A record only exists once initialize has run.
        return PoolStatus.ACTIVE

    @property
    def authority(self) -> Authority:
        return Authority(
            pool_address=self.address,
            mint_a=self.mint_a,
            mint_b=self.mint_b,
            bump=self.bump,
            program_id=self.program_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"Pool(address={self.address[:18]}..., "
            f"mints=({self.mint_a[:10]}..., {self.mint_b[:10]}...), "
            f"fee_bps={self.fee_bps})"
        )


_POOL_FIELDS = ("address", "mint_a", "mint_b", "vault_a", "vault_b", "lp_mint", "fee_bps", "bump", "program_id")


def pool_from_dict(obj: Mapping[str, Any]) -> Pool:
    """Rebuild a pool record from its logical dict form (strict)."""
    if not isinstance(obj, Mapping):
        raise ValueError("pool record must be an object")
    unknown = set(obj) - set(_POOL_FIELDS)
    if unknown:
        raise ValueError(f"unknown pool record fields: {sorted(unknown)}")
    missing = [k for k in _POOL_FIELDS if k != "program_id" and k not in obj]
    if missing:
        raise ValueError(f"missing pool record fields: {missing}")
    for key in ("address", "mint_a", "mint_b", "vault_a", "vault_b", "lp_mint"):
        if not isinstance(obj[key], str) or not obj[key]:
            raise ValueError(f"{key} must be a non-empty string")
    for key in ("fee_bps", "bump"):
        if not isinstance(obj[key], int) or isinstance(obj[key], bool):
            raise ValueError(f"{key} must be an int")
    return Pool(**{k: obj[k] for k in _POOL_FIELDS if k in obj})


@dataclass(frozen=True)
class ConfigRecord:
    """Protocol config record naming the admin."""

    address: str
    admin: str
    bump: int
