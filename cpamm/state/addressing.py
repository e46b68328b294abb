"""
Deterministic addressing and delegated pool authority.

A pool's storage address and its signing authority are both derived from the
canonical (mint_a, mint_b) pair, so the pool can direct vault and LP-mint
operations without holding a key. The derivation is a SHA-256 over a domain
tag, the seeds, a bump byte and the program id, with a bump search from 255
downward.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..errors import IdenticalMints, InvalidMintOrder, Unauthorized


DEFAULT_PROGRAM_ID = "0x" + "a3" * 32
POOL_SEED = b"pool"
CONFIG_SEED = b"config"
_DOMAIN_TAG = b"CpammDerivedAddress"
_ZERO_ADDRESS = "0x" + "00" * 32


def _require_id(name: str, value: str) -> None:
    if not isinstance(value, str) or not value:
        raise TypeError(f"{name} must be a non-empty string")


def _candidate(seeds: Sequence[bytes], bump: int, program_id: str) -> str:
    h = hashlib.sha256()
    h.update(_DOMAIN_TAG)
    for seed in seeds:
        # Length-prefix each seed so ("ab", "c") and ("a", "bc") differ.
        h.update(len(seed).to_bytes(2, "big"))
        h.update(seed)
    h.update(bytes([bump]))
    h.update(program_id.encode("utf-8"))
    return "0x" + h.hexdigest()


def find_address(seeds: Sequence[bytes], program_id: str) -> Tuple[str, int]:
    """
    Return (address, bump) for the first usable bump in 255..0.

    A candidate is unusable if it collides with the program id or the zero
    address.
    """
    _require_id("program_id", program_id)
    for bump in range(255, -1, -1):
        addr = _candidate(seeds, bump, program_id)
        if addr not in (program_id, _ZERO_ADDRESS):
            return addr, bump
    raise ValueError("no usable bump for seeds")


def create_address(seeds: Sequence[bytes], bump: int, program_id: str) -> str:
    """Re-derive an address from a known bump."""
    if not isinstance(bump, int) or isinstance(bump, bool) or not (0 <= bump <= 255):
        raise ValueError(f"bump must be in [0, 255]: {bump!r}")
    return _candidate(seeds, bump, program_id)


def pool_seeds(mint_a: str, mint_b: str) -> Tuple[bytes, bytes, bytes]:
    _require_id("mint_a", mint_a)
    _require_id("mint_b", mint_b)
    if mint_a == mint_b:
        raise IdenticalMints(mint_a)
    if mint_a > mint_b:
        raise InvalidMintOrder(f"{mint_a} > {mint_b}")
    return POOL_SEED, mint_a.encode("utf-8"), mint_b.encode("utf-8")


def derive_pool_address(mint_a: str, mint_b: str, program_id: str = DEFAULT_PROGRAM_ID) -> Tuple[str, int]:
    """
    Address of the pool for a canonical pair.

    Raises:
        IdenticalMints: If mint_a == mint_b
        InvalidMintOrder: If mint_a > mint_b
    """
    return find_address(pool_seeds(mint_a, mint_b), program_id)


def derive_config_address(program_id: str = DEFAULT_PROGRAM_ID) -> Tuple[str, int]:
    return find_address((CONFIG_SEED,), program_id)


@dataclass(frozen=True)
class Authority:
    """
    Signing capability of one pool.

    Custody directives take an Authority explicitly; there is no ambient
    permission. Obtain one from a pool record (`Pool.authority`) or from
    `derive_pool_authority`; any other instance fails `verify()` unless it
    re-derives to its own address.
    """

    pool_address: str
    mint_a: str
    mint_b: str
    bump: int
    program_id: str = DEFAULT_PROGRAM_ID

    def verify(self) -> None:
        """Re-derive the address from the seeds; raise Unauthorized on mismatch."""
        try:
            expected = create_address(pool_seeds(self.mint_a, self.mint_b), self.bump, self.program_id)
        except (ValueError, TypeError, IdenticalMints, InvalidMintOrder) as exc:
            raise Unauthorized(f"malformed authority: {exc}") from exc
        if expected != self.pool_address:
            raise Unauthorized(f"authority does not derive to {self.pool_address}")


def derive_pool_authority(mint_a: str, mint_b: str, program_id: str = DEFAULT_PROGRAM_ID) -> Authority:
    address, bump = derive_pool_address(mint_a, mint_b, program_id)
    return Authority(pool_address=address, mint_a=mint_a, mint_b=mint_b, bump=bump, program_id=program_id)
