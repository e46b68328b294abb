"""Typed failures for the AMM core.

Every failure aborts the whole operation. Each class carries a stable numeric
``code`` and a stable human-readable ``message`` so callers can map failures
without parsing strings.
"""

from __future__ import annotations

from typing import Dict, Type


INPUT = "input"
CONSISTENCY = "consistency"
ECONOMIC = "economic"
ARITHMETIC = "arithmetic"


class AmmError(Exception):
    """Base class for all AMM failures."""

    code: int = 6000
    message: str = "AMM error"
    category: str = CONSISTENCY

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        text = self.message if not detail else f"{self.message}: {detail}"
        super().__init__(text)


class IdenticalMints(AmmError):
    code = 6000
    message = "Token mints must be different"
    category = INPUT


class InvalidMintOrder(AmmError):
    code = 6001
    message = "Token mints must be in canonical order"
    category = INPUT


class ZeroLiquidity(AmmError):
    code = 6002
    message = "Liquidity amount cannot be zero"
    category = INPUT


class InsufficientLiquidity(AmmError):
    code = 6003
    message = "Pool has insufficient liquidity"
    category = ECONOMIC


class SlippageExceeded(AmmError):
    code = 6004
    message = "Slippage tolerance exceeded"
    category = ECONOMIC


class MathOverflow(AmmError):
    code = 6005
    message = "Math operation overflow"
    category = ARITHMETIC


class InvalidVault(AmmError):
    code = 6006
    message = "Invalid vault account"
    category = CONSISTENCY


class InvalidLpMint(AmmError):
    code = 6007
    message = "Invalid LP mint"
    category = CONSISTENCY


class Unauthorized(AmmError):
    code = 6008
    message = "Unauthorized: only admin can perform this action"
    category = CONSISTENCY


class PoolAlreadyExists(AmmError):
    code = 6009
    message = "Pool already exists for this token pair"
    category = CONSISTENCY


class PoolNotReady(AmmError):
    code = 6010
    message = "Pool not ready: no pool record for this token pair"
    category = CONSISTENCY


class ConfigAlreadyExists(AmmError):
    code = 6011
    message = "Config record already initialized"
    category = CONSISTENCY


class InvariantViolation(AmmError):
    """Raised when a computed post-state breaks a pool invariant."""

    code = 6012
    message = "Pool invariant violated"
    category = ECONOMIC

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        super().__init__(", ".join(self.violations))


_BY_CODE: Dict[int, Type[AmmError]] = {
    cls.code: cls
    for cls in (
        IdenticalMints,
        InvalidMintOrder,
        ZeroLiquidity,
        InsufficientLiquidity,
        SlippageExceeded,
        MathOverflow,
        InvalidVault,
        InvalidLpMint,
        Unauthorized,
        PoolAlreadyExists,
        PoolNotReady,
        ConfigAlreadyExists,
        InvariantViolation,
    )
}


def error_from_code(code: int) -> Type[AmmError]:
    """Look up an error class by its stable code."""
    try:
        return _BY_CODE[code]
    except KeyError:
        raise ValueError(f"unknown AMM error code: {code}") from None


def all_error_classes() -> list[Type[AmmError]]:
    return [_BY_CODE[c] for c in sorted(_BY_CODE)]
