"""
Strict parsing of caller-facing operations.

Requests arrive as JSON-shaped dicts with a "kind" tag. Every argument is
required (no defaults, no optional parameters) and amounts must be u64 ints.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple, Union

from ..kernels.python.fixed_point_v1 import U64_MAX


class OperationKind(Enum):
    INITIALIZE_CONFIG = "INITIALIZE_CONFIG"
    INITIALIZE_POOL = "INITIALIZE_POOL"
    ADD_LIQUIDITY = "ADD_LIQUIDITY"
    REMOVE_LIQUIDITY = "REMOVE_LIQUIDITY"
    SWAP = "SWAP"


@dataclass(frozen=True)
class InitializeConfigOp:
    admin: str


@dataclass(frozen=True)
class InitializePoolOp:
    payer: str
    mint_a: str
    mint_b: str
    vault_a: str
    vault_b: str
    lp_mint: str


@dataclass(frozen=True)
class AddLiquidityOp:
    user: str
    mint_a: str
    mint_b: str
    amount_a: int
    amount_b: int
    min_lp_tokens: int


@dataclass(frozen=True)
class RemoveLiquidityOp:
    user: str
    mint_a: str
    mint_b: str
    lp_amount: int
    min_amount_a: int
    min_amount_b: int


@dataclass(frozen=True)
class SwapOp:
    user: str
    mint_a: str
    mint_b: str
    vault_in: str
    vault_out: str
    amount_in: int
    minimum_amount_out: int


Operation = Union[InitializeConfigOp, InitializePoolOp, AddLiquidityOp, RemoveLiquidityOp, SwapOp]


def _require_str(value: Any, *, name: str, max_len: int = 256) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_u64(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} must be in [0, 2**64-1]")
    return int(value)


# kind -> (op class, string fields, u64 fields)
_SCHEMAS: Dict[OperationKind, Tuple[type, Tuple[str, ...], Tuple[str, ...]]] = {
    OperationKind.INITIALIZE_CONFIG: (InitializeConfigOp, ("admin",), ()),
    OperationKind.INITIALIZE_POOL: (
        InitializePoolOp,
        ("payer", "mint_a", "mint_b", "vault_a", "vault_b", "lp_mint"),
        (),
    ),
    OperationKind.ADD_LIQUIDITY: (
        AddLiquidityOp,
        ("user", "mint_a", "mint_b"),
        ("amount_a", "amount_b", "min_lp_tokens"),
    ),
    OperationKind.REMOVE_LIQUIDITY: (
        RemoveLiquidityOp,
        ("user", "mint_a", "mint_b"),
        ("lp_amount", "min_amount_a", "min_amount_b"),
    ),
    OperationKind.SWAP: (
        SwapOp,
        ("user", "mint_a", "mint_b", "vault_in", "vault_out"),
        ("amount_in", "minimum_amount_out"),
    ),
}


def parse_operation(obj: Any) -> Operation:
    """
    Parse one operation dict.

    Raises:
        ValueError: On unknown kind, missing/unknown keys, or bad field types
    """
    if not isinstance(obj, Mapping):
        raise ValueError("operation must be an object")
    raw_kind = obj.get("kind")
    if not isinstance(raw_kind, str):
        raise ValueError("operation kind must be a string")
    try:
        kind = OperationKind(raw_kind)
    except ValueError:
        raise ValueError(f"unknown operation kind: {raw_kind!r}") from None

    cls, str_fields, int_fields = _SCHEMAS[kind]
    expected = {"kind", *str_fields, *int_fields}
    missing = sorted(expected - set(obj))
    if missing:
        raise ValueError(f"{kind.value}: missing fields {missing}")
    unknown = sorted(set(obj) - expected)
    if unknown:
        raise ValueError(f"{kind.value}: unknown fields {unknown}")

    args: Dict[str, Any] = {}
    for name in str_fields:
        args[name] = _require_str(obj[name], name=name)
    for name in int_fields:
        args[name] = _require_u64(obj[name], name=name)
    return cls(**args)


def operation_kind(op: Operation) -> OperationKind:
    for kind, (cls, _, _) in _SCHEMAS.items():
        if isinstance(op, cls):
            return kind
    raise TypeError(f"not an operation: {type(op).__name__}")
