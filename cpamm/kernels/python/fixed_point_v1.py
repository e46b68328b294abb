"""
Checked fixed-width integer arithmetic (v1 semantics).

Python ints never overflow, so every width limit is enforced explicitly:
- amounts are u64, intermediate products are u128,
- every operation that would leave its width raises `MathOverflow`,
- nothing wraps or saturates.

All rounding is floor (`//` on non-negative operands).
"""

from __future__ import annotations

from ...errors import MathOverflow


U16_MAX = (1 << 16) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_width(name: str, value: int, limit: int) -> None:
    _require_int(name, value)
    if value < 0 or value > limit:
        raise MathOverflow(f"{name}={value} outside [0, {limit}]")


def require_u64(name: str, value: int) -> int:
    """Validate a caller-supplied amount as an unsigned 64-bit integer."""
    _require_width(name, value, U64_MAX)
    return value


def require_u16(name: str, value: int) -> int:
    _require_width(name, value, U16_MAX)
    return value


def to_u64(value: int) -> int:
    """Narrow a wide intermediate back to u64 (fail-closed)."""
    _require_int("value", value)
    if value < 0 or value > U64_MAX:
        raise MathOverflow(f"{value} does not fit in u64")
    return value


def checked_add(a: int, b: int, *, limit: int = U128_MAX) -> int:
    _require_width("a", a, limit)
    _require_width("b", b, limit)
    out = a + b
    if out > limit:
        raise MathOverflow(f"{a} + {b} overflows")
    return out


def checked_sub(a: int, b: int, *, limit: int = U128_MAX) -> int:
    _require_width("a", a, limit)
    _require_width("b", b, limit)
    if b > a:
        raise MathOverflow(f"{a} - {b} underflows")
    return a - b


def checked_mul(a: int, b: int, *, limit: int = U128_MAX) -> int:
    _require_width("a", a, limit)
    _require_width("b", b, limit)
    out = a * b
    if out > limit:
        raise MathOverflow(f"{a} * {b} overflows")
    return out


def checked_mul_div(a: int, b: int, c: int) -> int:
    """
    Compute `floor(a * b / c)` with a u128 intermediate and a u64 result.

    Raises MathOverflow if `a * b` leaves u128, if `c == 0`, or if the
    quotient does not fit in u64.
    """
    product = checked_mul(a, b)
    _require_width("c", c, U128_MAX)
    if c == 0:
        raise MathOverflow("division by zero")
    return to_u64(product // c)


def integer_sqrt(value: int) -> int:
    """
    `floor(sqrt(value))` by Newton's method.

    Seeded at `(value + 1) // 2`; iterates `y = (x + value // x) // 2` while the
    sequence keeps decreasing. The iterates never drop below the true root, so
    the first non-decreasing step lands on the floor.
    """
    _require_width("value", value, U128_MAX)
    if value == 0:
        return 0

    x = value
    y = (x + 1) // 2
    while y < x:
        x = y
        y = (x + value // x) // 2
    return x
