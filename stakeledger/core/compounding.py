"""Daily compounding in unsigned 64.64 binary fixed point.

`compound(rate, principal, days)` returns ``principal * (1 + rate / 1e18) ** days``.

Representation:
- a 64.64 value ``x`` stands for ``x / 2**64``;
- values are bounded by ``MAX_64X64 = 2**127 - 1`` (the signed 128-bit range of
  the on-chain math library the rates were designed against);
- amounts are unsigned 256-bit integers.

Rounding contract: every step truncates toward zero (Python ``//`` and ``>>`` on
non-negative ints). Results are therefore never above the exact real value, and
a zero rate or zero days is exact.
"""

from __future__ import annotations

from .errors import CompoundingOverflowError

RATE_SCALE: int = 10**18
ONE_64X64: int = 1 << 64
MAX_64X64: int = (1 << 127) - 1
MAX_UINT256: int = (1 << 256) - 1


def _require_uint(value: int, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    return value


# -- 64.64 primitives ---------------------------------------------------------

def divu(x: int, y: int) -> int:
    """``x / y`` as 64.64, truncated. Raises on a zero divisor or overflow."""
    if y == 0:
        raise ZeroDivisionError("divu by zero")
    result = (x << 64) // y
    if result > MAX_64X64:
        raise CompoundingOverflowError(f"divu overflow: {x} / {y}")
    return result


def mul_64x64(a: int, b: int) -> int:
    """Product of two 64.64 values, truncated."""
    result = (a * b) >> 64
    if result > MAX_64X64:
        raise CompoundingOverflowError("64.64 multiplication overflow")
    return result


def pow_64x64(base: int, exponent: int) -> int:
    """``base ** exponent`` for a 64.64 base by square-and-multiply.

    Each product truncates. The last squaring is skipped so that a result which
    fits is never rejected because of an unused intermediate.
    """
    result = ONE_64X64
    b = base
    n = exponent
    while n:
        if n & 1:
            result = mul_64x64(result, b)
        n >>= 1
        if n:
            b = mul_64x64(b, b)
    return result


def mulu(x: int, y: int) -> int:
    """64.64 ``x`` times unsigned integer ``y``, truncated to an integer."""
    result = (x * y) >> 64
    if result > MAX_UINT256:
        raise CompoundingOverflowError("mulu result exceeds uint256")
    return result


# -- Compounding --------------------------------------------------------------

def growth_factor(rate: int, days: int) -> int:
    """``(1 + rate / RATE_SCALE) ** days`` as 64.64."""
    _require_uint(rate, name="rate")
    _require_uint(days, name="days")
    base = ONE_64X64 + divu(rate, RATE_SCALE)
    if base > MAX_64X64:
        raise CompoundingOverflowError(f"rate too large: {rate}")
    return pow_64x64(base, days)


def compound(rate: int, principal: int, days: int) -> int:
    """Compound `principal` daily at `rate` (scaled by 1e18) for `days` days."""
    _require_uint(principal, name="principal")
    if principal > MAX_UINT256:
        raise CompoundingOverflowError("principal exceeds uint256")
    if days == 0:
        _require_uint(rate, name="rate")
        return principal
    return mulu(growth_factor(rate, days), principal)
