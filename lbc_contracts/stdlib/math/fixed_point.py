# -*- coding: utf-8 -*-
"""
lbc_contracts.stdlib.math.fixed_point
=====================================

Bonding-curve formulas on binary fixed-point numbers.

Continuous-token relations (ratio r = reserve_ratio_ppm / 1e6):

    purchase:  minted = supply * ((1 + deposit / reserve) ** r - 1)
    sale:      refund = reserve * (1 - (1 - sell / supply) ** (1 / r))

Both reduce to a rational power ``(a / b) ** (n / d)`` with ``a >= b``, which
is evaluated as ``exp(ln(a / b) * n / d)`` on numbers carrying
``MAX_PRECISION`` (127) fractional bits:

- ``fixed_ln`` takes the integer part of log2 from the bit length, then
  produces the 127 fractional bits of log2 by iterated squaring, and scales by
  a lower bound of ln 2.
- ``fixed_exp`` splits ``x = k * ln2 + r`` using an upper bound of ln 2 and
  sums the Maclaurin series of ``e ** r`` for at most ``EXP_SERIES_TERMS``
  terms, then shifts left by ``k``.

Rounding
--------
Every step truncates toward zero and every bound is chosen on the low side,
so ``power`` never exceeds the exact value. Consequently minted amounts and
refunds never exceed their exact mathematical values: rounding always favors
the reserve. The fixed-point error is on the order of 2**-120 relative, which
is far below the 1e-6 relative bound promised for outputs of at least 1e6
base units; in practice only the final integer floor is visible.

Arguments whose exponent would exceed ``MAX_EXP`` are clamped, which again
can only lower the result.

The module holds no state besides constants computed at import time.
"""

from __future__ import annotations

from typing import Final

from . import PPM, U256_MAX

MAX_PRECISION: Final[int] = 127
FIXED_1: Final[int] = 1 << MAX_PRECISION
FIXED_2: Final[int] = 2 << MAX_PRECISION

EXP_SERIES_TERMS: Final[int] = 34
MAX_EXP_BITS: Final[int] = 255


class CurveDomainError(ValueError):
    """Formula input outside the curve's domain."""


def _ln2_bounds(precision: int) -> "tuple[int, int]":
    # ln 2 = sum_{k>=1} 1 / (k * 2**k). With K = precision + 8 terms the tail
    # is below one unit at this scale and each floored term loses under one
    # unit, so floor + K + 1 bounds the true value from above.
    terms = precision + 8
    one = 1 << precision
    lo = 0
    for k in range(1, terms + 1):
        lo += one // (k << k)
    return lo, lo + terms + 1


LN2_FLOOR, LN2_CEIL = _ln2_bounds(MAX_PRECISION)
MAX_EXP: Final[int] = MAX_EXP_BITS * LN2_FLOOR


def _require_uint(name: str, v: object) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise CurveDomainError(f"{name} must be int, got {type(v).__name__}")
    if v < 0 or v > U256_MAX:
        raise CurveDomainError(f"{name} outside [0, 2**256-1]: {v}")
    return v


def _require_ratio(ratio_ppm: object) -> int:
    r = _require_uint("reserve_ratio_ppm", ratio_ppm)
    if r == 0 or r > PPM:
        raise CurveDomainError(f"reserve_ratio_ppm must be in 1..{PPM}, got {r}")
    return r


# ---------------------------------------------------------------------------
# Fixed-point primitives
# ---------------------------------------------------------------------------


def fixed_ln(numerator: int, denominator: int) -> int:
    """
    floor-biased ln(numerator / denominator) * 2**127, for numerator >= denominator > 0.
    """
    if denominator <= 0 or numerator < denominator:
        raise CurveDomainError("fixed_ln requires numerator >= denominator > 0")
    x = numerator * FIXED_1 // denominator
    res = 0

    count = (x >> MAX_PRECISION).bit_length() - 1
    if count > 0:
        x >>= count
        res = count * FIXED_1

    # x is now in [1, 2) at fixed scale
    if x > FIXED_1:
        for i in range(MAX_PRECISION, 0, -1):
            x = (x * x) >> MAX_PRECISION
            if x >= FIXED_2:
                x >>= 1
                res += 1 << (i - 1)

    return (res * LN2_FLOOR) >> MAX_PRECISION


def fixed_exp(x: int) -> int:
    """floor-biased e**(x / 2**127) * 2**127 for x >= 0 (clamped at MAX_EXP)."""
    if x < 0:
        raise CurveDomainError("fixed_exp requires x >= 0")
    if x > MAX_EXP:
        x = MAX_EXP
    k, r = divmod(x, LN2_CEIL)

    total = FIXED_1
    term = FIXED_1
    for n in range(1, EXP_SERIES_TERMS):
        term = term * r // (n * FIXED_1)
        if term == 0:
            break
        total += term
    return total << k


def power(base_n: int, base_d: int, exp_n: int, exp_d: int) -> int:
    """
    (base_n / base_d) ** (exp_n / exp_d) as a 127-bit fixed-point number.

    Requires base_n >= base_d > 0 and exp_d > 0; the result is >= FIXED_1 and
    never above the exact value.
    """
    if exp_d <= 0 or exp_n < 0:
        raise CurveDomainError("power requires exp_n >= 0 and exp_d > 0")
    return fixed_exp(fixed_ln(base_n, base_d) * exp_n // exp_d)


# ---------------------------------------------------------------------------
# Curve formulas
# ---------------------------------------------------------------------------


def purchase_return(
    total_supply: int, deposit_amount: int, reserve_ratio_ppm: int, reserve_balance: int
) -> int:
    """
    Tokens issued for ``deposit_amount`` at the given supply and reserve.

    Raises CurveDomainError unless total_supply > 0, reserve_balance > 0 and
    0 < reserve_ratio_ppm <= 1_000_000. A zero deposit returns 0.
    """
    supply = _require_uint("total_supply", total_supply)
    deposit = _require_uint("deposit_amount", deposit_amount)
    ratio = _require_ratio(reserve_ratio_ppm)
    reserve = _require_uint("reserve_balance", reserve_balance)
    if supply == 0:
        raise CurveDomainError("total_supply must be > 0")
    if reserve == 0:
        raise CurveDomainError("reserve_balance must be > 0")

    if deposit == 0:
        return 0
    if ratio == PPM:
        return supply * deposit // reserve

    result = power(deposit + reserve, reserve, ratio, PPM)
    return ((supply * result) >> MAX_PRECISION) - supply


def sale_return(
    total_supply: int, sell_amount: int, reserve_ratio_ppm: int, reserve_balance: int
) -> int:
    """
    Reserve refunded for burning ``sell_amount`` tokens.

    Selling the whole supply returns the whole reserve exactly; selling
    nothing returns 0. Raises CurveDomainError unless
    0 <= sell_amount <= total_supply, total_supply > 0, reserve_balance > 0 and
    0 < reserve_ratio_ppm <= 1_000_000.
    """
    supply = _require_uint("total_supply", total_supply)
    sell = _require_uint("sell_amount", sell_amount)
    ratio = _require_ratio(reserve_ratio_ppm)
    reserve = _require_uint("reserve_balance", reserve_balance)
    if supply == 0:
        raise CurveDomainError("total_supply must be > 0")
    if reserve == 0:
        raise CurveDomainError("reserve_balance must be > 0")
    if sell > supply:
        raise CurveDomainError("sell_amount exceeds total_supply")

    if sell == 0:
        return 0
    if sell == supply:
        return reserve
    if ratio == PPM:
        return reserve * sell // supply

    result = power(supply, supply - sell, PPM, ratio)
    return reserve * (result - FIXED_1) // result


__all__ = [
    "MAX_PRECISION",
    "FIXED_1",
    "FIXED_2",
    "EXP_SERIES_TERMS",
    "MAX_EXP",
    "LN2_FLOOR",
    "LN2_CEIL",
    "CurveDomainError",
    "fixed_ln",
    "fixed_exp",
    "power",
    "purchase_return",
    "sale_return",
]
