# -*- coding: utf-8 -*-
"""
lbc_contracts.stdlib.math
=========================

Deterministic, integer-only math helpers for LBC Python contracts.

Smart contracts must avoid Python floats. This package offers the integer
primitives the market and its token need:
- U256 envelope checks
- parts-per-million (PPM) ratio validation
- checked U256 add/sub (see ``safe_uint``)
- the bonding-curve power engine (see ``fixed_point``)

Reverts carry short, stable tags such as ``b"MATH:BAD_PPM"``.

Examples
--------
    from lbc_contracts.stdlib.math import check_ppm, require_u256

    check_ppm(500_000)        # ok, a 50% reserve ratio
    require_u256(10**18)      # ok
"""

from __future__ import annotations

from typing import Final

from lbc_vm.stdlib import abi


def _revert(msg: bytes) -> None:
    abi.revert(msg)


# ---------------------------------------------------------------------------
# Numeric envelopes & constants
# ---------------------------------------------------------------------------

U256_MAX: Final[int] = (1 << 256) - 1

PPM: Final[int] = 1_000_000  # parts per million
GWEI: Final[int] = 10**9


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


def is_uint(x: object) -> bool:
    """True for non-bool ints in [0, U256_MAX]."""
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= U256_MAX


def require_u256(*xs: int) -> None:
    """Revert if any value is outside [0, U256_MAX]."""
    for n in xs:
        if not is_uint(n):
            _revert(b"MATH:U256_OOB")


def check_ppm(ppm: int) -> None:
    """Revert unless 0 < ppm <= 1_000_000."""
    if not is_uint(ppm) or ppm == 0 or ppm > PPM:
        _revert(b"MATH:BAD_PPM")


__all__ = [
    "U256_MAX",
    "PPM",
    "GWEI",
    "is_uint",
    "require_u256",
    "check_ppm",
]
