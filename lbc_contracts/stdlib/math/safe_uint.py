# -*- coding: utf-8 -*-
"""
lbc_contracts.stdlib.math.safe_uint
===================================

Checked unsigned-integer helpers for LBC Python contracts.

- **Checked**: revert on overflow/underflow with stable tags.
- Integer-only; arguments are validated to lie in [0, U256_MAX].

Token balances and the market reserve are updated exclusively through these
helpers so that an accounting bug surfaces as a revert rather than a wrap.
"""

from __future__ import annotations

from typing import Final

from . import U256_MAX, _revert

# Canonical error tags (short, stable)
ERR_OOB: Final[bytes] = b"UINT:OOB"          # input outside [0, U256_MAX]
ERR_OVER: Final[bytes] = b"UINT:OVERFLOW"
ERR_UNDER: Final[bytes] = b"UINT:UNDERFLOW"


def _assert_u256(*xs: int) -> None:
    for x in xs:
        if isinstance(x, bool) or not isinstance(x, int) or x < 0 or x > U256_MAX:
            _revert(ERR_OOB)


def u256_add(x: int, y: int) -> int:
    """Checked add: revert on overflow."""
    _assert_u256(x, y)
    s = x + y
    if s > U256_MAX:
        _revert(ERR_OVER)
    return s


def u256_sub(x: int, y: int) -> int:
    """Checked subtract: revert on underflow."""
    _assert_u256(x, y)
    if y > x:
        _revert(ERR_UNDER)
    return x - y


__all__ = [
    "ERR_OOB",
    "ERR_OVER",
    "ERR_UNDER",
    "u256_add",
    "u256_sub",
]
