# -*- coding: utf-8 -*-
"""
lbc_contracts.stdlib.token
==========================

Tiny, deterministic helpers and constants for fungible token contracts.
This package **does not** perform storage or event emission by itself; it
only provides conventions, prefixes, and validation shared by the token
library (`fungible`) and the transfer-with-notify hook (`receiver`).

Conventions
-----------
Storage keys (prefixed bytes):
  - balances:   BAL_PREFIX || <addr>
  - allowances: ALLOW_PREFIX || <owner> || b"|" || <spender>

Events (names as bytes):
  - b"Transfer" { "from": bytes, "to": bytes, "value": int }
  - b"Approval" { "owner": bytes, "spender": bytes, "value": int }
  - b"Mint"     { "to": bytes, "amount": int }
  - b"Burn"     { "from": bytes, "amount": int }

Symbols/Names:
  - Symbols: 1..11 printable ASCII (e.g. b"MIT").
  - Names:   1..64 printable ASCII (e.g. b"MITHRIL").

Numeric domain:
  - Amounts fit U256. Arithmetic goes through `lbc_contracts.stdlib.math.safe_uint`.
"""

from __future__ import annotations

from typing import Final

from lbc_vm.stdlib import abi

# -----------------------------------------------------------------------------
# Public constants: storage prefixes, event names, limits, errors
# -----------------------------------------------------------------------------

BAL_PREFIX: Final[bytes] = b"tok:bal:"
ALLOW_PREFIX: Final[bytes] = b"tok:allow:"

EVT_TRANSFER: Final[bytes] = b"Transfer"
EVT_APPROVAL: Final[bytes] = b"Approval"
EVT_MINT: Final[bytes] = b"Mint"
EVT_BURN: Final[bytes] = b"Burn"

DEFAULT_DECIMALS: Final[int] = 18
MAX_DECIMALS: Final[int] = 36

# Stable error tags (short, comparable, log-friendly)
ERR_BAD_ADDR: Final[bytes] = b"TOKEN:BAD_ADDR"
ERR_BAD_AMOUNT: Final[bytes] = b"TOKEN:BAD_AMOUNT"
ERR_BAD_SYMBOL: Final[bytes] = b"TOKEN:BAD_SYMBOL"
ERR_BAD_NAME: Final[bytes] = b"TOKEN:BAD_NAME"
ERR_BAD_DECIMALS: Final[bytes] = b"TOKEN:BAD_DECIMALS"


# -----------------------------------------------------------------------------
# Key derivation helpers (no storage I/O here)
# -----------------------------------------------------------------------------


def key_balance(addr: bytes) -> bytes:
    require_address(addr)
    return BAL_PREFIX + bytes(addr)


def key_allow(owner: bytes, spender: bytes) -> bytes:
    require_address(owner)
    require_address(spender)
    return ALLOW_PREFIX + bytes(owner) + b"|" + bytes(spender)


# -----------------------------------------------------------------------------
# Validation helpers
# -----------------------------------------------------------------------------


def require_address(addr: bytes) -> None:
    """
    Ensure `addr` is non-empty bytes. Width is enforced by the host, not here.
    """
    if not isinstance(addr, (bytes, bytearray)) or len(addr) == 0:
        abi.revert(ERR_BAD_ADDR)


def require_amount(n: int) -> None:
    """
    Ensure `n` is an integer amount in [0, 2**256-1].
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0 or n > (2**256 - 1):
        abi.revert(ERR_BAD_AMOUNT)


def is_printable_ascii(s: bytes) -> bool:
    if not isinstance(s, (bytes, bytearray)) or len(s) == 0:
        return False
    return all(32 <= b <= 126 for b in s)


def require_symbol(sym: bytes) -> None:
    if not is_printable_ascii(sym) or not (1 <= len(sym) <= 11):
        abi.revert(ERR_BAD_SYMBOL)


def require_name(name: bytes) -> None:
    if not is_printable_ascii(name) or not (1 <= len(name) <= 64):
        abi.revert(ERR_BAD_NAME)


def require_decimals(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or not (0 <= n <= MAX_DECIMALS):
        abi.revert(ERR_BAD_DECIMALS)


__all__ = [
    "BAL_PREFIX",
    "ALLOW_PREFIX",
    "EVT_TRANSFER",
    "EVT_APPROVAL",
    "EVT_MINT",
    "EVT_BURN",
    "DEFAULT_DECIMALS",
    "MAX_DECIMALS",
    "ERR_BAD_ADDR",
    "ERR_BAD_AMOUNT",
    "ERR_BAD_SYMBOL",
    "ERR_BAD_NAME",
    "ERR_BAD_DECIMALS",
    "key_balance",
    "key_allow",
    "require_address",
    "require_amount",
    "require_symbol",
    "require_name",
    "require_decimals",
    "is_printable_ascii",
]
