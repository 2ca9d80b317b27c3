# -*- coding: utf-8 -*-
"""
Fungible token library (ERC-20 like)
====================================

Deterministic, float-free, storage-backed token bookkeeping for LBC Python
contracts. Token contracts import these functions and pass the acting
account explicitly, usually ``abi.caller()``.

Highlights
----------
- Explicit `caller` parameters for mutating calls (no ambient msg.sender here).
- Deterministic storage layout using prefixes from `lbc_contracts.stdlib.token`.
- Events emitted via `lbc_vm.stdlib.events`: Transfer, Approval, Mint, Burn.
- U256-checked math via `lbc_contracts.stdlib.math.safe_uint` (no silent wrap).
- Supply control (`mint_to`, `burn_from_holder`) is unguarded; the calling
  contract enforces who may use it.

Library surface
---------------
# metadata
init_metadata(name, symbol, decimals) / name() / symbol() / decimals()
total_supply() / balance_of(addr) / allowance(owner, spender)

# movement (explicit caller)
transfer(caller, to, amount)
approve(caller, spender, amount)
transfer_from(caller, owner, to, amount)

# supply
mint_to(to, amount) / burn_from_holder(holder, amount)
"""

from __future__ import annotations

from typing import Final

from lbc_vm.stdlib import abi, events, storage

from ..math.safe_uint import u256_add, u256_sub
from . import (EVT_APPROVAL, EVT_BURN, EVT_MINT, EVT_TRANSFER, key_allow,
               key_balance, require_address, require_amount,
               require_decimals, require_name, require_symbol)

# ------------------------------------------------------------------------------
# Storage keys (metadata). Values are raw bytes unless noted.
# ------------------------------------------------------------------------------

K_NAME: Final[bytes] = b"tok:meta:name"
K_SYMBOL: Final[bytes] = b"tok:meta:symbol"
K_DECIMALS: Final[bytes] = b"tok:meta:dec"  # u256
K_TOTAL: Final[bytes] = b"tok:meta:total"  # u256
K_INIT: Final[bytes] = b"tok:meta:inited"  # presence flag

# Counterparty recorded in Transfer events for mint and burn.
ZERO_ADDR: Final[bytes] = b"\x00" * 20


# ------------------------------------------------------------------------------
# Metadata
# ------------------------------------------------------------------------------


def init_metadata(name: bytes, symbol: bytes, decimals: int) -> None:
    """
    One-time metadata initializer. Fails if already initialized.
    """
    if storage.get(K_INIT):
        abi.revert(b"TOKEN:ALREADY_INIT")
    require_name(name)
    require_symbol(symbol)
    require_decimals(decimals)

    storage.set(K_NAME, bytes(name))
    storage.set(K_SYMBOL, bytes(symbol))
    storage.set_int(K_DECIMALS, decimals)
    storage.set(K_INIT, b"1")


def is_initialized() -> bool:
    return bool(storage.get(K_INIT))


def name() -> bytes:
    return storage.get(K_NAME)


def symbol() -> bytes:
    return storage.get(K_SYMBOL)


def decimals() -> int:
    return storage.get_int(K_DECIMALS)


def total_supply() -> int:
    return storage.get_int(K_TOTAL)


# ------------------------------------------------------------------------------
# Views
# ------------------------------------------------------------------------------


def balance_of(addr: bytes) -> int:
    return storage.get_int(key_balance(addr))


def allowance(owner: bytes, spender: bytes) -> int:
    return storage.get_int(key_allow(owner, spender))


# ------------------------------------------------------------------------------
# Movement
# ------------------------------------------------------------------------------


def _move(src: bytes, dst: bytes, amount: int) -> None:
    src_key = key_balance(src)
    src_bal = storage.get_int(src_key)
    if src_bal < amount:
        abi.revert(b"TOKEN:INSUFFICIENT_BALANCE")
    storage.set_int(src_key, u256_sub(src_bal, amount))
    dst_key = key_balance(dst)
    storage.set_int(dst_key, u256_add(storage.get_int(dst_key), amount))


def transfer(caller: bytes, to: bytes, amount: int) -> bool:
    require_address(caller)
    require_address(to)
    require_amount(amount)

    if amount > 0:
        _move(caller, to, amount)
    events.emit(EVT_TRANSFER, {b"from": caller, b"to": to, b"value": amount})
    return True


def approve(caller: bytes, spender: bytes, amount: int) -> bool:
    require_address(caller)
    require_address(spender)
    require_amount(amount)

    storage.set_int(key_allow(caller, spender), amount)
    events.emit(EVT_APPROVAL, {b"owner": caller, b"spender": spender, b"value": amount})
    return True


def spend_allowance(owner: bytes, spender: bytes, amount: int) -> None:
    """Debit `spender`'s allowance over `owner` by `amount`."""
    allow_key = key_allow(owner, spender)
    current = storage.get_int(allow_key)
    if current < amount:
        abi.revert(b"TOKEN:ALLOWANCE_LOW")
    storage.set_int(allow_key, u256_sub(current, amount))


def transfer_from(caller: bytes, owner: bytes, to: bytes, amount: int) -> bool:
    """
    Spender (`caller`) transfers `amount` from `owner` to `to` using allowance.
    """
    require_address(caller)
    require_address(owner)
    require_address(to)
    require_amount(amount)

    if amount > 0:
        # Debit allowance first (checks then set)
        spend_allowance(owner, caller, amount)
        _move(owner, to, amount)
    events.emit(EVT_TRANSFER, {b"from": owner, b"to": to, b"value": amount})
    return True


# ------------------------------------------------------------------------------
# Supply control (permission checks belong to the calling contract)
# ------------------------------------------------------------------------------


def mint_to(to: bytes, amount: int) -> None:
    require_address(to)
    require_amount(amount)
    if amount == 0:
        return

    storage.set_int(K_TOTAL, u256_add(total_supply(), amount))
    to_key = key_balance(to)
    storage.set_int(to_key, u256_add(storage.get_int(to_key), amount))

    events.emit(EVT_TRANSFER, {b"from": ZERO_ADDR, b"to": to, b"value": amount})
    events.emit(EVT_MINT, {b"to": to, b"amount": amount})


def burn_from_holder(holder: bytes, amount: int) -> None:
    require_address(holder)
    require_amount(amount)
    if amount == 0:
        return

    bal_key = key_balance(holder)
    cur = storage.get_int(bal_key)
    if cur < amount:
        abi.revert(b"TOKEN:INSUFFICIENT_BALANCE")
    storage.set_int(bal_key, u256_sub(cur, amount))
    storage.set_int(K_TOTAL, u256_sub(total_supply(), amount))

    events.emit(EVT_TRANSFER, {b"from": holder, b"to": ZERO_ADDR, b"value": amount})
    events.emit(EVT_BURN, {b"from": holder, b"amount": amount})


__all__ = [
    "K_NAME",
    "K_SYMBOL",
    "K_DECIMALS",
    "K_TOTAL",
    "ZERO_ADDR",
    "init_metadata",
    "is_initialized",
    "name",
    "symbol",
    "decimals",
    "total_supply",
    "balance_of",
    "allowance",
    "transfer",
    "approve",
    "spend_allowance",
    "transfer_from",
    "mint_to",
    "burn_from_holder",
]
