# -*- coding: utf-8 -*-
"""
LBC Reserve Token (MITHRIL / MIT)
---------------------------------

Mintable, burnable fungible token with transfer-with-notify. The LBC swap
market deploys one instance and becomes its owner, which makes the market the
only account able to change supply.

Views:
  - name() -> bytes
  - symbol() -> bytes
  - decimals() -> int
  - total_supply() -> int
  - balance_of(addr: bytes) -> int
  - allowance(owner: bytes, spender: bytes) -> int
  - owner() -> bytes
State-changing:
  - init(name, symbol, decimals, owner, holder, initial_supply) -> None  (deploy only)
  - transfer(to, amount) -> bool
  - approve(spender, amount) -> bool
  - transfer_from(src, to, amount) -> bool
  - transfer_and_call(to, amount, data=b"") -> bool
  - transfer_from_and_call(src, to, amount, data=b"") -> bool
  - mint(to, amount) -> bool      (owner-only)
  - burn(amount) -> bool          (owner-only, from the owner's balance)

Event names (bytes):
  b"Transfer", b"Approval", b"OwnershipTransferred", b"Mint", b"Burn"
"""
from __future__ import annotations

from lbc_vm.stdlib import abi

from lbc_contracts.stdlib.access.ownable import get_owner, init_owner, require_owner
from lbc_contracts.stdlib.token import fungible
from lbc_contracts.stdlib.token.receiver import notify_transfer_received


def init(
    name: bytes,
    symbol: bytes,
    decimals: int,
    owner: bytes,
    holder: bytes,
    initial_supply: int,
) -> None:
    fungible.init_metadata(name, symbol, decimals)
    init_owner(owner)
    fungible.mint_to(holder, initial_supply)


# ----------------------------
# Views
# ----------------------------

def name() -> bytes:
    return fungible.name()


def symbol() -> bytes:
    return fungible.symbol()


def decimals() -> int:
    return fungible.decimals()


def total_supply() -> int:
    return fungible.total_supply()


def balance_of(addr: bytes) -> int:
    return fungible.balance_of(addr)


def allowance(owner: bytes, spender: bytes) -> int:
    return fungible.allowance(owner, spender)


def owner() -> bytes:
    return get_owner() or b""


# ----------------------------
# Transfers
# ----------------------------

def transfer(to: bytes, amount: int) -> bool:
    return fungible.transfer(abi.caller(), to, amount)


def approve(spender: bytes, amount: int) -> bool:
    return fungible.approve(abi.caller(), spender, amount)


def transfer_from(src: bytes, to: bytes, amount: int) -> bool:
    return fungible.transfer_from(abi.caller(), src, to, amount)


def transfer_and_call(to: bytes, amount: int, data: bytes = b"") -> bool:
    """Transfer, then notify `to` if it is a contract. The hook may move the tokens on."""
    caller = abi.caller()
    fungible.transfer(caller, to, amount)
    notify_transfer_received(caller, caller, to, amount, data)
    return True


def transfer_from_and_call(src: bytes, to: bytes, amount: int, data: bytes = b"") -> bool:
    """Allowance-based transfer_and_call; the hook sees `src` as the sender."""
    caller = abi.caller()
    fungible.transfer_from(caller, src, to, amount)
    notify_transfer_received(caller, src, to, amount, data)
    return True


# ----------------------------
# Supply (owner-only)
# ----------------------------

def mint(to: bytes, amount: int) -> bool:
    require_owner(abi.caller())
    fungible.mint_to(to, amount)
    return True


def burn(amount: int) -> bool:
    caller = abi.caller()
    require_owner(caller)
    fungible.burn_from_holder(caller, amount)
    return True


__all__ = [
    "name",
    "symbol",
    "decimals",
    "total_supply",
    "balance_of",
    "allowance",
    "owner",
    "transfer",
    "approve",
    "transfer_from",
    "transfer_and_call",
    "transfer_from_and_call",
    "mint",
    "burn",
]
