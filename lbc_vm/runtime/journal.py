"""
lbc_vm.runtime.journal — journaling writes, checkpoints, revert/commit.

This module provides a deterministic, in-memory write journal over accounts
and contract storage. It supports nested checkpoints via a stack of overlays.
Writes go to the top overlay; reads consult overlays from top → base.
`commit()` merges the top overlay into the next layer (or the base state if
it's the last layer). `revert()` discards the top overlay.

Key properties
--------------
- Pure Python, no I/O.
- Copy-on-write for accounts (Account objects are copied into overlays).
- Storage overlay per (address, key) with explicit deletion markers.
- Nested checkpoints (begin/commit/revert) with O(changes) merge cost.

Intended usage
--------------
    j = Journal()
    j.begin()                       # start a checkpoint
    acc = j.ensure_account_for_write(addr)
    acc.balance += 10
    j.storage_set(addr, key, b"value")
    j.commit()                      # apply to parent/base

The engine opens one checkpoint per contract frame, so a failing call undoes
exactly its own writes and everything it triggered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from ..errors import AddressCollision

U256_MAX = (1 << 256) - 1


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


@dataclass
class Account:
    """
    Account record.

    - nonce:   transactions sent (EOA) or contracts created (contract)
    - balance: native value, u256
    - code:    importable module name of the contract, None for EOAs
    """
    nonce: int = 0
    balance: int = 0
    code: Optional[str] = None

    def __post_init__(self) -> None:
        if not (0 <= self.balance <= U256_MAX):
            raise ValueError("balance outside u256")
        if self.nonce < 0:
            raise ValueError("nonce must be non-negative")

    @property
    def is_contract(self) -> bool:
        return self.code is not None

    def copy(self) -> "Account":
        return Account(nonce=self.nonce, balance=self.balance, code=self.code)


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    """
    A single journal layer.

    - `accounts`: copies of Account objects modified/created in this layer.
    - `storage`: staged storage changes. `None` means deletion for that key.
    """

    accounts: Dict[bytes, Account] = field(default_factory=dict)
    storage: Dict[bytes, Dict[bytes, Optional[bytes]]] = field(default_factory=dict)

    def storage_set_local(self, addr: bytes, key: bytes, value: Optional[bytes]) -> None:
        m = self.storage.get(addr)
        if m is None:
            m = {}
            self.storage[addr] = m
        m[key] = value


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    API highlights
    --------------
    - begin() / commit() / revert() / depth()
    - get_account(), ensure_account_for_write(), create_account()
    - storage_get(), storage_set(), storage_delete(), storage_items()
    """

    def __init__(self) -> None:
        self._base_accounts: Dict[bytes, Account] = {}
        self._base_storage: Dict[bytes, Dict[bytes, bytes]] = {}
        self._layers: List[_Overlay] = []

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of open checkpoints (0 when writes go straight to base)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """Merge the top overlay into its parent, or into base if it is the last one."""
        if not self._layers:
            raise RuntimeError("journal has no open checkpoint")
        top = self._layers.pop()
        if self._layers:
            self._merge_layers(self._layers[-1], top)
        else:
            self._apply_to_base(top)

    def revert(self) -> None:
        """Discard the top overlay."""
        if not self._layers:
            raise RuntimeError("journal has no open checkpoint")
        self._layers.pop()

    def revert_to(self, marker: int) -> None:
        """Revert repeatedly until the current depth equals `marker`."""
        if marker < 0:
            raise ValueError("marker must be >= 0")
        while len(self._layers) > marker:
            self.revert()

    @staticmethod
    def _merge_layers(parent: _Overlay, child: _Overlay) -> None:
        for addr, acc in child.accounts.items():
            parent.accounts[addr] = acc
        for addr, changes in child.storage.items():
            dst = parent.storage.setdefault(addr, {})
            dst.update(changes)

    def _apply_to_base(self, layer: _Overlay) -> None:
        for addr, acc in layer.accounts.items():
            self._base_accounts[addr] = acc
        for addr, changes in layer.storage.items():
            dst = self._base_storage.setdefault(addr, {})
            for k, v in changes.items():
                if v is None:
                    dst.pop(k, None)
                else:
                    dst[k] = v
            if not dst:
                self._base_storage.pop(addr, None)

    # --------------------------------------------------------------------- #
    # Account API
    # --------------------------------------------------------------------- #

    def get_account(self, address: bytes | bytearray | memoryview) -> Optional[Account]:
        """Readonly lookup. Do not mutate the returned object."""
        addr = _b(address, name="address")
        for layer in reversed(self._layers):
            acc = layer.accounts.get(addr)
            if acc is not None:
                return acc
        return self._base_accounts.get(addr)

    def ensure_account_for_write(self, address: bytes | bytearray | memoryview) -> Account:
        """
        Fetch an Account suitable for mutation in the top layer, creating a
        zeroed one if absent anywhere.
        """
        addr = _b(address, name="address")
        if not self._layers:
            acc = self._base_accounts.get(addr)
            if acc is None:
                acc = Account()
                self._base_accounts[addr] = acc
            return acc
        top = self._layers[-1]
        if addr in top.accounts:
            return top.accounts[addr]
        existing = self.get_account(addr)
        acc = existing.copy() if existing is not None else Account()
        top.accounts[addr] = acc
        return acc

    def create_account(self, address: bytes | bytearray | memoryview, *, code: Optional[str]) -> Account:
        """
        Create a contract (or EOA) record. An existing address may only be
        reused if it is an empty, code-less account (pre-funded addresses).
        """
        addr = _b(address, name="address")
        existing = self.get_account(addr)
        if existing is not None and (existing.is_contract or existing.nonce > 0):
            raise AddressCollision(
                "account already exists", context={"address": "0x" + addr.hex()}
            )
        acc = self.ensure_account_for_write(addr)
        acc.code = code
        acc.nonce = 1 if code is not None else acc.nonce
        return acc

    # --------------------------------------------------------------------- #
    # Storage API
    # --------------------------------------------------------------------- #

    def storage_get(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        default: Optional[bytes] = None,
    ) -> Optional[bytes]:
        """Read storage with overlay precedence. Returns `default` if absent."""
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        for layer in reversed(self._layers):
            m = layer.storage.get(addr)
            if m is not None and key_b in m:
                v = m[key_b]
                return default if v is None else v
        return self._base_storage.get(addr, {}).get(key_b, default)

    def storage_set(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        value: bytes | bytearray | memoryview,
    ) -> None:
        """Stage a storage write in the top overlay. Empty value is a deletion."""
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        val_b = _b(value, name="value")
        stored: Optional[bytes] = val_b if len(val_b) else None
        if not self._layers:
            self._apply_to_base(_Overlay(storage={addr: {key_b: stored}}))
            return
        self._layers[-1].storage_set_local(addr, key_b, stored)

    def storage_delete(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
    ) -> None:
        """Explicit storage deletion."""
        self.storage_set(address, key, b"")

    def storage_items(self, address: bytes | bytearray | memoryview) -> Iterator[Tuple[bytes, bytes]]:
        """Iterate visible (key, value) pairs for an address, ordered by key."""
        addr = _b(address, name="address")
        visible: Dict[bytes, bytes] = dict(self._base_storage.get(addr, {}))
        for layer in self._layers:
            m = layer.storage.get(addr)
            if not m:
                continue
            for k, v in m.items():
                if v is None:
                    visible.pop(k, None)
                else:
                    visible[k] = v
        for k in sorted(visible):
            yield k, visible[k]


__all__ = ["Account", "Journal", "U256_MAX"]
