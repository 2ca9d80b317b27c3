# -*- coding: utf-8 -*-
"""
lbc_contracts.stdlib.access.ownable
===================================

Minimal, deterministic **Ownable** helper for LBC Python contracts.

- read the current owner (`get_owner`)
- initialize the owner once (`init_owner`)
- check that a caller is the owner (`require_owner`)

Ownership is fixed after initialization: the market's only owner-controlled
parameter is its gas-price ceiling, and no transfer path is offered.

Events:
    - "OwnershipTransferred" args: {"previous": bytes, "new": bytes}
"""
from __future__ import annotations

from typing import Optional

from lbc_vm.errors import Revert
from lbc_vm.stdlib import events, storage

from . import OWNER_KEY

__all__ = ["Unauthorized", "get_owner", "init_owner", "require_owner"]


class Unauthorized(Revert):
    """A non-owner attempted an owner-only action."""

    reason = b"ACCESS:NOT_OWNER"


def get_owner() -> Optional[bytes]:
    """
    Return the current owner address, or None if not set.
    """
    v = storage.get(OWNER_KEY)
    return v if len(v) > 0 else None


def init_owner(owner: bytes) -> None:
    """
    Initialize the contract owner. Idempotent: does not overwrite if already set.
    """
    if get_owner() is not None:
        return
    if not isinstance(owner, (bytes, bytearray)) or len(owner) == 0:
        raise Unauthorized(b"ACCESS:OWNER_EMPTY")
    storage.set(OWNER_KEY, bytes(owner))
    events.emit(b"OwnershipTransferred", {"previous": b"", "new": bytes(owner)})


def require_owner(caller: bytes) -> None:
    """
    Revert with ``Unauthorized`` unless `caller` equals the current owner.
    """
    owner = get_owner()
    if owner is None or owner != caller:
        raise Unauthorized(context={"caller": "0x" + bytes(caller).hex()})
