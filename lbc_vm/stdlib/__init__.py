"""
lbc_vm.stdlib
=============

Contract-facing standard library surface.

Contracts can do:

    from lbc_vm.stdlib import storage, events, abi, treasury, calls, hash

Exports
-------
- storage  : get/set/delete plus get_int/set_int (u256, big-endian), scoped to the executing contract
- events   : emit(name: bytes, args: dict) -> None
- abi      : caller(), origin(), value(), gas_price(), self_address(), revert(...), require(...)
- treasury : balance(address=None) -> int, transfer(to, amount) -> None
- calls    : invoke(to, entrypoint, *args, value=0), create(module, *args, salt=None), is_contract(addr)
- hash     : sha3_256(b)

Every function resolves the executing frame at call time; using them outside
a transaction raises ``VmError(code="no_frame")``.
"""

from __future__ import annotations

from . import abi as abi
from . import calls as calls
from . import events as events
from . import hash as hash
from . import storage as storage
from . import treasury as treasury

__all__ = ("storage", "events", "abi", "treasury", "calls", "hash")
