"""
Test contract exercising the whole contract-facing stdlib surface.

Storage:
  b"count"  -> u256 counter
  b"recv"   -> total native value received through ``receive``
"""
from __future__ import annotations

from lbc_vm.errors import Revert
from lbc_vm.stdlib import abi, calls, events, hash, storage, treasury

MODULE = __name__


def init(start: int = 0) -> None:
    abi.require(start >= 0, b"SAMPLE:NEGATIVE")
    storage.set_int(b"count", start)
    events.emit(b"Init", {b"start": start, b"deployer": abi.caller()})


def inc(n: int = 1) -> int:
    total = storage.get_int(b"count") + n
    storage.set_int(b"count", total)
    events.emit(b"Inc", {"by": n, "total": total})
    return total


def get() -> int:
    return storage.get_int(b"count")


def inc_then_fail(n: int) -> None:
    inc(n)
    abi.revert(b"SAMPLE:FAIL")


def inc_other(other: bytes, n: int) -> int:
    """Increment locally, then call `other`; a failure there is caught."""
    inc(1)
    try:
        calls.invoke(other, "inc_then_fail", n)
    except Revert:
        events.emit(b"Caught", {"other": other})
    return get()


def recurse(depth: int) -> int:
    return calls.invoke(abi.self_address(), "recurse", depth + 1)


def context() -> tuple:
    return (abi.caller(), abi.origin(), abi.value(), abi.gas_price(), abi.self_address())


def context_via(other: bytes) -> tuple:
    return calls.invoke(other, "context")


def receive() -> None:
    storage.set_int(b"recv", storage.get_int(b"recv") + abi.value())


def received() -> int:
    return storage.get_int(b"recv")


def pay(to: bytes, amount: int) -> int:
    treasury.transfer(to, amount)
    return treasury.balance()


def pay_into(to: bytes, entrypoint: str, amount: int) -> object:
    return calls.invoke(to, entrypoint, value=amount)


def spawn(start: int, salt: bytes = b"") -> bytes:
    return calls.create(MODULE, start, salt=salt or None)


def digest(data: bytes) -> bytes:
    return hash.sha3_256(data)


def put(key: bytes, value: bytes) -> None:
    if value:
        storage.set(key, value)
    else:
        storage.delete(key)


def spam(n: int) -> None:
    for i in range(n):
        events.emit(b"Spam", {"i": i})


__all__ = [
    "inc",
    "get",
    "inc_then_fail",
    "inc_other",
    "recurse",
    "context",
    "context_via",
    "receive",
    "received",
    "pay",
    "pay_into",
    "spawn",
    "digest",
    "put",
    "spam",
]

__payable__ = ("context", "inc_then_fail")
