# -*- coding: utf-8 -*-
"""
Test-only contract: a configurable token receiver and market client.

Modes (set once in ``init``):
  b"accept"        acknowledge every token notification
  b"wrong_ack"     answer notifications with a wrong acknowledgement
  b"revert"        revert inside the notification hook
  b"reenter_sell"  on receiving a refund, try to redeem again
  b"reenter_buy"   on receiving a refund, try to deposit it again

``buy`` forwards attached value to the market; ``sell`` redeems through
``transfer_and_call``. Refunds arrive through ``receive``.
"""
from __future__ import annotations

from lbc_vm.stdlib import abi, calls, events, storage

from lbc_contracts.stdlib.token.receiver import ON_TRANSFER_RECEIVED

K_MODE = b"probe:mode"
K_MARKET = b"probe:market"
K_TOKEN = b"probe:token"
K_HITS = b"probe:hits"


def init(mode: bytes, market: bytes = b"", token: bytes = b"") -> None:
    storage.set(K_MODE, mode)
    if market:
        storage.set(K_MARKET, market)
    if token:
        storage.set(K_TOKEN, token)


def on_transfer_received(operator: bytes, sender: bytes, amount: int, data: bytes = b"") -> bytes:
    mode = storage.get(K_MODE)
    if mode == b"revert":
        abi.revert(b"PROBE:REJECT")
    storage.set_int(K_HITS, storage.get_int(K_HITS) + 1)
    events.emit(b"Notified", {"operator": operator, "from": sender, "amount": amount, "data": data})
    if mode == b"wrong_ack":
        return b"\x00\x00\x00\x00"
    return ON_TRANSFER_RECEIVED


def buy() -> None:
    calls.invoke(storage.get(K_MARKET), None, value=abi.value())


def sell(amount: int) -> None:
    calls.invoke(storage.get(K_TOKEN), "transfer_and_call", storage.get(K_MARKET), amount, b"")


def receive() -> None:
    mode = storage.get(K_MODE)
    if mode == b"reenter_sell":
        calls.invoke(storage.get(K_TOKEN), "transfer_and_call", storage.get(K_MARKET), 1, b"")
    elif mode == b"reenter_buy":
        calls.invoke(storage.get(K_MARKET), None, value=abi.value())


def hits() -> int:
    return storage.get_int(K_HITS)


__all__ = ["on_transfer_received", "buy", "sell", "receive", "hits"]
__payable__ = ("buy",)
