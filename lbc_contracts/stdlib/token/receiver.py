# -*- coding: utf-8 -*-
"""
Transfer-with-notify (ERC-1363 style)
=====================================

After a token moves balance to a contract, it calls the recipient's
``on_transfer_received(operator, sender, amount, data)`` entrypoint. The
recipient must return ``ON_TRANSFER_RECEIVED``; any other answer, a missing
entrypoint or a revert inside the hook aborts the whole transfer.

EOA recipients are not notified and receive a plain transfer.
"""

from __future__ import annotations

from typing import Final

from lbc_vm.errors import Revert, UnknownEntrypoint
from lbc_vm.stdlib import calls
from lbc_vm.stdlib.hash import sha3_256

HOOK_NAME: Final[str] = "on_transfer_received"

# First 4 bytes of the hook signature hash; returned by receivers to accept.
ON_TRANSFER_RECEIVED: Final[bytes] = sha3_256(
    b"on_transfer_received(bytes,bytes,uint256,bytes)"
)[:4]

ERR_RECEIVER_REJECTED: Final[bytes] = b"TOKEN:RECEIVER_REJECTED"


class ReceiverRejected(Revert):
    reason = ERR_RECEIVER_REJECTED


def notify_transfer_received(
    operator: bytes, sender: bytes, to: bytes, amount: int, data: bytes = b""
) -> None:
    """
    Run the recipient hook when `to` is a contract; revert unless it acknowledges.
    """
    if not calls.is_contract(to):
        return
    try:
        ack = calls.invoke(to, HOOK_NAME, operator, sender, amount, bytes(data))
    except UnknownEntrypoint as e:
        raise ReceiverRejected(context={"to": "0x" + bytes(to).hex()}) from e
    if ack != ON_TRANSFER_RECEIVED:
        raise ReceiverRejected(context={"to": "0x" + bytes(to).hex()})


__all__ = [
    "HOOK_NAME",
    "ON_TRANSFER_RECEIVED",
    "ERR_RECEIVER_REJECTED",
    "ReceiverRejected",
    "notify_transfer_received",
]
