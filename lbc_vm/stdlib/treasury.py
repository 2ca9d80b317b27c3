from __future__ import annotations

from typing import Optional

from ..runtime.context import active_host, current_frame


def balance(address: Optional[bytes] = None) -> int:
    """
    Native balance of `address`, or of the executing contract when omitted.
    """
    if address is None:
        address = current_frame().address
    return active_host().balance_of(bytes(address))


def transfer(to: bytes, amount: int) -> None:
    """
    Send `amount` of native value from the executing contract to `to`.

    A contract recipient has its ``receive`` entrypoint run; a failure there
    reverts the transfer together with the calling frame.
    """
    active_host().transfer_value(bytes(to), amount)


__all__ = ["balance", "transfer"]
