from __future__ import annotations

from typing import Any, NoReturn

from ..errors import Revert
from ..runtime.context import current_frame


def caller() -> bytes:
    """Immediate caller of the executing contract (EOA or contract)."""
    return current_frame().caller


def origin() -> bytes:
    """The EOA that signed the current transaction."""
    return current_frame().origin


def value() -> int:
    """Native value attached to this invocation."""
    return current_frame().value


def gas_price() -> int:
    return current_frame().gas_price


def self_address() -> bytes:
    return current_frame().address


def revert(reason: Any = b"REVERT") -> NoReturn:
    """Abort the current frame with a bytes reason tag."""
    raise Revert(reason)


def require(condition: bool, reason: Any = b"REQUIRE") -> None:
    """
    Assertion helper for contracts:

        abi.require(amount > 0, b"TOKEN:ZERO_AMOUNT")
    """
    if not condition:
        raise Revert(reason)


__all__ = ["caller", "origin", "value", "gas_price", "self_address", "revert", "require"]
