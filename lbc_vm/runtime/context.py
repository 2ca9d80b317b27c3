"""
lbc_vm.runtime.context — TxEnv/Frame passed to contracts (deterministic)

These lightweight environments describe *who* is executing *what*. They
contain only pure data (ints/bytes) and perform strict validation.

Design notes
------------
- Addresses are raw bytes (20 bytes by default, see ``lbc_vm.config``).
- Hex strings (with or without "0x") are accepted by helpers and normalized to
  bytes.
- All numeric fields are validated to be non-negative.
- ``gas_price`` is declared once per transaction and inherited by every frame,
  so contracts can price-gate operations against it.

The engine keeps a stack of active frames here while a transaction runs. The
contract-facing ``lbc_vm.stdlib`` reads the top of that stack; outside a
transaction there is no current frame and access raises ``VmError``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Union

from ..errors import VmError


# ----------------------------- helpers ----------------------------- #

class ContextError(VmError):
    """Validation or coercion failure for TxEnv/Frame."""

    default_code = "context_invalid"


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def _require_non_negative_int(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


# ----------------------------- models ------------------------------ #

@dataclass(frozen=True)
class TxEnv:
    """
    Deterministic per-transaction environment.

    Fields
    ------
    tx_hash:   Transaction hash bytes (derived from sender and nonce).
    sender:    Originating EOA address.
    to:        Call target address, or None for a deploy.
    value:     Native value attached to the transaction.
    gas_price: Declared gas price (value per gas unit).
    nonce:     Sender nonce at submission.
    """
    tx_hash: bytes
    sender: bytes
    to: Optional[bytes]
    value: int
    gas_price: int
    nonce: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "tx_hash", to_bytes(self.tx_hash))
        object.__setattr__(self, "sender", to_bytes(self.sender))
        if self.to is not None:
            object.__setattr__(self, "to", to_bytes(self.to))
        object.__setattr__(self, "value", _require_non_negative_int("value", self.value))
        object.__setattr__(self, "gas_price", _require_non_negative_int("gas_price", self.gas_price))
        object.__setattr__(self, "nonce", _require_non_negative_int("nonce", self.nonce))

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["tx_hash"] = to_hex(self.tx_hash)
        d["sender"] = to_hex(self.sender)
        d["to"] = to_hex(self.to) if self.to is not None else None
        return d


@dataclass(frozen=True)
class Frame:
    """
    One contract invocation.

    Fields
    ------
    address:   The executing contract.
    caller:    Immediate caller (EOA or contract).
    origin:    Transaction sender (always an EOA).
    value:     Native value sent with this invocation.
    gas_price: Transaction gas price.
    depth:     0 for the outermost frame.
    """
    address: bytes
    caller: bytes
    origin: bytes
    value: int
    gas_price: int
    depth: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", to_bytes(self.address))
        object.__setattr__(self, "caller", to_bytes(self.caller))
        object.__setattr__(self, "origin", to_bytes(self.origin))
        object.__setattr__(self, "value", _require_non_negative_int("value", self.value))
        object.__setattr__(self, "gas_price", _require_non_negative_int("gas_price", self.gas_price))
        object.__setattr__(self, "depth", _require_non_negative_int("depth", self.depth))


# ----------------------------- frame stack ------------------------- #

_FRAMES: List[Frame] = []
_HOST: Optional[Any] = None


def push_frame(frame: Frame, host: Any) -> None:
    global _HOST
    if _FRAMES and host is not _HOST:
        raise VmError("another chain is already executing", code="host_busy")
    _HOST = host
    _FRAMES.append(frame)


def pop_frame() -> Frame:
    global _HOST
    frame = _FRAMES.pop()
    if not _FRAMES:
        _HOST = None
    return frame


def current_frame() -> Frame:
    if not _FRAMES:
        raise VmError("no active contract frame", code="no_frame")
    return _FRAMES[-1]


def active_host() -> Any:
    if _HOST is None:
        raise VmError("no active chain", code="no_frame")
    return _HOST


def in_frame() -> bool:
    return bool(_FRAMES)


__all__ = [
    "ContextError",
    "to_bytes",
    "to_hex",
    "TxEnv",
    "Frame",
    "push_frame",
    "pop_frame",
    "current_frame",
    "active_host",
    "in_frame",
]
