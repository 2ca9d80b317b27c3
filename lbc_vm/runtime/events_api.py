from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..errors import VmError

# Basic bounds on what a contract may log.
MAX_EVENT_NAME_BYTES = 64
MAX_KEY_LEN = 64
MAX_BYTES_LEN = 4096
MAX_INT_BITS = 256

# Keys must be identifier-like: letters/underscore, then letters/digits/underscore.
_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

ArgValue = Any  # constrained at runtime


@dataclass(frozen=True)
class Event:
    """An emitted event, tagged with the contract that emitted it."""

    address: bytes
    name: bytes
    args: Dict[str, ArgValue]

    def get(self, key: str, default: Any = None) -> Any:
        return self.args.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.args[key]


@dataclass(frozen=True)
class CanonicalEvent:
    """
    Canonical event representation for receipts:

        address: "0x" + hex of the emitting contract
        name:    "0x" + hex-encoded event name bytes
        args:    sequence of {"k", "t", "v"} dicts
                 t="b" => bytes encoded as 0x-prefixed hex
                 t="i" => integer
                 t="z" => boolean
    """

    address: str
    name: str
    args: Sequence[Mapping[str, Any]]


def _invalid(msg: str, **context: Any) -> VmError:
    return VmError(msg, code="event_invalid", context=context)


def _check_name(name: Any) -> bytes:
    if not isinstance(name, (bytes, bytearray)):
        raise _invalid("event name must be bytes", where="name_type")
    b = bytes(name)
    if len(b) == 0:
        raise _invalid("event name must be non-empty", where="name_empty")
    if len(b) > MAX_EVENT_NAME_BYTES:
        raise _invalid("event name too long", where="name_length", len=len(b))
    return b


def _check_key(key: Any) -> str:
    if not isinstance(key, str):
        raise _invalid("event key must be str", where="key_type")
    if len(key) == 0:
        raise _invalid("event key must be non-empty", where="key_empty")
    if len(key) > MAX_KEY_LEN:
        raise _invalid("event key too long", where="key_length", len=len(key))
    if not _KEY_RE.match(key):
        raise _invalid("event key has invalid characters", where="key_grammar", key=key)
    return key


def _check_value(value: Any) -> ArgValue:
    if isinstance(value, (bytes, bytearray)):
        b = bytes(value)
        if len(b) > MAX_BYTES_LEN:
            raise _invalid("event bytes arg too long", where="value_bytes_length", len=len(b))
        return b
    if isinstance(value, bool):
        # bool is a subclass of int, so check it before int.
        return value
    if isinstance(value, int):
        if value < 0 or value.bit_length() > MAX_INT_BITS:
            raise _invalid("event int arg out of range", where="value_int_bits", bits=value.bit_length())
        return int(value)
    raise _invalid("unsupported event arg type", where="value_type", py_type=type(value).__name__)


class EventLog:
    """
    Per-transaction event buffer.

    The engine takes a ``mark()`` when a frame starts and ``truncate(mark)``
    when it fails, so events from rolled-back frames never reach a receipt.
    """

    def __init__(self, max_events: Optional[int] = None) -> None:
        self._events: List[Event] = []
        self._max = max_events

    def __len__(self) -> int:
        return len(self._events)

    def mark(self) -> int:
        return len(self._events)

    def truncate(self, mark: int) -> None:
        del self._events[mark:]

    def clear(self) -> None:
        self._events.clear()

    def emit(self, address: bytes, name: bytes, args: Mapping[Any, Any]) -> Event:
        bname = _check_name(name)
        if not isinstance(args, Mapping):
            raise _invalid("event args must be a mapping", where="args_type")
        if self._max is not None and len(self._events) >= self._max:
            raise VmError(
                "too many events in one transaction",
                code="event_limit",
                context={"limit": self._max},
            )
        checked: Dict[str, ArgValue] = {}
        for raw_k, raw_v in args.items():
            checked[_check_key(raw_k)] = _check_value(raw_v)
        ev = Event(bytes(address), bname, checked)
        self._events.append(ev)
        return ev

    def snapshot(self) -> List[Event]:
        return list(self._events)

    def to_receipt(self) -> List[CanonicalEvent]:
        return to_canonical(self._events)


def to_canonical(events: Sequence[Event]) -> List[CanonicalEvent]:
    """Convert events into the canonical receipt form."""
    out: List[CanonicalEvent] = []
    for ev in events:
        enc_args: List[Dict[str, Any]] = []
        for k, v in ev.args.items():
            if isinstance(v, (bytes, bytearray)):
                enc_args.append({"k": k, "t": "b", "v": "0x" + bytes(v).hex()})
            elif isinstance(v, bool):
                enc_args.append({"k": k, "t": "z", "v": v})
            else:
                enc_args.append({"k": k, "t": "i", "v": int(v)})
        out.append(
            CanonicalEvent(
                address="0x" + ev.address.hex(),
                name="0x" + ev.name.hex(),
                args=tuple(enc_args),
            )
        )
    return out


__all__ = [
    "Event",
    "CanonicalEvent",
    "EventLog",
    "to_canonical",
    "MAX_EVENT_NAME_BYTES",
    "MAX_KEY_LEN",
    "MAX_BYTES_LEN",
    "MAX_INT_BITS",
]
