from __future__ import annotations

from typing import Any, Dict, Mapping

from ..runtime import events_api as _rt
from ..runtime.context import active_host

# Re-export types so tests and contracts can import them from stdlib.events
Event = _rt.Event
CanonicalEvent = _rt.CanonicalEvent

__all__ = ["Event", "CanonicalEvent", "emit"]


def _to_str_key(k: Any) -> str:
    """
    Contract-facing keys may be bytes; runtime-facing keys must be str.
      * bytes / bytearray -> ASCII decode (hex if not ASCII)
      * str               -> pass through
    """
    if isinstance(k, str):
        return k
    if isinstance(k, (bytes, bytearray)):
        try:
            return bytes(k).decode("ascii")
        except UnicodeDecodeError:
            return bytes(k).hex()
    return str(k)


def emit(name: bytes, args: Mapping[Any, Any]) -> None:
    """
    Contract-facing emit, attributed to the executing contract:

        emit(b"Mint", {"depositor": addr, "minted": 5, "deposit": 10})
    """
    if not isinstance(name, (bytes, bytearray)):
        raise TypeError(f"event name must be bytes, got {type(name).__name__}")
    if not isinstance(args, Mapping):
        raise TypeError(f"event args must be a mapping, got {type(args).__name__}")
    norm: Dict[str, Any] = {_to_str_key(k): v for k, v in args.items()}
    active_host().emit(bytes(name), norm)
