from __future__ import annotations

from typing import Optional

from ..runtime.context import active_host

# Contract storage. Keys and values are always bytes and are scoped to the
# executing contract; an empty value deletes the key.

U256_BYTES = 32


def _ensure_bytes(name: str, value: object) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")
    return bytes(value)


def get(key: bytes, default: Optional[bytes] = None) -> bytes:
    """
    Get the value stored at 'key'. If the key is missing:

      * if 'default' is provided, that default (as bytes) is returned
      * otherwise, an empty byte string is returned (b"")
    """
    bkey = _ensure_bytes("key", key)
    val = active_host().storage_get(bkey)
    if val is not None:
        return val
    if default is not None:
        return _ensure_bytes("default", default)
    return b""


def set(key: bytes, value: bytes) -> None:
    """Store 'value' at 'key' deterministically."""
    active_host().storage_set(_ensure_bytes("key", key), _ensure_bytes("value", value))


def delete(key: bytes) -> None:
    """Delete 'key' if present (no-op if absent)."""
    active_host().storage_set(_ensure_bytes("key", key), b"")


def get_int(key: bytes) -> int:
    """Big-endian unsigned integer at 'key'; 0 when unset."""
    raw = get(key)
    return int.from_bytes(raw, "big") if raw else 0


def set_int(key: bytes, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("value must be int")
    if value < 0 or value.bit_length() > U256_BYTES * 8:
        raise ValueError("value outside u256")
    if value == 0:
        delete(key)
    else:
        set(key, value.to_bytes(U256_BYTES, "big"))


__all__ = ["get", "set", "delete", "get_int", "set_int"]
