from __future__ import annotations

import hashlib


def sha3_256(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("sha3_256 expects bytes")
    return hashlib.sha3_256(bytes(data)).digest()


__all__ = ["sha3_256"]
