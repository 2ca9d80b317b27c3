from __future__ import annotations

from typing import Any, Optional, Union

from ..runtime.context import active_host


def invoke(to: bytes, entrypoint: str, *args: Any, value: int = 0) -> Any:
    """Call `entrypoint` on contract `to` and return its result."""
    return active_host().invoke(bytes(to), entrypoint, *args, value=value)


def create(module: str, *args: Any, salt: Optional[Union[bytes, str]] = None) -> bytes:
    """Deploy `module` from the executing contract; `salt` selects a create2 address."""
    return active_host().create(module, *args, salt=salt)


def is_contract(address: bytes) -> bool:
    return active_host().is_contract(bytes(address))


__all__ = ["invoke", "create", "is_contract"]
