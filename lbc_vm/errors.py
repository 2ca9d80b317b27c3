"""
lbc_vm.errors — structured exceptions for the LBC Python VM host.

Hierarchy
---------
VmError (base)
 ├─ Revert              : contract-triggered failure (carries a reason)
 │   ├─ InsufficientBalance : value transfer larger than the payer's balance
 │   └─ NotPayable          : value attached to an entrypoint that does not take it
 ├─ UnknownEntrypoint   : call to a name the contract does not export
 ├─ CallDepthExceeded   : nested calls went past ``max_call_depth``
 └─ AddressCollision    : deploy target already holds an account

Any exception raised inside a frame aborts that frame and rolls back its
writes; the engine re-raises it unchanged so callers see the exact reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(eq=False)
class VmError(Exception):
    """
    Structured error used throughout the runtime.

    Supported call patterns:

        VmError("simple message")
        VmError("message", code="some_code", context={...})

    Attributes:
        code: short machine-readable code string
        message: human-readable message
        context: optional extra fields for debugging
    """

    code: str
    message: str
    context: Dict[str, Any]

    default_code = "vm_error"

    def __init__(
        self,
        message: Any = "",
        *,
        code: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if isinstance(message, (bytes, bytearray)):
            message = bytes(message).decode("utf-8", errors="replace")
        super().__init__(str(message))
        object.__setattr__(self, "code", str(code or self.default_code))
        object.__setattr__(self, "message", str(message))
        object.__setattr__(self, "context", dict(context or {}))

    def __str__(self) -> str:
        return self.message or self.code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }


class Revert(VmError):
    """
    Contract-triggered revert.

    ``reason`` is the stable bytes tag a contract reverted with (for example
    ``b"TOKEN:BALANCE"``). Subclasses used as typed contract errors set a
    class-level ``reason`` and may be raised without arguments.
    """

    default_code = "revert"
    reason: bytes = b"REVERT"

    def __init__(
        self,
        reason: Any = None,
        *,
        code: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if reason is None:
            reason = type(self).reason
        if isinstance(reason, str):
            reason = reason.encode("utf-8")
        super().__init__(bytes(reason), code=code, context=context)
        object.__setattr__(self, "reason", bytes(reason))

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["reason"] = self.reason.decode("utf-8", errors="replace")
        return out


class InsufficientBalance(Revert):
    reason = b"VM:INSUFFICIENT_BALANCE"


class NotPayable(Revert):
    reason = b"VM:NOT_PAYABLE"


class UnknownEntrypoint(VmError):
    default_code = "unknown_entrypoint"


class CallDepthExceeded(VmError):
    default_code = "call_depth_exceeded"


class AddressCollision(VmError):
    default_code = "address_collision"


__all__ = [
    "VmError",
    "Revert",
    "InsufficientBalance",
    "NotPayable",
    "UnknownEntrypoint",
    "CallDepthExceeded",
    "AddressCollision",
]
