"""
LBC Python VM (lbc_vm) — package marker and public entrypoints.

A small deterministic host that runs contracts written as plain Python
modules. The façade exposes:

- __version__ / version(): semantic version string
- Chain: in-process ledger with deploy/transact/call
- VmError, Revert: the error types every failure derives from

Contracts themselves only import ``lbc_vm.stdlib``.
"""

from __future__ import annotations

from .errors import Revert, VmError
from .runtime.engine import Chain, Receipt
from .version import __version__


def version() -> str:
    """Return the lbc_vm semantic version string."""
    return __version__


__all__ = ["__version__", "version", "Chain", "Receipt", "Revert", "VmError"]
