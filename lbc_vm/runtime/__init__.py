"""
LBC VM — runtime package

The deterministic chain that executes contract modules, plus the host-side
building blocks it is made of (frames, journal, event log).

Convenience re-exports live here so callers can do:

    from lbc_vm.runtime import Chain, Receipt, TxEnv, Frame
    from lbc_vm.runtime import events, journal  # module namespaces

Notes
-----
- Contract code must not import from here; it uses ``lbc_vm.stdlib``.
- No wall-clock I/O or system randomness is exposed.
"""

from __future__ import annotations

from ..version import __version__  # re-export
from . import events_api as events
from . import journal as journal
from .context import Frame, TxEnv, current_frame
from .engine import (Chain, Receipt, code_hash, create2_address,
                     create_address, eoa_address)

__all__ = [
    "__version__",
    "events",
    "journal",
    "Frame",
    "TxEnv",
    "current_frame",
    "Chain",
    "Receipt",
    "code_hash",
    "create_address",
    "create2_address",
    "eoa_address",
]
