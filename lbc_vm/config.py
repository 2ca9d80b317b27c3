"""
lbc_vm.config — runtime limits and defaults for the deterministic host.

This module centralizes configuration for the in-process chain. It has NO
third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (LBC_VM_*)
  2) Hardcoded safe defaults below

Key env vars:
  - LBC_VM_MAX_CALL_DEPTH      (int)    default: 64
  - LBC_VM_MAX_LOGS_PER_TX     (int)    default: 1024
  - LBC_VM_DEFAULT_GAS_PRICE   (int)    default: 1_000_000_000  (1 gwei)
  - LBC_VM_ADDRESS_LEN         (int)    default: 20

Out-of-range integers are clamped to their bounds; unparsable values fall back
to the default.

Usage:
    from lbc_vm.config import load_config
    CFG = load_config()
    if CFG.max_call_depth < 8: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict


# ----------------------------- helpers ---------------------------------------


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class VMConfig:
    # Limits
    max_call_depth: int
    max_logs_per_tx: int

    # Defaults applied to transactions
    default_gas_price: int
    address_len: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "max_call_depth": self.max_call_depth,
            "max_logs_per_tx": self.max_logs_per_tx,
            "default_gas_price": self.default_gas_price,
            "address_len": self.address_len,
        }


@lru_cache(maxsize=1)
def load_config() -> VMConfig:
    """
    Build and cache a VMConfig from environment + safe defaults.
    """
    return VMConfig(
        max_call_depth=_env_int("LBC_VM_MAX_CALL_DEPTH", 64, min_v=4, max_v=1024),
        max_logs_per_tx=_env_int("LBC_VM_MAX_LOGS_PER_TX", 1024, min_v=1, max_v=10_000),
        default_gas_price=_env_int(
            "LBC_VM_DEFAULT_GAS_PRICE", 1_000_000_000, min_v=0, max_v=(1 << 128) - 1
        ),
        address_len=_env_int("LBC_VM_ADDRESS_LEN", 20, min_v=20, max_v=32),
    )


__all__ = ["VMConfig", "load_config"]
