"""lbc_vm.version — semantic version resolution.

Resolution order (first match wins):
- LBC_VM_VERSION environment variable (exact value)
- installed distribution metadata for ``lbc-swap``
- BASE_VERSION + '+dev'
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata
from typing import Optional

# Bump on changes that alter contract-visible behavior (addresses, events, formulas).
BASE_VERSION = "0.1.0"

DIST_NAME = "lbc-swap"


def _pkg_metadata_version(dist_name: str = DIST_NAME) -> Optional[str]:
    """Try to read installed package version; None if unavailable."""
    try:
        v = importlib_metadata.version(dist_name)
    except importlib_metadata.PackageNotFoundError:
        return None
    return v if v and v != "0.0.0" else None


@lru_cache(maxsize=1)
def compute_version() -> str:
    val = os.getenv("LBC_VM_VERSION")
    if val:
        return val
    meta_v = _pkg_metadata_version()
    if meta_v:
        return meta_v
    return f"{BASE_VERSION}+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "compute_version"]
