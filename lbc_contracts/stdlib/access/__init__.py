# -*- coding: utf-8 -*-
"""
lbc_contracts.stdlib.access
===========================

Deterministic access-control helpers for LBC Python contracts.

Storage layout (by convention)
------------------------------
- Owner: key ``b"access:owner"`` → address bytes, absent while unset.

These keys are deterministic byte strings; *do not* change them after deploy.

Quick usage (inside a contract)
-------------------------------
    from lbc_vm.stdlib import abi
    from lbc_contracts.stdlib.access import init_owner, require_owner

    def init() -> None:
        init_owner(abi.caller())

    def critical() -> None:
        require_owner(abi.caller())
"""

from __future__ import annotations

from typing import Final

OWNER_KEY: Final[bytes] = b"access:owner"

from .ownable import Unauthorized, get_owner, init_owner, require_owner  # noqa: E402

__all__ = ["OWNER_KEY", "Unauthorized", "get_owner", "init_owner", "require_owner"]
