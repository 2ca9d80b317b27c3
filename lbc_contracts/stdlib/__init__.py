# -*- coding: utf-8 -*-
"""
lbc_contracts.stdlib
====================

Libraries imported by LBC contracts:

- ``math``          integer helpers, checked U256 arithmetic (``safe_uint``) and
                    the bonding-curve formulas (``fixed_point``)
- ``access``        single-owner access control
- ``token``         fungible token bookkeeping and the transfer-with-notify hook

Everything here is deterministic and float-free; state lives in the calling
contract's storage.
"""
from __future__ import annotations
