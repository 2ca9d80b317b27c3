# -*- coding: utf-8 -*-
"""
lbc_contracts
=============

Contracts for the LBC bonding-curve swap, written against ``lbc_vm.stdlib``.

Layout
------
- ``stdlib/``         shared contract libraries (math, fixed-point curve, access, token)
- ``reserve_token/``  MITHRIL (MIT), the mintable/burnable token with transfer-with-notify
- ``lbc_swap/``       the market: mint on deposit, burn on redeem, gas-price ceiling
- ``tools/``          the ``lbc-swap`` command line (deploy / quote / simulate)

Contracts are deployed by module name, e.g.::

    from lbc_vm import Chain
    from lbc_contracts.lbc_swap import MODULE

    chain = Chain()
    alice = chain.account("alice")
    market = chain.deploy(alice, MODULE, b"salt", 500_000, 10**19).contract_address
"""
from __future__ import annotations

from lbc_vm.version import __version__

__all__ = ["__version__"]
