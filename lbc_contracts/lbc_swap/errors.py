# -*- coding: utf-8 -*-
"""
Typed reverts raised by the LBC swap market.

Every error aborts the whole transaction; the host rolls back all state the
transaction touched. ``reason`` is the stable tag observers match on.
"""
from __future__ import annotations

from lbc_vm.errors import Revert

from lbc_contracts.stdlib.access.ownable import Unauthorized


class ZeroDeposit(Revert):
    """Plain value transfer of zero."""

    reason = b"LBC:ZERO_DEPOSIT"


class GasPriceExceeded(Revert):
    """Deposit declared a gas price above the ceiling."""

    reason = b"LBC:GAS_PRICE_EXCEEDED"


class UntrustedCaller(Revert):
    """Receive hook called by anything other than the market's own token."""

    reason = b"LBC:UNTRUSTED_CALLER"


class ZeroAmount(Revert):
    reason = b"LBC:ZERO_AMOUNT"


class ZeroGasPrice(Revert):
    reason = b"LBC:ZERO_GAS_PRICE"


class EmptySupply(Revert):
    """Nothing is outstanding, so a purchase cannot be priced."""

    reason = b"LBC:EMPTY_SUPPLY"


class EmptyReserve(Revert):
    """No reserve to refund from."""

    reason = b"LBC:EMPTY_RESERVE"


class InvalidReserveRatio(Revert):
    reason = b"LBC:BAD_RESERVE_RATIO"


class ZeroInitialSupply(Revert):
    """Market deployed without an initial token supply."""

    reason = b"LBC:ZERO_INITIAL_SUPPLY"


class CurveDomain(Revert):
    """Curve inputs outside the formula's domain, e.g. selling more than the supply."""

    reason = b"LBC:CURVE_DOMAIN"


class AlreadyInitialized(Revert):
    reason = b"LBC:ALREADY_INIT"


class Reentrancy(Revert):
    reason = b"LBC:REENTRANCY"


__all__ = [
    "ZeroDeposit",
    "GasPriceExceeded",
    "UntrustedCaller",
    "ZeroAmount",
    "ZeroGasPrice",
    "Unauthorized",
    "EmptySupply",
    "EmptyReserve",
    "InvalidReserveRatio",
    "ZeroInitialSupply",
    "CurveDomain",
    "AlreadyInitialized",
    "Reentrancy",
]
