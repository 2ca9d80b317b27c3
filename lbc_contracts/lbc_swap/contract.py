# -*- coding: utf-8 -*-
"""
LBC Swap — bonding-curve market
-------------------------------

Issues MITHRIL (MIT) against deposited native value and burns it to refund a
share of the reserve. Price follows the continuous-token curve in
``lbc_contracts.stdlib.math.fixed_point`` with an immutable reserve ratio.

Construction:
  - init(salt, reserve_ratio_ppm, initial_supply, gas_price_ceiling=None)
    creates the token (create2 with `salt`), becomes its owner and credits the
    deployer with `initial_supply`, which must be non-zero. The reserve starts
    at zero.

Mint (deposit):
  - receive(): plain value transfer. Gas price must not exceed the ceiling.
    No other entrypoint accepts value.

Burn (redeem):
  - on_transfer_received(operator, sender, amount, data): only from the
    market's own token, via transfer_and_call / transfer_from_and_call.

Admin:
  - set_gas_price_ceiling(new_value)    (owner-only)

Views:
  - reserve_balance(), gas_price_ceiling(), reserve_ratio(), token_address(), owner()
  - calculate_purchase_return(supply, deposit, ratio_ppm, reserve)
  - calculate_sale_return(supply, sell, ratio_ppm, reserve)
  - quote_deposit(amount), quote_redeem(amount)

Events (bytes names):
  b"Mint" {depositor, minted, deposit}
  b"Burn" {seller, burned, refund}
  b"TokensReceivedAck" {operator, from, amount}
  b"GasPriceCeilingUpdated" {previous, current}

Curve inputs outside the formula domain revert with `CurveDomain`.

Every state change happens before the external call it precedes, and a
storage lock rejects re-entry into receive/on_transfer_received.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from lbc_vm.stdlib import abi, calls, events, storage, treasury

from lbc_contracts.reserve_token import MODULE as TOKEN_MODULE
from lbc_contracts.stdlib.access.ownable import get_owner, init_owner, require_owner
from lbc_contracts.stdlib.math import GWEI, PPM, check_ppm, is_uint, require_u256
from lbc_contracts.stdlib.math import fixed_point
from lbc_contracts.stdlib.math.safe_uint import u256_add, u256_sub
from lbc_contracts.stdlib.token.receiver import ON_TRANSFER_RECEIVED

from .errors import (AlreadyInitialized, CurveDomain, EmptyReserve,
                     EmptySupply, GasPriceExceeded, InvalidReserveRatio,
                     Reentrancy, UntrustedCaller, ZeroAmount, ZeroDeposit,
                     ZeroGasPrice, ZeroInitialSupply)

TOKEN_NAME = b"MITHRIL"
TOKEN_SYMBOL = b"MIT"
TOKEN_DECIMALS = 18

DEFAULT_GAS_PRICE_CEILING = 50 * GWEI

# ----------------------------
# Storage keys
# ----------------------------

K_INIT = b"lbc:inited"
K_TOKEN = b"lbc:token"
K_RATIO = b"lbc:ratio_ppm"
K_RESERVE = b"lbc:reserve"
K_CEILING = b"lbc:gas_ceiling"
K_LOCK = b"lbc:lock"


@contextmanager
def _non_reentrant() -> Iterator[None]:
    if storage.get(K_LOCK):
        raise Reentrancy()
    storage.set(K_LOCK, b"\x01")
    try:
        yield
    finally:
        storage.delete(K_LOCK)


def _token() -> bytes:
    return storage.get(K_TOKEN)


def _token_supply(token: bytes) -> int:
    return calls.invoke(token, "total_supply")


def _purchase(supply: int, deposit: int, ratio_ppm: int, reserve: int) -> int:
    try:
        return fixed_point.purchase_return(supply, deposit, ratio_ppm, reserve)
    except fixed_point.CurveDomainError as e:
        raise CurveDomain(context={"detail": str(e)}) from e


def _sale(supply: int, amount: int, ratio_ppm: int, reserve: int) -> int:
    try:
        return fixed_point.sale_return(supply, amount, ratio_ppm, reserve)
    except fixed_point.CurveDomainError as e:
        raise CurveDomain(context={"detail": str(e)}) from e


# ----------------------------
# Construction
# ----------------------------

def init(
    salt: bytes,
    reserve_ratio_ppm: int,
    initial_supply: int,
    gas_price_ceiling: Optional[int] = None,
) -> None:
    if storage.get(K_INIT):
        raise AlreadyInitialized()
    if not is_uint(reserve_ratio_ppm) or not (1 <= reserve_ratio_ppm <= PPM):
        raise InvalidReserveRatio(context={"reserve_ratio_ppm": reserve_ratio_ppm})
    require_u256(initial_supply)
    if initial_supply == 0:
        raise ZeroInitialSupply()
    ceiling = DEFAULT_GAS_PRICE_CEILING if gas_price_ceiling is None else gas_price_ceiling
    require_u256(ceiling)
    if ceiling == 0:
        raise ZeroGasPrice()

    deployer = abi.caller()
    init_owner(deployer)
    storage.set_int(K_RATIO, reserve_ratio_ppm)
    storage.set_int(K_CEILING, ceiling)
    storage.set_int(K_RESERVE, 0)
    storage.set(K_INIT, b"1")

    token = calls.create(
        TOKEN_MODULE,
        TOKEN_NAME,
        TOKEN_SYMBOL,
        TOKEN_DECIMALS,
        abi.self_address(),
        deployer,
        initial_supply,
        salt=salt,
    )
    storage.set(K_TOKEN, token)


# ----------------------------
# Mint path
# ----------------------------

def receive() -> None:
    """Deposit: mint tokens to the sender for the attached value."""
    with _non_reentrant():
        deposit = abi.value()
        if deposit == 0:
            raise ZeroDeposit()
        ceiling = storage.get_int(K_CEILING)
        if abi.gas_price() > ceiling:
            raise GasPriceExceeded(context={"gas_price": abi.gas_price(), "ceiling": ceiling})

        token = _token()
        supply = _token_supply(token)
        if supply == 0:
            raise EmptySupply()
        reserve = storage.get_int(K_RESERVE)
        # The deposit is already held by the market, so it prices against
        # the reserve including itself.
        minted = _purchase(supply, deposit, storage.get_int(K_RATIO), reserve + deposit)

        storage.set_int(K_RESERVE, u256_add(reserve, deposit))
        depositor = abi.caller()
        calls.invoke(token, "mint", depositor, minted)
        events.emit(b"Mint", {"depositor": depositor, "minted": minted, "deposit": deposit})


# ----------------------------
# Burn path
# ----------------------------

def on_transfer_received(operator: bytes, sender: bytes, amount: int, data: bytes = b"") -> bytes:
    """Redeem: burn tokens the market just received and refund `sender`."""
    token = _token()
    if abi.caller() != token:
        raise UntrustedCaller(context={"caller": "0x" + abi.caller().hex()})
    with _non_reentrant():
        if amount == 0:
            raise ZeroAmount()
        reserve = storage.get_int(K_RESERVE)
        if reserve == 0:
            raise EmptyReserve()
        supply = _token_supply(token)
        refund = _sale(supply, amount, storage.get_int(K_RATIO), reserve)

        calls.invoke(token, "burn", amount)
        storage.set_int(K_RESERVE, u256_sub(reserve, refund))
        if refund > 0:
            treasury.transfer(sender, refund)

        events.emit(b"TokensReceivedAck", {"operator": operator, "from": sender, "amount": amount})
        events.emit(b"Burn", {"seller": sender, "burned": amount, "refund": refund})
    return ON_TRANSFER_RECEIVED


# ----------------------------
# Admin
# ----------------------------

def set_gas_price_ceiling(new_value: int) -> None:
    require_owner(abi.caller())
    require_u256(new_value)
    if new_value == 0:
        raise ZeroGasPrice()
    previous = storage.get_int(K_CEILING)
    storage.set_int(K_CEILING, new_value)
    events.emit(b"GasPriceCeilingUpdated", {"previous": previous, "current": new_value})


# ----------------------------
# Views
# ----------------------------

def reserve_balance() -> int:
    return storage.get_int(K_RESERVE)


def gas_price_ceiling() -> int:
    return storage.get_int(K_CEILING)


def reserve_ratio() -> int:
    return storage.get_int(K_RATIO)


def token_address() -> bytes:
    return _token()


def owner() -> bytes:
    return get_owner() or b""


def calculate_purchase_return(
    total_supply: int, deposit_amount: int, reserve_ratio_ppm: int, reserve_balance: int
) -> int:
    check_ppm(reserve_ratio_ppm)
    return _purchase(total_supply, deposit_amount, reserve_ratio_ppm, reserve_balance)


def calculate_sale_return(
    total_supply: int, sell_amount: int, reserve_ratio_ppm: int, reserve_balance: int
) -> int:
    check_ppm(reserve_ratio_ppm)
    return _sale(total_supply, sell_amount, reserve_ratio_ppm, reserve_balance)


def quote_deposit(amount: int) -> int:
    """Tokens a deposit of `amount` would mint right now."""
    supply = _token_supply(_token())
    if supply == 0:
        raise EmptySupply()
    reserve = storage.get_int(K_RESERVE)
    return _purchase(supply, amount, storage.get_int(K_RATIO), reserve + amount)


def quote_redeem(amount: int) -> int:
    """Refund that redeeming `amount` tokens would pay right now."""
    reserve = storage.get_int(K_RESERVE)
    if reserve == 0:
        raise EmptyReserve()
    supply = _token_supply(_token())
    return _sale(supply, amount, storage.get_int(K_RATIO), reserve)


__all__ = [
    "receive",
    "on_transfer_received",
    "set_gas_price_ceiling",
    "reserve_balance",
    "gas_price_ceiling",
    "reserve_ratio",
    "token_address",
    "owner",
    "calculate_purchase_return",
    "calculate_sale_return",
    "quote_deposit",
    "quote_redeem",
]
