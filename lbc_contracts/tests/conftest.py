# -*- coding: utf-8 -*-
"""
lbc_contracts.tests.conftest
============================

Pytest fixtures for the LBC swap market and its reserve token.

Every test gets a fresh in-process ``lbc_vm.Chain`` with a handful of funded
EOAs and, when asked for, a market deployed the way the deploy tool does it:
salt ``b"May the force be with you"``, reserve ratio 0.5 and 10 MIT pre-minted
to the deployer.

Usage (inside a test file):
    def test_deposit(chain, accounts, market):
        alice = accounts["alice"]
        chain.transact(alice, market.address, value=ETHER)
        assert market.reserve() == ETHER

Hypothesis tests cannot use function-scoped fixtures, so the same setup is
available as the plain helper ``deploy_market(chain, deployer, ...)``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

import pytest

from lbc_vm import Chain

from lbc_contracts.lbc_swap import MODULE as MARKET_MODULE

# --- stable env for tests -----------------------------------------------------

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

ETHER = 10**18
GWEI = 10**9

SALT = b"May the force be with you"
RATIO_HALF = 500_000
INITIAL_SUPPLY = 10 * ETHER

ACCOUNT_LABELS = ("deployer", "alice", "bob", "carol", "mallory")
FAUCET = 1_000 * ETHER


# --- tiny market handle ---------------------------------------------------------


@dataclass
class Market:
    """Addresses of a deployed market plus read helpers."""

    chain: Chain
    address: bytes
    token: bytes
    deployer: bytes

    def reserve(self) -> int:
        return self.chain.call(self.address, "reserve_balance")

    def ceiling(self) -> int:
        return self.chain.call(self.address, "gas_price_ceiling")

    def supply(self) -> int:
        return self.chain.call(self.token, "total_supply")

    def tokens_of(self, who: bytes) -> int:
        return self.chain.call(self.token, "balance_of", who)

    def deposit(self, who: bytes, amount: int, *, gas_price: Optional[int] = None):
        return self.chain.transact(who, self.address, value=amount, gas_price=gas_price)

    def redeem(self, who: bytes, amount: int, data: bytes = b""):
        return self.chain.transact(who, self.token, "transfer_and_call", self.address, amount, data)


def deploy_market(
    chain: Chain,
    deployer: bytes,
    *,
    ratio: int = RATIO_HALF,
    initial_supply: int = INITIAL_SUPPLY,
    gas_price_ceiling: Optional[int] = None,
    salt: bytes = SALT,
) -> Market:
    receipt = chain.deploy(deployer, MARKET_MODULE, salt, ratio, initial_supply, gas_price_ceiling)
    assert receipt.contract_address is not None
    address = receipt.contract_address
    token = chain.call(address, "token_address")
    return Market(chain=chain, address=address, token=token, deployer=deployer)


def funded_chain() -> "tuple[Chain, Dict[str, bytes]]":
    chain = Chain()
    accounts = {label: chain.account(label) for label in ACCOUNT_LABELS}
    for addr in accounts.values():
        chain.fund(addr, FAUCET)
    return chain, accounts


# --- fixtures -------------------------------------------------------------------


@pytest.fixture
def funded():
    return funded_chain()


@pytest.fixture
def chain(funded) -> Chain:
    return funded[0]


@pytest.fixture
def accounts(funded) -> Dict[str, bytes]:
    return funded[1]


@pytest.fixture
def market(chain: Chain, accounts: Dict[str, bytes]) -> Market:
    return deploy_market(chain, accounts["deployer"])
