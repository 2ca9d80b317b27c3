from __future__ import annotations

"""
lbc_contracts.tools.deploy
--------------------------

Deploy and exercise the LBC swap market on a local in-process chain.

Commands
--------
deploy    Deploy the market (and its MITHRIL token) and print the resulting state.
quote     Evaluate the purchase or sale formula without any chain.
simulate  Deploy, run a series of deposits and optionally redeem everything,
          printing the market state after each step.

Examples
--------
# Deploy with the defaults (ratio 0.5, 10 MIT initial supply)
lbc-swap deploy

# Tokens minted for a 10 ETH deposit at supply 10 / reserve 10
lbc-swap quote --supply 10000000000000000000 --amount 10000000000000000000 \
               --ratio 500000 --reserve 10000000000000000000

# Two deposits, then every holder redeems
lbc-swap simulate --deposit 10000000000000000000 --deposit 10000000000000000000 --redeem-all
"""

import json
import logging
from typing import Any, Dict, List, NoReturn, Optional

import typer

from lbc_vm import Chain, VmError
from lbc_vm.runtime.context import to_hex

from lbc_contracts.lbc_swap import MODULE as MARKET_MODULE
from lbc_contracts.lbc_swap.contract import DEFAULT_GAS_PRICE_CEILING
from lbc_contracts.stdlib.math.fixed_point import (CurveDomainError,
                                                   purchase_return,
                                                   sale_return)

log = logging.getLogger(__name__)

DEFAULT_SALT = "May the force be with you"
DEFAULT_RATIO_PPM = 500_000
ETHER = 10**18
DEFAULT_INITIAL_SUPPLY = 10 * ETHER

app = typer.Typer(
    name="lbc-swap",
    add_completion=False,
    no_args_is_help=True,
    help="Deploy, quote and simulate the LBC bonding-curve swap on a local chain.",
)


# -------------------- helpers --------------------


def _emit(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, sort_keys=True))


def _fail(msg: str, code: int = 1) -> NoReturn:
    typer.secho(msg, fg=typer.colors.RED, err=True)
    raise typer.Exit(code)


def _deploy_market(
    chain: Chain,
    deployer: bytes,
    *,
    salt: str,
    ratio: int,
    initial_supply: int,
    gas_price_ceiling: Optional[int],
) -> bytes:
    receipt = chain.deploy(
        deployer,
        MARKET_MODULE,
        salt.encode("utf-8"),
        ratio,
        initial_supply,
        gas_price_ceiling,
    )
    assert receipt.contract_address is not None
    return receipt.contract_address


def _state(chain: Chain, market: bytes, holders: Dict[str, bytes]) -> Dict[str, Any]:
    token = chain.call(market, "token_address")
    return {
        "market": to_hex(market),
        "token": to_hex(token),
        "owner": to_hex(chain.call(market, "owner")),
        "reserve_ratio_ppm": chain.call(market, "reserve_ratio"),
        "gas_price_ceiling": chain.call(market, "gas_price_ceiling"),
        "reserve_balance": chain.call(market, "reserve_balance"),
        "market_value_balance": chain.balance_of(market),
        "total_supply": chain.call(token, "total_supply"),
        "holders": {
            label: {
                "address": to_hex(addr),
                "tokens": chain.call(token, "balance_of", addr),
                "value": chain.balance_of(addr),
            }
            for label, addr in holders.items()
        },
    }


# -------------------- commands --------------------


@app.command("deploy")
def cmd_deploy(
    ratio: int = typer.Option(DEFAULT_RATIO_PPM, "--ratio", min=1, max=1_000_000, help="Reserve ratio in ppm."),
    initial_supply: int = typer.Option(DEFAULT_INITIAL_SUPPLY, "--initial-supply", min=1, help="Tokens pre-minted to the deployer (base units)."),
    salt: str = typer.Option(DEFAULT_SALT, "--salt", help="Salt for the token address."),
    gas_price_ceiling: Optional[int] = typer.Option(None, "--gas-price-ceiling", min=1, help="Initial gas-price ceiling (default 50 gwei)."),
    deployer: str = typer.Option("alice", "--deployer", help="Label of the deploying account."),
) -> None:
    """
    Deploy the market on a fresh local chain and print its state as JSON.
    """
    chain = Chain()
    who = chain.account(deployer)
    try:
        market = _deploy_market(
            chain, who, salt=salt, ratio=ratio, initial_supply=initial_supply,
            gas_price_ceiling=gas_price_ceiling,
        )
    except VmError as e:
        _fail(f"deploy failed: {e} ({e.code})")
    _emit(_state(chain, market, {deployer: who}))


@app.command("quote")
def cmd_quote(
    supply: int = typer.Option(..., "--supply", help="Current token supply."),
    amount: int = typer.Option(..., "--amount", help="Deposit (buy) or tokens to sell."),
    ratio: int = typer.Option(DEFAULT_RATIO_PPM, "--ratio", help="Reserve ratio in ppm."),
    reserve: int = typer.Option(..., "--reserve", help="Reserve balance used by the formula."),
    sell: bool = typer.Option(False, "--sell", help="Quote a sale instead of a purchase."),
) -> None:
    """
    Evaluate purchase_return (default) or sale_return.
    """
    try:
        if sell:
            result = sale_return(supply, amount, ratio, reserve)
        else:
            result = purchase_return(supply, amount, ratio, reserve)
    except CurveDomainError as e:
        _fail(f"invalid input: {e}", code=2)
    _emit(
        {
            "kind": "sale" if sell else "purchase",
            "supply": supply,
            "amount": amount,
            "ratio_ppm": ratio,
            "reserve": reserve,
            "result": result,
        }
    )


@app.command("simulate")
def cmd_simulate(
    deposit: Optional[List[int]] = typer.Option(None, "--deposit", help="Deposit amount, one depositor each (repeatable)."),
    ratio: int = typer.Option(DEFAULT_RATIO_PPM, "--ratio", min=1, max=1_000_000),
    initial_supply: int = typer.Option(DEFAULT_INITIAL_SUPPLY, "--initial-supply", min=1),
    gas_price: Optional[int] = typer.Option(None, "--gas-price", min=0, help="Gas price declared by depositors."),
    redeem_all: bool = typer.Option(False, "--redeem-all", help="Afterwards every holder redeems its whole balance."),
) -> None:
    """
    Deploy, deposit, optionally redeem everything; print state after each step.
    """
    chain = Chain()
    deployer = chain.account("deployer")
    holders: Dict[str, bytes] = {"deployer": deployer}
    steps: List[Dict[str, Any]] = []
    price = DEFAULT_GAS_PRICE_CEILING if gas_price is None else gas_price

    try:
        market = _deploy_market(
            chain, deployer, salt=DEFAULT_SALT, ratio=ratio,
            initial_supply=initial_supply, gas_price_ceiling=None,
        )
        token = chain.call(market, "token_address")
        steps.append({"step": "deploy", "state": _state(chain, market, holders)})

        for i, amt in enumerate(deposit or []):
            label = f"depositor-{i}"
            who = chain.account(label)
            holders[label] = who
            chain.fund(who, amt)
            receipt = chain.transact(who, market, value=amt, gas_price=price)
            minted = [e["minted"] for e in receipt.events_named(b"Mint", market)]
            log.info("%s deposited %d, minted %s", label, amt, minted)
            steps.append(
                {"step": f"deposit:{label}", "minted": sum(minted), "state": _state(chain, market, holders)}
            )

        if redeem_all:
            for label, who in reversed(list(holders.items())):
                bal = chain.call(token, "balance_of", who)
                if bal == 0:
                    continue
                receipt = chain.transact(who, token, "transfer_and_call", market, bal, b"")
                refund = sum(e["refund"] for e in receipt.events_named(b"Burn", market))
                steps.append(
                    {"step": f"redeem:{label}", "refund": refund, "state": _state(chain, market, holders)}
                )
    except VmError as e:
        _fail(f"simulation failed: {e} ({e.code})")

    _emit(steps)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, log_level.upper(), logging.WARNING),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def get_app() -> typer.Typer:
    return app


if __name__ == "__main__":
    app()
