"""
lbc_vm.runtime.engine — deterministic in-process chain for Python contracts.

A contract is a plain Python module. Its public entrypoints are the names in
the module's ``__all__``; ``init`` runs once at deploy time and ``receive``
(when exported) handles plain value transfers. Contracts reach the host only
through ``lbc_vm.stdlib`` which resolves the executing frame from
``lbc_vm.runtime.context``.

Execution model
---------------
- One transaction at a time; every transaction starts from an EOA.
- Every contract invocation is a frame and a journal checkpoint. A frame that
  raises has its writes and events discarded, then the exception propagates
  to the caller unchanged. A transaction that fails leaves no state behind.
- Native value moves into the callee before its code runs. Only ``receive``
  and the names a module lists in ``__payable__`` accept value; anything else
  called with value reverts with ``NotPayable``.
- Addresses are derived deterministically:
    create:   sha3_256(b"create|" + deployer + nonce)
    create2:  sha3_256(b"\\xff" + deployer + salt + code_hash)
  truncated to ``address_len`` bytes.

There is no gas metering. ``gas_price`` is carried as transaction data so that
contracts can gate on it.
"""

from __future__ import annotations

import hashlib
import importlib
import logging
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..config import VMConfig, load_config
from ..errors import (CallDepthExceeded, InsufficientBalance, NotPayable,
                      UnknownEntrypoint, VmError)
from .context import (Frame, TxEnv, current_frame, in_frame, pop_frame,
                      push_frame, to_bytes, to_hex)
from .events_api import Event, EventLog, to_canonical
from .journal import U256_MAX, Journal

log = logging.getLogger(__name__)

Address = bytes
ModuleRef = Union[str, ModuleType]

RECEIVE = "receive"
INIT = "init"
PAYABLE = "__payable__"


# ------------------------------- addresses -------------------------------- #


def _sha3(data: bytes) -> bytes:
    return hashlib.sha3_256(data).digest()


def eoa_address(label: str, *, length: int = 20) -> Address:
    """Stable EOA address for a human label (tests, CLI)."""
    return _sha3(label.encode("utf-8"))[:length]


def code_hash(module: str, args: Sequence[Any]) -> bytes:
    """Identity of a deployment: contract module plus constructor arguments."""
    return _sha3(module.encode("utf-8") + b"|" + repr(tuple(args)).encode("utf-8"))


def create_address(deployer: bytes, nonce: int, *, length: int = 20) -> Address:
    return _sha3(b"create|" + bytes(deployer) + nonce.to_bytes(8, "big"))[:length]


def create2_address(deployer: bytes, salt: bytes, chash: bytes, *, length: int = 20) -> Address:
    return _sha3(b"\xff" + bytes(deployer) + bytes(salt) + bytes(chash))[:length]


def _module_name(module: ModuleRef) -> str:
    if isinstance(module, ModuleType):
        return module.__name__
    if isinstance(module, str) and module:
        return module
    raise VmError("contract module must be a module or a dotted name", code="bad_module")


def _salt_bytes(salt: Union[bytes, str]) -> bytes:
    if isinstance(salt, str):
        return salt.encode("utf-8")
    return bytes(salt)


# -------------------------------- receipts -------------------------------- #


@dataclass(frozen=True)
class Receipt:
    """Outcome of one successful transaction."""

    tx_hash: bytes
    sender: bytes
    to: Optional[bytes]
    contract_address: Optional[bytes]
    return_value: Any
    events: Tuple[Event, ...]
    gas_price: int

    def events_named(self, name: bytes, address: Optional[bytes] = None) -> List[Event]:
        """Events called `name`, optionally only those emitted by `address`."""
        return [
            e for e in self.events
            if e.name == name and (address is None or e.address == address)
        ]

    def to_dict(self) -> Dict[str, Any]:
        rv = self.return_value
        if isinstance(rv, (bytes, bytearray)):
            rv = to_hex(rv)
        return {
            "tx_hash": to_hex(self.tx_hash),
            "sender": to_hex(self.sender),
            "to": to_hex(self.to) if self.to is not None else None,
            "contract_address": (
                to_hex(self.contract_address) if self.contract_address is not None else None
            ),
            "return_value": rv,
            "gas_price": self.gas_price,
            "events": [
                {"address": c.address, "name": c.name, "args": list(c.args)}
                for c in to_canonical(self.events)
            ],
        }


# --------------------------------- chain ---------------------------------- #


class Chain:
    """
    Single-process ledger that executes Python contracts.

    Host surface used by tests and tools:
        account, fund, balance_of, nonce_of, is_contract, code_of, storage_at,
        deploy, transact, call

    Host surface used by contracts (through ``lbc_vm.stdlib``):
        invoke, create, transfer_value, emit, storage_get, storage_set
    """

    def __init__(self, config: Optional[VMConfig] = None) -> None:
        self.config = config or load_config()
        self.journal = Journal()
        self._events: Optional[EventLog] = None
        self._tx: Optional[TxEnv] = None
        self._modules: Dict[str, ModuleType] = {}

    # ---------------------------- accounts ------------------------------ #

    def account(self, label: str) -> Address:
        return eoa_address(label, length=self.config.address_len)

    def fund(self, address: Union[bytes, str], amount: int) -> None:
        """Mint native value to an address (test/tool faucet, outside transactions)."""
        if self._events is not None:
            raise VmError("cannot fund during a transaction", code="host_busy")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise VmError("fund amount must be a non-negative int", code="bad_amount")
        acc = self.journal.ensure_account_for_write(self._addr(address))
        if acc.balance + amount > U256_MAX:
            raise VmError("balance overflow", code="balance_overflow")
        acc.balance += amount

    def balance_of(self, address: Union[bytes, str]) -> int:
        acc = self.journal.get_account(self._addr(address))
        return acc.balance if acc is not None else 0

    def nonce_of(self, address: Union[bytes, str]) -> int:
        acc = self.journal.get_account(self._addr(address))
        return acc.nonce if acc is not None else 0

    def is_contract(self, address: Union[bytes, str]) -> bool:
        acc = self.journal.get_account(self._addr(address))
        return acc is not None and acc.is_contract

    def code_of(self, address: Union[bytes, str]) -> Optional[str]:
        acc = self.journal.get_account(self._addr(address))
        return acc.code if acc is not None else None

    def storage_at(self, address: Union[bytes, str], key: bytes) -> bytes:
        return self.journal.storage_get(self._addr(address), key, b"") or b""

    def _addr(self, address: Union[bytes, str]) -> Address:
        a = to_bytes(address)
        if len(a) != self.config.address_len:
            raise VmError(
                f"address must be exactly {self.config.address_len} bytes",
                code="bad_address",
                context={"len": len(a)},
            )
        return a

    # -------------------------- transactions ---------------------------- #

    def deploy(
        self,
        sender: Union[bytes, str],
        module: ModuleRef,
        *args: Any,
        salt: Optional[Union[bytes, str]] = None,
        value: int = 0,
        gas_price: Optional[int] = None,
    ) -> Receipt:
        """Deploy a contract module from an EOA and run its ``init``."""
        name = _module_name(module)
        self._load(name)
        sender_b = self._addr(sender)
        nonce = self.nonce_of(sender_b)
        if salt is None:
            address = create_address(sender_b, nonce, length=self.config.address_len)
        else:
            address = create2_address(
                sender_b, _salt_bytes(salt), code_hash(name, args), length=self.config.address_len
            )

        def body(tx: TxEnv) -> Any:
            return self._enter(
                caller=tx.sender,
                origin=tx.sender,
                to=address,
                entrypoint=INIT,
                args=args,
                value=tx.value,
                gas_price=tx.gas_price,
                depth=0,
                deploy_code=name,
            )

        receipt = self._run_tx(sender_b, None, value, gas_price, body, contract_address=address)
        log.debug("deployed %s at %s (sender=%s)", name, to_hex(address), to_hex(sender_b))
        return receipt

    def transact(
        self,
        sender: Union[bytes, str],
        to: Union[bytes, str],
        entrypoint: Optional[str] = None,
        *args: Any,
        value: int = 0,
        gas_price: Optional[int] = None,
    ) -> Receipt:
        """
        Send a transaction. ``entrypoint=None`` is a plain value transfer, which
        runs the target's ``receive`` when the target is a contract.
        """
        to_b = self._addr(to)

        def body(tx: TxEnv) -> Any:
            return self._call_account(
                caller=tx.sender,
                origin=tx.sender,
                to=to_b,
                entrypoint=entrypoint,
                args=args,
                value=tx.value,
                gas_price=tx.gas_price,
                depth=0,
            )

        return self._run_tx(self._addr(sender), to_b, value, gas_price, body)

    def call(
        self,
        to: Union[bytes, str],
        entrypoint: str,
        *args: Any,
        caller: Optional[Union[bytes, str]] = None,
    ) -> Any:
        """Read-only query. Writes and events are always discarded."""
        if self._events is not None:
            raise VmError("cannot query during a transaction", code="host_busy")
        to_b = self._addr(to)
        caller_b = self._addr(caller) if caller is not None else bytes(self.config.address_len)
        self._events = EventLog(self.config.max_logs_per_tx)
        self.journal.begin()
        try:
            return self._call_account(
                caller=caller_b,
                origin=caller_b,
                to=to_b,
                entrypoint=entrypoint,
                args=args,
                value=0,
                gas_price=self.config.default_gas_price,
                depth=0,
            )
        finally:
            self.journal.revert()
            self._events = None

    def _run_tx(
        self,
        sender: Address,
        to: Optional[Address],
        value: int,
        gas_price: Optional[int],
        body: Any,
        *,
        contract_address: Optional[Address] = None,
    ) -> Receipt:
        if self._events is not None or in_frame():
            raise VmError("a transaction is already executing", code="host_busy")
        if self.is_contract(sender):
            raise VmError("transactions must originate from an EOA", code="bad_sender")
        nonce = self.nonce_of(sender)
        tx = TxEnv(
            tx_hash=_sha3(b"tx|" + sender + nonce.to_bytes(8, "big") + (to or b"")),
            sender=sender,
            to=to,
            value=value,
            gas_price=self.config.default_gas_price if gas_price is None else gas_price,
            nonce=nonce,
        )
        self._tx = tx
        self._events = EventLog(self.config.max_logs_per_tx)
        self.journal.begin()
        try:
            result = body(tx)
            self.journal.ensure_account_for_write(sender).nonce += 1
        except Exception as exc:
            self.journal.revert()
            log.debug("tx %s reverted: %r", to_hex(tx.tx_hash), exc)
            raise
        else:
            self.journal.commit()
            return Receipt(
                tx_hash=tx.tx_hash,
                sender=sender,
                to=to,
                contract_address=contract_address,
                return_value=result,
                events=tuple(self._events.snapshot()),
                gas_price=tx.gas_price,
            )
        finally:
            self._events = None
            self._tx = None

    # ---------------------------- frames -------------------------------- #

    def _call_account(
        self,
        *,
        caller: Address,
        origin: Address,
        to: Address,
        entrypoint: Optional[str],
        args: Sequence[Any],
        value: int,
        gas_price: int,
        depth: int,
    ) -> Any:
        if self.is_contract(to):
            return self._enter(
                caller=caller,
                origin=origin,
                to=to,
                entrypoint=entrypoint,
                args=args,
                value=value,
                gas_price=gas_price,
                depth=depth,
            )
        if entrypoint is not None:
            raise UnknownEntrypoint(
                "target is not a contract",
                context={"to": to_hex(to), "entrypoint": entrypoint},
            )
        self._move_value(caller, to, value)
        return None

    def _enter(
        self,
        *,
        caller: Address,
        origin: Address,
        to: Address,
        entrypoint: Optional[str],
        args: Sequence[Any],
        value: int,
        gas_price: int,
        depth: int,
        deploy_code: Optional[str] = None,
    ) -> Any:
        if depth >= self.config.max_call_depth:
            raise CallDepthExceeded(
                "call depth limit reached", context={"limit": self.config.max_call_depth}
            )
        assert self._events is not None
        frame = Frame(
            address=to, caller=caller, origin=origin, value=value, gas_price=gas_price, depth=depth
        )
        mark = self._events.mark()
        self.journal.begin()
        push_frame(frame, self)
        try:
            if deploy_code is not None:
                self.journal.create_account(to, code=deploy_code)
            if value:
                self._check_payable(to, INIT if deploy_code is not None else entrypoint)
            self._move_value(caller, to, value)
            result = self._dispatch(to, entrypoint, args, deploying=deploy_code is not None)
        except Exception:
            self.journal.revert()
            self._events.truncate(mark)
            raise
        else:
            self.journal.commit()
            return result
        finally:
            pop_frame()

    def _dispatch(
        self, address: Address, entrypoint: Optional[str], args: Sequence[Any], *, deploying: bool
    ) -> Any:
        code = self.code_of(address)
        assert code is not None
        module = self._load(code)
        if deploying:
            init = getattr(module, INIT, None)
            return init(*args) if init is not None else None
        name = RECEIVE if entrypoint is None else entrypoint
        exported = getattr(module, "__all__", ())
        if name == INIT or name not in exported or not callable(getattr(module, name, None)):
            raise UnknownEntrypoint(
                f"no entrypoint {name!r}",
                context={"contract": code, "address": to_hex(address)},
            )
        return getattr(module, name)(*args)

    def _check_payable(self, address: Address, entrypoint: Optional[str]) -> None:
        name = RECEIVE if entrypoint is None else entrypoint
        if name == RECEIVE:
            return
        code = self.code_of(address)
        assert code is not None
        if name not in getattr(self._load(code), PAYABLE, ()):
            raise NotPayable(context={"contract": code, "entrypoint": name})

    def _load(self, name: str) -> ModuleType:
        mod = self._modules.get(name)
        if mod is None:
            try:
                mod = importlib.import_module(name)
            except ImportError as e:
                raise VmError(f"cannot load contract module {name!r}", code="bad_module") from e
            self._modules[name] = mod
        return mod

    def _move_value(self, src: Address, dst: Address, amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise VmError("value must be a non-negative int", code="bad_amount")
        if amount == 0:
            return
        payer = self.journal.ensure_account_for_write(src)
        if payer.balance < amount:
            raise InsufficientBalance(
                context={"from": to_hex(src), "balance": payer.balance, "amount": amount}
            )
        payer.balance -= amount
        payee = self.journal.ensure_account_for_write(dst)
        if payee.balance + amount > U256_MAX:
            raise VmError("balance overflow", code="balance_overflow")
        payee.balance += amount

    # --------------------- contract-facing host ops --------------------- #

    def invoke(self, to: bytes, entrypoint: Optional[str], *args: Any, value: int = 0) -> Any:
        """Call another account from the executing contract."""
        f = current_frame()
        return self._call_account(
            caller=f.address,
            origin=f.origin,
            to=self._addr(to),
            entrypoint=entrypoint,
            args=args,
            value=value,
            gas_price=f.gas_price,
            depth=f.depth + 1,
        )

    def transfer_value(self, to: bytes, amount: int) -> None:
        """Send native value from the executing contract; runs ``receive`` on contracts."""
        self.invoke(to, None, value=amount)

    def create(
        self,
        module: ModuleRef,
        *args: Any,
        salt: Optional[Union[bytes, str]] = None,
        value: int = 0,
    ) -> Address:
        """Deploy a contract from the executing contract. Returns its address."""
        f = current_frame()
        name = _module_name(module)
        self._load(name)
        creator = self.journal.ensure_account_for_write(f.address)
        if salt is None:
            address = create_address(f.address, creator.nonce, length=self.config.address_len)
        else:
            address = create2_address(
                f.address, _salt_bytes(salt), code_hash(name, args), length=self.config.address_len
            )
        creator.nonce += 1
        self._enter(
            caller=f.address,
            origin=f.origin,
            to=address,
            entrypoint=INIT,
            args=args,
            value=value,
            gas_price=f.gas_price,
            depth=f.depth + 1,
            deploy_code=name,
        )
        log.debug("contract %s created %s at %s", to_hex(f.address), name, to_hex(address))
        return address

    def emit(self, name: bytes, args: Dict[str, Any]) -> None:
        if self._events is None:
            raise VmError("no active transaction", code="no_frame")
        self._events.emit(current_frame().address, name, args)

    def storage_get(self, key: bytes) -> Optional[bytes]:
        return self.journal.storage_get(current_frame().address, key)

    def storage_set(self, key: bytes, value: bytes) -> None:
        self.journal.storage_set(current_frame().address, key, value)


__all__ = [
    "Chain",
    "Receipt",
    "eoa_address",
    "code_hash",
    "create_address",
    "create2_address",
]
