"""
dropvm.runtime.host — the deterministic contract host.

The host owns all state (a :class:`~dropvm.runtime.journal.Journal` of storage,
native balances and events), the registry of deployed contracts, and the block
environment. Every top-level operation (``deploy``, ``call``) is atomic: a
checkpoint is opened, the contract function runs (nested cross-contract calls
each get their own checkpoint), and the whole thing is committed on success or
rolled back on any exception.

While a contract function runs, the active :class:`ActiveFrame` is published
through a context variable; the contract-facing stdlib (``dropvm.stdlib``)
resolves it with :func:`current` to find "self", the caller and the host.

Native value
------------
``call(..., value=n)`` debits ``n`` from the sender and credits the callee
*before* the function body runs, so ``treasury.balance()`` already includes
it. A contract paying native value to an address that hosts a contract with a
public ``receive`` function triggers a nested ``receive()`` call carrying that
value; re-entering the payer from there is allowed up to the depth cap.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .. import logging as dlog
from ..config import VMConfig, load_config
from ..errors import Revert, VmError
from .context import BlockEnv, CallFrame, to_bytes, to_hex
from .events_api import Event, make_event
from .hash_api import keccak256
from .journal import Journal
from .loader import ContractCode, ContractSource, load_contract

AddressLike = Union[bytes, bytearray, memoryview, str]

_log = dlog.get_logger("dropvm.host")

_ABI_SCALARS = (bool, int, bytes, str, type(None))


@dataclass
class ActiveFrame:
    """The call currently executing, plus per-call counters."""

    host: "Host"
    frame: CallFrame
    logs: int = 0


_ACTIVE: ContextVar[Optional[ActiveFrame]] = ContextVar("_DROPVM_ACTIVE_FRAME", default=None)


def current() -> ActiveFrame:
    """Return the active frame or raise if no contract is executing."""
    af = _ACTIVE.get()
    if af is None:
        raise VmError("no active contract call", code="no_frame")
    return af


def _check_abi_value(v: Any, where: str) -> None:
    if isinstance(v, _ABI_SCALARS):
        return
    if isinstance(v, (list, tuple)):
        for item in v:
            _check_abi_value(item, where)
        return
    if isinstance(v, dict):
        for k, item in v.items():
            if not isinstance(k, str):
                raise VmError("ABI map keys must be str", code="abi_type", context={"where": where})
            _check_abi_value(item, where)
        return
    raise VmError(
        f"value of type {type(v).__name__} cannot cross the contract boundary",
        code="abi_type",
        context={"where": where, "py_type": type(v).__name__},
    )


def _check_amount(amount: Any, what: str) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise VmError(f"{what} must be a non-negative int", code="bad_value", context={"value": repr(amount)})
    return amount


class Host:
    """
    In-process execution host.

        host = Host(timestamp=1_700_000_000)
        host.credit(alice, 10**18)
        token = host.deploy("airdrop.contracts.distributor.contract", ..., sender=admin)
        host.call(token, "claim", 100, proof, sender=alice, value=fee)
    """

    def __init__(
        self,
        *,
        height: int = 0,
        timestamp: int = 1_700_000_000,
        chain_id: int = 1337,
        config: Optional[VMConfig] = None,
    ) -> None:
        self.config = config or load_config()
        self.journal = Journal()
        self._block = BlockEnv(height=height, timestamp=timestamp, chain_id=chain_id)
        self._contracts: Dict[bytes, ContractCode] = {}
        self._nonces: Dict[bytes, int] = {}
        self.last_events: List[Event] = []

    # ------------------------------------------------------------------ #
    # Block environment
    # ------------------------------------------------------------------ #

    @property
    def block(self) -> BlockEnv:
        return self._block

    def set_block(self, *, height: Optional[int] = None, timestamp: Optional[int] = None) -> BlockEnv:
        self._require_idle()
        self._block = replace(
            self._block,
            height=self._block.height if height is None else height,
            timestamp=self._block.timestamp if timestamp is None else timestamp,
        )
        return self._block

    def advance_time(self, seconds: int, *, blocks: int = 1) -> BlockEnv:
        self._require_idle()
        self._block = self._block.advanced(seconds=seconds, blocks=blocks)
        return self._block

    # ------------------------------------------------------------------ #
    # Addresses & accounts
    # ------------------------------------------------------------------ #

    @property
    def zero_address(self) -> bytes:
        return bytes(self.config.address_len)

    def address(self, value: AddressLike) -> bytes:
        """Normalize an address and check its width against the host config."""
        b = to_bytes(value)
        if len(b) != self.config.address_len:
            raise VmError(
                f"address must be exactly {self.config.address_len} bytes, got {len(b)}",
                code="bad_address",
            )
        return b

    def _derive_address(self, deployer: bytes, nonce: int) -> bytes:
        seed = deployer + nonce.to_bytes(8, "big")
        out = b""
        counter = 0
        while len(out) < self.config.address_len:
            out += keccak256(seed + counter.to_bytes(4, "big"), domain=b"create")
            counter += 1
        return out[: self.config.address_len]

    def is_contract(self, address: AddressLike) -> bool:
        return self.address(address) in self._contracts

    def code_of(self, address: AddressLike) -> ContractCode:
        addr = self.address(address)
        code = self._contracts.get(addr)
        if code is None:
            raise VmError("no contract at address", code="unknown_contract", context={"address": to_hex(addr)})
        return code

    def credit(self, address: AddressLike, amount: int) -> int:
        """Mint native units to `address` outside of any call. Returns the new balance."""
        self._require_idle()
        addr = self.address(address)
        _check_amount(amount, "amount")
        new = self.journal.get_balance(addr) + amount
        self.journal.set_balance(addr, new)
        self.journal.commit()
        return new

    def balance(self, address: AddressLike) -> int:
        """Native balance of `address`."""
        return self.journal.get_balance(self.address(address))

    def storage_at(self, address: AddressLike, key: bytes) -> bytes:
        return self.journal.storage_get(self.address(address), key)

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #

    def events(
        self,
        address: Optional[AddressLike] = None,
        name: Optional[Union[str, bytes]] = None,
    ) -> List[Event]:
        """Committed events, optionally filtered by emitter and name."""
        addr = self.address(address) if address is not None else None
        bname = name.encode("ascii") if isinstance(name, str) else name
        return [
            ev
            for ev in self.journal.events()
            if (addr is None or ev.address == addr) and (bname is None or ev.name == bname)
        ]

    # ------------------------------------------------------------------ #
    # Top-level operations
    # ------------------------------------------------------------------ #

    def deploy(
        self,
        source: ContractSource,
        *init_args: Any,
        sender: AddressLike,
        value: int = 0,
        init_fn: str = "init",
        exports: Optional[Sequence[str]] = None,
    ) -> bytes:
        """
        Register a contract at a fresh address and run its `init_fn` (if it
        exports one) as part of the same atomic operation.
        """
        self._require_idle()
        code = load_contract(source, exports=exports)
        deployer = self.address(sender)
        nonce = self._nonces.get(deployer, 0)
        self._nonces[deployer] = nonce + 1
        address = self._derive_address(deployer, nonce)
        if address in self._contracts:
            raise VmError("address collision", code="address_collision", context={"address": to_hex(address)})

        self._contracts[address] = code
        try:
            if code.has(init_fn):
                self._run_top_level(address, init_fn, init_args, deployer, value)
            elif init_args or value:
                raise VmError(f"{code.name} has no {init_fn}()", code="unknown_function")
        except BaseException:
            del self._contracts[address]
            raise

        _log.info(
            "contract deployed",
            extra={"contract": code.name, "address": address, "code_hash": code.code_hash},
        )
        return address

    def call(self, address: AddressLike, fn: str, *args: Any, sender: AddressLike, value: int = 0) -> Any:
        """Invoke `fn` atomically; state changes persist only if it returns."""
        self._require_idle()
        return self._run_top_level(self.address(address), fn, args, self.address(sender), value)

    def view(self, address: AddressLike, fn: str, *args: Any, sender: Optional[AddressLike] = None) -> Any:
        """Invoke `fn` and discard every state change, successful or not."""
        self._require_idle()
        caller = self.address(sender) if sender is not None else self.zero_address
        marker = self.journal.begin()
        try:
            return self._invoke(self.address(address), fn, tuple(args), caller=caller, origin=caller, value=0, depth=0)
        finally:
            self.journal.revert_to(marker - 1)

    def _run_top_level(self, address: bytes, fn: str, args: Sequence[Any], sender: bytes, value: int) -> Any:
        committed = len(self.journal.events())
        with dlog.trace_scope():
            dlog.bind(component="host", contract=address, fn=fn, height=self.block.height)
            try:
                result = self._invoke(address, fn, tuple(args), caller=sender, origin=sender, value=value, depth=0)
            except Revert as e:
                self.journal.revert()
                _log.debug("call reverted", extra={"reason": e.reason})
                raise
            except BaseException:
                self.journal.revert()
                _log.debug("call failed", exc_info=True)
                raise
            self.journal.commit()
            self.last_events = self.journal.events()[committed:]
            _log.debug("call ok", extra={"events": len(self.last_events)})
        return result

    # ------------------------------------------------------------------ #
    # Execution core
    # ------------------------------------------------------------------ #

    def _invoke(
        self,
        address: bytes,
        fn: str,
        args: Sequence[Any],
        *,
        caller: bytes,
        origin: bytes,
        value: int,
        depth: int,
    ) -> Any:
        if depth >= self.config.max_call_depth:
            raise VmError("call depth exceeded", code="call_depth", context={"depth": depth, "fn": fn})
        _check_amount(value, "value")
        entry = self.code_of(address).entry(fn)
        if self.config.strict_mode:
            _check_abi_value(list(args), "args")

        frame = CallFrame(address=address, caller=caller, origin=origin, value=value, fn=fn, depth=depth)
        self.journal.begin()
        token = _ACTIVE.set(ActiveFrame(self, frame))
        try:
            if value:
                self._move(caller, address, value)
            result = entry(*args)
            if self.config.strict_mode:
                _check_abi_value(result, "return")
        except BaseException:
            self.journal.revert()
            raise
        finally:
            _ACTIVE.reset(token)
        self.journal.commit()
        return result

    def _move(self, src: bytes, dst: bytes, amount: int) -> None:
        if amount == 0 or src == dst:
            return
        bal = self.journal.get_balance(src)
        if bal < amount:
            raise Revert(
                b"TREASURY:INSUFFICIENT_FUNDS",
                context={"from": to_hex(src), "balance": bal, "amount": amount},
            )
        self.journal.set_balance(src, bal - amount)
        self.journal.set_balance(dst, self.journal.get_balance(dst) + amount)

    def _require_idle(self) -> None:
        if _ACTIVE.get() is not None:
            raise VmError("host API used from inside a contract call", code="reentrant_host")

    # ------------------------------------------------------------------ #
    # Services used by dropvm.stdlib (always with the active frame)
    # ------------------------------------------------------------------ #

    def nested_call(self, af: ActiveFrame, to: AddressLike, fn: str, args: Sequence[Any], value: int = 0) -> Any:
        return self._invoke(
            self.address(to),
            fn,
            tuple(args),
            caller=af.frame.address,
            origin=af.frame.origin,
            value=value,
            depth=af.frame.depth + 1,
        )

    def native_transfer(self, af: ActiveFrame, to: AddressLike, amount: int) -> None:
        dst = self.address(to)
        _check_amount(amount, "amount")
        if amount == 0:
            return
        code = self._contracts.get(dst)
        if code is not None and code.has("receive"):
            self.nested_call(af, dst, "receive", (), value=amount)
        else:
            self._move(af.frame.address, dst, amount)

    def emit(self, af: ActiveFrame, name: bytes, args: Mapping[str, Any]) -> None:
        if af.logs >= self.config.max_logs_per_call:
            raise VmError("too many events in one call", code="log_limit", context={"limit": af.logs})
        self.journal.append_event(make_event(af.frame.address, name, args))
        af.logs += 1

    def storage_get(self, af: ActiveFrame, key: bytes) -> bytes:
        return self.journal.storage_get(af.frame.address, self._check_key(key))

    def storage_set(self, af: ActiveFrame, key: bytes, value: bytes) -> None:
        k = self._check_key(key)
        if not isinstance(value, (bytes, bytearray)):
            raise VmError("storage value must be bytes", code="storage_invalid")
        if len(value) > self.config.max_storage_value_bytes:
            raise VmError("storage value too large", code="storage_invalid", context={"len": len(value)})
        self.journal.storage_set(af.frame.address, k, bytes(value))

    def storage_delete(self, af: ActiveFrame, key: bytes) -> None:
        self.journal.storage_delete(af.frame.address, self._check_key(key))

    def _check_key(self, key: Any) -> bytes:
        if not isinstance(key, (bytes, bytearray)) or not key:
            raise VmError("storage key must be non-empty bytes", code="storage_invalid")
        if len(key) > self.config.max_storage_key_bytes:
            raise VmError("storage key too long", code="storage_invalid", context={"len": len(key)})
        return bytes(key)


__all__ = ["Host", "ActiveFrame", "current"]
