"""
Execution host: the collaborator generated endpoints and clients run against.

Generated code needs exactly three primitives from its environment:

    call(gas, address, value, payload, result) -> None   # raises CallError
    value() -> int                                        # value transferred with the current call
    log(topics, data) -> None                             # append an event log

`Host` is the structural protocol for that surface. `LocalHost` is a small
in-memory implementation: contracts are endpoints registered under an
address, calls are routed synchronously, and each call runs in a frame that
carries its transferred value. It performs no gas metering and holds no
balances; it exists so endpoints and clients can be exercised end to end
without a chain.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from eth_utils import is_address, to_checksum_address

from ..errors import CallError, DispatchError

_LOG = logging.getLogger(__name__)


@runtime_checkable
class Host(Protocol):
    def call(self, gas: int, address: str, value: int, payload: bytes, result: bytearray) -> None: ...
    def value(self) -> int: ...
    def log(self, topics: Sequence[bytes], data: bytes) -> None: ...


@runtime_checkable
class Dispatchable(Protocol):
    def dispatch(self, payload: bytes) -> bytes: ...
    def dispatch_ctor(self, payload: bytes) -> None: ...


@dataclass(frozen=True)
class CallRecord:
    gas: int
    address: str
    value: int
    payload: bytes


@dataclass(frozen=True)
class LogRecord:
    address: Optional[str]
    topics: Tuple[bytes, ...]
    data: bytes


@dataclass
class _Frame:
    address: Optional[str]
    value: int


@dataclass
class LocalHost:
    """In-memory host routing calls to registered endpoints."""

    contracts: Dict[str, Dispatchable] = field(default_factory=dict)
    calls: List[CallRecord] = field(default_factory=list)
    logs: List[LogRecord] = field(default_factory=list)
    _frames: List[_Frame] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------ frames

    @contextmanager
    def frame(self, *, address: Optional[str] = None, value: int = 0) -> Iterator["LocalHost"]:
        """Run the enclosed block as a call frame transferring `value`."""
        if value < 0:
            raise ValueError("transferred value cannot be negative")
        self._frames.append(_Frame(address=address, value=int(value)))
        try:
            yield self
        finally:
            self._frames.pop()

    def value(self) -> int:
        return self._frames[-1].value if self._frames else 0

    def current_address(self) -> Optional[str]:
        return self._frames[-1].address if self._frames else None

    # ------------------------------------------------------------------ contracts

    def deploy(self, address: str, endpoint: Dispatchable, payload: bytes = b"", *, value: int = 0) -> str:
        """Register `endpoint` under `address` and run its constructor entry point once."""
        if not is_address(address):
            raise ValueError(f"invalid contract address: {address!r}")
        addr = to_checksum_address(address)
        if addr in self.contracts:
            raise ValueError(f"address already in use: {addr}")
        with self.frame(address=addr, value=value):
            endpoint.dispatch_ctor(payload)
        self.contracts[addr] = endpoint
        _LOG.debug("deployed %s at %s", type(endpoint).__name__, addr)
        return addr

    def call(self, gas: int, address: str, value: int, payload: bytes, result: bytearray) -> None:
        addr = to_checksum_address(address) if is_address(address) else address
        self.calls.append(CallRecord(gas=gas, address=addr, value=value, payload=bytes(payload)))
        if gas <= 0:
            raise CallError("out of gas", context={"address": addr, "gas": gas})
        target = self.contracts.get(addr)
        if target is None:
            raise CallError(f"no contract at {addr}", context={"address": addr})
        try:
            with self.frame(address=addr, value=value):
                out = target.dispatch(bytes(payload))
        except DispatchError as e:
            _LOG.debug("call to %s failed: %s", addr, e.code)
            raise CallError(
                f"call to {addr} failed: {e.message}",
                context={"address": addr, "cause": e.code},
            ) from e
        result[:] = out

    def log(self, topics: Sequence[bytes], data: bytes) -> None:
        self.logs.append(LogRecord(address=self.current_address(), topics=tuple(topics), data=bytes(data)))


__all__ = ["Host", "Dispatchable", "LocalHost", "CallRecord", "LogRecord"]
