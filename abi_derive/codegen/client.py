"""
Client (remote-call stub) generator.

`build_client(interface, "TokenClient")` returns a class with one method per
callable signature. Each method encodes `selector || args`, forwards it to the
host together with the configured gas limit and transferred value, and
decodes the first declared return value:

    token = TokenClient("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed", host=host)
    ok = token.gas(100_000).value(0).transfer(dest, 10)

The gas and value set through the builder methods stay in effect for every
subsequent call on the same client object.

Events and the constructor also get methods, for symmetry with the endpoint
side, but calling them raises `ClientMisuseError`: events are emitted by the
contract itself and construction happens at deployment.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Dict, FrozenSet, Optional

from eth_utils import is_address, to_checksum_address

from ..abi.stream import Sink, SinkError, Stream, StreamError
from ..config import load_config
from ..errors import (
    ArgumentEncodeError,
    ClientMisuseError,
    DescriptionError,
    ResultDecodeError,
)
from ..interface.model import CONSTRUCTOR, Event, Interface, Signature, unknown_item
from ..runtime.host import Host

log = logging.getLogger(__name__)


class Client:
    """Base class of generated clients."""

    interface: ClassVar[Interface]
    default_gas: ClassVar[int]

    def __init__(self, address: str, *, host: Host) -> None:
        if not is_address(address):
            raise ValueError(f"invalid contract address: {address!r}")
        self._address = to_checksum_address(address)
        self._host = host
        self._gas: Optional[int] = None
        self._value = 0

    @property
    def address(self) -> str:
        return self._address

    @property
    def host(self) -> Host:
        return self._host

    def gas(self, limit: int) -> "Client":
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"gas limit must be a positive integer, got {limit!r}")
        self._gas = limit
        return self

    def value(self, amount: int) -> "Client":
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"value must be a non-negative integer, got {amount!r}")
        self._value = amount
        return self

    @property
    def gas_limit(self) -> int:
        return self._gas if self._gas is not None else self.default_gas

    @property
    def call_value(self) -> int:
        return self._value

    def _invoke(self, sig: Signature, args: tuple) -> Any:
        if len(args) != len(sig.arguments):
            raise TypeError(
                f"{sig.name}() takes {len(sig.arguments)} arguments ({len(args)} given)"
            )
        payload = bytearray(sig.selector_bytes)
        sink = Sink(len(args))
        try:
            for param, arg in zip(sig.arguments, args):
                sink.push(param.type, arg)
            sink.drain_to(payload)
        except SinkError as e:
            raise ArgumentEncodeError(
                f"{self.interface.name}.{sig.name}: {e.message}",
                context={"method": sig.name},
            ) from e

        result = bytearray()
        log.debug(
            "call %s.%s -> %s gas=%d value=%d",
            self.interface.name, sig.name, self._address, self.gas_limit, self._value,
        )
        self._host.call(self.gas_limit, self._address, self._value, bytes(payload), result)

        if not sig.return_types:
            return None
        try:
            return Stream(bytes(result)).pop(sig.return_types[0])
        except StreamError as e:
            raise ResultDecodeError(
                f"{self.interface.name}.{sig.name}: {e.message}",
                context={"method": sig.name, "length": len(result)},
            ) from e


_RESERVED: FrozenSet[str] = frozenset(dir(Client)) | {"interface", "default_gas"}


def _call_method(sig: Signature) -> Callable[..., Any]:
    def method(self: Client, *args: Any) -> Any:
        return self._invoke(sig, args)

    method.__doc__ = f"Call `{sig.canonical}` (selector {sig.selector_hex})."
    return method


def _misuse_method(name: str, what: str) -> Callable[..., Any]:
    def method(self: Client, *args: Any, **kwargs: Any) -> Any:
        raise ClientMisuseError(
            f"{self.interface.name}.{name} is {what} and cannot be called through a client",
            context={"item": name},
        )

    method.__doc__ = f"Not callable: `{name}` is {what}."
    return method


def _check_name(intf: Interface, name: str) -> None:
    if name in _RESERVED:
        raise DescriptionError(
            f"{intf.name}.{name} would shadow a client member",
            context={"interface": intf.name, "name": name},
        )


def build_client(intf: Interface, name: str, *, default_gas: Optional[int] = None) -> type:
    """Create the client class `name` for a normalized interface."""
    gas = default_gas if default_gas is not None else load_config().default_gas
    attrs: Dict[str, Any] = {
        "interface": intf,
        "default_gas": gas,
        "__doc__": f"ABI client for the {intf.name} interface.",
    }

    def bind(member: str, method: Callable[..., Any]) -> None:
        _check_name(intf, member)
        method.__name__ = member
        method.__qualname__ = f"{name}.{member}"
        attrs[member] = method

    if intf.constructor is not None:
        bind(CONSTRUCTOR, _misuse_method(CONSTRUCTOR, "the constructor"))

    for item in intf.items:
        if isinstance(item, Signature):
            bind(item.name, _call_method(item))
        elif isinstance(item, Event):
            bind(item.name, _misuse_method(item.name, "an event"))
        else:
            unknown_item(item)

    cls = type(name, (Client,), attrs)
    log.debug("client %s: %d methods for %s (default gas %d)", name, len(intf.items), intf.name, gas)
    return cls


__all__ = ["Client", "build_client"]
