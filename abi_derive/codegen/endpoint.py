"""
Endpoint (dispatcher) generator.

`build_endpoint(interface, "TokenEndpoint")` returns a class whose instances
wrap an implementation object and route ABI call payloads to it:

    endpoint = TokenEndpoint(TokenImpl(), host=host)
    out = endpoint.dispatch(payload)     # selector(4) || args  ->  encoded result
    endpoint.dispatch_ctor(ctor_args)    # once, at deployment

Call path of `dispatch`:

  1. payload shorter than 4 bytes        -> InvalidPayload
  2. first 4 bytes (big-endian)          -> method id; unknown id -> UnknownSelector
  3. non-payable route, host.value() != 0 -> ValueNotAccepted (before decoding)
  4. arguments popped from a Stream in declaration order; failure -> ArgumentDecodeError
  5. handler invoked; results pushed into a Sink sized to the return count,
     or b"" when the method declares no return types

`dispatch_ctor` calls `inner.constructor(*args)` whatever name the constructor
declaration carries.

Every error aborts the current call only; the endpoint holds no per-call state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from ..abi.stream import Sink, SinkError, Stream, StreamError
from ..abi.types import TypeRef
from ..errors import (
    ArgumentDecodeError,
    InvalidPayload,
    ResultEncodeError,
    UnknownSelector,
    ValueNotAccepted,
)
from ..interface.model import CONSTRUCTOR, Event, Interface, Signature, unknown_item
from ..runtime.host import Host

log = logging.getLogger(__name__)

SELECTOR_SIZE = 4


@dataclass(frozen=True)
class Route:
    selector: int
    name: str
    canonical: str
    argument_types: Tuple[TypeRef, ...]
    return_types: Tuple[TypeRef, ...]
    is_payable: bool

    @classmethod
    def from_signature(cls, sig: Signature) -> "Route":
        return cls(
            selector=sig.selector,
            name=sig.name,
            canonical=sig.canonical,
            argument_types=sig.argument_types,
            return_types=sig.return_types,
            is_payable=sig.is_payable,
        )


def build_routes(intf: Interface) -> Dict[int, Route]:
    """Selector -> Route for every callable item, in declaration order."""
    routes: Dict[int, Route] = {}
    for item in intf.items:
        if isinstance(item, Signature):
            routes[item.selector] = Route.from_signature(item)
        elif isinstance(item, Event):
            continue
        else:
            unknown_item(item)
    return routes


def parse_selector(payload: bytes) -> Tuple[int, bytes]:
    """Split a call payload into (method id, argument payload)."""
    if len(payload) < SELECTOR_SIZE:
        raise InvalidPayload(
            f"payload of {len(payload)} bytes is shorter than a selector",
            context={"length": len(payload)},
        )
    return int.from_bytes(payload[:SELECTOR_SIZE], "big"), payload[SELECTOR_SIZE:]


class Endpoint:
    """
    Base class of generated endpoints. Subclasses produced by `build_endpoint`
    bind `interface` and `routes`; instantiate them with the implementation
    object and the execution host.
    """

    interface: ClassVar[Interface]
    routes: ClassVar[Dict[int, Route]]

    def __init__(self, inner: Any, *, host: Host) -> None:
        missing = [name for name in self._required_handlers() if not callable(getattr(inner, name, None))]
        if missing:
            raise TypeError(
                f"{type(inner).__name__} does not implement {self.interface.name}: missing {missing}"
            )
        self.inner = inner
        self.host = host

    @classmethod
    def _required_handlers(cls) -> List[str]:
        names = [route.name for route in cls.routes.values()]
        if cls.interface.constructor is not None:
            names.append(CONSTRUCTOR)
        return names

    @classmethod
    def selectors(cls) -> List[int]:
        return list(cls.routes)

    def instance(self) -> Any:
        return self.inner

    # ------------------------------------------------------------------ dispatch

    def dispatch(self, payload: bytes) -> bytes:
        method_id, method_payload = parse_selector(bytes(payload))
        route = self.routes.get(method_id)
        if route is None:
            raise UnknownSelector(method_id)
        self._check_value(route.name, route.is_payable)
        args = self._decode_args(route.name, route.argument_types, method_payload)
        result = getattr(self.inner, route.name)(*args)
        if not route.return_types:
            return b""
        return self._encode_result(route, result)

    def dispatch_ctor(self, payload: bytes) -> None:
        ctor = self.interface.constructor
        if ctor is None:
            return
        self._check_value(ctor.name, ctor.is_payable)
        args = self._decode_args(ctor.name, ctor.argument_types, bytes(payload))
        getattr(self.inner, CONSTRUCTOR)(*args)

    # ------------------------------------------------------------------ helpers

    def _check_value(self, name: str, is_payable: bool) -> None:
        if is_payable:
            return
        value = self.host.value()
        if value != 0:
            raise ValueNotAccepted(
                f"{self.interface.name}.{name} is not payable",
                context={"method": name, "value": value},
            )

    def _decode_args(self, name: str, types: Tuple[TypeRef, ...], payload: bytes) -> List[Any]:
        stream = Stream(payload)
        args: List[Any] = []
        for index, typ in enumerate(types):
            try:
                args.append(stream.pop(typ))
            except StreamError as e:
                raise ArgumentDecodeError(
                    f"{self.interface.name}.{name}: argument #{index} ({typ}): {e.message}",
                    context={"method": name, "index": index, "type": str(typ)},
                ) from e
        return args

    def _encode_result(self, route: Route, result: Any) -> bytes:
        count = len(route.return_types)
        if count == 1:
            values: Tuple[Any, ...] = (result,)
        elif isinstance(result, (tuple, list)):
            values = tuple(result)
        else:
            raise ResultEncodeError(
                f"{route.name} must return {count} values, got {type(result).__name__}",
                context={"method": route.name},
            )
        if len(values) != count:
            raise ResultEncodeError(
                f"{route.name} returned {len(values)} values, declared {count}",
                context={"method": route.name},
            )
        sink = Sink(count)
        out = bytearray()
        try:
            for typ, value in zip(route.return_types, values):
                sink.push(typ, value)
            sink.drain_to(out)
        except SinkError as e:
            raise ResultEncodeError(
                f"{route.name}: {e.message}", context={"method": route.name}
            ) from e
        return bytes(out)


def build_endpoint(intf: Interface, name: str, *, module: Optional[str] = None) -> type:
    """Create the endpoint class `name` for a normalized interface."""
    routes = build_routes(intf)
    attrs = {
        "interface": intf,
        "routes": routes,
        "__doc__": f"ABI endpoint for the {intf.name} interface ({len(routes)} routes).",
    }
    if module is not None:
        attrs["__module__"] = module
    cls = type(name, (Endpoint,), attrs)
    log.debug("endpoint %s: %d routes for %s", name, len(routes), intf.name)
    return cls


__all__ = ["Route", "Endpoint", "SELECTOR_SIZE", "build_routes", "build_endpoint", "parse_selector"]
