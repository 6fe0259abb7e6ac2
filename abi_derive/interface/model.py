from __future__ import annotations

"""
Interface model
===============

Frozen dataclasses describing one contract interface, as consumed by the
endpoint, client and manifest generators. Instances are produced by
`abi_derive.interface.builder.build_interface` and annotated by
`abi_derive.interface.normalize.normalize_interface`.

Shape of the model:

- `Param` is a (binding name, type) pair; `indexed` only matters for events.
- `Signature` is a callable method (or the constructor) with its canonical
  signature string and 4-byte selector.
- `Event` carries its canonical signature and 32-byte log topic.
- `Interface` keeps items in declaration order; the constructor lives
  outside `items`.

`Item` is the tagged union `Signature | Event`. Consumers switch on it with
an exhaustive isinstance chain and call `unknown_item()` in the final branch.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NoReturn, Optional, Tuple, Union

from ..abi.types import TypeRef


@dataclass(frozen=True)
class Param:
    name: str
    type: TypeRef
    indexed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type.canonical_str()}


@dataclass(frozen=True)
class Signature:
    name: str
    arguments: Tuple[Param, ...] = ()
    return_types: Tuple[TypeRef, ...] = ()
    is_payable: bool = False
    canonical: str = ""   # e.g. "transfer(address,uint256)"
    selector: int = 0     # big-endian u32 of keccak256(canonical)[:4]

    @property
    def argument_types(self) -> Tuple[TypeRef, ...]:
        return tuple(p.type for p in self.arguments)

    @property
    def selector_bytes(self) -> bytes:
        return self.selector.to_bytes(4, "big")

    @property
    def selector_hex(self) -> str:
        return f"0x{self.selector:08x}"


@dataclass(frozen=True)
class Event:
    name: str
    arguments: Tuple[Param, ...] = ()
    canonical: str = ""
    topic: bytes = b""    # keccak256(canonical)

    @property
    def indexed(self) -> Tuple[Param, ...]:
        return tuple(p for p in self.arguments if p.indexed)

    @property
    def data_arguments(self) -> Tuple[Param, ...]:
        return tuple(p for p in self.arguments if not p.indexed)


# Handler and client member name of the constructor, whatever it is declared as.
CONSTRUCTOR = "constructor"

Item = Union[Signature, Event]


def unknown_item(item: object) -> NoReturn:
    raise TypeError(f"unknown interface item: {type(item).__name__}")


@dataclass(frozen=True)
class Interface:
    name: str
    constructor: Optional[Signature] = None
    items: Tuple[Item, ...] = field(default_factory=tuple)

    def signatures(self) -> List[Signature]:
        """Callable (non-event) items in declaration order."""
        return [it for it in self.items if isinstance(it, Signature)]

    def events(self) -> List[Event]:
        return [it for it in self.items if isinstance(it, Event)]

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, name: str) -> Optional[Item]:
        for it in self.items:
            if it.name == name:
                return it
        return None


__all__ = [
    "CONSTRUCTOR",
    "Param",
    "Signature",
    "Event",
    "Item",
    "Interface",
    "unknown_item",
]
