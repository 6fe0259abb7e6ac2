from __future__ import annotations

"""
Signature normalization & selector hashing

- canonical signature := name "(" canonicalType [ "," canonicalType ]* ")"
- selector            := big-endian u32 of keccak256(canonical)[:4]
- event topic         := keccak256(canonical)

These are bit-exact with the contract ABI convention, so independent tooling
computing selectors the same way interoperates with generated endpoints:

    >>> hex(selector_of("transfer(address,uint256)"))
    '0xa9059cbb'

`normalize_interface` annotates every item and then rejects interfaces in
which two callable signatures share a selector (one of the routes would be
unreachable otherwise).
"""

import dataclasses
import logging
from typing import Dict, Iterable, Optional

from ..errors import SelectorCollisionError
from ..hashing import keccak256
from .model import Event, Interface, Item, Param, Signature, unknown_item

log = logging.getLogger(__name__)


def canonical_signature(name: str, params: Iterable[Param]) -> str:
    return name + "(" + ",".join(p.type.canonical_str() for p in params) + ")"


def selector_of(signature: str) -> int:
    return int.from_bytes(keccak256(signature.encode("utf-8"))[:4], "big")


def topic_of(signature: str) -> bytes:
    return keccak256(signature.encode("utf-8"))


def normalize_signature(sig: Signature) -> Signature:
    canonical = canonical_signature(sig.name, sig.arguments)
    return dataclasses.replace(sig, canonical=canonical, selector=selector_of(canonical))


def normalize_event(ev: Event) -> Event:
    canonical = canonical_signature(ev.name, ev.arguments)
    return dataclasses.replace(ev, canonical=canonical, topic=topic_of(canonical))


def normalize_item(item: Item) -> Item:
    if isinstance(item, Signature):
        return normalize_signature(item)
    if isinstance(item, Event):
        return normalize_event(item)
    unknown_item(item)


def check_selector_collisions(intf: Interface) -> None:
    """Raise SelectorCollisionError if two callable signatures share a selector."""
    seen: Dict[int, str] = {}
    for sig in intf.signatures():
        other = seen.get(sig.selector)
        if other is not None:
            log.debug("selector collision 0x%08x: %s vs %s", sig.selector, other, sig.canonical)
            raise SelectorCollisionError(sig.selector, other, sig.canonical)
        seen[sig.selector] = sig.canonical


def normalize_interface(intf: Interface) -> Interface:
    """Return `intf` with canonical signatures, selectors and topics filled in."""
    ctor: Optional[Signature] = None
    if intf.constructor is not None:
        ctor = normalize_signature(intf.constructor)
    items = tuple(normalize_item(it) for it in intf.items)
    out = dataclasses.replace(intf, constructor=ctor, items=items)
    check_selector_collisions(out)
    for sig in out.signatures():
        log.debug("%s: %s -> %s", intf.name, sig.canonical, sig.selector_hex)
    return out


__all__ = [
    "canonical_signature",
    "selector_of",
    "topic_of",
    "normalize_signature",
    "normalize_event",
    "normalize_item",
    "check_selector_collisions",
    "normalize_interface",
]
