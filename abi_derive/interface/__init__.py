"""
abi_derive.interface: interface model, builder and normalizer.

Public surface:
- Model dataclasses: ``Interface``, ``Signature``, ``Event``, ``Param``.
- Builder: ``build_interface`` (raw description → Interface).
- Normalizer: ``normalize_interface``, ``selector_of``, ``topic_of``,
  ``canonical_signature``.
- ``load_interface``: both steps in one call.
"""

from .builder import Description, build_interface
from .model import Event, Interface, Item, Param, Signature, unknown_item
from .normalize import (
    canonical_signature,
    check_selector_collisions,
    normalize_interface,
    selector_of,
    topic_of,
)


def load_interface(description: Description) -> Interface:
    """Build and normalize an interface from its raw description."""
    return normalize_interface(build_interface(description))


__all__ = [
    "Description",
    "Event",
    "Interface",
    "Item",
    "Param",
    "Signature",
    "build_interface",
    "canonical_signature",
    "check_selector_collisions",
    "load_interface",
    "normalize_interface",
    "selector_of",
    "topic_of",
    "unknown_item",
]
