"""
abi_derive.codegen: generators over a normalized `Interface`.

- ``build_endpoint``: endpoint class dispatching call payloads to an implementation.
- ``build_client``: client class encoding calls and decoding results.
- ``EventEmitter`` / ``encode_event``: contract-side event logs.
- ``build_manifest`` / ``emit_manifest``: the JSON manifest and its sinks.

All generators are independent of each other and only read the interface.
"""

from .client import Client, build_client
from .endpoint import Endpoint, Route, build_endpoint, build_routes, parse_selector
from .events import EventEmitter, encode_event
from .manifest import (
    DirectorySink,
    ManifestSink,
    MemorySink,
    build_manifest,
    emit_manifest,
    render_manifest,
    validate_manifest,
)

__all__ = [
    "Client",
    "DirectorySink",
    "Endpoint",
    "EventEmitter",
    "ManifestSink",
    "MemorySink",
    "Route",
    "build_client",
    "build_endpoint",
    "build_manifest",
    "build_routes",
    "emit_manifest",
    "encode_event",
    "parse_selector",
    "render_manifest",
    "validate_manifest",
]
