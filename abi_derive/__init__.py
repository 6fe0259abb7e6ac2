"""
abi_derive: contract ABI endpoints, clients and manifests from interface descriptions.

A small façade over the compilation pass:

- __version__ / version(): semantic version string
- derive(description, endpoint_name, client_name=None, *, sink) -> DerivedInterface
    Build + normalize the interface, generate the endpoint (and client) classes
    and write the JSON manifest through `sink`.
- load_interface(description) -> Interface
    Builder + normalizer only.
- DirectorySink / MemorySink: manifest sinks.
- LocalHost: in-memory execution host for local runs and tests.
"""

from __future__ import annotations

from .codegen.manifest import DirectorySink, MemorySink
from .derive import DerivedInterface, derive
from .errors import AbiDeriveError
from .interface import load_interface
from .runtime.host import LocalHost
from .version import __version__


def version() -> str:
    """Return the abi_derive semantic version string."""
    return __version__


__all__ = [
    "AbiDeriveError",
    "DerivedInterface",
    "DirectorySink",
    "LocalHost",
    "MemorySink",
    "__version__",
    "derive",
    "load_interface",
    "version",
]
