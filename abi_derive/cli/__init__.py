"""
abi_derive.cli
--------------

Command-line entrypoints, exposed as console scripts:
  - `abi-derive`  -> abi_derive.cli.derive:main

CLI modules are loaded lazily via `resolve_entrypoint`.
"""

from __future__ import annotations

from importlib import import_module
from typing import Callable, Dict

ENTRYPOINTS: Dict[str, str] = {
    "derive": "abi_derive.cli.derive:main",
}


def resolve_entrypoint(name: str) -> Callable[..., int]:
    """
    Resolve a CLI name to its `main()` callable.

    Raises KeyError for an unknown name, ImportError for a malformed target and
    AttributeError when the target is not callable.
    """
    target = ENTRYPOINTS[name]
    module_path, _, attr = target.partition(":")
    if not module_path or not attr:
        raise ImportError(f"Malformed entrypoint target: {target!r}")
    module = import_module(module_path)
    main_fn = getattr(module, attr)
    if not callable(main_fn):
        raise AttributeError(f"Entrypoint {target!r} is not callable")
    return main_fn


__all__ = ["ENTRYPOINTS", "resolve_entrypoint"]
