#!/usr/bin/env python3
"""
abi-derive

Generate the ABI manifest for an interface description and check that its
endpoint (and optionally client) classes can be built.

Usage:
  python -m abi_derive.cli.derive path/to/Token.json
  # or, if installed as a console script:
  abi-derive path/to/Token.json --target-dir build

Options:
  --target-dir DIR     Build directory; the manifest lands in DIR/json/<Name>.json
                       (default: $ABI_DERIVE_TARGET_DIR or ./target).
  --endpoint NAME      Endpoint class name (default: <Name>Endpoint).
  --client NAME        Also build a client class with this name.
  --stdout             Print the manifest to stdout instead of writing it.
  --no-validate        Skip JSON-Schema validation of the manifest.
  --quiet              Suppress informational stderr logs.

Exit codes: 0 on success, 2 when the description or the manifest is rejected.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict

from ..codegen.manifest import DirectorySink, MemorySink
from ..config import load_config
from ..derive import derive
from ..errors import AbiDeriveError, DescriptionError
from ..interface import build_interface
from ..version import __version__

log = logging.getLogger("abi_derive.cli")

_CTX: Dict[str, Any] = {}


def eprint(*a: Any, **k: Any) -> None:
    if not _CTX.get("quiet", False):
        print(*a, file=sys.stderr, **k)


def _setup_logging(level: str, quiet: bool) -> None:
    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=logging.WARNING if quiet else getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_description(path: str) -> str:
    try:
        if path == "-":
            return sys.stdin.read()
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise DescriptionError(f"cannot read description {path}: {e}", context={"path": path}) from e


def parse_args(argv: list[str]) -> argparse.Namespace:
    cfg = load_config()
    p = argparse.ArgumentParser(
        prog="abi-derive",
        description="Generate ABI endpoint/client classes and the JSON manifest for an interface.",
    )
    p.add_argument("description", help="Path to the interface description JSON (use '-' for stdin)")
    p.add_argument(
        "--target-dir",
        default=os.fspath(cfg.target_dir),
        help="Build directory for json/<Name>.json (default: %(default)s)",
    )
    p.add_argument("--endpoint", help="Endpoint class name (default: <Name>Endpoint)")
    p.add_argument("--client", help="Also build a client class with this name")
    p.add_argument("--stdout", action="store_true", help="Print the manifest instead of writing it")
    p.add_argument(
        "--no-validate",
        dest="validate",
        action="store_false",
        default=cfg.validate_manifest,
        help="Skip JSON-Schema validation of the manifest",
    )
    p.add_argument("--quiet", action="store_true", help="Silence informational logs on stderr")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    _CTX["quiet"] = bool(args.quiet)
    _setup_logging(load_config().log_level, args.quiet)

    try:
        text = _read_description(args.description)
        memory = MemorySink() if args.stdout else None
        sink = memory if memory is not None else DirectorySink(args.target_dir)
        endpoint_name = args.endpoint
        if endpoint_name is None:
            endpoint_name = f"{build_interface(text).name}Endpoint"
        derived = derive(text, endpoint_name, args.client, sink=sink, validate=args.validate)
    except AbiDeriveError as e:
        eprint(f"[abi-derive] error: {e.code}: {e.message}")
        return 2

    name = derived.interface.name
    if memory is not None:
        sys.stdout.write(memory.documents[name])
    else:
        eprint(f"[abi-derive] wrote manifest → {derived.manifest_path}")
    eprint(
        f"[abi-derive] {name}: {len(derived.endpoint.routes)} routes, "
        f"{len(derived.interface.events())} events, endpoint={derived.endpoint.__name__}"
        + (f", client={derived.client.__name__}" if derived.client is not None else "")
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
