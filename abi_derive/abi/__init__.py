"""
abi_derive.abi
==============

Type references for interface descriptions and the word-stream adapters
(`Stream` / `Sink`) through which generated endpoints and clients reach the
contract ABI codec.
"""

from __future__ import annotations

from .stream import *  # noqa: F401,F403
from .types import *  # noqa: F401,F403

from .stream import __all__ as _all_stream
from .types import __all__ as _all_types

__all__ = tuple(dict.fromkeys((*_all_types, *_all_stream)))
