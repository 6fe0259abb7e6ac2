from __future__ import annotations

import os

import pytest

from abi_derive.codegen.events import EventEmitter
from abi_derive.config import load_config
from abi_derive.interface import Interface, load_interface
from abi_derive.runtime.host import LocalHost
from abi_derive.tests import TOKEN_DESCRIPTION, TokenImpl


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    """Drop ABI_DERIVE_* variables and the cached config around every test."""
    for key in list(os.environ):
        if key.startswith("ABI_DERIVE_"):
            monkeypatch.delenv(key, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture
def token_interface() -> Interface:
    return load_interface(TOKEN_DESCRIPTION)


@pytest.fixture
def host() -> LocalHost:
    return LocalHost()


@pytest.fixture
def token_impl(host: LocalHost, token_interface: Interface) -> TokenImpl:
    return TokenImpl(host, EventEmitter(token_interface, host))
