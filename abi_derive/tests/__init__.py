"""
abi_derive.tests package bootstrap.

Shared material for the test modules:

- Hypothesis profiles (dev/ci/fast), selected with HYPOTHESIS_PROFILE, else
  "ci" when CI is set and "dev" locally.
- A Token interface description exercising every declaration shape, well-known
  addresses and the Transfer event topic.
- `TokenImpl`, a plain-Python implementation of that interface.

Usage in tests:
    from abi_derive.tests import TOKEN_DESCRIPTION, TokenImpl, BOB
"""

from __future__ import annotations

import os
from typing import Any, Dict, Tuple

from eth_utils import to_checksum_address
from hypothesis import HealthCheck, settings

from abi_derive.codegen.events import EventEmitter
from abi_derive.runtime.host import LocalHost


settings.register_profile(
    "dev",
    settings(max_examples=100, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        derandomize=True,
        suppress_health_check=(HealthCheck.too_slow,),
    ),
)
settings.register_profile("fast", settings(max_examples=25, deadline=None))
settings.load_profile(
    os.getenv("HYPOTHESIS_PROFILE") or ("ci" if os.getenv("CI") else "dev")
)


OWNER = to_checksum_address("0x" + "11" * 20)
ALICE = to_checksum_address("0x" + "a1" * 20)
BOB = to_checksum_address("0x" + "b0" * 20)
CONTRACT = to_checksum_address("0x" + "c0" * 19 + "01")

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = bytes.fromhex(
    "ddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
)

TOKEN_DESCRIPTION: Dict[str, Any] = {
    "name": "Token",
    "methods": [
        {"name": "constructor", "constructor": True, "inputs": [["supply", "uint256"]]},
        {"name": "totalSupply", "outputs": ["uint256"]},
        {"name": "balanceOf", "inputs": [{"name": "owner", "type": "address"}], "outputs": ["U256"]},
        {
            "name": "transfer",
            "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
            "outputs": ["bool"],
        },
        {"name": "deposit", "payable": True},
        {"name": "echo", "inputs": [["data", "Vec<u8>"]], "outputs": ["bytes"]},
        {"name": "stats", "outputs": ["uint256", "bool"]},
        {
            "name": "Transfer",
            "event": True,
            "inputs": [
                {"name": "from", "type": "address", "indexed": True},
                {"name": "to", "type": "address", "indexed": True},
                {"name": "value", "type": "uint256"},
            ],
        },
    ],
}


class TokenImpl:
    """Minimal token: the whole supply starts with OWNER, who is the only sender."""

    def __init__(self, host: LocalHost, events: EventEmitter) -> None:
        self.host = host
        self.events = events
        self.supply = 0
        self.balances: Dict[str, int] = {}
        self.deposited = 0
        self.constructed = 0

    def constructor(self, supply: int) -> None:
        self.constructed += 1
        self.supply = supply
        self.balances[OWNER] = supply

    def totalSupply(self) -> int:
        return self.supply

    def balanceOf(self, owner: str) -> int:
        return self.balances.get(owner, 0)

    def transfer(self, to: str, amount: int) -> bool:
        if self.balances.get(OWNER, 0) < amount:
            return False
        self.balances[OWNER] -= amount
        self.balances[to] = self.balances.get(to, 0) + amount
        self.events.Transfer(OWNER, to, amount)
        return True

    def deposit(self) -> None:
        self.deposited += self.host.value()

    def echo(self, data: bytes) -> bytes:
        return data

    def stats(self) -> Tuple[int, bool]:
        return self.supply, self.supply > 0


