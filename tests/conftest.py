"""
Shared fixtures: an in-memory ENS registry/resolver gateway and a service wired to it.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from ens_resolver.abi import ADDR_SELECTOR, NAME_SELECTOR, RESOLVER_SELECTOR, TEXT_SELECTOR
from ens_resolver.config import DEFAULT_REGISTRY_ADDRESS, Config
from ens_resolver.namehash import namehash, reverse_name
from ens_resolver.retry import RetryPolicy
from ens_resolver.service import EnsService

RESOLVER_A = "0x" + "a1" * 20
RESOLVER_B = "0x" + "b2" * 20
ALICE_ADDRESS = "0x" + "11" * 20
BOB_ADDRESS = "0x" + "22" * 20


def address_word(address: Optional[str]) -> bytes:
    if not address:
        return b"\x00" * 32
    return b"\x00" * 12 + bytes.fromhex(address[2:])


def string_result(value: str) -> bytes:
    """ABI-encode a single string return value."""
    data = value.encode("utf-8")
    padding = b"\x00" * ((32 - len(data) % 32) % 32)
    return (32).to_bytes(32, "big") + len(data).to_bytes(32, "big") + data + padding


class FakeEns:
    """Answers registry and resolver calls the way the deployed contracts do."""

    def __init__(self, registry: str = DEFAULT_REGISTRY_ADDRESS) -> None:
        self.registry = registry.lower()
        self.resolvers: Dict[str, str] = {}
        self.addresses: Dict[Tuple[str, str], str] = {}
        self.texts: Dict[Tuple[str, str, str], str] = {}
        self.names: Dict[Tuple[str, str], str] = {}
        self.calls: List[Tuple[str, bytes]] = []

    def set_resolver(self, name: str, resolver: str) -> None:
        self.resolvers[namehash(name)] = resolver.lower()

    def set_address(self, name: str, resolver: str, address: str) -> None:
        self.addresses[(resolver.lower(), namehash(name))] = address.lower()

    def set_text(self, name: str, resolver: str, key: str, value: str) -> None:
        self.texts[(resolver.lower(), namehash(name), key)] = value

    def set_primary_name(self, address: str, resolver: str, name: str) -> None:
        self.names[(resolver.lower(), namehash(reverse_name(address)))] = name

    def calls_with(self, selector: bytes, to: Optional[str] = None) -> List[Tuple[str, bytes]]:
        return [
            (target, data)
            for target, data in self.calls
            if data[:4] == selector and (to is None or target == to.lower())
        ]

    def call(self, to: str, data: bytes) -> Optional[bytes]:
        to = to.lower()
        self.calls.append((to, data))
        selector = data[:4]
        node = "0x" + data[4:36].hex()

        if to == self.registry:
            if selector != RESOLVER_SELECTOR:
                return None
            return address_word(self.resolvers.get(node))
        if selector == ADDR_SELECTOR:
            return address_word(self.addresses.get((to, node)))
        if selector == TEXT_SELECTOR:
            length = int.from_bytes(data[68:100], "big")
            key = data[100 : 100 + length].decode("utf-8")
            return string_result(self.texts.get((to, node, key), ""))
        if selector == NAME_SELECTOR:
            return string_result(self.names.get((to, node), ""))
        return None


class FlakyGateway:
    """Returns no data for the first `failures` calls, then delegates."""

    def __init__(self, inner, failures: int) -> None:
        self.inner = inner
        self.failures = failures
        self.attempts = 0

    def call(self, to: str, data: bytes) -> Optional[bytes]:
        self.attempts += 1
        if self.attempts <= self.failures:
            return None
        return self.inner.call(to, data)


@pytest.fixture
def fake_ens() -> FakeEns:
    return FakeEns()


@pytest.fixture
def config() -> Config:
    return Config(rpc_url="http://localhost:8545")


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def retry_policy(sleeps: List[float]) -> RetryPolicy:
    return RetryPolicy(max_attempts=3, sleep=sleeps.append, rand=lambda _a, _b: 0.0)


@pytest.fixture
def service(config: Config, fake_ens: FakeEns, retry_policy: RetryPolicy) -> EnsService:
    return EnsService(config, gateway=fake_ens, retry_policy=retry_policy)

