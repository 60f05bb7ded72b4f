import os
import re
from dataclasses import dataclass
from typing import Optional

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")

# Canonical ENS deployments on Ethereum mainnet.
DEFAULT_REGISTRY_ADDRESS = "0x00000000000c2e074ec69a0dfb2997ba6c7d2e1e"
DEFAULT_REVERSE_RESOLVER = "0x084b1c3c81545d370f3634392de611caabff8148"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    rpc_url: str
    request_timeout: int = 10
    max_retries: int = 3
    backoff_seconds: float = 0.1
    backoff_max_seconds: float = 2.0
    jitter_seconds: float = 0.15
    registry_address: str = DEFAULT_REGISTRY_ADDRESS
    default_reverse_resolver: str = DEFAULT_REVERSE_RESOLVER
    # When False, address records are read from the exact query node only.
    address_fallback: bool = True
    log_level: str = "WARNING"


def normalize_contract_address(value: str, field: str) -> str:
    """Validate a 0x-prefixed contract address and return it lowercased."""
    candidate = (value or "").strip()
    if not ADDRESS_PATTERN.match(candidate):
        raise ValueError(f"{field} must be a 0x-prefixed 40 hex character address, got '{value}'.")
    return candidate.lower()


def _parse_bool(raw: Optional[str], field: str, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{field} must be a boolean (true/false), got '{raw}'.")


def load_config() -> Config:
    """Load configuration from environment variables."""
    rpc_url = (os.getenv("ETH_RPC_URL") or "").strip()
    if not rpc_url:
        raise ValueError("ETH_RPC_URL is required but not set.")

    timeout = int(os.getenv("REQUEST_TIMEOUT", "10"))
    max_retries = int(os.getenv("REQUEST_RETRIES", "3"))
    backoff = float(os.getenv("REQUEST_BACKOFF_SECONDS", "0.1"))
    backoff_max = float(os.getenv("REQUEST_BACKOFF_MAX_SECONDS", "2.0"))
    jitter = float(os.getenv("REQUEST_JITTER_SECONDS", "0.15"))
    if max_retries < 1:
        raise ValueError("REQUEST_RETRIES must be at least 1.")

    registry = normalize_contract_address(
        os.getenv("ENS_REGISTRY_ADDRESS", DEFAULT_REGISTRY_ADDRESS), "ENS_REGISTRY_ADDRESS"
    )
    reverse_resolver = normalize_contract_address(
        os.getenv("ENS_DEFAULT_REVERSE_RESOLVER", DEFAULT_REVERSE_RESOLVER),
        "ENS_DEFAULT_REVERSE_RESOLVER",
    )
    address_fallback = _parse_bool(os.getenv("ENS_ADDRESS_FALLBACK"), "ENS_ADDRESS_FALLBACK", True)
    log_level = os.getenv("LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

    return Config(
        rpc_url=rpc_url.rstrip("/"),
        request_timeout=timeout,
        max_retries=max_retries,
        backoff_seconds=backoff,
        backoff_max_seconds=backoff_max,
        jitter_seconds=jitter,
        registry_address=registry,
        default_reverse_resolver=reverse_resolver,
        address_fallback=address_fallback,
        log_level=log_level,
    )
