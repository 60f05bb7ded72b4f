import logging
from typing import Dict, Optional, Sequence, Union

from .config import Config
from .hydrator import ProfileHydrator
from .locator import ResolverLocator
from .models import DEFAULT_RECORDS, Profile, ResolutionResult, ResolutionStatus
from .namehash import canonical_address_hex, namehash, normalize
from .records import RecordReader
from .resolver import BoundResolver
from .retry import RetryPolicy
from .reverse import ReverseResolver
from .rpc_client import EthCallGateway, RpcClient, RpcGateway

logger = logging.getLogger(__name__)


class EnsService:
    """Combine configuration, gateway, and retry policy to serve ENS lookups."""

    def __init__(
        self,
        config: Config,
        gateway: Optional[RpcGateway] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self.config = config
        if gateway is None:
            gateway = EthCallGateway(RpcClient(config.rpc_url, timeout=config.request_timeout))
        policy = retry_policy or RetryPolicy.from_config(config)
        self.gateway = policy.wrap(gateway)

        self.locator = ResolverLocator(self.gateway, config.registry_address)
        self.reader = RecordReader(self.gateway)
        self.reverse = ReverseResolver(self.gateway, self.locator, config.default_reverse_resolver)
        self.hydrator = ProfileHydrator(
            self.locator,
            self.reader,
            address_fallback=config.address_fallback,
        )

    def resolve(
        self,
        address_or_name: str,
        records: Optional[Sequence[str]] = None,
    ) -> ResolutionResult:
        """
        Resolve a profile from either a name or an address.

        Addresses never contain a dot, so anything with one is treated as a name.
        An address is reverse resolved first and its primary name then hydrated.
        """
        keys = DEFAULT_RECORDS if records is None else records
        if "." in address_or_name:
            return self.resolve_profile(address_or_name, keys)

        profile = Profile(address="0x" + canonical_address_hex(address_or_name))
        try:
            name = self.reverse.reverse_lookup(profile.address)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Reverse lookup of %s failed", profile.address)
            return ResolutionResult(profile, ResolutionStatus.NOT_FOUND, cause=exc)

        if not name:
            return ResolutionResult(profile, ResolutionStatus.NOT_FOUND)
        result = self.hydrator.hydrate(name, keys, profile=profile)
        if result.status is ResolutionStatus.NOT_FOUND and result.cause is None:
            # The primary name alone is a successful reverse resolution.
            result.status = ResolutionStatus.RESOLVED
        return result

    def resolve_profile(
        self,
        name: str,
        records: Optional[Sequence[str]] = None,
    ) -> ResolutionResult:
        keys = DEFAULT_RECORDS if records is None else records
        return self.hydrator.hydrate(normalize(name), keys)

    def reverse_lookup(self, address: str) -> Optional[str]:
        return self.reverse.reverse_lookup(address)

    def resolver_for_name(self, name: str) -> Optional[str]:
        """Resolver registered on the name's own node; parents are not consulted."""
        return self.locator.resolver_at(namehash(normalize(name)))

    def bind(self, name: str) -> Optional[BoundResolver]:
        return self.hydrator.bind(normalize(name))

    def resolve_address(self, name: str) -> Optional[str]:
        bound = self.bind(name)
        return bound.address() if bound else None

    def resolve_avatar(self, name: str, parent_fallback: bool = True) -> Optional[str]:
        bound = self.bind(name)
        return bound.avatar(parent_fallback) if bound else None

    def resolve_record(self, name: str, key: Union[str, Sequence[str]]) -> Optional[str]:
        bound = self.bind(name)
        return bound.record(key) if bound else None

    def resolve_records(self, name: str, keys: Sequence[str]) -> Optional[Dict[str, Optional[str]]]:
        bound = self.bind(name)
        return bound.records(keys) if bound else None
