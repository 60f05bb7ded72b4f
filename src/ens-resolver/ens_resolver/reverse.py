import logging
from typing import List, Optional

from .abi import decode_dynamic_string, encode_name_call
from .locator import ResolverLocator
from .namehash import namehash, normalize, reverse_name
from .rpc_client import RpcGateway

logger = logging.getLogger(__name__)


class ReverseResolver:
    """Resolve an address to its primary name through <addr>.addr.reverse."""

    def __init__(
        self,
        gateway: RpcGateway,
        locator: ResolverLocator,
        default_reverse_resolver: str,
    ) -> None:
        self.gateway = gateway
        self.locator = locator
        self.default_reverse_resolver = default_reverse_resolver.lower()

    def candidate_resolvers(self, node: str) -> List[str]:
        """Resolver registered for the reverse node first, then the default reverse resolver."""
        candidates: List[str] = []
        located = self.locator.resolver_at(node)
        if located:
            candidates.append(located.lower())
        if self.default_reverse_resolver not in candidates:
            candidates.append(self.default_reverse_resolver)
        return candidates

    def reverse_lookup(self, address: str) -> Optional[str]:
        """
        Return the normalized primary name for an address, or None.

        Raises ValueError when the address is not 40 hex characters.
        """
        node = namehash(reverse_name(address))
        data = encode_name_call(node)

        for resolver in self.candidate_resolvers(node):
            decoded = decode_dynamic_string(self.gateway.call(resolver, data))
            if decoded:
                return normalize(decoded)
            logger.debug("No primary name for %s on resolver %s", address, resolver)
        return None
