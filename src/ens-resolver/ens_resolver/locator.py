import logging
from typing import Optional

from .abi import decode_address, encode_resolver_call
from .models import ResolverBinding
from .namehash import namehash, parent_name
from .rpc_client import RpcGateway

logger = logging.getLogger(__name__)


class ResolverLocator:
    """Find the resolver governing a name by querying the ENS registry."""

    def __init__(self, gateway: RpcGateway, registry_address: str) -> None:
        self.gateway = gateway
        self.registry_address = registry_address

    def resolver_at(self, node: str) -> Optional[str]:
        """Resolver registered for exactly this node, or None."""
        result = self.gateway.call(self.registry_address, encode_resolver_call(node))
        return decode_address(result)

    def locate(self, name: str) -> Optional[ResolverBinding]:
        """
        Walk from the name towards its top-level label until a resolver is found.

        The returned binding carries the node the resolver was registered on, which
        is an ancestor's node when the name inherits its parent's resolver.
        """
        current: Optional[str] = name
        while current is not None:
            node = namehash(current)
            resolver = self.resolver_at(node)
            if resolver:
                if current != name:
                    logger.debug("Resolver for %s inherited from %s", name, current)
                return ResolverBinding(resolver=resolver, node=node)
            current = parent_name(current)

        logger.debug("No resolver found for %s", name)
        return None
