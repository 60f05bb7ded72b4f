from typing import Dict, Optional, Sequence, Union

from .locator import ResolverLocator
from .models import AVATAR_KEY, ResolverBinding
from .namehash import namehash, parent_name
from .records import RecordReader


class BoundResolver:
    """
    Record view for one name and the resolver binding found for it.

    Lookups try the name's own node first and then the node the resolver was found
    on, so wildcard resolvers registered on a parent still answer for subdomains.
    """

    def __init__(
        self,
        name: str,
        binding: ResolverBinding,
        reader: RecordReader,
        locator: ResolverLocator,
        address_fallback: bool = True,
    ) -> None:
        self.name = name
        self.binding = binding
        self.query_node = namehash(name)
        self._reader = reader
        self._locator = locator
        self._address_fallback = address_fallback

    @property
    def resolver(self) -> str:
        return self.binding.resolver

    @property
    def inherited(self) -> bool:
        return self.binding.node != self.query_node

    def address(self) -> Optional[str]:
        addr = self._reader.get_address(self.resolver, self.query_node)
        if addr is None and self._address_fallback and self.inherited:
            addr = self._reader.get_address(self.resolver, self.binding.node)
        return addr

    def text(self, key: str) -> Optional[str]:
        value = self._reader.get_text(self.resolver, self.query_node, key)
        if value is None and self.inherited:
            value = self._reader.get_text(self.resolver, self.binding.node, key)
        return value

    def first_text(self, keys: Sequence[str]) -> Optional[str]:
        for key in keys:
            if not isinstance(key, str) or not key:
                continue
            value = self.text(key)
            if value is not None:
                return value
        return None

    def avatar(self, parent_fallback: bool = True) -> Optional[str]:
        """
        Avatar on the name's own node, else on the immediate parent through the
        parent's own resolver. Never looks further up than one label.
        """
        value = self._reader.get_text(self.resolver, self.query_node, AVATAR_KEY)
        if value is not None or not parent_fallback:
            return value

        parent = parent_name(self.name)
        if parent is None:
            return None
        parent_node = namehash(parent)
        parent_resolver = self._locator.resolver_at(parent_node)
        if parent_resolver is None:
            return None
        return self._reader.get_text(parent_resolver, parent_node, AVATAR_KEY)

    def record(self, key: Union[str, Sequence[str]]) -> Optional[str]:
        if not isinstance(key, str):
            return self.first_text(key)
        if key.lower() == AVATAR_KEY:
            return self.avatar()
        return self.text(key)

    def records(self, keys: Sequence[str]) -> Dict[str, Optional[str]]:
        return {key: self.record(key) for key in keys}
