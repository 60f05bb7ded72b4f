from typing import Optional

from .abi import decode_address, decode_dynamic_string, encode_addr_call, encode_text_call
from .rpc_client import RpcGateway


class RecordReader:
    """Read address and text records from a resolver contract."""

    def __init__(self, gateway: RpcGateway) -> None:
        self.gateway = gateway

    def get_address(self, resolver: str, node: str) -> Optional[str]:
        result = self.gateway.call(resolver, encode_addr_call(node))
        return decode_address(result)

    def get_text(self, resolver: str, node: str, key: str) -> Optional[str]:
        result = self.gateway.call(resolver, encode_text_call(node, key))
        value = decode_dynamic_string(result)
        return value or None
