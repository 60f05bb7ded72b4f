import itertools
import logging
from typing import Any, Dict, List, Optional, Protocol

import requests

logger = logging.getLogger(__name__)


class RpcGateway(Protocol):
    """Anything that can run a read-only contract call and hand back raw result bytes."""

    def call(self, to: str, data: bytes) -> Optional[bytes]:
        ...


class RpcClient:
    """Minimal JSON-RPC 2.0 client for EVM nodes (HTTP POST)."""

    def __init__(
        self,
        rpc_url: str,
        timeout: int = 10,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        url = (rpc_url or "").strip()
        if not url:
            raise ValueError("rpc_url must be a non-empty string.")

        self.rpc_url = url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if headers:
            self.session.headers.update(dict(headers))
        self._ids = itertools.count(1)

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Single JSON-RPC round trip; raises on transport or protocol errors."""
        if not isinstance(method, str) or not method.strip():
            raise ValueError("method must be a non-empty string.")
        if params is None:
            params = []
        if not isinstance(params, list):
            raise ValueError("params must be a list.")

        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        response = self.session.post(
            self.rpc_url,
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Unexpected JSON-RPC response (non-object).")

        error_obj = data.get("error")
        if isinstance(error_obj, dict):
            code = error_obj.get("code")
            message = error_obj.get("message")
            err_data = error_obj.get("data")
            parts: list[str] = []
            if code is not None:
                parts.append(f"code {code}")
            if message:
                parts.append(str(message))
            if err_data:
                parts.append(str(err_data))
            detail = ": ".join(parts) if parts else "unknown error"
            raise ValueError(f"RPC error: {detail}.")

        if "result" not in data:
            raise ValueError("Unexpected JSON-RPC response (missing result).")
        return data.get("result")

    def eth_call(self, to: str, data: bytes) -> Optional[bytes]:
        """
        Run eth_call against the latest block.

        Transport failures, RPC errors, and empty or bare "0x" results all come back
        as None so callers can retry or treat the value as unknown.
        """
        params = [{"to": to, "data": "0x" + data.hex()}, "latest"]
        try:
            result = self.call("eth_call", params)
        except (requests.RequestException, ValueError) as exc:
            logger.debug("eth_call to %s failed: %s", to, exc)
            return None

        if not isinstance(result, str) or result in ("", "0x"):
            return None
        body = result[2:] if result.startswith("0x") else result
        if len(body) % 2 != 0:
            body = "0" + body
        try:
            return bytes.fromhex(body)
        except ValueError:
            logger.debug("eth_call to %s returned non-hex result %r", to, result[:80])
            return None


class EthCallGateway:
    """RpcGateway backed by an RpcClient."""

    def __init__(self, client: RpcClient) -> None:
        self.client = client

    def call(self, to: str, data: bytes) -> Optional[bytes]:
        return self.client.eth_call(to, data)
