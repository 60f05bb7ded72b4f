"""
MCP server exposing ENS name, profile, and reverse resolution.
"""

import argparse
import logging
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from .config import load_config
from .service import EnsService

server = FastMCP(
    name="ens-resolver",
    instructions="Resolve ENS names to addresses and profile records, and addresses to primary names.",
)

_service: Optional[EnsService] = None


def _get_service() -> EnsService:
    global _service
    if _service is None:
        cfg = load_config()
        logging.basicConfig(level=cfg.log_level)
        _service = EnsService(cfg)
    return _service


def _normalize_keys(records: Optional[List[str]]) -> Optional[List[str]]:
    if records is None:
        return None
    if isinstance(records, str):
        raise ValueError("records must be an array of text record keys (e.g. ['avatar', 'url']); got a string.")
    return list(records)


@server.tool(
    name="resolve",
    title="Resolve ENS Profile",
    description="Resolve a profile from an ENS name or an address (reverse lookup first). `records` limits the text keys fetched.",
)
def resolve(target: str, records: Optional[List[str]] = None) -> dict:
    svc = _get_service()
    return svc.resolve(target, _normalize_keys(records)).to_dict()


@server.tool(
    name="resolve_profile",
    title="Resolve ENS Name Profile",
    description="Resolve address and text records for an ENS name.",
)
def resolve_profile(name: str, records: Optional[List[str]] = None) -> dict:
    svc = _get_service()
    return svc.resolve_profile(name, _normalize_keys(records)).to_dict()


@server.tool(
    name="reverse_lookup",
    title="Reverse Lookup",
    description="Return the primary ENS name of an address (no forward verification).",
)
def reverse_lookup(address: str) -> dict:
    svc = _get_service()
    return {"address": address, "name": svc.reverse_lookup(address)}


@server.tool(
    name="resolve_address",
    title="Resolve ETH Address",
    description="Resolve the ETH address record of an ENS name, honouring inherited resolvers.",
)
def resolve_address(name: str) -> dict:
    svc = _get_service()
    return {"name": name, "address": svc.resolve_address(name)}


@server.tool(
    name="resolve_avatar",
    title="Resolve Avatar",
    description="Resolve the avatar record of an ENS name, optionally falling back to the immediate parent.",
)
def resolve_avatar(name: str, parent_fallback: bool = True) -> dict:
    svc = _get_service()
    return {"name": name, "avatar": svc.resolve_avatar(name, parent_fallback)}


@server.tool(
    name="resolve_records",
    title="Resolve Text Records",
    description="Fetch text records of an ENS name. `keys` must be an array of record keys.",
)
def resolve_records(name: str, keys: List[str]) -> dict:
    svc = _get_service()
    return {"name": name, "records": svc.resolve_records(name, _normalize_keys(keys) or [])}


@server.tool(
    name="get_resolver",
    title="Get Resolver",
    description="Return the resolver registered on the exact node of an ENS name.",
)
def get_resolver(name: str) -> dict:
    svc = _get_service()
    return {"name": name, "resolver": svc.resolver_for_name(name)}


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the ENS resolver MCP server.")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Transport protocol for MCP.",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--mount-path",
        default="/",
        help="Mount path for SSE transport (only when transport=sse).",
    )
    args = parser.parse_args()

    server.settings.host = args.host
    server.settings.port = args.port

    if args.transport == "sse":
        server.run(transport="sse", mount_path=args.mount_path)
    else:
        server.run(transport=args.transport)


if __name__ == "__main__":
    main()
