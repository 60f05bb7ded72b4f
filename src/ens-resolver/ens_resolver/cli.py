import argparse
import json
import logging
import sys
from typing import Optional

from .config import load_config
from .service import EnsService


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve ENS names, profiles, and primary names over an Ethereum JSON-RPC endpoint.",
        allow_abbrev=False,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    profile_parser = subparsers.add_parser("profile", help="Resolve a name's address and text records")
    profile_parser.add_argument("name", help="ENS name, e.g. vitalik.eth.")
    profile_parser.add_argument(
        "--record",
        action="append",
        dest="records",
        help="Text record key to fetch (repeatable). Defaults to avatar, url, email, description, twitter, github.",
    )

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a profile from a name or an address")
    resolve_parser.add_argument("target", help="ENS name or 0x-prefixed address.")
    resolve_parser.add_argument(
        "--record",
        action="append",
        dest="records",
        help="Text record key to fetch (repeatable).",
    )

    reverse_parser = subparsers.add_parser("reverse", help="Look up the primary name of an address")
    reverse_parser.add_argument("address", help="Address (40 hex chars, 0x prefix optional).")

    address_parser = subparsers.add_parser("address", help="Resolve the ETH address of a name")
    address_parser.add_argument("name", help="ENS name.")

    avatar_parser = subparsers.add_parser("avatar", help="Resolve the avatar record of a name")
    avatar_parser.add_argument("name", help="ENS name.")
    avatar_parser.add_argument(
        "--no-parent-fallback",
        action="store_true",
        help="Do not fall back to the parent name's avatar.",
    )

    record_parser = subparsers.add_parser("record", help="Fetch one or more text records of a name")
    record_parser.add_argument("name", help="ENS name.")
    record_parser.add_argument("keys", nargs="+", help="Text record keys.")

    resolver_parser = subparsers.add_parser("resolver", help="Show the resolver registered for a name")
    resolver_parser.add_argument("name", help="ENS name.")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config()
        logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
        service = EnsService(config)

        if args.command == "profile":
            result = service.resolve_profile(args.name, args.records).to_dict()
        elif args.command == "resolve":
            result = service.resolve(args.target, args.records).to_dict()
        elif args.command == "reverse":
            result = {"address": args.address, "name": service.reverse_lookup(args.address)}
        elif args.command == "address":
            result = {"name": args.name, "address": service.resolve_address(args.name)}
        elif args.command == "avatar":
            result = {
                "name": args.name,
                "avatar": service.resolve_avatar(args.name, parent_fallback=not args.no_parent_fallback),
            }
        elif args.command == "record":
            result = {"name": args.name, "records": service.resolve_records(args.name, args.keys)}
        elif args.command == "resolver":
            result = {"name": args.name, "resolver": service.resolver_for_name(args.name)}
        else:
            parser.error(f"Unknown command {args.command}")
            return
        print(json.dumps(result, indent=2))
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
