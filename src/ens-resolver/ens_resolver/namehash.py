"""
Name normalization and EIP-137 namehash.
"""

import re
from typing import Optional

import idna
from Crypto.Hash import keccak

ZERO_NODE = "0x" + "00" * 32
REVERSE_SUFFIX = "addr.reverse"

_HEX_ADDRESS_RE = re.compile(r"^[0-9a-f]{40}$")


def keccak256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()


def normalize(name: str) -> str:
    """
    Canonicalize a user supplied name: trim, drop one trailing dot, lowercase and
    convert to its IDNA ASCII form when possible.

    Names IDNA rejects (emoji, underscores, over-long labels) keep their
    lowercased form.
    """
    candidate = (name or "").strip()
    if candidate.endswith("."):
        candidate = candidate[:-1]
    candidate = candidate.lower()
    if not candidate:
        return ""

    try:
        return idna.encode(candidate, uts46=True).decode("ascii").lower()
    except (UnicodeError, ValueError):
        return candidate


def namehash(name: str) -> str:
    """Compute the 0x-prefixed node for an already normalized name."""
    node = b"\x00" * 32
    if name:
        for label in reversed(name.split(".")):
            node = keccak256(node + keccak256(label.encode("utf-8")))
    return "0x" + node.hex()


def parent_name(name: str) -> Optional[str]:
    """Drop the leftmost label; None when the name has no parent."""
    dot = name.find(".")
    if dot == -1:
        return None
    parent = name[dot + 1 :]
    return parent or None


def canonical_address_hex(address: str) -> str:
    """Lowercase 40 hex chars, without prefix."""
    if not isinstance(address, str):
        raise ValueError("Address must be a string.")
    candidate = address.strip().lower()
    if candidate.startswith("0x"):
        candidate = candidate[2:]
    if not _HEX_ADDRESS_RE.match(candidate):
        raise ValueError("Invalid address format. Expected 40 hex characters, optionally 0x-prefixed.")
    return candidate


def reverse_name(address: str) -> str:
    return f"{canonical_address_hex(address)}.{REVERSE_SUFFIX}"
