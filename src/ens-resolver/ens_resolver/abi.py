"""
Call-frame encoding and result decoding for the ENS registry and resolver methods.

Only four call shapes are supported:
  resolver(bytes32)      -> address
  addr(bytes32)          -> address
  text(bytes32,string)   -> string
  name(bytes32)          -> string

Decoders treat the returned bytes as untrusted: any truncated or inconsistent frame
yields None instead of raising.
"""

import re
from typing import Optional

RESOLVER_SELECTOR = bytes.fromhex("0178b8bf")  # resolver(bytes32)
ADDR_SELECTOR = bytes.fromhex("3b3b57de")  # addr(bytes32)
TEXT_SELECTOR = bytes.fromhex("59d1d43c")  # text(bytes32,string)
NAME_SELECTOR = bytes.fromhex("691f3431")  # name(bytes32)

WORD_SIZE = 32
# Head of text(bytes32,string): node word + offset word.
_TEXT_STRING_OFFSET = 2 * WORD_SIZE

_NODE_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


def _node_bytes(node: str) -> bytes:
    if not isinstance(node, str) or not _NODE_RE.match(node):
        raise ValueError("node must be a 32-byte hex string (64 hex chars, optionally 0x-prefixed).")
    return bytes.fromhex(node[2:] if node.startswith("0x") else node)


def _pad32(b: bytes) -> bytes:
    if len(b) == WORD_SIZE:
        return b
    if len(b) > WORD_SIZE:
        raise ValueError("Encoded value exceeds 32 bytes.")
    return b.rjust(WORD_SIZE, b"\x00")


def _uint_word(value: int) -> bytes:
    return _pad32(value.to_bytes(WORD_SIZE, "big"))


def _encode_dynamic_bytes(data: bytes) -> bytes:
    padded_data = data + b"\x00" * ((WORD_SIZE - (len(data) % WORD_SIZE)) % WORD_SIZE)
    return _uint_word(len(data)) + padded_data


def _read_word(buf: memoryview, offset: int) -> bytes:
    end = offset + WORD_SIZE
    if offset < 0 or end > len(buf):
        raise ValueError("Result shorter than expected for ABI decoding.")
    return bytes(buf[offset:end])


def encode_resolver_call(node: str) -> bytes:
    return RESOLVER_SELECTOR + _node_bytes(node)


def encode_addr_call(node: str) -> bytes:
    return ADDR_SELECTOR + _node_bytes(node)


def encode_name_call(node: str) -> bytes:
    return NAME_SELECTOR + _node_bytes(node)


def encode_text_call(node: str, key: str) -> bytes:
    return (
        TEXT_SELECTOR
        + _node_bytes(node)
        + _uint_word(_TEXT_STRING_OFFSET)
        + _encode_dynamic_bytes(key.encode("utf-8"))
    )


def decode_address(data: Optional[bytes]) -> Optional[str]:
    """Low 20 bytes of the first word as 0x-prefixed lowercase hex; None for zero."""
    if not data or len(data) < WORD_SIZE:
        return None
    word = data[:WORD_SIZE]
    address = word[-20:]
    if not any(address):
        return None
    return "0x" + address.hex()


def decode_dynamic_string(data: Optional[bytes]) -> Optional[str]:
    """Decode an ABI-encoded string return value; None for empty or malformed frames."""
    if not data:
        return None
    buf = memoryview(data)
    try:
        offset = int.from_bytes(_read_word(buf, 0), "big")
        length = int.from_bytes(_read_word(buf, offset), "big")
        if length == 0:
            return None
        start = offset + WORD_SIZE
        end = start + length
        if end > len(buf):
            return None
        return bytes(buf[start:end]).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None
