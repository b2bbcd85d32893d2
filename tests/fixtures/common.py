"""
Common test fixtures shared by all modules.

Provides:
- item sequence factories
- bit flipping for tamper tests
- an independent hashlib rendition of the hashing rules, so tests do not
  check the library against itself
"""

import hashlib
from typing import Any


def make_items(count: int, kind: str = "int") -> list[Any]:
    """
    Create `count` distinct items.

    Args:
        count: Number of items
        kind: "int" (0..count-1), "str" ("item-0", ...), "bytes" or "dict"
    """
    if kind == "int":
        return list(range(count))
    if kind == "str":
        return [f"item-{i}" for i in range(count)]
    if kind == "bytes":
        return [f"payload-{i}".encode() for i in range(count)]
    if kind == "dict":
        return [{"id": i, "name": f"record-{i}"} for i in range(count)]
    raise ValueError(f"Unknown item kind: {kind}")


def flip_bit(digest: str, bit: int) -> str:
    """Return digest with one bit of its 256-bit value inverted."""
    raw = bytearray(bytes.fromhex(digest))
    raw[bit // 8] ^= 1 << (bit % 8)
    return raw.hex().upper()


def reference_leaf_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest().upper()


def reference_internal_hash(a: str, b: str) -> str:
    first, second = sorted([a, b])
    return hashlib.sha256((first + second).encode("ascii")).hexdigest().upper()
