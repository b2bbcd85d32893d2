"""
Hashing Utilities
Leaf and internal-node hashing for the Merkle tree.

This module provides:
- SHA-256 hashing for raw bytes
- Digest representation: 64-char uppercase hex string
- Leaf hashing over the canonical encoding of an item
- Order-independent internal-node hashing

Canonical Hashing Rules:
1. Leaf hashing:     leaf = HEX(sha256(canonical_encode(item)))
2. Internal hashing: node = HEX(sha256(min(a, b) + max(a, b)))
   where a and b are hex digests and the concatenation is of their
   ASCII text. Sorting makes the result independent of child order, so
   proofs never need left/right markers.

Security/Determinism Notes:
- Digests are always uppercase; string comparison is then the same total
  order as comparing the raw digest bytes.
- All operations are pure and deterministic.
"""
from __future__ import annotations

import hashlib
import string
from typing import Any

from hashtree.schemas.canonical import canonical_encode
from hashtree.schemas.errors import DigestFormatException


# Width of a SHA-256 digest in hex characters
DIGEST_HEX_LENGTH: int = 64

_HEX_DIGITS = frozenset(string.hexdigits)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_hex(data: bytes) -> str:
    """
    SHA-256 of raw bytes as a digest string (uppercase hex).

    Example:
        >>> hash_hex(b"hello")[:8]
        '2CF24DBA'
    """
    return hashlib.sha256(data).hexdigest().upper()


def hash_leaf(item: Any) -> str:
    """
    Hash a tree item into its leaf digest.

    Args:
        item: Any canonically encodable value (see
              hashtree.schemas.canonical.canonical_encode)

    Returns:
        64-char uppercase hex digest

    Raises:
        CanonicalizationException: If the item cannot be encoded
    """
    return hash_hex(canonical_encode(item))


def hash_internal(a: str, b: str) -> str:
    """
    Hash two child digests into their parent digest.

    The pair is sorted before concatenation, so
    ``hash_internal(a, b) == hash_internal(b, a)``.

    Args:
        a: Digest of one child
        b: Digest of the other child

    Returns:
        64-char uppercase hex digest
    """
    if a > b:
        a, b = b, a
    return hash_hex((a + b).encode("ascii"))


def is_digest(value: Any) -> bool:
    """Check whether value is a canonical digest (64 uppercase hex chars)."""
    return (
        isinstance(value, str)
        and len(value) == DIGEST_HEX_LENGTH
        and value == value.upper()
        and all(c in _HEX_DIGITS for c in value)
    )


def normalize_digest(value: str) -> str:
    """
    Convert a user-supplied hex digest to canonical form.

    Accepts either case and an optional 0x prefix.

    Raises:
        DigestFormatException: If value is not a 256-bit hex string
    """
    if not isinstance(value, str):
        raise DigestFormatException(
            f"Digest must be a string, got {type(value).__name__}"
        )

    hex_content = value.strip()
    if hex_content[:2] in ("0x", "0X"):
        hex_content = hex_content[2:]

    if len(hex_content) != DIGEST_HEX_LENGTH:
        raise DigestFormatException(
            f"Digest must be {DIGEST_HEX_LENGTH} hex characters, got {len(hex_content)}",
            value=value,
        )

    if not all(c in _HEX_DIGITS for c in hex_content):
        raise DigestFormatException(
            "Digest contains non-hexadecimal characters",
            value=value,
        )

    return hex_content.upper()


def to_bytes(digest: str) -> bytes:
    """Raw 32 bytes of a digest string."""
    return bytes.fromhex(normalize_digest(digest))


def from_bytes(data: bytes) -> str:
    """
    Digest string for 32 raw digest bytes.

    Raises:
        DigestFormatException: If data is not 32 bytes long
    """
    if len(data) * 2 != DIGEST_HEX_LENGTH:
        raise DigestFormatException(
            f"Digest must be {DIGEST_HEX_LENGTH // 2} bytes, got {len(data)}"
        )
    return data.hex().upper()


__all__ = [
    "DIGEST_HEX_LENGTH",
    "sha256",
    "hash_hex",
    "hash_leaf",
    "hash_internal",
    "is_digest",
    "normalize_digest",
    "to_bytes",
    "from_bytes",
]
