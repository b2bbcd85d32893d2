"""
Core cryptographic utilities.

All digests produced here are 64-character uppercase hex strings.
"""
from .hashing import (
    DIGEST_HEX_LENGTH,
    sha256,
    hash_hex,
    hash_leaf,
    hash_internal,
    is_digest,
    normalize_digest,
    to_bytes,
    from_bytes,
)

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
