"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Canonical encoding API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_encode,
    canonicalize_value,
    dumps_canonical,
    encode_int,
    ensure_utc,
    format_datetime_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ConfigurationException,
    DigestFormatException,
    EmptyInputError,
    ErrorCodes,
    MerkleError,
    MerkleException,
)

# Verification results
from .verification import (
    CheckResult,
    VerificationResult,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_encode",
    "canonicalize_value",
    "dumps_canonical",
    "encode_int",
    "ensure_utc",
    "format_datetime_canonical",
    # Errors
    "CanonicalizationException",
    "ConfigurationException",
    "DigestFormatException",
    "EmptyInputError",
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    # Verification
    "CheckResult",
    "VerificationResult",
]
