"""
Schemas & Canonicalization
File: errors.py

Purpose: Error taxonomy for tree construction, canonical encoding and
digest handling. Defines both Pydantic models for structured error
communication and Python exceptions for control flow.

Absent proofs and failed verifications are NOT errors: `MerkleTree.proof()`
returns None and `verify()` returns False. The codes below still name them
so that callers reporting outcomes (e.g. the CLI) use stable identifiers.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction
    EMPTY_INPUT = "EMPTY_INPUT"

    # Encoding
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    DIGEST_FORMAT_ERROR = "DIGEST_FORMAT_ERROR"

    # Proof outcomes
    PROOF_NOT_FOUND = "PROOF_NOT_FOUND"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"

    # Runtime
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Error model for structured error reporting.

    Used where an error has to be reported as data (e.g. the CLI's JSON
    output) rather than raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raisable exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all hashtree errors.

    Carries structured error information and can be converted to a
    MerkleError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(MerkleException, ValueError):
    """Raised when a tree is requested over zero items."""

    def __init__(
        self,
        message: str = "Cannot build a Merkle tree from an empty item sequence",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
        )


class CanonicalizationException(MerkleException):
    """Exception raised when an item cannot be canonically encoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class DigestFormatException(MerkleException, ValueError):
    """Exception raised when a value is not a well-formed 256-bit hex digest."""

    def __init__(
        self,
        message: str,
        value: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if value is not None:
            full_details["value"] = value
        super().__init__(
            message=message,
            code=ErrorCodes.DIGEST_FORMAT_ERROR,
            details=full_details,
        )


class ConfigurationException(MerkleException):
    """Exception raised when runtime configuration values are invalid."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=full_details,
        )
