"""
Schemas & Canonicalization
File: verification.py

Purpose: Structured result format for proof verification.

`verify()` itself only answers yes/no. These models are for callers that
also want to know which check failed (the CLI, audit tooling).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import MerkleError


CheckSeverity = Literal["info", "error"]


class CheckResult(BaseModel):
    """Result of a single verification check."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Unique identifier for this check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the check passed",
    )
    severity: CheckSeverity = Field(
        ...,
        description="Severity level of this check",
    )
    message: str = Field(
        ...,
        description="Human-readable message describing the result",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional details about the check",
    )

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a passed check result."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            details=details or {},
        )

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            details=details or {},
        )


class VerificationResult(BaseModel):
    """
    Complete result of verifying one proof against one root.

    `ok` is True only when every check passed.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(
        ...,
        description="Overall verification success",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Individual check results",
    )
    recomputed_root: str | None = Field(
        default=None,
        description="Root hash recomputed from the proof, if the proof was well-formed",
    )
    error: MerkleError | None = Field(
        default=None,
        description="Error details when verification did not succeed",
    )

    @property
    def error_count(self) -> int:
        """Count of failed checks."""
        return sum(1 for check in self.checks if not check.ok)

    def get_failed_checks(self) -> list[CheckResult]:
        """Get all failed checks."""
        return [check for check in self.checks if not check.ok]

    def get_error_messages(self) -> list[str]:
        """Get all error messages."""
        return [check.message for check in self.checks if not check.ok]

    @classmethod
    def from_checks(
        cls,
        checks: list[CheckResult],
        recomputed_root: str | None = None,
        error: MerkleError | None = None,
    ) -> "VerificationResult":
        """Build a result whose `ok` is derived from its checks."""
        return cls(
            ok=all(check.ok for check in checks) and error is None,
            checks=checks,
            recomputed_root=recomputed_root,
            error=error,
        )
