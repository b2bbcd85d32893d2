"""
CLI Verify Command

Verify an inclusion proof against a trusted root hash, offline.

Usage:
    hashtree verify --root DIGEST LEAF [SIBLING...] [--item ITEM [--int]] [--json] [--debug]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from hashtree.crypto.hashing import normalize_digest
from hashtree.merkle import MerkleProof, MerkleVerifier
from hashtree.schemas.errors import DigestFormatException
from hashtree.schemas.verification import VerificationResult
from hashtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    parse_items,
    print_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    root_hash: str = ""
    recomputed_hash: str | None = None
    proof_length: int = 0
    ok: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d


def build_summary(
    root_hash: str,
    proof_length: int,
    result: VerificationResult,
    debug: bool = False,
) -> VerifySummary:
    """Build a VerifySummary from a verification result."""
    summary = VerifySummary(
        root_hash=root_hash,
        recomputed_hash=result.recomputed_root,
        proof_length=proof_length,
        ok=result.ok,
        errors=result.get_error_messages(),
    )
    if debug:
        summary.checks = [
            {"check_id": c.check_id, "ok": c.ok, "message": c.message}
            for c in result.checks
        ]
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"root_hash: {summary.root_hash}")
    print(f"recomputed_hash: {summary.recomputed_hash or '-'}")
    print(f"proof_length: {summary.proof_length}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        print(f"\nchecks: {passed} passed, {len(summary.checks) - passed} failed")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}: {check['message']}")


def _parse_proof(tokens: list[str]) -> MerkleProof | list[str]:
    """
    Parse command-line digests, accepting either case and a 0x prefix.

    Unparseable input is returned as given and fails the format check.
    """
    try:
        return MerkleProof.from_hashes(tokens)
    except ValueError as e:
        logger.debug("Proof is not parseable: %s", e)
        return list(tokens)


def _parse_root(token: str) -> str:
    try:
        return normalize_digest(token)
    except DigestFormatException as e:
        logger.debug("Root is not parseable: %s", e.message)
        return token


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code
    """
    check_item = args.item is not None
    item = None
    if check_item:
        try:
            (item,) = parse_items([args.item], as_int=args.int)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    proof = _parse_proof(args.hashes)
    root_hash = _parse_root(args.root)

    result = MerkleVerifier.check(proof, root_hash, item=item, check_item=check_item)
    logger.info("Verification %s", "passed" if result.ok else "failed")

    summary = build_summary(root_hash, len(args.hashes), result, debug=args.debug)
    if args.json:
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
