"""
CLI Demo Command

Builds a tree over the integers 0..size-1, prints the inclusion proof for
one of them, then replays the proof and prints the recomputed and actual
root hashes.

Usage:
    hashtree demo [--target 7] [--size 8] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field

from hashtree.merkle import build, recompute_root
from hashtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
)


logger = logging.getLogger(__name__)


@dataclass
class DemoSummary:
    """Outcome of a demo run."""
    items: list[int] = field(default_factory=list)
    target: int = 0
    proof: list[str] = field(default_factory=list)
    recomputed_hash: str = ""
    root_hash: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.proof) and self.recomputed_hash == self.root_hash

    def to_dict(self) -> dict:
        d = asdict(self)
        d["ok"] = self.ok
        return d


def run_demo(size: int = 8, target: int = 7) -> DemoSummary:
    """Build the demo tree and prove membership of target."""
    items = list(range(size))
    tree = build(items)
    summary = DemoSummary(items=items, target=target, root_hash=tree.root_hash())

    proof = tree.proof(target)
    if proof is None:
        logger.info("Target %d is not in the demo tree", target)
        return summary

    summary.proof = proof.to_list()
    summary.recomputed_hash = recompute_root(proof)
    return summary


def demo_cmd(args: Namespace) -> int:
    """
    Execute the demo command.

    Returns:
        Exit code
    """
    if args.size < 1:
        print("Error: --size must be at least 1", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = run_demo(size=args.size, target=args.target)

    if args.json:
        print_json(summary.to_dict())
        return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED

    if not summary.proof:
        print(f"{summary.target} is not within the merkle tree")
        print(f"Root hash: {summary.root_hash}")
        return EXIT_VERIFICATION_FAILED

    print(f"Listing all proofs needed to verify that {summary.target} is within the merkle tree")
    for digest in summary.proof:
        print(f"proof: {digest}")
    print(f"Recomputed hash: {summary.recomputed_hash}")
    print(f"Root hash: {summary.root_hash}")

    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
