"""
CLI Tree Commands

Build a tree from command-line items and print its root hash, or an
inclusion proof for one of the items.

Usage:
    hashtree root ITEM... [--int] [--json]
    hashtree prove TARGET ITEM... [--int] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from hashtree.merkle import build
from hashtree.schemas.errors import ErrorCodes, MerkleError, MerkleException
from hashtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    parse_items,
    print_json,
)


logger = logging.getLogger(__name__)


def root_cmd(args: Namespace) -> int:
    """Print the root hash of a tree over the given items."""
    try:
        items = parse_items(args.items, as_int=args.int)
        tree = build(items)
    except (ValueError, MerkleException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print_json({
            "root_hash": tree.root_hash(),
            "leaf_count": tree.leaf_count,
            "depth": tree.depth,
        })
    else:
        print(tree.root_hash())
    return EXIT_SUCCESS


def prove_cmd(args: Namespace) -> int:
    """Print the inclusion proof of TARGET in a tree over the given items."""
    try:
        items = parse_items(args.items, as_int=args.int)
        (target,) = parse_items([args.target], as_int=args.int)
        tree = build(items)
        proof = tree.proof(target)
    except (ValueError, MerkleException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if proof is None:
        logger.info("Target %r not found among %d items", target, len(items))
        if args.json:
            error = MerkleError(
                code=ErrorCodes.PROOF_NOT_FOUND,
                message=f"{args.target} is not within the merkle tree",
            )
            print_json({
                "found": False,
                "root_hash": tree.root_hash(),
                "error": error.model_dump(),
            })
        else:
            print(f"{args.target} is not within the merkle tree", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    if args.json:
        print_json({
            "found": True,
            "root_hash": tree.root_hash(),
            "proof": proof.to_list(),
        })
    else:
        for digest in proof:
            print(digest)
    return EXIT_SUCCESS
