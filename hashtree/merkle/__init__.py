"""
Merkle Tree and Inclusion Proofs
Deterministic tree construction + proof generation/verification.

This module provides:
- LeafNode / InternalNode: the two node kinds
- build / MerkleTree: construction and queries
- MerkleProof: ordered digest list, leaf first
- verify_proof / MerkleVerifier: verification against a trusted root

Canonical Commitment Rules:
1. Leaf hashing: HEX(sha256(canonical_encode(item)))
2. Parent hashing: HEX(sha256(min(a, b) + max(a, b)))
3. Padding: Duplicate last node if odd number at any level
4. Single item: root = leaf
5. Empty input: EmptyInputError

Usage:
    from hashtree.merkle import build, verify_proof

    tree = build([0, 1, 2, 3, 4, 5, 6, 7])
    proof = tree.proof(7)
    assert verify_proof(proof, tree.root_hash())
"""
from .node import (
    LeafNode,
    InternalNode,
    Node,
    copy_node,
    iter_leaves,
    node_height,
)

from .merkle_proofs import (
    MerkleProof,
    MerkleVerifier,
    build_proof,
    build_item_proof,
    recompute_root,
    verify_proof,
)

from .merkle_tree import (
    MerkleTree,
    build,
    compute_tree_depth,
)


__all__ = [
    # Nodes
    "LeafNode",
    "InternalNode",
    "Node",
    "copy_node",
    "iter_leaves",
    "node_height",
    # Proofs
    "MerkleProof",
    "MerkleVerifier",
    "build_proof",
    "build_item_proof",
    "recompute_root",
    "verify_proof",
    # Tree
    "MerkleTree",
    "build",
    "compute_tree_depth",
]
