"""
hashtree - binary hash trees with compact inclusion proofs.

    >>> import hashtree
    >>> tree = hashtree.build([0, 1, 2, 3, 4, 5, 6, 7])
    >>> proof = tree.proof(7)
    >>> hashtree.verify(proof, tree.root_hash())
    True
"""

from hashtree.crypto.hashing import hash_internal, hash_leaf
from hashtree.merkle import (
    InternalNode,
    LeafNode,
    MerkleProof,
    MerkleTree,
    MerkleVerifier,
    build,
    verify_proof,
)
from hashtree.schemas.errors import (
    CanonicalizationException,
    DigestFormatException,
    EmptyInputError,
    MerkleException,
)

__version__ = "0.1.0"

verify = verify_proof

__all__ = [
    "build",
    "verify",
    "hash_leaf",
    "hash_internal",
    "InternalNode",
    "LeafNode",
    "MerkleProof",
    "MerkleTree",
    "MerkleVerifier",
    "CanonicalizationException",
    "DigestFormatException",
    "EmptyInputError",
    "MerkleException",
]
