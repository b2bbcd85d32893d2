"""
Merkle Proofs
Inclusion proof representation, generation and verification.

This module provides:
- MerkleProof: an ordered tuple of digests, leaf first, then siblings
  from the leaf's level up to the level just below the root
- build_proof: recursive search for a target leaf
- recompute_root / verify_proof: replay of the internal-node hashing rule
- MerkleVerifier: class-based wrappers, including a detailed check

Proofs carry no left/right markers. Internal hashes sort their two inputs,
so folding `acc = hash_internal(acc, sibling)` reproduces every ancestor
regardless of which side the sibling was on.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence, Union

from hashtree.crypto.hashing import hash_internal, hash_leaf, is_digest, normalize_digest
from hashtree.merkle.node import InternalNode, LeafNode, Node
from hashtree.schemas.errors import (
    CanonicalizationException,
    DigestFormatException,
    ErrorCodes,
    MerkleError,
)
from hashtree.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for one leaf.

    The proof is independent of the tree it came from and can be verified
    against nothing but a trusted root hash.

    Attributes:
        hashes: hashes[0] is the leaf digest; hashes[1:] are sibling
                digests ordered from the leaf level toward the root
    """
    hashes: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate proof structure."""
        object.__setattr__(self, "hashes", tuple(self.hashes))
        if not self.hashes:
            raise ValueError("A Merkle proof must contain at least the leaf hash")
        for position, value in enumerate(self.hashes):
            if not is_digest(value):
                raise DigestFormatException(
                    f"Proof element {position} is not a canonical digest",
                    value=str(value),
                )

    @classmethod
    def from_hashes(cls, hashes: Sequence[str]) -> "MerkleProof":
        """Build a proof from user-supplied hex digests, normalizing each."""
        return cls(tuple(normalize_digest(h) for h in hashes))

    @property
    def leaf(self) -> str:
        """Digest of the proven leaf."""
        return self.hashes[0]

    @property
    def siblings(self) -> tuple[str, ...]:
        """Sibling digests, bottom-up."""
        return self.hashes[1:]

    def to_list(self) -> list[str]:
        return list(self.hashes)

    def __len__(self) -> int:
        return len(self.hashes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.hashes)

    def __getitem__(self, index):
        return self.hashes[index]


ProofLike = Union[MerkleProof, Sequence[str]]


# =============================================================================
# Generation
# =============================================================================

def _search(node: Node, target_hash: str) -> Optional[list[str]]:
    """
    Find target_hash below node.

    Returns the leaf hash followed by sibling hashes (bottom-up), or None.
    The first child is searched before the second, so with duplicate leaves
    the leftmost match wins.
    """
    if isinstance(node, LeafNode):
        if node.hash == target_hash:
            return [node.hash]
        return None

    if isinstance(node, InternalNode):
        first, second = node.children

        path = _search(first, target_hash)
        if path is not None:
            path.append(second.hash)
            return path

        path = _search(second, target_hash)
        if path is not None:
            path.append(first.hash)
            return path

        return None

    raise TypeError(f"Expected LeafNode or InternalNode, got {type(node).__name__}")


def build_proof(root: Node, target_hash: str) -> Optional[MerkleProof]:
    """
    Generate an inclusion proof for the leaf with the given digest.

    This is a full recursive descent (O(n)). MerkleTree.proof() answers the
    same question through its leaf index when one is kept.

    Args:
        root: Root of the (sub)tree to search
        target_hash: Leaf digest to look for

    Returns:
        MerkleProof of length 1 + depth of the leaf, or None if no leaf
        has that digest
    """
    path = _search(root, target_hash)
    if path is None:
        return None
    return MerkleProof(tuple(path))


def build_item_proof(root: Node, item: Any) -> Optional[MerkleProof]:
    """Generate an inclusion proof for an item (hashed with hash_leaf)."""
    return build_proof(root, hash_leaf(item))


# =============================================================================
# Verification
# =============================================================================

def _coerce_hashes(proof: Any) -> Optional[tuple[str, ...]]:
    """
    Digests of a proof, or None if it is empty or malformed.

    Only canonical digests are accepted. Lowercase, 0x-prefixed or
    whitespace-padded text is malformed here; use MerkleProof.from_hashes
    to parse user input.
    """
    if isinstance(proof, MerkleProof):
        return proof.hashes

    if proof is None or isinstance(proof, (str, bytes, bytearray)):
        return None

    try:
        hashes = tuple(proof)
    except TypeError:
        return None

    if not hashes or not all(is_digest(h) for h in hashes):
        return None
    return hashes


def recompute_root(proof: ProofLike) -> str:
    """
    Fold a proof into the root hash it commits to.

    Raises:
        ValueError: If the proof is empty or contains malformed digests
    """
    hashes = _coerce_hashes(proof)
    if hashes is None:
        raise ValueError("Proof is empty or contains malformed digests")

    acc = hashes[0]
    for sibling in hashes[1:]:
        acc = hash_internal(acc, sibling)
    return acc


def verify_proof(proof: ProofLike, root_hash: str) -> bool:
    """
    Verify an inclusion proof against a trusted root hash.

    Never raises: empty proofs, malformed digests and malformed roots all
    simply fail verification. Proof elements and the root must be
    canonical digests (64 uppercase hex characters).

    Args:
        proof: MerkleProof or sequence of hex digests
        root_hash: Trusted root digest

    Returns:
        True if the proof folds to root_hash, False otherwise
    """
    hashes = _coerce_hashes(proof)
    if hashes is None:
        logger.debug("Rejecting empty or malformed proof")
        return False

    if not is_digest(root_hash):
        logger.debug("Rejecting malformed root hash")
        return False

    actual = recompute_root(hashes)
    if actual != root_hash:
        logger.debug("Proof folds to %s, expected %s", actual, root_hash)
        return False
    return True


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = tree.proof(7)
        >>> MerkleVerifier.verify(proof, tree.root_hash())
        True
    """

    @staticmethod
    def verify(proof: ProofLike, root_hash: str) -> bool:
        """Verify a proof against a trusted root hash."""
        return verify_proof(proof, root_hash)

    @staticmethod
    def verify_item(item: Any, proof: ProofLike, root_hash: str) -> bool:
        """
        Verify that a specific item is the one the proof is about.

        Checks proof[0] == hash_leaf(item) in addition to the root fold.
        Items that cannot be encoded fail verification.
        """
        hashes = _coerce_hashes(proof)
        if hashes is None:
            return False
        try:
            leaf = hash_leaf(item)
        except CanonicalizationException:
            return False
        return hashes[0] == leaf and verify_proof(hashes, root_hash)

    @staticmethod
    def check(
        proof: ProofLike,
        root_hash: str,
        item: Any = None,
        check_item: bool = False,
    ) -> VerificationResult:
        """
        Verify a proof and report each check.

        Checks, in order: proof well-formed, root well-formed, leaf matches
        the item (only when check_item is True), recomputed root matches.
        """
        checks: list[CheckResult] = []

        hashes = _coerce_hashes(proof)
        if hashes is None:
            checks.append(CheckResult.failed(
                "proof_format",
                "Proof is empty or contains malformed digests",
            ))
        else:
            checks.append(CheckResult.passed(
                "proof_format",
                f"Proof has {len(hashes)} well-formed digests",
                details={"length": len(hashes)},
            ))

        if is_digest(root_hash):
            expected = root_hash
            checks.append(CheckResult.passed("root_format", "Root hash is well-formed"))
        else:
            expected = None
            checks.append(CheckResult.failed(
                "root_format",
                "Root hash is not 64 uppercase hex characters",
                details={"value": str(root_hash)},
            ))

        if check_item and hashes is not None:
            try:
                leaf = hash_leaf(item)
            except CanonicalizationException as e:
                checks.append(CheckResult.failed("leaf_match", e.message, details=e.details))
            else:
                if leaf == hashes[0]:
                    checks.append(CheckResult.passed("leaf_match", "Proof leaf matches item"))
                else:
                    checks.append(CheckResult.failed(
                        "leaf_match",
                        "Proof leaf does not match item",
                        details={"expected": leaf, "actual": hashes[0]},
                    ))

        recomputed = recompute_root(hashes) if hashes is not None else None
        if recomputed is not None and expected is not None:
            if recomputed == expected:
                checks.append(CheckResult.passed("root_match", "Recomputed root matches"))
            else:
                checks.append(CheckResult.failed(
                    "root_match",
                    "Recomputed root does not match trusted root",
                    details={"expected": expected, "actual": recomputed},
                ))

        result = VerificationResult.from_checks(checks, recomputed_root=recomputed)
        failed = result.get_failed_checks()
        if failed:
            result.error = MerkleError(
                code=ErrorCodes.VERIFICATION_FAILED,
                message="; ".join(c.message for c in failed),
                details={"failed_checks": [c.check_id for c in failed]},
            )
        return result


__all__ = [
    "MerkleProof",
    "ProofLike",
    "build_proof",
    "build_item_proof",
    "recompute_root",
    "verify_proof",
    "MerkleVerifier",
]
