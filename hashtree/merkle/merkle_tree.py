"""
Merkle Tree Implementation
Deterministic tree construction over an ordered item sequence.

This module provides:
- build: construct an immutable MerkleTree from a non-empty item sequence
- MerkleTree: root access, leaf listing, inclusion proofs
- compute_tree_depth: depth of the tree built over n items

Construction Rules (Hard Contracts):
1. Leaf hashing: leaf = hash_leaf(item)
2. Parent hashing: parent = hash_internal(first, second), order-independent
3. Padding rule: duplicate the last node if a level has an odd count,
   at EVERY level, so no node is ever dropped
4. Pairing: adjacent nodes, in input order
5. Single item: root = the leaf itself
6. Empty input: EmptyInputError

Determinism Notes:
- No randomness; pairing order is fixed by input order
- Reordering items generally changes the root; swapping the two members
  of one pair does not
- Parallel builds produce the same nodes as sequential builds
"""
from __future__ import annotations

import concurrent.futures
import logging
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from hashtree.config.runtime import get_default_config
from hashtree.crypto.hashing import hash_leaf, is_digest, normalize_digest
from hashtree.merkle.merkle_proofs import MerkleProof, build_proof
from hashtree.merkle.node import (
    InternalNode,
    LeafNode,
    Node,
    copy_node,
    iter_leaves,
    node_height,
)
from hashtree.schemas.errors import CanonicalizationException, EmptyInputError


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class MerkleTree:
    """
    An immutable binary hash tree.

    Trees are created by `build()`; nothing on a tree mutates it, so a
    built tree can be shared between threads without locking.

    Example:
        >>> tree = build([0, 1, 2, 3, 4, 5, 6, 7])
        >>> proof = tree.proof(7)
        >>> len(proof)
        4
        >>> verify(proof, tree.root_hash())
        True
    """

    __slots__ = ("_root", "_leaf_index", "_leaf_count")

    def __init__(self, root: Node, index_leaves: bool = True) -> None:
        """
        Wrap an already-built root node.

        Args:
            root: Root node; the tree takes ownership of it
            index_leaves: Keep a leaf-hash index so proof() does not
                search the whole tree
        """
        self._root = root
        self._leaf_count = sum(1 for _ in iter_leaves(root))
        self._leaf_index: Optional[dict[str, tuple[int, ...]]] = (
            _index_leaves(root) if index_leaves else None
        )

    @classmethod
    def build(cls, items: Iterable[Any], **kwargs: Any) -> "MerkleTree":
        """Alias for the module-level build()."""
        return build(items, **kwargs)

    @property
    def root(self) -> Node:
        return self._root

    def root_hash(self) -> str:
        """Root digest: the commitment to the whole item sequence."""
        return self._root.hash

    @property
    def depth(self) -> int:
        """Number of levels below the root (0 for a single-item tree)."""
        return node_height(self._root)

    @property
    def leaf_count(self) -> int:
        """Number of leaves, padding duplicates included."""
        return self._leaf_count

    @property
    def is_indexed(self) -> bool:
        return self._leaf_index is not None

    def leaf_nodes(self) -> list[LeafNode]:
        """Leaves left to right, padding duplicates included."""
        return list(iter_leaves(self._root))

    def leaves(self) -> list[Any]:
        """Items left to right, padding duplicates included."""
        return [leaf.item for leaf in iter_leaves(self._root)]

    def proof(self, item: Any) -> Optional[MerkleProof]:
        """
        Inclusion proof for an item.

        Returns:
            MerkleProof, or None if no leaf holds an item with the same
            leaf hash. With duplicate items the leftmost leaf is proven.
            An item that cannot be encoded is never in the tree, so it
            also yields None.
        """
        try:
            leaf_hash = hash_leaf(item)
        except CanonicalizationException as e:
            logger.debug("Item of type %s cannot be encoded: %s", type(item).__name__, e.message)
            return None
        return self.proof_for_hash(leaf_hash)

    def proof_for_hash(self, leaf_hash: str) -> Optional[MerkleProof]:
        """
        Inclusion proof for a leaf digest.

        Raises:
            DigestFormatException: If leaf_hash is not a 256-bit hex digest
        """
        if not is_digest(leaf_hash):
            leaf_hash = normalize_digest(leaf_hash)

        if self._leaf_index is None:
            proof = build_proof(self._root, leaf_hash)
        else:
            proof = self._indexed_proof(leaf_hash)

        if proof is None:
            logger.debug("No leaf with hash %s", leaf_hash)
        return proof

    def contains(self, item: Any) -> bool:
        """Whether some leaf has the item's leaf hash."""
        return self.proof(item) is not None

    def _indexed_proof(self, leaf_hash: str) -> Optional[MerkleProof]:
        path = self._leaf_index.get(leaf_hash)
        if path is None:
            return None

        siblings: list[str] = []
        node = self._root
        for step in path:
            siblings.append(node.children[1 - step].hash)
            node = node.children[step]

        siblings.reverse()
        return MerkleProof((node.hash, *siblings))

    def __len__(self) -> int:
        return self._leaf_count

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(root_hash={self.root_hash()!r}, "
            f"leaves={self._leaf_count}, depth={self.depth})"
        )


def _index_leaves(root: Node) -> dict[str, tuple[int, ...]]:
    """
    Map each leaf hash to the child path of its leftmost occurrence.

    A path is the sequence of child positions (0 or 1) from the root.
    """
    index: dict[str, tuple[int, ...]] = {}
    stack: list[tuple[Node, tuple[int, ...]]] = [(root, ())]
    while stack:
        node, path = stack.pop()
        if isinstance(node, LeafNode):
            index.setdefault(node.hash, path)
        elif isinstance(node, InternalNode):
            stack.append((node.children[1], path + (1,)))
            stack.append((node.children[0], path + (0,)))
        else:
            raise TypeError(f"Expected LeafNode or InternalNode, got {type(node).__name__}")
    return index


def _pair(nodes: Sequence[Node]) -> list[tuple[Node, Node]]:
    return [(nodes[i], nodes[i + 1]) for i in range(0, len(nodes), 2)]


def _combine(pair: tuple[Node, Node]) -> InternalNode:
    return InternalNode.from_children(*pair)


def build(
    items: Iterable[Any],
    *,
    max_workers: Optional[int] = None,
    index_leaves: Optional[bool] = None,
) -> MerkleTree:
    """
    Build a Merkle tree over an ordered, non-empty item sequence.

    Algorithm:
    1. Hash every item into a leaf
    2. While more than one node remains:
       - If the level has an odd number of nodes, append a copy of the last
       - Pair adjacent nodes into internal nodes
    3. The last node standing is the root

    Padding Rule: Duplicate last node at each level if odd.
    Example: [a, b, c] -> [a, b, c, c] -> [ab, cc] -> [root]

    Args:
        items: Items to commit to. Order matters and is preserved.
        max_workers: Thread pool size for leaf hashing and per-level
            combination. None uses the runtime configuration.
        index_leaves: Keep a leaf-hash index for proof lookups. None uses
            the runtime configuration.

    Returns:
        The built MerkleTree

    Raises:
        EmptyInputError: If items is empty
        CanonicalizationException: If an item cannot be encoded
    """
    items = list(items)
    if not items:
        raise EmptyInputError()

    build_config = get_default_config().build
    if max_workers is None:
        max_workers = build_config.max_workers
    if index_leaves is None:
        index_leaves = build_config.index_leaves

    if max_workers > 1 and len(items) >= build_config.parallel_threshold:
        logger.debug("Building tree over %d items with %d workers", len(items), max_workers)
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
            root = _reduce(items, lambda fn, seq: list(pool.map(fn, seq)))
    else:
        logger.debug("Building tree over %d items", len(items))
        root = _reduce(items, lambda fn, seq: [fn(x) for x in seq])

    return MerkleTree(root, index_leaves=index_leaves)


def _reduce(
    items: list[Any],
    map_fn: Callable[[Callable[[T], R], Sequence[T]], list[R]],
) -> Node:
    """
    Leaf hashing plus level-by-level reduction.

    map_fn applies a function to every element of a sequence and returns
    the results in order; each call completes before the next level starts.
    """
    level: list[Node] = map_fn(LeafNode.from_item, items)

    height = 0
    while len(level) > 1:
        if len(level) % 2 == 1:
            logger.debug("Padding level %d (%d nodes) with a copy of its last node", height, len(level))
            level.append(copy_node(level[-1]))

        level = map_fn(_combine, _pair(level))
        height += 1

    return level[0]


def compute_tree_depth(num_items: int) -> int:
    """
    Depth of the tree built over num_items items.

    Depth counts edges from the root to the leaves, so a single item has
    depth 0 and every proof is depth + 1 digests long.

    Raises:
        EmptyInputError: If num_items is not positive
    """
    if num_items <= 0:
        raise EmptyInputError(f"A tree needs at least one item, got {num_items}")

    depth = 0
    n = num_items
    while n > 1:
        if n % 2 == 1:
            n += 1
        n //= 2
        depth += 1
    return depth


__all__ = [
    "MerkleTree",
    "build",
    "compute_tree_depth",
]
