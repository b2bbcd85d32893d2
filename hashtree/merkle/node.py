"""
Merkle Tree Nodes

A node is exactly one of:
- LeafNode: the digest of one item, plus the item itself
- InternalNode: the digest of two children, plus those children

Node is a closed union. Code that walks a tree dispatches on the two
classes and treats anything else as a TypeError.

Items are stored by reference, not copied. A tree over large payloads
therefore costs one reference per leaf in addition to the caller's data.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Union

from hashtree.crypto.hashing import hash_internal, hash_leaf


@dataclass(frozen=True)
class LeafNode:
    """
    Leaf of a Merkle tree.

    Attributes:
        hash: Digest of the canonical encoding of `item`
        item: The original data value
    """
    hash: str
    item: Any

    @classmethod
    def from_item(cls, item: Any) -> "LeafNode":
        """Create a leaf, hashing the item."""
        return cls(hash=hash_leaf(item), item=item)


@dataclass(frozen=True)
class InternalNode:
    """
    Internal node of a Merkle tree.

    Children are kept in the order they were paired. The hash does not
    depend on that order.

    Attributes:
        hash: hash_internal(children[0].hash, children[1].hash)
        children: Exactly two sub-nodes
    """
    hash: str
    children: tuple["Node", "Node"]

    def __post_init__(self) -> None:
        if len(self.children) != 2:
            raise ValueError(
                f"Internal node requires exactly 2 children, got {len(self.children)}"
            )

    @classmethod
    def from_children(cls, first: "Node", second: "Node") -> "InternalNode":
        """Create an internal node over two children, hashing them."""
        return cls(
            hash=hash_internal(first.hash, second.hash),
            children=(first, second),
        )


Node = Union[LeafNode, InternalNode]


def _unknown_node(node: Any) -> TypeError:
    return TypeError(f"Expected LeafNode or InternalNode, got {type(node).__name__}")


def copy_node(node: Node) -> Node:
    """
    Structural copy of a subtree.

    Used when padding duplicates a node, so the copy is owned only by its
    new parent. Items are shared, nodes are not.
    """
    if isinstance(node, LeafNode):
        return LeafNode(hash=node.hash, item=node.item)
    if isinstance(node, InternalNode):
        first, second = node.children
        return InternalNode(hash=node.hash, children=(copy_node(first), copy_node(second)))
    raise _unknown_node(node)


def iter_leaves(node: Node) -> Iterator[LeafNode]:
    """Yield leaves left to right."""
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, LeafNode):
            yield current
        elif isinstance(current, InternalNode):
            first, second = current.children
            stack.append(second)
            stack.append(first)
        else:
            raise _unknown_node(current)


def node_height(node: Node) -> int:
    """Number of edges from node down to its leaves (0 for a leaf)."""
    height = 0
    current = node
    while True:
        if isinstance(current, LeafNode):
            return height
        if isinstance(current, InternalNode):
            # Every level is padded to even width, so all leaves share one depth
            current = current.children[0]
            height += 1
        else:
            raise _unknown_node(current)


__all__ = [
    "LeafNode",
    "InternalNode",
    "Node",
    "copy_node",
    "iter_leaves",
    "node_height",
]
