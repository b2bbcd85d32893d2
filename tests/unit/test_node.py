"""
Node Unit Tests
Tests for hashtree/merkle/node.py
"""
import dataclasses

import pytest

from hashtree.crypto.hashing import hash_internal, hash_leaf
from hashtree.merkle.node import (
    InternalNode,
    LeafNode,
    copy_node,
    iter_leaves,
    node_height,
)


def _pair(a, b):
    return InternalNode.from_children(LeafNode.from_item(a), LeafNode.from_item(b))


class TestLeafNode:

    def test_from_item_hashes_item(self):
        leaf = LeafNode.from_item(5)

        assert leaf.hash == hash_leaf(5)
        assert leaf.item == 5

    def test_item_stored_by_reference(self):
        payload = {"large": "payload"}
        leaf = LeafNode.from_item(payload)

        assert leaf.item is payload

    def test_frozen(self):
        leaf = LeafNode.from_item(1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            leaf.hash = "0" * 64


class TestInternalNode:

    def test_hash_combines_children(self):
        node = _pair(1, 2)

        assert node.hash == hash_internal(hash_leaf(1), hash_leaf(2))

    def test_children_kept_in_supplied_order(self):
        first = LeafNode.from_item("z")
        second = LeafNode.from_item("a")

        node = InternalNode.from_children(first, second)

        assert node.children == (first, second)

    def test_swapped_children_same_hash(self):
        assert _pair(1, 2).hash == _pair(2, 1).hash

    def test_requires_two_children(self):
        leaf = LeafNode.from_item(1)
        with pytest.raises(ValueError, match="exactly 2 children"):
            InternalNode(hash=leaf.hash, children=(leaf,))


class TestTraversal:

    def test_iter_leaves_left_to_right(self):
        root = InternalNode.from_children(_pair(0, 1), _pair(2, 3))

        assert [leaf.item for leaf in iter_leaves(root)] == [0, 1, 2, 3]

    def test_iter_leaves_single_leaf(self):
        leaf = LeafNode.from_item("only")
        assert list(iter_leaves(leaf)) == [leaf]

    def test_node_height(self):
        assert node_height(LeafNode.from_item(0)) == 0
        assert node_height(_pair(0, 1)) == 1
        assert node_height(InternalNode.from_children(_pair(0, 1), _pair(2, 3))) == 2

    def test_unknown_node_type_rejected(self):
        with pytest.raises(TypeError):
            list(iter_leaves("not a node"))


class TestCopyNode:

    def test_copy_is_equal_but_not_shared(self):
        original = InternalNode.from_children(_pair(0, 1), _pair(2, 3))

        duplicate = copy_node(original)

        assert duplicate == original
        assert duplicate is not original
        assert duplicate.children[0] is not original.children[0]

    def test_copy_shares_items(self):
        payload = ["shared"]
        leaf = LeafNode.from_item(payload)

        assert copy_node(leaf).item is payload
