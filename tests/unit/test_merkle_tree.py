"""
Merkle Tree Unit Tests
Tests for hashtree/merkle/merkle_tree.py

Covers:
1. Empty input raises EmptyInputError
2. Single item - root equals leaf
3. Root determinism - same items -> same root across builds
4. Padding correctness - duplicate-last at EVERY level, nothing dropped
5. Sibling swap invariance vs. cross-pair reordering
6. Leaf listing, depth, indexing, parallel builds
"""
import pytest

from fixtures.common import make_items, reference_internal_hash, reference_leaf_hash
from hashtree.config import RuntimeConfig, set_default_config
from hashtree.crypto.hashing import hash_internal, hash_leaf
from hashtree.merkle import (
    InternalNode,
    LeafNode,
    MerkleTree,
    build,
    compute_tree_depth,
    verify_proof,
)
from hashtree.schemas.errors import EmptyInputError, ErrorCodes


def _h(*items):
    return [hash_leaf(i) for i in items]


class TestEmptyInput:

    def test_empty_list_raises(self):
        with pytest.raises(EmptyInputError) as exc_info:
            build([])
        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT

    def test_empty_generator_raises(self):
        with pytest.raises(EmptyInputError):
            build(x for x in [])

    def test_empty_input_is_value_error(self):
        with pytest.raises(ValueError):
            build([])


class TestSingleItem:

    def test_root_is_leaf(self):
        tree = build(["only"])

        assert isinstance(tree.root, LeafNode)
        assert tree.root_hash() == hash_leaf("only")
        assert tree.depth == 0
        assert tree.leaves() == ["only"]

    def test_single_item_proof(self):
        tree = build(["only"])
        proof = tree.proof("only")

        assert proof.to_list() == [hash_leaf("only")]
        assert verify_proof(proof, tree.root_hash())


class TestRootDeterminism:

    def test_same_items_same_root(self):
        items = make_items(13, "str")

        roots = [build(items).root_hash() for _ in range(5)]

        assert all(r == roots[0] for r in roots)

    def test_rebuilt_items_same_root(self):
        assert build(make_items(9, "dict")).root_hash() == build(make_items(9, "dict")).root_hash()

    def test_different_items_different_roots(self):
        assert build(["a", "b"]).root_hash() != build(["x", "y"]).root_hash()

    def test_cross_pair_reorder_changes_root(self):
        """[0,1,2,3] pairs {0,1},{2,3}; [0,2,1,3] pairs {0,2},{1,3}."""
        assert build([0, 1, 2, 3]).root_hash() != build([0, 2, 1, 3]).root_hash()


class TestSiblingSwap:

    def test_swap_within_pair_keeps_root(self):
        assert build([0, 1, 2, 3]).root_hash() == build([1, 0, 2, 3]).root_hash()
        assert build([0, 1, 2, 3]).root_hash() == build([0, 1, 3, 2]).root_hash()

    def test_swap_pairs_keeps_root(self):
        """Swapping two sibling subtrees is also invisible to the root."""
        assert build([0, 1, 2, 3]).root_hash() == build([2, 3, 0, 1]).root_hash()

    def test_swap_within_pair_larger_tree(self):
        items = make_items(10)
        swapped = list(items)
        swapped[4], swapped[5] = swapped[5], swapped[4]

        assert build(items).root_hash() == build(swapped).root_hash()


EIGHT_ITEM_ROOT = "38AA134309A4A0A8702EC909D5D68DEF078173561268AEEAAA8F99DBCFFADE86"


class TestStructure:

    def test_eight_items_known_root(self, eight_item_tree):
        """Root over 0..7 is pinned; any change to leaf or pair hashing moves it."""
        assert eight_item_tree.root_hash() == EIGHT_ITEM_ROOT

    def test_eight_items_manual_root(self, eight_item_tree):
        """Recompute the 0..7 root with plain hashlib."""
        level = [reference_leaf_hash(format(i, "X").encode()) for i in range(8)]
        while len(level) > 1:
            level = [reference_internal_hash(level[i], level[i + 1]) for i in range(0, len(level), 2)]

        assert eight_item_tree.root_hash() == level[0]

    def test_eight_items_no_padding(self, eight_item_tree, eight_items):
        assert eight_item_tree.leaves() == eight_items
        assert eight_item_tree.leaf_count == 8
        assert eight_item_tree.depth == 3

    def test_root_is_internal(self, eight_item_tree):
        assert isinstance(eight_item_tree.root, InternalNode)

    def test_children_in_input_order(self):
        tree = build(["b", "a"])
        first, second = tree.root.children

        assert first.item == "b"
        assert second.item == "a"

    def test_every_internal_node_hash_invariant(self):
        tree = build(make_items(11))
        stack = [tree.root]
        while stack:
            node = stack.pop()
            if isinstance(node, InternalNode):
                first, second = node.children
                assert node.hash == hash_internal(first.hash, second.hash)
                stack.extend(node.children)
            else:
                assert node.hash == hash_leaf(node.item)


class TestPaddingCorrectness:

    def test_three_items(self, three_item_tree):
        """[0,1,2] -> [0,1,2,2] -> [01, 22] -> root."""
        h0, h1, h2 = _h(0, 1, 2)
        expected = hash_internal(hash_internal(h0, h1), hash_internal(h2, h2))

        assert three_item_tree.root_hash() == expected
        assert three_item_tree.leaves() == [0, 1, 2, 2]
        assert len(three_item_tree.leaves()) == 4

    def test_five_items_pads_two_levels(self):
        """
        Level 0: [a, b, c, d, e, e]
        Level 1: [ab, cd, ee, ee]   (ee duplicated)
        Level 2: [abcd, eeee]
        Level 3: [root]
        """
        a, b, c, d, e = _h(*"abcde")
        ab = hash_internal(a, b)
        cd = hash_internal(c, d)
        ee = hash_internal(e, e)
        expected = hash_internal(hash_internal(ab, cd), hash_internal(ee, ee))

        tree = build(list("abcde"))

        assert tree.root_hash() == expected
        assert tree.leaves() == list("abcdeeee")
        assert tree.depth == 3

    def test_six_items_pads_intermediate_level_only(self):
        """Six leaves pair evenly; the three parents need one padding copy."""
        tree = build(make_items(6))

        assert tree.leaves() == [0, 1, 2, 3, 4, 5, 4, 5]
        assert tree.depth == 3

    @pytest.mark.parametrize("count", list(range(1, 34)))
    def test_no_item_dropped(self, count):
        """Every item is a leaf and provable whatever the input size."""
        items = make_items(count)
        tree = build(items)

        assert set(tree.leaves()) == set(items)
        assert tree.leaves()[:count] == items
        assert tree.depth == compute_tree_depth(count)
        for item in items:
            assert verify_proof(tree.proof(item), tree.root_hash())

    def test_padding_nodes_are_copies(self, three_item_tree):
        first_pair, second_pair = three_item_tree.root.children
        original, duplicate = second_pair.children

        assert original == duplicate
        assert original is not duplicate

    def test_full_width_levels(self):
        """All leaves sit at the same depth, so leaf count is a power of two."""
        for count in (3, 5, 6, 7, 9, 12, 17):
            leaf_count = build(make_items(count)).leaf_count
            assert leaf_count & (leaf_count - 1) == 0


class TestLeaves:

    def test_leaves_returns_original_objects(self):
        items = [{"id": 1}, {"id": 2}]
        tree = build(items)

        assert tree.leaves()[0] is items[0]

    def test_leaf_nodes(self, three_item_tree):
        nodes = three_item_tree.leaf_nodes()

        assert [n.item for n in nodes] == [0, 1, 2, 2]
        assert all(isinstance(n, LeafNode) for n in nodes)

    def test_len(self, three_item_tree):
        assert len(three_item_tree) == 4

    def test_bytes_input_iterates_as_ints(self):
        """A bytes object is a sequence of small integers."""
        assert build(bytes(range(8))).root_hash() == build(list(range(8))).root_hash()

    def test_repr(self, eight_item_tree):
        text = repr(eight_item_tree)
        assert "MerkleTree" in text
        assert eight_item_tree.root_hash() in text


class TestComputeTreeDepth:

    def test_single(self):
        assert compute_tree_depth(1) == 0

    def test_powers_of_two(self):
        assert compute_tree_depth(2) == 1
        assert compute_tree_depth(8) == 3
        assert compute_tree_depth(16) == 4

    def test_non_powers_of_two(self):
        assert compute_tree_depth(3) == 2
        assert compute_tree_depth(5) == 3
        assert compute_tree_depth(9) == 4

    def test_zero_rejected(self):
        with pytest.raises(EmptyInputError):
            compute_tree_depth(0)


class TestBuildOptions:

    def test_unindexed_tree(self):
        tree = build(make_items(7), index_leaves=False)

        assert not tree.is_indexed
        assert verify_proof(tree.proof(3), tree.root_hash())

    def test_indexed_by_default(self, eight_item_tree):
        assert eight_item_tree.is_indexed

    def test_config_disables_index(self):
        set_default_config(RuntimeConfig.from_dict({"build": {"index_leaves": False}}))

        assert not build(make_items(4)).is_indexed

    def test_parallel_build_matches_sequential(self):
        items = make_items(300, "bytes")
        set_default_config(RuntimeConfig.from_dict({"build": {"parallel_threshold": 1}}))

        parallel = build(items, max_workers=4)
        sequential = build(items, max_workers=1)

        assert parallel.root_hash() == sequential.root_hash()
        assert parallel.leaves() == sequential.leaves()

    def test_parallel_below_threshold_still_correct(self):
        items = make_items(5)
        assert build(items, max_workers=8).root_hash() == build(items).root_hash()

    def test_classmethod_alias(self):
        assert MerkleTree.build([1, 2, 3]).root_hash() == build([1, 2, 3]).root_hash()
