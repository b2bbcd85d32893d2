"""
Test fixtures package for hashtree tests.

Usage:
    from fixtures import make_items, flip_bit

    def test_something():
        tree = build(make_items(5))
"""

from .common import (
    flip_bit,
    make_items,
    reference_internal_hash,
    reference_leaf_hash,
)

__all__ = [
    "flip_bit",
    "make_items",
    "reference_internal_hash",
    "reference_leaf_hash",
]
