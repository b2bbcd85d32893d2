"""
hashtree CLI

Command-line interface for building hash trees and checking inclusion proofs.

Usage:
    python -m hashtree_cli demo
    python -m hashtree_cli root a b c
    python -m hashtree_cli prove b a b c
    python -m hashtree_cli verify --root <digest> <leaf> <sibling>...
    python -m hashtree_cli config --show
"""

__version__ = "0.1.0"
