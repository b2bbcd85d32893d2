"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m hashtree_cli demo [--target N] [--size N] [--json]
    python -m hashtree_cli root ITEM... [--int] [--json]
    python -m hashtree_cli prove TARGET ITEM... [--int] [--json]
    python -m hashtree_cli verify --root DIGEST HASH... [--item ITEM] [--json] [--debug]
    python -m hashtree_cli config --show
    python -m hashtree_cli config --init [--path hashtree.yaml]

Environment Variables:
    HASHTREE_LOG_LEVEL            Log level (default: WARNING)
    HASHTREE_LOG_FILE             Also write logs to this file
    HASHTREE_MAX_WORKERS          Thread pool size for builds (default: 1)
    HASHTREE_PARALLEL_THRESHOLD   Minimum item count for pooled builds (default: 1024)
    HASHTREE_INDEX_LEAVES         Keep a leaf-hash index for proofs (default: true)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from hashtree.config import RuntimeConfig, set_default_config
from hashtree_cli import __version__
from hashtree_cli.commands import demo, tree, verify
from hashtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
)


CONFIG_TEMPLATE = """\
build:
  max_workers: 1
  parallel_threshold: 1024
  index_leaves: true
logging:
  level: WARNING
  file: null
"""


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def load_config(config_path: Path | None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.
    """
    if config_path is None:
        return RuntimeConfig.from_env()
    return RuntimeConfig.from_yaml(config_path).with_env_overrides()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hashtree",
        description="Build Merkle trees, generate inclusion proofs and verify them.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Prove membership of one integer in a tree over 0..size-1",
        description="Build a tree over a fixed integer sequence, print a proof and replay it.",
    )
    demo_parser.add_argument(
        "--target", "-t",
        type=int,
        default=7,
        help="Item to prove (default: 7)",
    )
    demo_parser.add_argument(
        "--size", "-n",
        type=int,
        default=8,
        help="Number of items, 0..size-1 (default: 8)",
    )
    demo_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the root hash of a tree over the given items",
    )
    root_parser.add_argument("items", nargs="+", help="Items, in order")
    root_parser.add_argument("--int", action="store_true", help="Parse items as integers")
    root_parser.add_argument("--json", action="store_true", help="JSON output")
    root_parser.set_defaults(func=tree.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Print the inclusion proof of TARGET in a tree over the given items",
    )
    prove_parser.add_argument("target", help="Item to prove")
    prove_parser.add_argument("items", nargs="+", help="Items, in order")
    prove_parser.add_argument("--int", action="store_true", help="Parse items as integers")
    prove_parser.add_argument("--json", action="store_true", help="JSON output")
    prove_parser.set_defaults(func=tree.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof against a trusted root hash",
        description="Replay a proof (leaf hash first, then siblings) and compare with the root.",
    )
    verify_parser.add_argument("hashes", nargs="*", help="Proof digests, leaf first")
    verify_parser.add_argument("--root", "-r", required=True, help="Trusted root hash")
    verify_parser.add_argument(
        "--item",
        default=None,
        help="Also check that the proof's leaf is this item",
    )
    verify_parser.add_argument("--int", action="store_true", help="Parse --item as an integer")
    verify_parser.add_argument("--json", action="store_true", help="JSON output")
    verify_parser.add_argument("--debug", action="store_true", help="Include individual checks")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="hashtree.yaml",
        help="Path for config file (default: hashtree.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(CONFIG_TEMPLATE)
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (HASHTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: hashtree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed or not found)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.logging.level, log_file=config.logging.file)
    set_default_config(config)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
