"""
Helpers shared by CLI commands.
"""

from __future__ import annotations

import json
from typing import Any, Sequence


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def parse_items(raw: Sequence[str], as_int: bool = False) -> list[Any]:
    """
    Convert command-line tokens into tree items.

    With as_int, tokens are parsed as integers (base prefixes such as 0x
    are accepted); otherwise they are used as strings.

    Raises:
        ValueError: If as_int is set and a token is not an integer
    """
    if not as_int:
        return list(raw)
    items = []
    for token in raw:
        try:
            items.append(int(token, 0))
        except ValueError as e:
            raise ValueError(f"Not an integer item: {token!r}") from e
    return items


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))
