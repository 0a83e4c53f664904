"""Argument normalization for spawned commands."""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from typing import Union

SparseArg = Union[str, int, float, bool, None, Sequence["SparseArg"]]


def get_args(sparse_args: Sequence[SparseArg]) -> list[str]:
    """Flatten sparse arguments into a plain argument list.

    ``None`` and ``False`` entries are dropped so callers can write
    ``["--flag" if enabled else None]``. Nested sequences are flattened.

    Args:
        sparse_args: Arguments as accepted by ``SpawnCoordinator.spawn``.

    Returns:
        List of string arguments.
    """
    args: list[str] = []

    for arg in sparse_args:
        if arg is None or arg is False:
            continue
        if isinstance(arg, (list, tuple)):
            args.extend(get_args(arg))
        elif isinstance(arg, str):
            args.append(arg)
        else:
            args.append(str(arg))

    return args


def quote(command: str, *args: str) -> str:
    """Render a command line for display."""
    return shlex.join([command, *args])
