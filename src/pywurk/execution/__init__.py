"""Process spawning.

The traversal primitives live in :mod:`pywurk.execution.engine`.
"""

from pywurk.execution.args import SparseArg, get_args, quote
from pywurk.execution.results import SpawnResult
from pywurk.execution.spawn import (
    Spawn,
    SpawnCoordinator,
    SpawnOptions,
    compose_path,
    local_bin_paths,
    run_process,
)

__all__ = [
    "Spawn",
    "SpawnCoordinator",
    "SpawnOptions",
    "SpawnResult",
    "SparseArg",
    "compose_path",
    "get_args",
    "local_bin_paths",
    "quote",
    "run_process",
]
