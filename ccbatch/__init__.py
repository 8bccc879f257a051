# SPDX-License-Identifier: MIT
"""
ccbatch: GCC flag synthesis and batch compilation through make.

ccbatch translates abstract compile options into GCC command-line flags,
writes a Makefile that compiles a batch of sources with them, and runs
make over it in parallel.
"""

from __future__ import annotations

import json
import os

__version__ = "0.1.0"

# Internal storage for CLI variables
_cli_vars: dict[str, str] | None = None

from ccbatch.core.errors import (  # noqa: E402
    BuildFailure,
    CcbatchError,
    ExternalToolFailure,
    PersistenceFailure,
    ProcessLaunchFailure,
)
from ccbatch.core.executor import BatchExecutor, BuildResult  # noqa: E402
from ccbatch.core.options import (  # noqa: E402
    CompileOptions,
    DefineEntry,
    LinkSubsystem,
    OptimizationSpec,
    Rtti,
)
from ccbatch.generators.makefile import MakefileGenerator  # noqa: E402
from ccbatch.toolchains.gcc import GccCompiler, get_compiler  # noqa: E402


def _load_cli_vars() -> dict[str, str]:
    """Parse CCBATCH_VARS; a missing or malformed value gives no variables."""
    raw = os.environ.get("CCBATCH_VARS")
    if not raw:
        return {}
    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return loaded if isinstance(loaded, dict) else {}


def get_var(name: str, default: str | None = None) -> str | None:
    """Look up a ccbatch setting.

    The compiler variant used by the CLI, for example, can be chosen with
    either of:
        CCBATCH_VARS='{"CCBATCH_COMPILER": "mingw"}' ccbatch compile ...
        CCBATCH_COMPILER=mingw ccbatch compile ...

    A value in the CCBATCH_VARS JSON object wins over a plain environment
    variable of the same name. CCBATCH_VARS is read once per process.
    """
    global _cli_vars

    if _cli_vars is None:
        _cli_vars = _load_cli_vars()
    if name in _cli_vars:
        return _cli_vars[name]
    return os.environ.get(name, default)


def _reset_vars() -> None:
    """Forget cached CCBATCH_VARS (used by tests)."""
    global _cli_vars
    _cli_vars = None


__all__ = [
    "__version__",
    "get_var",
    # Errors
    "BuildFailure",
    "CcbatchError",
    "ExternalToolFailure",
    "PersistenceFailure",
    "ProcessLaunchFailure",
    # Options
    "CompileOptions",
    "DefineEntry",
    "LinkSubsystem",
    "OptimizationSpec",
    "Rtti",
    # Building
    "BatchExecutor",
    "BuildResult",
    "GccCompiler",
    "MakefileGenerator",
    "get_compiler",
]
