"""Core module - program assembly, diagnostics, output isolation and the loop.

The loop and executor are NOT re-exported here; import them directly::

    from igo.core.loop import run_repl_loop
    from igo.core.executor import StatementExecutor
"""

from igo.core.assembler import SENTINEL, SENTINEL_LINE, assemble_program, write_program
from igo.core.delta import OutputDelta, extract_delta
from igo.core.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    is_incomplete,
    is_runtime_failure,
    parse_diagnostics,
    unused_bindings,
)
from igo.core.session import Session
from igo.core.skeleton import Skeleton, SkeletonError, empty_skeleton, prepare_skeleton

__all__ = [
    # Assembly
    "SENTINEL",
    "SENTINEL_LINE",
    "assemble_program",
    "write_program",
    # Output isolation
    "OutputDelta",
    "extract_delta",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    "is_incomplete",
    "is_runtime_failure",
    "parse_diagnostics",
    "unused_bindings",
    # Session
    "Session",
    "Skeleton",
    "SkeletonError",
    "empty_skeleton",
    "prepare_skeleton",
]
