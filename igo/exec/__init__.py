"""Command execution module.

Provides subprocess execution with optional timeout and the Go
toolchain adapter built on top of it.
"""

from .runner import (
    ExecOptions,
    ExecOutput,
    build_environment,
    execute_command,
    execute_command_sync,
)
from .toolchain import GoToolchain, Toolchain

__all__ = [
    "ExecOptions",
    "ExecOutput",
    "GoToolchain",
    "Toolchain",
    "build_environment",
    "execute_command",
    "execute_command_sync",
]
