"""Shell passthrough for prompt lines starting with the shell prefix."""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from igo.exec.runner import ExecOptions, execute_command_sync

logger = logging.getLogger(__name__)


@dataclass
class ShellResult:
    """Result of a shell passthrough command."""

    success: bool
    output: str
    error: Optional[str] = None

    @classmethod
    def ok(cls, output: str) -> "ShellResult":
        """Create a successful result."""
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str, output: str = "") -> "ShellResult":
        """Create a failed result."""
        return cls(success=False, output=output, error=error)


class ShellCommandTool:
    """Runs a command line directly, without a shell, in the workspace."""

    def __init__(self, cwd: Path, env: Optional[dict[str, str]] = None):
        """Initialize the shell command tool.

        Args:
            cwd: Working directory for every command
            env: Extra environment variables
        """
        self.cwd = cwd
        self.env = env or {}

    def execute(self, command_line: str) -> ShellResult:
        """Tokenize ``command_line`` shell-style and run it.

        Nothing here touches session state, whatever the outcome.
        """
        try:
            argv = shlex.split(command_line)
        except ValueError as e:
            return ShellResult.fail(f"bad command: {e}")
        if not argv:
            return ShellResult.fail("bad command: empty command line")

        logger.debug(f"shell: {argv!r}")
        result = execute_command_sync(
            argv,
            ExecOptions(cwd=self.cwd, env=dict(self.env), merge_stderr=True),
        )
        if result.ok:
            return ShellResult.ok(result.aggregated)
        return ShellResult.fail(
            "command failed: " + result.aggregated.removesuffix("\n"),
            output=result.aggregated,
        )
