"""Go toolchain adapter.

The session core only needs two things from the toolchain: a formatted,
import-resolved program text, and the combined output and exit status of
compiling and running it. Everything here shells out to the Go tools.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable

from igo.config.models import ToolchainConfig
from igo.errors import ToolchainError
from igo.exec.runner import ExecOptions, ExecOutput, execute_command_sync

logger = logging.getLogger(__name__)


@runtime_checkable
class Toolchain(Protocol):
    """What the session needs from a compiler toolchain."""

    def check(self) -> None: ...

    def init_module(self, workdir: Path) -> None: ...

    def verify(self, path: Path) -> None: ...

    def resolve_and_format(self, path: Path) -> str: ...

    def compile_and_run(self, path: Path, workdir: Path) -> ExecOutput: ...


class GoToolchain:
    """Runs ``go``, ``gofmt`` and ``goimports`` as subprocesses."""

    def __init__(self, config: ToolchainConfig):
        self.config = config

    def _options(self, cwd: Path, *, merge_stderr: bool = False, timeout=None) -> ExecOptions:
        return ExecOptions(
            cwd=cwd,
            timeout=timeout,
            env=dict(self.config.env),
            merge_stderr=merge_stderr,
        )

    def check(self) -> None:
        """Make sure every configured binary is on PATH."""
        for binary in (self.config.go, self.config.gofmt, self.config.formatter[0]):
            if shutil.which(binary) is None:
                raise ToolchainError(f"{binary} not found in PATH")

    def init_module(self, workdir: Path) -> None:
        """Run ``go mod init`` in a fresh workspace."""
        result = execute_command_sync(
            [self.config.go, "mod", "init", self.config.module_path],
            self._options(workdir, merge_stderr=True),
        )
        if not result.ok:
            raise ToolchainError(
                f'failed to run "go mod init": {result.aggregated.strip()}',
                output=result.aggregated,
                exit_code=result.exit_code,
            )

    def verify(self, path: Path) -> None:
        """Check that ``path`` parses, without changing it."""
        result = execute_command_sync(
            [self.config.gofmt, "-e", "-l", str(path)],
            self._options(path.parent),
        )
        if not result.ok:
            raise ToolchainError(
                result.stderr.strip() or result.aggregated.strip(),
                output=result.aggregated,
                exit_code=result.exit_code,
            )

    def resolve_and_format(self, path: Path) -> str:
        """Return the source at ``path`` with imports fixed and gofmt applied.

        Raises:
            ToolchainError: The formatter rejected the file. ``output``
                carries its diagnostics.
        """
        result = execute_command_sync(
            [*self.config.formatter, str(path)],
            self._options(path.parent),
        )
        if not result.ok:
            raise ToolchainError(
                result.stderr.strip() or result.aggregated.strip(),
                output=result.stderr or result.aggregated,
                exit_code=result.exit_code,
            )
        return result.stdout

    def compile_and_run(self, path: Path, workdir: Path) -> ExecOutput:
        """``go run`` the file with stdout and stderr interleaved."""
        return execute_command_sync(
            [self.config.go, "run", path.name],
            self._options(workdir, merge_stderr=True, timeout=self.config.run_timeout),
        )
