"""Command execution with timeout and combined output capture.

This module provides subprocess execution with:
- Optional timeouts (the process and everything it started are killed
  when one expires)
- Separate or merged stdout/stderr capture
- Environment inheritance with per-call overrides
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# Options and Output
# =============================================================================


@dataclass
class ExecOptions:
    """Options for command execution.

    Attributes:
        cwd: Working directory for command execution.
        timeout: Maximum execution time in seconds, or None to wait forever.
        env: Additional environment variables to set.
        merge_stderr: Send stderr into the stdout pipe so both streams keep
            the order in which the child wrote them.
    """

    cwd: Path = field(default_factory=Path.cwd)
    timeout: Optional[float] = None
    env: Dict[str, str] = field(default_factory=dict)
    merge_stderr: bool = False

    def __post_init__(self):
        """Ensure cwd is a Path object."""
        if isinstance(self.cwd, str):
            self.cwd = Path(self.cwd)


@dataclass
class ExecOutput:
    """Output from command execution.

    Attributes:
        stdout: Standard output content (everything, when merged).
        stderr: Standard error content (empty when merged).
        aggregated: Combined output.
        exit_code: Process exit code (-1 if unavailable).
        duration: Execution duration in seconds.
        timed_out: Whether the command timed out.
    """

    stdout: str
    stderr: str
    aggregated: str
    exit_code: int
    duration: float
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


def _kill_process_group(process: asyncio.subprocess.Process) -> None:
    """Kill the child together with any processes it spawned.

    A `go run` child leaves the compiled program running as a grandchild
    that still holds the output pipe, so killing the child alone is not
    enough.
    """
    try:
        if os.name == "posix":
            # Started with start_new_session=True, so pid is also the pgid.
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass  # Process group already gone


def _failed(message: str, exit_code: int, duration: float) -> ExecOutput:
    return ExecOutput(
        stdout="",
        stderr=message,
        aggregated=message,
        exit_code=exit_code,
        duration=duration,
    )


# =============================================================================
# Environment Building
# =============================================================================


def build_environment(overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Build the environment for a child process.

    Inherits the parent environment and applies ``overrides`` on top.
    """
    env: Dict[str, str] = dict(os.environ)
    if overrides:
        env.update(overrides)
    return env


# =============================================================================
# Command Execution
# =============================================================================


async def execute_command(
    command: List[str],
    options: Optional[ExecOptions] = None,
) -> ExecOutput:
    """Execute a command with timeout and output capture.

    Args:
        command: Command and arguments as a list of strings.
        options: Execution options (uses defaults if not provided).

    Returns:
        ExecOutput containing stdout, stderr, exit code, duration, etc.
    """
    if options is None:
        options = ExecOptions()

    if not command:
        return _failed("Empty command", 1, 0.0)

    program = command[0]
    args = command[1:]

    start_time = time.monotonic()
    env = build_environment(options.env)
    logger.debug(f"exec {command!r} in {options.cwd}")

    try:
        process = await asyncio.create_subprocess_exec(
            program,
            *args,
            cwd=options.cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT if options.merge_stderr else asyncio.subprocess.PIPE,
            env=env,
            start_new_session=os.name == "posix",
        )

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(),
                timeout=options.timeout,
            )
        except asyncio.TimeoutError:
            duration = time.monotonic() - start_time

            _kill_process_group(process)
            await process.wait()

            logger.debug(f"exec {program} timed out after {duration:.1f}s")
            return ExecOutput(
                stdout="",
                stderr="",
                aggregated=f"Command timed out after {options.timeout:.1f}s",
                exit_code=-1,
                duration=duration,
                timed_out=True,
            )

        duration = time.monotonic() - start_time
        exit_code = process.returncode if process.returncode is not None else -1

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else ""

        logger.debug(f"exec {program} exited {exit_code} in {duration:.2f}s")
        return ExecOutput(
            stdout=stdout,
            stderr=stderr,
            aggregated=stdout + stderr,
            exit_code=exit_code,
            duration=duration,
        )

    except FileNotFoundError:
        return _failed(f"Command not found: {program}", 127, time.monotonic() - start_time)
    except PermissionError:
        return _failed(f"Permission denied: {program}", 126, time.monotonic() - start_time)
    except OSError as e:
        return _failed(f"Failed to spawn: {e}", -1, time.monotonic() - start_time)


def execute_command_sync(
    command: List[str],
    options: Optional[ExecOptions] = None,
) -> ExecOutput:
    """Synchronous wrapper for execute_command."""
    return asyncio.run(execute_command(command, options))
