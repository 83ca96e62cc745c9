"""The read-eval-print loop.

Each line read is a quit token, a shell passthrough command or (part of)
a Go statement. A statement the parser reports as cut short is not an
error: the loop reads another line, appends it and tries again.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Optional, TextIO

from igo.config.models import ReplConfig
from igo.core.executor import StatementExecutor
from igo.core.session import Session
from igo.errors import IncompleteStatement, InputReadError, StatementError
from igo.output.processor import OutputProcessor
from igo.tools.shell import ShellCommandTool

logger = logging.getLogger(__name__)


class InputKind(str, Enum):
    QUIT = "quit"
    SHELL = "shell"
    STATEMENT = "statement"


class LineReader:
    """Reads newline-terminated lines, showing a prompt first."""

    def __init__(self, output: OutputProcessor, stdin: Optional[TextIO] = None):
        self.output = output
        self.stdin = stdin or sys.stdin

    def read(self, prompt: str) -> Optional[str]:
        """Return the next line without surrounding whitespace, or None at end of input.

        Raises:
            InputReadError: The stream could not be read.
        """
        self.output.prompt(prompt)
        try:
            line = self.stdin.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"failed to read input: {e}") from e
        if not line:
            return None
        return line.strip()


def classify_input(line: str, config: ReplConfig, pending: bool = False) -> InputKind:
    """Decide where a line goes. Shell commands are not recognized mid-statement."""
    if line in config.quit_commands:
        return InputKind.QUIT
    if not pending and config.shell_prefix and line.startswith(config.shell_prefix):
        return InputKind.SHELL
    return InputKind.STATEMENT


def run_shell(shell: ShellCommandTool, command_line: str, output: OutputProcessor) -> None:
    result = shell.execute(command_line)
    if result.success:
        output.shell_output(result.output)
    else:
        output.error(result.error or "command failed")


def run_repl_loop(
    session: Session,
    executor: StatementExecutor,
    shell: ShellCommandTool,
    output: OutputProcessor,
    reader: LineReader,
    config: Optional[ReplConfig] = None,
) -> int:
    """Run the loop until a quit token or end of input.

    Returns:
        Process exit status (0).

    Raises:
        InputReadError: Reading failed, or input ended inside a statement.
    """
    config = config or ReplConfig()
    pending: Optional[str] = None

    while True:
        line = reader.read(config.prompt if pending is None else config.continuation_prompt)

        if line is None:
            if pending is not None:
                raise InputReadError("failed to read input: unexpected end of input")
            break

        kind = classify_input(line, config, pending=pending is not None)
        if kind is InputKind.QUIT:
            break

        if kind is InputKind.SHELL:
            run_shell(shell, line[len(config.shell_prefix) :], output)
            continue

        if pending is None and not line:
            continue
        statement = line if pending is None else pending + "\n" + line

        try:
            output.program_output(executor.execute(statement))
        except IncompleteStatement:
            logger.debug("statement incomplete, reading another line")
            pending = statement
            continue
        except StatementError as e:
            output.error(str(e))
        pending = None

    output.remainder(session.trailing_remainder)
    return 0
