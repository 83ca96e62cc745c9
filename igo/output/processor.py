"""Output processor for igo.

Program output goes to stdout untouched. Errors go to stderr through a
rich console, verbatim: no markup parsing, highlighting or wrapping.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from rich.console import Console

from igo.config.models import OutputConfig


class OutputProcessor:
    """Writes prompts, program output and errors."""

    def __init__(
        self,
        config: Optional[OutputConfig] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        """Initialize the output processor.

        Args:
            config: Output configuration
            stdout: Standard output stream (default: sys.stdout)
            stderr: Standard error stream (default: sys.stderr)
        """
        self.config = config or OutputConfig()
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

        self.console = Console(
            file=self.stderr,
            no_color=not self.config.colors,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    def prompt(self, text: str) -> None:
        """Write a prompt without a trailing newline."""
        if text:
            self.stdout.write(text)
            self.stdout.flush()

    def program_output(self, text: str) -> None:
        """Print output produced by the newest statement, if any."""
        text = text.removesuffix("\n")
        if text:
            print(text, file=self.stdout, flush=True)

    def shell_output(self, text: str) -> None:
        """Print the output of a passthrough command as it was produced."""
        if text:
            self.stdout.write(text)
            self.stdout.flush()

    def remainder(self, text: str) -> None:
        """Flush output that skeleton code printed after the splice point."""
        self.shell_output(text)

    def error(self, message: str) -> None:
        """Print an error message on stderr."""
        self.console.print(message, style="red")
