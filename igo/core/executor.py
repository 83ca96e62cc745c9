"""Run one candidate statement against the session history.

Each attempt writes the assembled program, resolves imports, then
compiles and runs it. Unused local bindings are silenced by appending
``_ = name`` statements and retrying, up to a fixed number of rounds.
"""

from __future__ import annotations

import logging

from igo.config.models import ReplConfig
from igo.core.assembler import assemble_program, write_program
from igo.core.delta import extract_delta
from igo.core.diagnostics import (
    is_incomplete,
    is_runtime_failure,
    parse_diagnostics,
    unused_bindings,
)
from igo.core.session import Session
from igo.errors import (
    CompileError,
    FixLimitExceeded,
    FormatError,
    IncompleteStatement,
    ProgramError,
    ToolchainError,
)
from igo.exec.runner import ExecOutput
from igo.exec.toolchain import Toolchain

logger = logging.getLogger(__name__)


def discard_statement(name: str) -> str:
    return f"_ = {name}\n"


class StatementExecutor:
    """Executes statements for a session, committing only accepted ones."""

    def __init__(self, session: Session, toolchain: Toolchain, config: ReplConfig | None = None):
        self.session = session
        self.toolchain = toolchain
        self.max_fix_attempts = (config or ReplConfig()).max_fix_attempts

    def _write(self, text: str) -> None:
        try:
            write_program(self.session.program_path, text)
        except OSError as e:
            raise FormatError(f"failed to write file: {e}") from e

    def _build_and_run(self, candidate: str, fixes: list[str]) -> ExecOutput:
        s = self.session
        self._write(assemble_program(s.base_source, s.insertion_offset, s.history, candidate, fixes))

        try:
            formatted = self.toolchain.resolve_and_format(s.program_path)
        except ToolchainError as e:
            if is_incomplete(parse_diagnostics(e.output), e.output or e.message):
                raise IncompleteStatement(e.message) from e
            raise FormatError(f"failed to process imports: {e.message}") from e
        self._write(formatted)

        return self.toolchain.compile_and_run(s.program_path, s.workspace_dir)

    def execute(self, statement: str) -> str:
        """Run ``statement`` and return the output it alone produced.

        Raises:
            IncompleteStatement: More input is needed to finish the statement.
            CompileError: The program did not compile for a reason other
                than unused bindings.
            ProgramError: The program failed or timed out at run time.
            FormatError: Imports could not be resolved.
            FixLimitExceeded: Unused-binding repair did not converge.
        """
        candidate = statement + "\n"
        fixes: list[str] = []

        for attempt in range(1, self.max_fix_attempts + 1):
            result = self._build_and_run(candidate, fixes)
            if result.ok:
                break
            if result.timed_out:
                raise ProgramError(result.aggregated)

            output = result.aggregated
            if is_runtime_failure(output):
                delta = extract_delta(output, self.session.shown_line_count)
                raise ProgramError(delta.output.removesuffix("\n"))

            diagnostics = parse_diagnostics(output)
            if is_incomplete(diagnostics):
                raise IncompleteStatement(output)

            names = unused_bindings(diagnostics)
            if not names:
                raise CompileError(output.removesuffix("\n"))
            logger.debug(f"attempt {attempt}: discarding unused {', '.join(names)}")
            fixes.extend(discard_statement(name) for name in names)
        else:
            raise FixLimitExceeded(
                f"could not fix unused variables after {self.max_fix_attempts} attempts",
                attempts=self.max_fix_attempts,
            )

        delta = extract_delta(result.aggregated, self.session.shown_line_count)
        self.session.accept(candidate + "".join(fixes), delta)
        logger.debug(f"statement produced {len(delta.output)} char(s) of new output")
        return delta.output
