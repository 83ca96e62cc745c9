"""Exception hierarchy for igo.

Only ``StartupError`` and ``InputReadError`` end the process. Everything
under ``StatementError`` is reported for one input and the session goes on.
"""

from __future__ import annotations


class IgoError(Exception):
    """Base class for igo errors."""


class StartupError(IgoError):
    """Raised when the workspace or the initial source cannot be prepared."""


class InputReadError(IgoError):
    """Raised when the input stream fails or closes mid-statement."""


class ToolchainError(IgoError):
    """A toolchain command failed.

    ``output`` holds whatever the command printed before failing.
    """

    def __init__(self, message: str, output: str = "", exit_code: int = -1):
        super().__init__(message)
        self.message = message
        self.output = output
        self.exit_code = exit_code


class IncompleteStatement(IgoError):
    """The candidate statement ends before it is syntactically complete."""


class StatementError(IgoError):
    """A candidate statement was rejected; the message is shown verbatim."""


class CompileError(StatementError):
    """The assembled program did not compile."""


class ProgramError(StatementError):
    """The assembled program compiled but terminated abnormally."""


class FormatError(StatementError):
    """Import resolution or formatting failed for a complete statement."""


class FixLimitExceeded(StatementError):
    """Unused-binding repair did not converge."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts
