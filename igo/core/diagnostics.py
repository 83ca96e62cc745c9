"""Parse and classify compiler diagnostics.

Go tools report problems as ``path:line:col: message`` lines. Three
classes matter to the session:

- incomplete input (the parser hit end of file), which asks for another
  line of input;
- unused local bindings, which are repaired automatically;
- everything else, which is shown to the user.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

DIAGNOSTIC_RE = re.compile(r"^([^\s:]+):(\d+):(\d+):\s*(.+)$")

FOUND_EOF = "found 'EOF'"
UNUSED_PREFIX = "declared and not used: "
# Go releases before 1.20 put the name first.
LEGACY_UNUSED_RE = re.compile(r"^(\w+) declared (?:and|but) not used$")
EXIT_STATUS_PREFIX = "exit status "


class DiagnosticKind(str, Enum):
    INCOMPLETE = "incomplete"
    UNUSED_BINDING = "unused_binding"
    OTHER = "other"


@dataclass(frozen=True)
class Diagnostic:
    """One ``file:line:col: message`` record."""

    file: str
    line: int
    column: int
    message: str

    @property
    def unused_identifier(self) -> Optional[str]:
        if self.message.startswith(UNUSED_PREFIX):
            return self.message[len(UNUSED_PREFIX) :].strip()
        m = LEGACY_UNUSED_RE.match(self.message)
        return m.group(1) if m else None

    @property
    def kind(self) -> DiagnosticKind:
        if FOUND_EOF in self.message:
            return DiagnosticKind.INCOMPLETE
        if self.unused_identifier:
            return DiagnosticKind.UNUSED_BINDING
        return DiagnosticKind.OTHER

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}: {self.message}"


def parse_diagnostics(output: str) -> list[Diagnostic]:
    """Extract every diagnostic line from ``output``; other lines are ignored."""
    diagnostics = []
    for line in output.splitlines():
        m = DIAGNOSTIC_RE.match(line)
        if m:
            diagnostics.append(
                Diagnostic(
                    file=m.group(1),
                    line=int(m.group(2)),
                    column=int(m.group(3)),
                    message=m.group(4).rstrip(),
                )
            )
    return diagnostics


def is_incomplete(diagnostics: Iterable[Diagnostic], raw: str = "") -> bool:
    """True if the input ended before the statement was complete.

    ``raw`` is consulted only when no diagnostic line could be parsed.
    """
    diagnostics = list(diagnostics)
    if not diagnostics:
        return FOUND_EOF in raw
    return any(d.kind is DiagnosticKind.INCOMPLETE for d in diagnostics)


def unused_bindings(diagnostics: Iterable[Diagnostic]) -> list[str]:
    """Distinct unused identifiers, in the order first reported."""
    names: list[str] = []
    for d in diagnostics:
        name = d.unused_identifier
        if name and name not in names:
            names.append(name)
    return names


def is_runtime_failure(output: str) -> bool:
    """True if ``go run`` reports that the program itself exited non-zero."""
    lines = output.removesuffix("\n").split("\n")
    return lines[-1].startswith(EXIT_STATUS_PREFIX)
