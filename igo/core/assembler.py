"""Splice accumulated statements into the program skeleton."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

# A NUL byte keeps the marker out of ordinary program output.
SENTINEL = "\x00igo:EOF"
SENTINEL_LINE = SENTINEL + "\n"
SENTINEL_STATEMENT = 'println("\\000igo:EOF")'


def _terminated(text: str) -> str:
    return text if not text or text.endswith("\n") else text + "\n"


def assemble_program(
    base_source: str,
    insertion_offset: int,
    history: Iterable[str],
    candidate: str,
    fixes: Iterable[str] = (),
) -> str:
    """Build the full program text for one run.

    Order: skeleton prefix, newline, history, candidate, fixes, the
    sentinel print, skeleton suffix. The sentinel therefore always
    follows the code under test and precedes whatever the skeleton runs
    after the splice point.
    """
    parts = [base_source[:insertion_offset], "\n"]
    parts.extend(_terminated(entry) for entry in history)
    parts.append(_terminated(candidate))
    parts.extend(_terminated(fix) for fix in fixes)
    parts.append(SENTINEL_STATEMENT)
    parts.append(base_source[insertion_offset:])
    return "".join(parts)


def write_program(path: Path, text: str) -> None:
    """Overwrite ``path`` with ``text``."""
    path.write_text(text, encoding="utf-8")
