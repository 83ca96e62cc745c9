"""Isolate the output of the newest statement.

Every run replays the whole history, so its output starts with lines the
user has already seen. Those are skipped by counting newlines; the new
statement's output then runs up to the sentinel marker. Whatever follows
the marker comes from skeleton code after the splice point.
"""

from __future__ import annotations

from dataclasses import dataclass

from igo.core.assembler import SENTINEL_LINE


@dataclass(frozen=True)
class OutputDelta:
    output: str  # produced by the newest statement
    remainder: str  # produced after the sentinel
    line_count: int  # newlines in ``output``


def skip_lines(output: str, count: int) -> int:
    """Return the index just past the first ``count`` newlines.

    If ``output`` has fewer newlines than that, the result is its length.
    """
    start = 0
    for _ in range(count):
        nl = output.find("\n", start)
        if nl < 0:
            return len(output)
        start = nl + 1
    return start


def extract_delta(output: str, shown_line_count: int) -> OutputDelta:
    """Split the output of a run into new output and trailing remainder.

    Does not modify any session state; the caller commits the result
    once the statement is accepted.
    """
    start = skip_lines(output, shown_line_count)
    end = output.find(SENTINEL_LINE, start)
    if end < 0:
        end = len(output)

    after = end + len(SENTINEL_LINE)
    if after < len(output):
        remainder = output[after:].removesuffix("\n") + "\n"
    else:
        remainder = ""

    delta = output[start:end]
    return OutputDelta(output=delta, remainder=remainder, line_count=delta.count("\n"))
