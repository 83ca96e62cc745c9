"""REPL session state and workspace lifecycle.

A ``Session`` owns the program file being rewritten, the immutable
skeleton it is built from, and the append-only history of accepted
statements. Rejected statements never touch it.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from igo.core.delta import OutputDelta
from igo.core.skeleton import SkeletonError, empty_skeleton, prepare_skeleton
from igo.errors import StartupError, ToolchainError
from igo.exec.toolchain import Toolchain

logger = logging.getLogger(__name__)

PROGRAM_NAME = "main.go"


@dataclass
class Session:
    """Manages the state of one interactive session."""

    workspace_dir: Path
    program_path: Path
    base_source: str
    insertion_offset: int

    # Set when the session extends an existing file; restored on close.
    original_bytes: Optional[bytes] = None
    owns_workspace: bool = False

    shown_line_count: int = 0
    history: list[str] = field(default_factory=list)
    trailing_remainder: str = ""

    closed: bool = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        toolchain: Toolchain,
        source_path: Optional[Path] = None,
    ) -> "Session":
        """Prepare a session, either in a fresh workspace or around ``source_path``.

        Raises:
            StartupError: The workspace or source file could not be set up.
        """
        try:
            toolchain.check()
        except ToolchainError as e:
            raise StartupError(f"toolchain unavailable: {e}") from e

        if source_path is None:
            return cls._in_temp_workspace(toolchain)
        return cls._around_file(toolchain, source_path)

    @classmethod
    def _in_temp_workspace(cls, toolchain: Toolchain) -> "Session":
        try:
            workdir = Path(tempfile.mkdtemp(prefix="igo"))
        except OSError as e:
            raise StartupError(f"failed to create temporary directory: {e}") from e

        try:
            toolchain.init_module(workdir)
            skeleton = empty_skeleton()
            program_path = workdir / PROGRAM_NAME
            program_path.write_text(skeleton.source, encoding="utf-8")
        except (ToolchainError, OSError) as e:
            shutil.rmtree(workdir, ignore_errors=True)
            raise StartupError(str(e)) from e

        logger.debug(f"created workspace {workdir}")
        return cls(
            workspace_dir=workdir,
            program_path=program_path,
            base_source=skeleton.source,
            insertion_offset=skeleton.insertion_offset,
            owns_workspace=True,
        )

    @classmethod
    def _around_file(cls, toolchain: Toolchain, source_path: Path) -> "Session":
        path = source_path.resolve()
        try:
            original = path.read_bytes()
            text = original.decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StartupError(f'bad file "{source_path}": {e}') from e

        try:
            toolchain.verify(path)
            skeleton = prepare_skeleton(text)
        except (ToolchainError, SkeletonError) as e:
            raise StartupError(f"failed to parse: {e}") from e

        logger.debug(f"extending {path}, splice at offset {skeleton.insertion_offset}")
        return cls(
            workspace_dir=path.parent,
            program_path=path,
            base_source=skeleton.source,
            insertion_offset=skeleton.insertion_offset,
            original_bytes=original,
        )

    # ------------------------------------------------------------------
    # State updates
    # ------------------------------------------------------------------

    def accept(self, entry: str, delta: OutputDelta) -> None:
        """Record an accepted statement and the output it produced."""
        self.history.append(entry)
        self.shown_line_count += delta.line_count
        self.trailing_remainder = delta.remainder
        logger.debug(
            f"accepted statement #{len(self.history)}; "
            f"{self.shown_line_count} line(s) shown so far"
        )

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Restore the extended file or delete the temporary workspace."""
        if self.closed:
            return
        self.closed = True
        if self.original_bytes is not None:
            try:
                self.program_path.write_bytes(self.original_bytes)
            except OSError as e:
                logger.error(f"failed to restore {self.program_path}: {e}")
        if self.owns_workspace:
            shutil.rmtree(self.workspace_dir, ignore_errors=True)
            logger.debug(f"removed workspace {self.workspace_dir}")

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
