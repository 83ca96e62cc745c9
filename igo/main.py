"""Main CLI entry point for igo."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from igo import __version__
from igo.config.loader import find_config_file, load_config
from igo.config.models import IgoConfig, LogConfig
from igo.core.executor import StatementExecutor
from igo.core.loop import LineReader, run_repl_loop
from igo.core.session import Session
from igo.errors import InputReadError, StartupError
from igo.exec.toolchain import GoToolchain
from igo.output.processor import OutputProcessor
from igo.tools.shell import ShellCommandTool

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="igo",
    help="Interactive Go prompt",
    add_completion=False,
)

console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: LogConfig, verbose: bool = False) -> None:
    """Send log records to stderr and, optionally, a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def version_callback(value: bool):
    if value:
        console.print(f"igo v{__version__}")
        raise typer.Exit()


def build_toolchain(config: IgoConfig) -> GoToolchain:
    return GoToolchain(config.toolchain)


@app.command()
def main(
    source: Optional[Path] = typer.Argument(
        None, help="Existing Go source file to extend (default: empty program)"
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Kill a program run after this many seconds"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored errors"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose logging"),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Read Go statements, run them and print what each one outputs."""
    overrides = {}
    if timeout is not None:
        overrides["toolchain.run_timeout"] = timeout
    if no_color:
        overrides["output.colors"] = False

    try:
        config = load_config(config_file or find_config_file(), overrides)
    except (OSError, ValueError) as e:
        console.print(f"Error loading configuration: {e}", style="red", markup=False)
        raise typer.Exit(1)

    configure_logging(config.log, verbose)
    logger.debug(f"configuration: {config.model_dump()}")

    toolchain = build_toolchain(config)
    try:
        session = Session.create(toolchain, source)
    except StartupError as e:
        console.print(str(e), style="red", markup=False)
        raise typer.Exit(1)

    output = OutputProcessor(config.output)
    with session:
        executor = StatementExecutor(session, toolchain, config.repl)
        shell = ShellCommandTool(session.workspace_dir, config.toolchain.env)
        reader = LineReader(output)
        try:
            status = run_repl_loop(session, executor, shell, output, reader, config.repl)
        except InputReadError as e:
            output.error(str(e))
            raise typer.Exit(1)

    raise typer.Exit(status)


if __name__ == "__main__":
    app()
