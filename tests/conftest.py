import io
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path

import pytest

from igo.config.models import OutputConfig, ReplConfig
from igo.core.executor import StatementExecutor
from igo.core.loop import LineReader, run_repl_loop
from igo.core.session import Session
from igo.errors import ToolchainError
from igo.exec.runner import ExecOutput
from igo.output.processor import OutputProcessor
from igo.tools.shell import ShellCommandTool

DECL_RE = re.compile(r"^(\w+) := (.+)$")
ASSIGN_RE = re.compile(r"^(\w+) = (.+)$")
INC_RE = re.compile(r"^(\w+)\+\+$")
DEFER_RE = re.compile(r"^defer (.+)$")
PRINT_RE = re.compile(r"^(?:println|fmt\.Println)\((.*)\)$")
PRINT_NO_NL_RE = re.compile(r"^fmt\.Print\((.*)\)$")
PANIC_RE = re.compile(r'^panic\("(.*)"\)$')
VAR_INT_STRING_RE = re.compile(r'^var (\w+) int = (".*")$')
STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"')
IDENT_RE = re.compile(r"\b[A-Za-z_]\w*\b")

SKIP_PREFIXES = ("package ", "import ", "func ", "if ", "for ", "//", ")")


def _statements(text):
    """Yield (line, column, statement) for every simple statement in ``text``."""
    for lineno, line in enumerate(text.split("\n"), 1):
        for part in line.split(";"):
            stmt = part.strip().rstrip("}").strip()
            if not stmt or stmt.startswith(SKIP_PREFIXES) or stmt.endswith("{"):
                continue
            yield lineno, line.find(stmt) + 1, stmt


def _eval(expr, env):
    expr = expr.strip()
    if expr.startswith('"'):
        return expr[1:-1].replace("\\000", "\x00").replace("\\n", "\n")
    if re.fullmatch(r"-?\d+", expr):
        return int(expr)
    m = re.fullmatch(r"(\w+) \+ (\d+)", expr)
    if m:
        return env[m.group(1)] + int(m.group(2))
    return env[expr]


class FakeGoToolchain:
    """Stand-in for the Go tools that understands a tiny subset of Go.

    Supported statements: ``x := 1``, ``x = x + 1``, ``x++``, ``_ = x``,
    ``println(...)``/``fmt.Println(...)``/``fmt.Print(...)``,
    ``defer println(...)``, ``panic("...")``, ``if cond {`` blocks (the
    condition is ignored), ``undefined_fn()`` (compile error) and
    ``hang()`` (times out). Unused ``:=`` bindings are compile errors,
    as in Go.
    """

    def __init__(self):
        self.missing = False
        self.verify_error = None
        self.modules: list[Path] = []
        self.formatted: list[str] = []
        self.runs: list[str] = []

    # -- Toolchain protocol -------------------------------------------------

    def check(self):
        if self.missing:
            raise ToolchainError("go not found in PATH")

    def init_module(self, workdir):
        (workdir / "go.mod").write_text("module igo.localhost\n")
        self.modules.append(workdir)

    def verify(self, path):
        if self.verify_error:
            raise ToolchainError(self.verify_error)

    def resolve_and_format(self, path):
        text = path.read_text()
        self.formatted.append(text)
        if text.count("{") > text.count("}"):
            line = text.count("\n") + 1
            message = f"{path}:{line}:1: expected '}}', found 'EOF'"
            raise ToolchainError(message, output=message + "\n", exit_code=2)
        if "missing_pkg." in text:
            message = f'{path}:4:1: could not import missing_pkg (no required module provides package "missing_pkg")'
            raise ToolchainError(message, output=message + "\n", exit_code=1)
        return text

    def compile_and_run(self, path, workdir):
        text = path.read_text()
        self.runs.append(text)

        errors = self._compile_errors(text)
        if errors:
            lines = "".join(f"./{path.name}:{ln}:{col}: {msg}\n" for ln, col, msg in sorted(errors))
            return self._result("# command-line-arguments\n" + lines, 1)
        return self._run(text, path)

    # -- internals ------------------------------------------------------------

    @staticmethod
    def _result(output, exit_code, timed_out=False):
        return ExecOutput(
            stdout=output,
            stderr="",
            aggregated=output,
            exit_code=exit_code,
            duration=0.0,
            timed_out=timed_out,
        )

    @staticmethod
    def _compile_errors(text):
        errors = []
        declared = {}
        uses = Counter()
        for lineno, col, stmt in _statements(text):
            if "undefined_fn" in stmt:
                errors.append((lineno, col, "undefined: undefined_fn"))
            m = VAR_INT_STRING_RE.match(stmt)
            if m:
                errors.append(
                    (
                        lineno,
                        col,
                        f"cannot use {m.group(2)} (untyped string constant) as int value "
                        "in variable declaration",
                    )
                )
                continue
            rhs = stmt
            m = DECL_RE.match(stmt)
            if m:
                if m.group(1) in declared:
                    errors.append((lineno, col, "no new variables on left side of :="))
                else:
                    declared[m.group(1)] = (lineno, col)
                rhs = m.group(2)
            elif INC_RE.match(stmt):
                rhs = ""
            elif ASSIGN_RE.match(stmt):
                rhs = ASSIGN_RE.match(stmt).group(2)
            uses.update(IDENT_RE.findall(STRING_RE.sub('""', rhs)))
        for name, (lineno, col) in declared.items():
            if not uses[name]:
                errors.append((lineno, col, f"declared and not used: {name}"))
        return errors

    def _run(self, text, path):
        env = {}
        out = []
        deferred = []
        for lineno, _col, stmt in _statements(text):
            if stmt == "hang()":
                return self._result("Command timed out after 1.0s", -1, timed_out=True)
            m = DEFER_RE.match(stmt)
            if m:
                deferred.append(m.group(1))
                continue
            m = PANIC_RE.match(stmt)
            if m:
                out.append(
                    f"panic: {m.group(1)}\n\ngoroutine 1 [running]:\nmain.main()\n"
                    f"\t{path}:{lineno} +0x1d\nexit status 2\n"
                )
                return self._result("".join(out), 1)
            self._exec(stmt, env, out)
        for stmt in reversed(deferred):
            self._exec(stmt, env, out)
        return self._result("".join(out), 0)

    @staticmethod
    def _exec(stmt, env, out):
        m = DECL_RE.match(stmt) or ASSIGN_RE.match(stmt)
        if m:
            if m.group(1) != "_":
                env[m.group(1)] = _eval(m.group(2), env)
            return
        m = INC_RE.match(stmt)
        if m:
            env[m.group(1)] += 1
            return
        m = PRINT_RE.match(stmt)
        if m:
            out.append(f"{_eval(m.group(1), env)}\n")
            return
        m = PRINT_NO_NL_RE.match(stmt)
        if m:
            out.append(f"{_eval(m.group(1), env)}")


@dataclass
class ReplRun:
    stdout: str
    stderr: str
    status: int


@pytest.fixture()
def fake_go():
    return FakeGoToolchain()


@pytest.fixture()
def session(fake_go):
    s = Session.create(fake_go)
    yield s
    s.close()


@pytest.fixture()
def executor(session, fake_go):
    return StatementExecutor(session, fake_go, ReplConfig())


@pytest.fixture()
def run_repl(session, fake_go):
    """Drive the loop with scripted input; returns captured streams and status."""

    def _run(*lines: str, config: ReplConfig | None = None) -> ReplRun:
        config = config or ReplConfig(prompt="")
        stdout, stderr = io.StringIO(), io.StringIO()
        output = OutputProcessor(OutputConfig(colors=False), stdout=stdout, stderr=stderr)
        reader = LineReader(output, stdin=io.StringIO("".join(f"{line}\n" for line in lines)))
        executor = StatementExecutor(session, fake_go, config)
        shell = ShellCommandTool(session.workspace_dir)
        status = run_repl_loop(session, executor, shell, output, reader, config)
        return ReplRun(stdout=stdout.getvalue(), stderr=stderr.getvalue(), status=status)

    return _run


@pytest.fixture()
def go_file(tmp_path):
    """Write a Go source file into tmp_path and return its path."""

    def _write(text: str, name: str = "main.go") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
