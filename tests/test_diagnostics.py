from igo.core.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    is_incomplete,
    is_runtime_failure,
    parse_diagnostics,
    unused_bindings,
)

COMPILE_OUTPUT = """# command-line-arguments
./main.go:4:1: declared and not used: y
./main.go:5:1: declared and not used: z
./main.go:6:2: undefined: foo
"""


def test_parse_diagnostics_ignores_other_lines():
    diags = parse_diagnostics(COMPILE_OUTPUT)
    assert diags == [
        Diagnostic("./main.go", 4, 1, "declared and not used: y"),
        Diagnostic("./main.go", 5, 1, "declared and not used: z"),
        Diagnostic("./main.go", 6, 2, "undefined: foo"),
    ]
    assert [d.kind for d in diags] == [
        DiagnosticKind.UNUSED_BINDING,
        DiagnosticKind.UNUSED_BINDING,
        DiagnosticKind.OTHER,
    ]
    assert str(diags[2]) == "./main.go:6:2: undefined: foo"


def test_unused_bindings_are_distinct_and_ordered():
    output = COMPILE_OUTPUT + "./main.go:7:1: declared and not used: y\n"
    assert unused_bindings(parse_diagnostics(output)) == ["y", "z"]


def test_legacy_unused_message():
    diags = parse_diagnostics("./main.go:4:2: y declared but not used\n")
    assert diags[0].unused_identifier == "y"
    assert diags[0].kind is DiagnosticKind.UNUSED_BINDING


def test_incomplete_from_parser_error():
    diags = parse_diagnostics("/tmp/igo1/main.go:6:1: expected '}', found 'EOF'\n")
    assert diags[0].kind is DiagnosticKind.INCOMPLETE
    assert is_incomplete(diags)
    assert not is_incomplete(parse_diagnostics(COMPILE_OUTPUT))


def test_incomplete_falls_back_to_raw_text():
    assert is_incomplete([], "main.go: expected ')', found 'EOF'")
    assert not is_incomplete([], "could not import fmt")


def test_runtime_failure_detection():
    assert is_runtime_failure("1\npanic: boom\n\ngoroutine 1 [running]:\nexit status 2\n")
    assert is_runtime_failure("exit status 1")
    assert not is_runtime_failure(COMPILE_OUTPUT)
    assert not is_runtime_failure("")
