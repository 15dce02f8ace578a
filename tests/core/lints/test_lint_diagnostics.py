# tests/core/lints/test_lint_diagnostics.py
"""
Testes da leitura de diagnósticos do compilador.

A saída capturada de um estágio é varrida em busca das notas que o
compilador emite para lints ativados pela política; cada nota vira uma
`LintViolation` com a severidade efetiva da regra.
"""

from buildgate.core.lints import LintPolicySet, scan_diagnostics


POLICY = LintPolicySet.from_config(
    [
        {"name": "clippy::unwrap_used", "severity": "deny"},
        {"name": "clippy::uninlined_format_args", "severity": "warn"},
    ]
)


DENY_OUTPUT = """\
error: used `unwrap()` on an `Option` value
 --> src/main.rs:4:5
  |
4 |     x.unwrap();
  |     ^^^^^^^^^^
  |
  = note: requested on the command line with `-D clippy::unwrap-used`
"""

WARN_OUTPUT = """\
warning: variables can be used directly in the `format!` string
 --> src/lib.rs:10:5
  = note: `#[warn(clippy::uninlined_format_args)]` on by default
"""


def test_deny_note_is_fatal_violation():
    violations = scan_diagnostics(DENY_OUTPUT, POLICY)

    assert len(violations) == 1
    v = violations[0]
    assert v.lint == "clippy::unwrap_used"
    assert v.severity == "deny"
    assert v.fatal is True
    assert v.message == "used `unwrap()` on an `Option` value"


def test_warn_attribute_is_non_fatal():
    violations = scan_diagnostics(WARN_OUTPUT, POLICY)

    assert [v.lint for v in violations] == ["clippy::uninlined_format_args"]
    assert violations[0].fatal is False


def test_unrelated_diagnostics_are_ignored():
    output = "warning: unused variable: `x`\n  = note: `#[warn(unused_variables)]` on by default\n"
    assert scan_diagnostics(output, POLICY) == []


def test_clean_output_has_no_violations():
    assert scan_diagnostics("    Finished dev [unoptimized] target(s) in 0.5s\n", POLICY) == []
