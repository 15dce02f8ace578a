# src/buildgate/core/lints/__init__.py
"""Política de lints (warn/deny) e leitura de diagnósticos."""

from .diagnostics import scan_diagnostics
from .policy import LintPolicySet, LintRule, Severity, effective, find_conflicts

__all__ = [
    "LintPolicySet",
    "LintRule",
    "Severity",
    "effective",
    "find_conflicts",
    "scan_diagnostics",
]
