# src/buildgate/core/lints/diagnostics.py
"""
Leitura de diagnósticos do compilador atribuídos à política de lints.

O compilador indica a origem do nível de um diagnóstico em notas como:

    = note: requested on the command line with `-D clippy::unwrap-used`
    = note: `#[warn(let_underscore_drop)]` on by default

Cada nota encontrada cuja regra pertence à política efetiva vira um
`LintViolation`, associado ao cabeçalho (`warning: ...` / `error: ...`)
mais recente.

Nomes são comparados de forma normalizada (`-` e `_` equivalentes), pois o
compilador reporta `unwrap-used` para a regra declarada `unwrap_used`.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from buildgate.core.exceptions import LintViolation

from .policy import LintPolicySet, Severity


_COMMAND_LINE_RE = re.compile(r"requested on the command line with `-([WD])\s*([A-Za-z0-9_:\-]+)`")
_ATTRIBUTE_RE = re.compile(r"`#\[(warn|deny)\(([A-Za-z0-9_:\-]+)\)\]`")
_HEADLINE_RE = re.compile(r"^(warning|error)(\[[A-Z0-9]+\])?: (.+)$")


def _normalize(name: str) -> str:
    return name.replace("-", "_")


def scan_diagnostics(output: str, policy: LintPolicySet) -> List[LintViolation]:
    """Extrai violações da política a partir da saída capturada de um estágio."""
    by_normalized: Dict[str, str] = {_normalize(n): n for n in policy.effective}
    effective = policy.effective

    violations: List[LintViolation] = []
    headline: Optional[str] = None

    for line in output.splitlines():
        stripped = line.strip()
        m = _HEADLINE_RE.match(stripped)
        if m:
            headline = m.group(3)
            continue

        found = _COMMAND_LINE_RE.search(stripped) or _ATTRIBUTE_RE.search(stripped)
        if not found:
            continue

        lint = by_normalized.get(_normalize(found.group(2)))
        if lint is None:
            continue

        severity: Severity = effective[lint]
        violations.append(
            LintViolation(
                message=headline or f"diagnóstico {lint}",
                details={"lint": lint, "severity": severity.value, "note": stripped},
            )
        )

    return violations
