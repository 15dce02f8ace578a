# src/buildgate/core/lints/policy.py
"""
Lint Policy Set.

Conjunto ordenado de pares (diagnóstico, severidade) aplicado uniformemente a
toda unidade compilada do workspace. A severidade é `warn` (reportado, não
fatal) ou `deny` (fatal ao estágio de build).

Política efetiva:
    - fold da esquerda para a direita; a última entrada vence por nome
    - ordem das chaves = ordem da primeira aparição
    - redefinição com severidade diferente sem `override: true` gera
      aviso (nunca falha)

Todas as operações são puras: nada de estado global mutável.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from buildgate.core.config.errors import MalformedLintRuleError


class Severity(str, Enum):
    """Nível de impacto de um diagnóstico no build."""

    WARN = "warn"
    DENY = "deny"

    @property
    def flag(self) -> str:
        return "-W" if self is Severity.WARN else "-D"


_FLAG_TO_SEVERITY = {"-W": Severity.WARN, "-D": Severity.DENY}


@dataclass(frozen=True)
class LintRule:
    """Regra declarada: nome do diagnóstico + severidade."""

    name: str
    severity: Severity
    override: bool = False

    @classmethod
    def parse(cls, raw: Any) -> "LintRule":
        """
        Aceita `{name, severity, override?}` ou a forma nativa `"-D nome"`.

        Raises:
            MalformedLintRuleError: Se nome ou severidade forem inválidos.
        """
        if isinstance(raw, str):
            parts = raw.split()
            if len(parts) == 2 and parts[0] in _FLAG_TO_SEVERITY:
                return cls(name=parts[1], severity=_FLAG_TO_SEVERITY[parts[0]])
            raise MalformedLintRuleError(f"Regra de lint inválida: {raw!r}")

        if not isinstance(raw, dict):
            raise MalformedLintRuleError(f"Regra de lint inválida: {raw!r}")

        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            raise MalformedLintRuleError(f"Regra de lint sem nome: {raw!r}")

        try:
            severity = Severity(str(raw.get("severity", "")).lower())
        except ValueError as e:
            raise MalformedLintRuleError(
                f"Severidade inválida para '{name}': {raw.get('severity')!r} (use warn|deny)"
            ) from e

        return cls(name=name.strip(), severity=severity, override=bool(raw.get("override", False)))


def effective(rules: Iterable[LintRule]) -> Dict[str, Severity]:
    """Mapeamento efetivo nome → severidade (última entrada vence)."""
    result: Dict[str, Severity] = {}
    for rule in rules:
        result[rule.name] = rule.severity
    return result


def find_conflicts(rules: Iterable[LintRule]) -> List[str]:
    """Lista redefinições silenciosas (severidade diferente sem `override`)."""
    seen: Dict[str, Severity] = {}
    messages: List[str] = []
    for rule in rules:
        previous = seen.get(rule.name)
        if previous is not None and previous != rule.severity and not rule.override:
            messages.append(
                f"lint '{rule.name}' redefinido de {previous.value} para "
                f"{rule.severity.value} sem override explícito"
            )
        seen[rule.name] = rule.severity
    return messages


@dataclass(frozen=True)
class LintPolicySet:
    """Política de lints imutável, pronta para injeção na toolchain."""

    rules: Tuple[LintRule, ...] = ()

    @classmethod
    def from_config(cls, raw: Optional[List[Any]]) -> "LintPolicySet":
        if raw is None:
            return cls()
        if not isinstance(raw, list):
            raise MalformedLintRuleError(
                f"Seção 'lints' deve ser lista, recebido: {type(raw).__name__}"
            )
        return cls(rules=tuple(LintRule.parse(r) for r in raw))

    @property
    def effective(self) -> Dict[str, Severity]:
        return effective(self.rules)

    @property
    def conflicts(self) -> List[str]:
        return find_conflicts(self.rules)

    def names(self, severity: Severity) -> List[str]:
        return [name for name, sev in self.effective.items() if sev is severity]

    def to_flags(self) -> List[str]:
        """Uma flag por entrada efetiva: `-W<nome>` ou `-D<nome>`."""
        return [f"{sev.flag}{name}" for name, sev in self.effective.items()]

    def to_flag_pairs(self) -> List[Tuple[str, str]]:
        return [(sev.flag, name) for name, sev in self.effective.items()]

    def to_rustflags(self) -> str:
        """Valor para a variável `RUSTFLAGS` do processo."""
        return " ".join(self.to_flags())
