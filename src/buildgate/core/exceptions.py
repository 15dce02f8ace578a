"""
BuildGate — Canonical Exceptions (v1)

Este módulo define exceções tipadas de tempo de resolução e de execução.

Objetivo:
- Permitir que resolver, lints e runner levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Falhas de carga de configuração vivem em `core.config.errors`.
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, eq=False)
class BuildGateException(Exception):
    """Base class para exceções internas do BuildGate.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Resolução de aliases
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class AliasResolutionError(BuildGateException):
    """Falha ao expandir um alias; afeta apenas o alias invocado."""

    @property
    def alias(self) -> Optional[str]:
        return self.details.get("alias")


@dataclass(frozen=True, eq=False)
class CyclicAliasError(AliasResolutionError):
    """Alias referencia a si mesmo, direta ou transitivamente."""

    @property
    def path(self) -> List[str]:
        return list(self.details.get("path", []))


@dataclass(frozen=True, eq=False)
class UnknownAliasError(AliasResolutionError):
    """Nome de alias inexistente na tabela."""

    @property
    def name(self) -> str:
        return str(self.details.get("name", ""))


@dataclass(frozen=True, eq=False)
class AliasDepthExceededError(AliasResolutionError):
    """Expansão excedeu a profundidade máxima configurada."""


# ---------------------------------------------------------------------------
# Lints
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class LintViolation(BuildGateException):
    """Diagnóstico do compilador atribuído a uma regra da política.

    `warn` é registrado e não fatal; `deny` é fatal ao estágio que o contém.
    """

    @property
    def lint(self) -> str:
        return str(self.details.get("lint", ""))

    @property
    def severity(self) -> str:
        return str(self.details.get("severity", ""))

    @property
    def fatal(self) -> bool:
        return self.severity == "deny"


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class StageFailure(BuildGateException):
    """Estágio do pipeline falhou; nenhum estágio seguinte é executado."""

    @property
    def stage_name(self) -> str:
        return str(self.details.get("stage", ""))

    @property
    def exit_info(self) -> Dict[str, Any]:
        return dict(self.details.get("exit_info", {}) or {})


@dataclass(frozen=True, eq=False)
class CommandLaunchError(BuildGateException):
    """O processo externo não pôde ser iniciado (ex.: toolchain ausente)."""


@dataclass(frozen=True, eq=False)
class CommandCancelledError(BuildGateException):
    """O processo externo foi interrompido por um sinal do operador."""
