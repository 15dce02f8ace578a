"""
BuildGate — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros reportados ao operador.

Erros fazem parte do contrato operacional do sistema, devendo ser:
- explícitos
- serializáveis
- atribuíveis a um único estágio ou alias
- acionáveis

Nenhuma falha é silenciada e nenhum fallback é aplicado.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do BuildGate.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Configuração
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

# Aliases
ALIAS_CYCLE = "ALIAS_CYCLE"
ALIAS_UNKNOWN = "ALIAS_UNKNOWN"
ALIAS_DEPTH_EXCEEDED = "ALIAS_DEPTH_EXCEEDED"

# Estágios
STAGE_EXIT_FAILURE = "STAGE_EXIT_FAILURE"
STAGE_LAUNCH_FAILURE = "STAGE_LAUNCH_FAILURE"
STAGE_CANCELLED = "STAGE_CANCELLED"
STAGE_LINT_DENIED = "STAGE_LINT_DENIED"

# Runner
RUNNER_EXECUTION_ERROR = "RUNNER_EXECUTION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------


def configuration_error(
    *,
    message: str,
    exc_type: Optional[str] = None,
    hint: str = "Corrija a política (defaults/local) indicada antes de reexecutar; nenhuma etapa foi executada.",
) -> ErrorPayload:
    return ErrorPayload(
        type=CONFIGURATION_ERROR,
        message=message,
        details={"exc_type": exc_type},
        hint=hint,
    )


def stage_exit_failure(
    *,
    stage: str,
    argv: List[str],
    returncode: int,
    hint: str = "Reproduza o comando do estágio localmente; a saída capturada está no log do estágio.",
) -> ErrorPayload:
    return ErrorPayload(
        type=STAGE_EXIT_FAILURE,
        message=f"Estágio '{stage}' terminou com código {returncode}",
        details={"stage": stage, "argv": list(argv), "returncode": returncode},
        hint=hint,
    )


def stage_launch_failure(
    *,
    stage: str,
    argv: List[str],
    reason: str,
    hint: str = "Verifique se a toolchain está instalada e presente no PATH.",
) -> ErrorPayload:
    return ErrorPayload(
        type=STAGE_LAUNCH_FAILURE,
        message=f"Estágio '{stage}' não pôde ser iniciado",
        details={"stage": stage, "argv": list(argv), "reason": reason},
        hint=hint,
    )


def stage_cancelled(
    *,
    stage: str,
    argv: List[str],
    hint: str = "O pipeline foi interrompido pelo operador; reexecute o pipeline completo.",
) -> ErrorPayload:
    return ErrorPayload(
        type=STAGE_CANCELLED,
        message=f"Estágio '{stage}' cancelado",
        details={"stage": stage, "argv": list(argv), "reason": "cancelled"},
        hint=hint,
    )


def stage_lint_denied(
    *,
    stage: str,
    lints: List[str],
    hint: str = "Corrija os diagnósticos com severidade deny ou ajuste explicitamente a política de lints.",
) -> ErrorPayload:
    return ErrorPayload(
        type=STAGE_LINT_DENIED,
        message=f"Estágio '{stage}' violou lints com severidade deny",
        details={"stage": stage, "lints": list(lints)},
        hint=hint,
    )
