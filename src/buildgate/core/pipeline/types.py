# src/buildgate/core/pipeline/types.py
"""
Tipos canônicos do pipeline de CI do BuildGate.

Componentes principais:
    - StageStatus     → estado final de um estágio (success, failed, cancelled)
    - PipelineState   → máquina de estados da run
    - CommandResult   → resultado bruto de um processo externo
    - StageOutcome    → registro imutável de um estágio executado
    - PipelineOutcome → Succeeded | Failed(stage, exit_info)
    - PipelineResult  → outcome + log ordenado por estágio

Máquina de estados:

    PENDING ──start──▶ RUNNING(0) ──ok──▶ RUNNING(i+1) ... ──ok──▶ SUCCEEDED
                           │
                           └──falha/cancelamento──▶ STAGE_FAILED(i)   (terminal)

Invariantes:
    - Valores textuais dos enums são estáveis (persistidos no Manifest)
    - Resultados são imutáveis após criados
    - O log contém apenas estágios efetivamente iniciados, em ordem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from buildgate.core.errors import ErrorPayload
from buildgate.core.exceptions import LintViolation, StageFailure


class StageStatus(str, Enum):
    """Estado final de um estágio executado."""

    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PipelineState(str, Enum):
    """Estados da run do pipeline."""

    PENDING = "pending"
    RUNNING = "running"
    STAGE_FAILED = "stage_failed"
    SUCCEEDED = "succeeded"

    @property
    def terminal(self) -> bool:
        return self in (PipelineState.STAGE_FAILED, PipelineState.SUCCEEDED)


@dataclass(frozen=True)
class CommandResult:
    """Resultado de um processo externo (stdout/stderr capturados quando houver)."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class StageOutcome:
    """Registro imutável da execução de um estágio."""

    name: str
    ordinal: int
    argv: Tuple[str, ...]
    status: StageStatus
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    violations: Tuple[LintViolation, ...] = ()
    error: Optional[ErrorPayload] = None

    @property
    def warnings(self) -> List[str]:
        return [
            f"{v.lint}: {v.message}" for v in self.violations if not v.fatal
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ordinal": self.ordinal,
            "argv": list(self.argv),
            "status": self.status.value,
            "returncode": self.returncode,
            "duration_ms": self.duration_ms,
            "violations": [
                {"lint": v.lint, "severity": v.severity, "message": v.message}
                for v in self.violations
            ],
            "error": self.error.to_dict() if self.error is not None else None,
        }


@dataclass(frozen=True)
class PipelineOutcome:
    """Desfecho da run: sucesso, ou falha atribuída a um único estágio."""

    succeeded: bool
    stage_name: Optional[str] = None
    exit_info: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls) -> "PipelineOutcome":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, stage_name: str, exit_info: Dict[str, Any]) -> "PipelineOutcome":
        return cls(succeeded=False, stage_name=stage_name, exit_info=dict(exit_info))

    def __str__(self) -> str:
        if self.succeeded:
            return "Succeeded"
        return f"Failed({self.stage_name!r}, {self.exit_info.get('reason', 'exit')})"


@dataclass(frozen=True)
class PipelineResult:
    """Resultado agregado de uma run do pipeline."""

    outcome: PipelineOutcome
    state: PipelineState
    stage_log: Tuple[StageOutcome, ...] = ()

    @property
    def failed_stage(self) -> Optional[StageOutcome]:
        for stage in self.stage_log:
            if stage.status is not StageStatus.SUCCESS:
                return stage
        return None

    def raise_for_failure(self) -> None:
        """Levanta `StageFailure` se a run falhou; no-op em caso de sucesso."""
        if self.outcome.succeeded:
            return
        raise StageFailure(
            message=f"Estágio '{self.outcome.stage_name}' falhou",
            details={"stage": self.outcome.stage_name, "exit_info": dict(self.outcome.exit_info)},
            hint="Consulte o log do estágio; nenhum estágio posterior foi executado.",
        )
