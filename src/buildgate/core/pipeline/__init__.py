# src/buildgate/core/pipeline/__init__.py
"""
Pipeline de CI do BuildGate: tipos, estágios, contexto e ambiente.

Componentes:
    - types       → estados, outcomes e resultados imutáveis
    - stage       → estágio declarado + protocolo `CommandExecutor`
    - registry    → unicidade de nomes/ordinais
    - context     → log estruturado da run
    - environment → flags de diagnóstico (backtrace, cor)
    - triggers    → eventos que disparam o pipeline
"""

from .context import RunContext
from .environment import RunEnvironment
from .registry import DuplicateStageError, StageRegistry
from .stage import CommandExecutor, PipelineStage
from .triggers import TriggerPolicy
from .types import (
    CommandResult,
    PipelineOutcome,
    PipelineResult,
    PipelineState,
    StageOutcome,
    StageStatus,
)

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "DuplicateStageError",
    "PipelineOutcome",
    "PipelineResult",
    "PipelineStage",
    "PipelineState",
    "RunContext",
    "RunEnvironment",
    "StageOutcome",
    "StageRegistry",
    "StageStatus",
    "TriggerPolicy",
]
