# src/buildgate/core/pipeline/registry.py
"""
Registro estrutural de estágios do pipeline.

O `StageRegistry` valida, no momento do registro, que cada estágio possui
nome e ordinal únicos, e preserva explicitamente a ordem de declaração.

Limites explícitos:
    - Não ordena por ordinal (ver `core.engine.planner`)
    - Não executa estágios
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from buildgate.core.config.errors import MalformedPipelineError

from .stage import PipelineStage


class DuplicateStageError(MalformedPipelineError):
    """Dois estágios com o mesmo nome ou o mesmo ordinal."""


@dataclass
class StageRegistry:
    """Registro canônico de estágios para validação estrutural pré-execução."""

    _stages: Dict[str, PipelineStage] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)
    _ordinals: Set[int] = field(default_factory=set, init=False, repr=False)

    def add(self, stage: PipelineStage) -> None:
        if stage.name in self._stages:
            raise DuplicateStageError(f"Duplicate stage name: {stage.name}")
        if stage.ordinal in self._ordinals:
            raise DuplicateStageError(f"Duplicate stage ordinal: {stage.ordinal} ({stage.name})")
        self._stages[stage.name] = stage
        self._order.append(stage.name)
        self._ordinals.add(stage.ordinal)

    def get(self, name: str) -> PipelineStage:
        return self._stages[name]

    def list(self) -> List[PipelineStage]:
        return [self._stages[n] for n in self._order]
