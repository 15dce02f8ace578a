# src/buildgate/core/engine/planner.py
"""
Planejador de execução do pipeline de CI.

O pipeline é linear: o ordinal de cada estágio determina estritamente a
ordem de execução. O planner valida a estrutura (nomes e ordinais únicos)
e produz a sequência ordenada pronta para o runner.

Invariantes:
    - Todos os estágios válidos aparecem exatamente uma vez
    - A mesma declaração produz sempre a mesma ordem

Limites explícitos:
    - Não executa estágios
    - Não resolve aliases
"""

from __future__ import annotations

from typing import Iterable, List

from buildgate.core.pipeline.registry import StageRegistry
from buildgate.core.pipeline.stage import PipelineStage


def plan_stages(stages: Iterable[PipelineStage]) -> List[PipelineStage]:
    """
    Valida e ordena estágios por ordinal.

    Raises:
        DuplicateStageError: Se houver nome ou ordinal repetido.
    """
    registry = StageRegistry()
    for stage in stages:
        registry.add(stage)
    return sorted(registry.list(), key=lambda s: s.ordinal)
