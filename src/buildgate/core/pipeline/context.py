# src/buildgate/core/pipeline/context.py
"""
Contexto de execução de uma run do pipeline de CI.

O `RunContext` é o log estruturado da run: todo evento relevante
(resolução de alias, início/fim de estágio, avisos de política) é
registrado aqui com `run_id`, estágio, nível e timestamp UTC.

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - Nenhum estado global compartilhado
    - Logs e warnings estruturados e rastreáveis

Invariantes:
    - Logs sempre incluem `run_id` e `stage`
    - Warnings são agrupados por estágio (ou `policy` para avisos de carga)

Limites explícitos:
    - Não executa estágios
    - Não persiste dados automaticamente (ver `core.traceability`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List


@dataclass
class RunContext:
    """
    Contexto de execução compartilhado de uma run do pipeline.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - policy_hash: hash da política efetiva usada na run
    - meta: metadados de execução (evento, branch, workspace)
    - events: log estruturado de eventos
    - warnings: warnings por estágio
    """

    run_id: str
    created_at: datetime
    policy_hash: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def log(self, *, stage: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "stage": stage,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, stage: str, message: str) -> None:
        if stage not in self.warnings:
            self.warnings[stage] = []
        self.warnings[stage].append(message)
        self.log(stage=stage, level="WARNING", message=message)
