# src/buildgate/core/pipeline/triggers.py
"""
Gatilhos do pipeline de CI.

O pipeline roda em dois tipos de evento: `push` para o branch de
integração e `pull_request` com destino a ele. Um evento que não casa
com a política não é erro; a run simplesmente não é disparada.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from buildgate.core.config.errors import MalformedPipelineError


EVENT_KINDS = ("push", "pull_request")


@dataclass(frozen=True)
class TriggerPolicy:
    branches: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_config(cls, raw: Optional[Mapping[str, Any]]) -> "TriggerPolicy":
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise MalformedPipelineError("pipeline.triggers deve ser dict")

        branches: Dict[str, Tuple[str, ...]] = {}
        for event, names in raw.items():
            if event not in EVENT_KINDS:
                raise MalformedPipelineError(
                    f"Evento de gatilho desconhecido: {event!r} (use {', '.join(EVENT_KINDS)})"
                )
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise MalformedPipelineError(f"pipeline.triggers.{event} deve ser lista de branches")
            branches[event] = tuple(names)
        return cls(branches=branches)

    def matches(self, event: str, branch: str) -> bool:
        return branch in self.branches.get(event, ())
