# src/buildgate/core/traceability/manifest.py
"""
Manifest v1 — rastreabilidade de runs do pipeline de CI.

O Manifest consolida, de forma determinística e auditável:
    - metadados da run (run_id, início, versão, evento, branch)
    - hash da política efetiva
    - estado incremental de cada estágio
    - Event Log ordenado de eventos explícitos

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - A ordem do Event Log reflete a ordem real de execução
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON determinístico

Limites explícitos:
    - Não executa pipeline
    - Não decide políticas de execução
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """
    Normaliza um timestamp para timezone-aware em UTC.

    Timestamps timezone-naive são assumidos como UTC; os demais são
    convertidos.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    """Duração em milissegundos (nunca negativa)."""
    s = _ensure_tzaware_utc(start)
    e = _ensure_tzaware_utc(end)
    return max(0, int((e - s).total_seconds() * 1000))


@dataclass
class BuildManifest:
    """
    Registro de uma run do pipeline.

    Campos principais:
        - run: metadados da execução
        - inputs: hash da política efetiva e ambiente de diagnóstico
        - stages: estado incremental de cada estágio, por nome
        - events: Event Log ordenado
        - outcome: desfecho final (preenchido por `record_outcome`)
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    stages: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)
    outcome: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "stages": {k: dict(v) for k, v in self.stages.items()},
            "events": [dict(e) for e in self.events],
            "outcome": dict(self.outcome),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildManifest":
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            stages={k: dict(v) for k, v in (data.get("stages", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
            outcome=dict(data.get("outcome", {}) or {}),
        )


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    buildgate_version: str,
    policy_hash: str,
    environment: Optional[Dict[str, str]] = None,
    trigger: Optional[Dict[str, str]] = None,
) -> BuildManifest:
    """
    Cria o Manifest inicial de uma run.

    ⚠️ Esta função **não emite eventos**: o Event Log inicia vazio e só é
    preenchido por chamadas explícitas a `add_event`, `stage_started`,
    `stage_finished` ou `stage_failed`.
    """
    run: Dict[str, Any] = {
        "run_id": run_id,
        "started_at": _iso(started_at),
        "buildgate_version": buildgate_version,
    }
    if trigger:
        run["trigger"] = dict(trigger)

    return BuildManifest(
        run=run,
        inputs={
            "policy_hash": policy_hash,
            "environment": dict(environment or {}),
        },
    )


def add_event(
    manifest: BuildManifest,
    *,
    event_type: str,
    ts: datetime,
    stage: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Adiciona um evento explícito ao Event Log, preservando a ordem de chamada."""
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if stage is not None:
        ev["stage"] = stage
    if payload is not None:
        ev["payload"] = payload
    manifest.events.append(ev)


def stage_started(
    manifest: BuildManifest,
    *,
    stage: str,
    ordinal: int,
    argv: List[str],
    ts: datetime,
) -> None:
    """Marca o estágio como `running` e registra `stage_started`."""
    manifest.stages.setdefault(stage, {})
    manifest.stages[stage].update(
        {
            "stage": stage,
            "ordinal": ordinal,
            "argv": list(argv),
            "status": "running",
            "started_at": _iso(ts),
        }
    )
    add_event(manifest, event_type="stage_started", ts=ts, stage=stage, payload={"ordinal": ordinal})


def _duration_from(entry: Dict[str, Any], ts: datetime) -> int:
    started_iso = entry.get("started_at")
    if not started_iso:
        return 0
    return _ms_between(datetime.fromisoformat(started_iso), ts)


def stage_finished(
    manifest: BuildManifest,
    *,
    stage: str,
    ts: datetime,
    returncode: int,
    warnings: Optional[List[str]] = None,
) -> None:
    """Registra a conclusão bem-sucedida de um estágio."""
    s = manifest.stages.setdefault(stage, {"stage": stage})
    s.update(
        {
            "status": "success",
            "finished_at": _iso(ts),
            "duration_ms": _duration_from(s, ts),
            "returncode": returncode,
            "warnings": list(warnings or []),
        }
    )
    add_event(
        manifest,
        event_type="stage_finished",
        ts=ts,
        stage=stage,
        payload={"status": "success", "duration_ms": s["duration_ms"]},
    )


def stage_failed(
    manifest: BuildManifest,
    *,
    stage: str,
    ts: datetime,
    status: str,
    error: Dict[str, Any],
    returncode: Optional[int] = None,
    warnings: Optional[List[str]] = None,
    ordinal: Optional[int] = None,
) -> None:
    """Registra a falha (ou cancelamento) de um estágio."""
    s = manifest.stages.setdefault(stage, {"stage": stage})
    if ordinal is not None:
        s.setdefault("ordinal", ordinal)
    s.update(
        {
            "status": status,
            "finished_at": _iso(ts),
            "duration_ms": _duration_from(s, ts),
            "returncode": returncode,
            "warnings": list(warnings or []),
            "error": dict(error),
        }
    )
    add_event(manifest, event_type="stage_failed", ts=ts, stage=stage, payload={"error": error.get("type")})


def record_outcome(manifest: BuildManifest, *, ts: datetime, outcome: Dict[str, Any]) -> None:
    """Fecha o Manifest com o desfecho da run."""
    manifest.outcome = dict(outcome)
    add_event(manifest, event_type="run_finished", ts=ts, payload=dict(outcome))


def save_manifest(manifest: BuildManifest, path: Path) -> None:
    """Persiste o Manifest em JSON determinístico (chaves ordenadas)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_manifest(path: Path) -> BuildManifest:
    data = json.loads(path.read_text(encoding="utf-8"))
    return BuildManifest.from_dict(data)
