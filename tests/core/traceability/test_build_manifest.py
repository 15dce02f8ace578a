# tests/core/traceability/test_build_manifest.py
"""
Testes do Manifest de runs de CI.

Os testes asseguram que:
- o Manifest inicial não possui eventos implícitos
- o estado dos estágios é atualizado incrementalmente
- o Event Log preserva a ordem real de execução
- o Manifest sobrevive à persistência em disco (round-trip)
"""

import json
from datetime import datetime, timedelta, timezone

from buildgate.core.traceability import (
    create_manifest,
    load_manifest,
    record_outcome,
    save_manifest,
    stage_failed,
    stage_finished,
    stage_started,
)


T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _manifest():
    return create_manifest(
        run_id="run-1",
        started_at=T0,
        buildgate_version="0.1.0",
        policy_hash="abc",
        environment={"RUST_BACKTRACE": "full"},
        trigger={"event": "push", "branch": "main"},
    )


def test_create_has_no_events():
    m = _manifest()

    assert m.events == []
    assert m.stages == {}
    assert m.run["trigger"] == {"event": "push", "branch": "main"}
    assert m.inputs == {"policy_hash": "abc", "environment": {"RUST_BACKTRACE": "full"}}


def test_naive_timestamps_are_treated_as_utc():
    m = create_manifest(run_id="r", started_at=datetime(2024, 1, 1), buildgate_version="0", policy_hash="h")
    assert m.run["started_at"] == "2024-01-01T00:00:00+00:00"


def test_stage_lifecycle_and_event_order():
    m = _manifest()
    stage_started(m, stage="build", ordinal=0, argv=["cargo", "build"], ts=T0)
    stage_finished(m, stage="build", ts=T0 + timedelta(seconds=2), returncode=0, warnings=["w"])
    stage_started(m, stage="test", ordinal=1, argv=["cargo", "test"], ts=T0 + timedelta(seconds=3))
    stage_failed(
        m,
        stage="test",
        ts=T0 + timedelta(seconds=4),
        status="failed",
        error={"type": "STAGE_EXIT_FAILURE", "message": "x"},
        returncode=101,
    )
    record_outcome(m, ts=T0 + timedelta(seconds=5), outcome={"succeeded": False, "stage": "test"})

    assert m.stages["build"]["status"] == "success"
    assert m.stages["build"]["duration_ms"] == 2000
    assert m.stages["build"]["warnings"] == ["w"]
    assert m.stages["test"]["status"] == "failed"
    assert m.stages["test"]["returncode"] == 101
    assert [e["event_type"] for e in m.events] == [
        "stage_started",
        "stage_finished",
        "stage_started",
        "stage_failed",
        "run_finished",
    ]
    assert m.outcome == {"succeeded": False, "stage": "test"}


def test_round_trip(tmp_path):
    m = _manifest()
    stage_started(m, stage="build", ordinal=0, argv=["cargo", "build"], ts=T0)
    stage_finished(m, stage="build", ts=T0, returncode=0)

    path = tmp_path / "out" / "manifest.json"
    save_manifest(m, path)

    assert json.loads(path.read_text(encoding="utf-8"))["run"]["run_id"] == "run-1"
    assert load_manifest(path).to_dict() == m.to_dict()
