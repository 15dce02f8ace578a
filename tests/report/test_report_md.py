# tests/report/test_report_md.py
"""
Testes do resumo de CI em Markdown, derivado exclusivamente do Manifest.
"""

from datetime import datetime, timezone

import pytest

from buildgate.core.engine.runner import PipelineRunner
from buildgate.core.pipeline import CommandResult
from buildgate.core.policy import load_policy
from buildgate.core.traceability import create_manifest
from buildgate.report import REQUIRED_SECTIONS, generate_report_md


WARN_NOTE = (
    "warning: feature name contains a negative word\n"
    "  = note: requested on the command line with `-W clippy::negative-feature-names`\n"
)


def _run(policy_config, executor, run_ctx):
    manifest = create_manifest(
        run_id="run-report",
        started_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        buildgate_version="0.1.0",
        policy_hash="hash-report",
        environment={"RUST_BACKTRACE": "full"},
        trigger={"event": "pull_request", "branch": "main"},
    )
    PipelineRunner(
        policy=load_policy(policy_config),
        executor=executor,
        ctx=run_ctx,
        manifest=manifest,
    ).run()
    return manifest.to_dict()


def test_failed_run_report(policy_config, fake_executor, run_ctx):
    executor = fake_executor(
        {
            "check": CommandResult(returncode=0, stderr=WARN_NOTE),
            "clippy": CommandResult(returncode=101),
        }
    )
    md = generate_report_md(_run(policy_config, executor, run_ctx))

    for section in REQUIRED_SECTIONS:
        assert section in md
    assert "- **Result**: `failed`" in md
    assert "- **Failed Stage**: `B`" in md
    assert "| 0 | A | success | 0 |" in md
    assert "| 1 | B | failed | 101 |" in md
    assert "C |" not in md
    assert "clippy::negative_feature_names" in md
    assert "STAGE_EXIT_FAILURE" in md
    assert "`cargo clippy --workspace`" in md
    assert "`RUST_BACKTRACE=full`" in md
    assert "`hash-report`" in md
    assert "`pull_request` on `main`" in md


def test_successful_run_report(policy_config, fake_executor, run_ctx):
    md = generate_report_md(_run(policy_config, fake_executor(), run_ctx))

    assert "- **Result**: `succeeded`" in md
    assert "No stage failures recorded." in md
    assert "No lint warnings recorded." in md


def test_report_is_deterministic(policy_config, fake_executor, run_ctx):
    manifest = _run(policy_config, fake_executor(), run_ctx)
    assert generate_report_md(manifest) == generate_report_md(manifest)


def test_empty_manifest_is_rejected():
    with pytest.raises(ValueError):
        generate_report_md({})
