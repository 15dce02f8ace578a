"""
src/buildgate/report/report_md.py

Gerador canônico do resumo de CI em Markdown.

Regras:
- O relatório é derivado EXCLUSIVAMENTE do Manifest final (dict).
- Não infere, não recalcula, não acessa filesystem.
- Mesmo Manifest => mesmo relatório (ordenação estável).

Estrutura mínima obrigatória:
# CI Report

## Outcome
## Stages
## Lint Warnings
## Failure Details
## Environment
## Traceability
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple


REQUIRED_SECTIONS: List[str] = [
    "# CI Report",
    "## Outcome",
    "## Stages",
    "## Lint Warnings",
    "## Failure Details",
    "## Environment",
    "## Traceability",
]


def _as_pretty_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, indent=2)


def _require_manifest(manifest: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(manifest, dict) or not manifest:
        raise ValueError("Manifest is required to generate the CI report")
    return manifest


def _section(manifest: Dict[str, Any], key: str, kind: type) -> Any:
    value = manifest.get(key)
    return value if isinstance(value, kind) else kind()


def _ordered_stages(stages: Dict[str, Any]) -> List[Tuple[str, Dict[str, Any]]]:
    items = [(name, s) for name, s in stages.items() if isinstance(s, dict)]
    return sorted(items, key=lambda kv: (kv[1].get("ordinal", 0), kv[0]))


def generate_report_md(manifest: Dict[str, Any]) -> str:
    """Gera o resumo Markdown de uma run a partir do Manifest final."""
    manifest = _require_manifest(manifest)

    run = _section(manifest, "run", dict)
    inputs = _section(manifest, "inputs", dict)
    stages = _section(manifest, "stages", dict)
    events = _section(manifest, "events", list)
    outcome = _section(manifest, "outcome", dict)

    ordered = _ordered_stages(stages)
    lines: List[str] = []

    lines.append("# CI Report\n")

    lines.append("## Outcome")
    if not outcome:
        lines.append("- **Result**: `unknown` (no outcome recorded)")
    elif outcome.get("succeeded"):
        lines.append("- **Result**: `succeeded`")
    else:
        lines.append("- **Result**: `failed`")
        lines.append(f"- **Failed Stage**: `{outcome.get('stage', '<unknown>')}`")
        lines.append(f"- **Reason**: `{outcome.get('reason', '<unknown>')}`")
    lines.append(f"- **Run ID**: `{run.get('run_id', '<unknown>')}`")
    lines.append(f"- **Started At (UTC)**: `{run.get('started_at', '<unknown>')}`")
    trigger = run.get("trigger")
    if isinstance(trigger, dict) and trigger:
        lines.append(
            f"- **Trigger**: `{trigger.get('event', '<unknown>')}` on `{trigger.get('branch', '<unknown>')}`"
        )
    lines.append("")

    lines.append("## Stages")
    if ordered:
        lines.append("| # | Stage | Status | Exit | Duration (ms) |")
        lines.append("|---|-------|--------|------|---------------|")
        for name, s in ordered:
            rc = s.get("returncode")
            lines.append(
                f"| {s.get('ordinal', '-')} | {name} | {s.get('status', 'unknown')} "
                f"| {'-' if rc is None else rc} | {s.get('duration_ms', '-')} |"
            )
    else:
        lines.append("No stages recorded in the Manifest.")
    lines.append("")

    lines.append("## Lint Warnings")
    warned = False
    for name, s in ordered:
        for w in s.get("warnings") or []:
            lines.append(f"- **{name}**: {w}")
            warned = True
    if not warned:
        lines.append("No lint warnings recorded.")
    lines.append("")

    lines.append("## Failure Details")
    failures = [(name, s) for name, s in ordered if isinstance(s.get("error"), dict)]
    if failures:
        for name, s in failures:
            err = s["error"]
            lines.append(f"### {name}")
            lines.append(f"- **Type**: `{err.get('type', '<unknown>')}`")
            lines.append(f"- **Message**: {err.get('message', '')}")
            if err.get("hint"):
                lines.append(f"- **Hint**: {err['hint']}")
            argv = s.get("argv")
            if argv:
                lines.append(f"- **Command**: `{' '.join(argv)}`")
    else:
        lines.append("No stage failures recorded.")
    lines.append("")

    lines.append("## Environment")
    environment = inputs.get("environment")
    if isinstance(environment, dict) and environment:
        for k, v in sorted(environment.items()):
            lines.append(f"- `{k}={v}`")
    else:
        lines.append("No environment overrides recorded.")
    lines.append("")

    lines.append("## Traceability")
    lines.append(f"- **Policy Hash**: `{inputs.get('policy_hash', '<unknown>')}`")
    lines.append(f"- **BuildGate Version**: `{run.get('buildgate_version', '<unknown>')}`")
    lines.append(f"- **Events recorded**: `{len(events)}`")
    lines.append("```json")
    lines.append(_as_pretty_json(run))
    lines.append("```")

    content = "\n".join(lines) + "\n"

    for sec in REQUIRED_SECTIONS:
        if sec not in content:
            raise RuntimeError(f"Report generation failed: missing required section: {sec}")

    return content
