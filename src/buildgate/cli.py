# src/buildgate/cli.py
"""
Interface de linha de comando do BuildGate.

Subcomandos:
    - run ALIAS [ARGS...] → resolve e executa; código de saída da toolchain
    - resolve ALIAS       → tokens resolvidos em JSON
    - lints               → flags efetivas de lint
    - ci                  → pipeline completo (0 sucesso, 1 falha)
    - cargo-config        → política renderizada como `.cargo/config.toml`
    - doctor              → versões da toolchain

Códigos de saída próprios:
    - 2   → erro de configuração ou de resolução (nenhum processo iniciado)
    - 130 → execução cancelada pelo operador
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from buildgate import __version__
from buildgate.core.config import ConfigurationError, load_config
from buildgate.core.engine.executor import SubprocessExecutor
from buildgate.core.engine.invocation import run_alias
from buildgate.core.engine.runner import PipelineRunner
from buildgate.core.errors import configuration_error
from buildgate.core.exceptions import (
    AliasResolutionError,
    CommandCancelledError,
    CommandLaunchError,
)
from buildgate.core.pipeline.context import RunContext
from buildgate.core.pipeline.environment import RunEnvironment
from buildgate.core.policy import BuildPolicy, load_policy
from buildgate.core.traceability import create_manifest, save_manifest
from buildgate.export import render_cargo_config
from buildgate.report import generate_report_md


EXIT_USAGE = 2
EXIT_CANCELLED = 130


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def _load(args: argparse.Namespace, *, verify_vendor: bool = True) -> BuildPolicy:
    config = load_config(defaults_path=args.config, local_path=args.local)
    return load_policy(config, base_dir=Path.cwd(), verify_vendor=verify_vendor)


def _environment(policy: BuildPolicy) -> RunEnvironment:
    return policy.environment.overlay(RunEnvironment.from_environ(os.environ))


def _dump_events(ctx: RunContext) -> None:
    for event in ctx.events:
        extra = {
            k: v for k, v in event.items()
            if k not in ("run_id", "stage", "level", "message", "timestamp")
        }
        suffix = f" {json.dumps(extra, ensure_ascii=False, sort_keys=True)}" if extra else ""
        _err(f"[{event['timestamp']}] {event['level']:<7} {event['stage']}: {event['message']}{suffix}")


# ---------------------------------------------------------------------------
# Subcomandos
# ---------------------------------------------------------------------------


def cmd_run(args: argparse.Namespace) -> int:
    policy = _load(args)
    result = run_alias(
        policy,
        args.alias,
        extra_args=args.args,
        executor=SubprocessExecutor(capture=False),
        environment=_environment(policy),
        cwd=Path.cwd(),
    )
    return result.returncode


def cmd_resolve(args: argparse.Namespace) -> int:
    policy = _load(args)
    tokens = policy.resolver().resolve(args.alias)
    print(json.dumps([policy.toolchain, *tokens], ensure_ascii=False))
    return 0


def cmd_lints(args: argparse.Namespace) -> int:
    policy = _load(args, verify_vendor=False)
    for flag in policy.lints.to_flags():
        print(flag)
    for message in policy.lints.conflicts:
        _err(f"warning: {message}")
    return 0


def cmd_cargo_config(args: argparse.Namespace) -> int:
    policy = _load(args, verify_vendor=False)
    sys.stdout.write(render_cargo_config(policy))
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    policy = _load(args, verify_vendor=False)
    executor = SubprocessExecutor(capture=True)
    env = _environment(policy).to_env()
    status = 0
    for argv in policy.doctor:
        try:
            result = executor.execute(argv, env=env)
        except CommandLaunchError as e:
            _err(f"{' '.join(argv)}: {e.message}")
            status = 1
            continue
        output = (result.stdout or result.stderr).strip()
        print(f"{' '.join(argv)}: {output}")
        if not result.ok:
            status = 1
    return status


def cmd_ci(args: argparse.Namespace) -> int:
    policy = _load(args)

    if args.event is not None and args.branch is not None:
        if not policy.triggers.matches(args.event, args.branch):
            print(f"Pipeline not triggered for {args.event} on {args.branch}")
            return 0

    started_at = datetime.now(timezone.utc)
    run_id = uuid.uuid4().hex
    environment = _environment(policy)
    trigger = (
        {"event": args.event, "branch": args.branch}
        if args.event is not None and args.branch is not None
        else None
    )

    ctx = RunContext(
        run_id=run_id,
        created_at=started_at,
        policy_hash=policy.config_hash,
        meta={"workspace": str(Path.cwd()), **(trigger or {})},
    )
    manifest = create_manifest(
        run_id=run_id,
        started_at=started_at,
        buildgate_version=__version__,
        policy_hash=policy.config_hash,
        environment=environment.to_env(),
        trigger=trigger,
    )

    runner = PipelineRunner(
        policy=policy,
        executor=SubprocessExecutor(capture=True),
        ctx=ctx,
        environment=environment,
        manifest=manifest,
        cwd=Path.cwd(),
    )
    result = runner.run()

    for stage in result.stage_log:
        print(f"{stage.name}: {stage.status.value}")
    print(str(result.outcome))

    if args.manifest:
        save_manifest(manifest, Path(args.manifest))
    if args.report:
        report_path = Path(args.report)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(generate_report_md(manifest.to_dict()), encoding="utf-8")

    if args.verbose:
        _dump_events(ctx)

    failed = result.failed_stage
    if failed is not None:
        if failed.stdout or failed.stderr:
            _err(failed.stdout + failed.stderr)
        if failed.error is not None:
            _err(f"error: {failed.error.message}")
            if failed.error.hint:
                _err(f"hint: {failed.error.hint}")
        if result.outcome.exit_info.get("reason") == "cancelled":
            return EXIT_CANCELLED
    return 0 if result.outcome.succeeded else 1


# ---------------------------------------------------------------------------
# Entrada
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="buildgate", description="Reproducible build policy for Cargo workspaces")
    p.add_argument("--config", default=None, help="Defaults policy file (packaged policy when omitted)")
    p.add_argument("--local", default=None, help="Optional local override file")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Resolve and execute an alias")
    run.add_argument("alias")
    run.add_argument("args", nargs=argparse.REMAINDER)
    run.set_defaults(func=cmd_run)

    resolve = sub.add_parser("resolve", help="Print the resolved argv as JSON")
    resolve.add_argument("alias")
    resolve.set_defaults(func=cmd_resolve)

    lints = sub.add_parser("lints", help="Print effective lint flags")
    lints.set_defaults(func=cmd_lints)

    ci = sub.add_parser("ci", help="Run the CI pipeline")
    ci.add_argument("--event", choices=["push", "pull_request"], default=None)
    ci.add_argument("--branch", default=None)
    ci.add_argument("--manifest", default=None, help="Write the run Manifest (JSON) here")
    ci.add_argument("--report", default=None, help="Write the Markdown CI report here")
    ci.set_defaults(func=cmd_ci)

    cargo = sub.add_parser("cargo-config", help="Print the policy as .cargo/config.toml")
    cargo.set_defaults(func=cmd_cargo_config)

    doctor = sub.add_parser("doctor", help="Print toolchain versions")
    doctor.set_defaults(func=cmd_doctor)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        return args.func(args)
    except ConfigurationError as e:
        payload = configuration_error(message=str(e), exc_type=e.__class__.__name__)
        _err(f"configuration error: {payload.message}")
        _err(f"hint: {payload.hint}")
        return EXIT_USAGE
    except AliasResolutionError as e:
        _err(f"alias error: {e.message}")
        if e.hint:
            _err(f"hint: {e.hint}")
        return EXIT_USAGE
    except CommandLaunchError as e:
        _err(f"error: {e.message}")
        if e.hint:
            _err(f"hint: {e.hint}")
        return 127
    except CommandCancelledError as e:
        _err(f"cancelled: {e.message}")
        return EXIT_CANCELLED


if __name__ == "__main__":
    raise SystemExit(main())
