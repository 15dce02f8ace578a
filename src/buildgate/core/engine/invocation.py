# src/buildgate/core/engine/invocation.py
"""
Montagem de invocações da toolchain.

Uma invocação é o par (argv, env) entregue ao executor:

    argv = [toolchain] + tokens resolvidos
    env  = RUSTFLAGS (política de lints) + flags de diagnóstico

Os tokens resolvidos são repassados literalmente, sem reescrita.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from buildgate.core.pipeline.environment import RUSTFLAGS_VAR, RunEnvironment
from buildgate.core.pipeline.stage import CommandExecutor, PipelineStage
from buildgate.core.pipeline.types import CommandResult
from buildgate.core.policy import BuildPolicy


@dataclass(frozen=True)
class Invocation:
    argv: Tuple[str, ...]
    env: Dict[str, str]


def build_invocation(
    policy: BuildPolicy,
    tokens: Sequence[str],
    *,
    environment: RunEnvironment,
) -> Invocation:
    env = environment.to_env()
    rustflags = policy.lints.to_rustflags()
    if rustflags:
        env[RUSTFLAGS_VAR] = rustflags
    return Invocation(argv=(policy.toolchain, *tokens), env=env)


def stage_tokens(policy: BuildPolicy, stage: PipelineStage) -> List[str]:
    """Tokens do estágio: alias resolvido ou `args` literais."""
    if stage.alias is not None:
        return policy.resolver().resolve(stage.alias)
    return list(stage.args)


def run_alias(
    policy: BuildPolicy,
    alias: str,
    *,
    extra_args: Sequence[str] = (),
    executor: CommandExecutor,
    environment: RunEnvironment,
    cwd: Optional[Path] = None,
) -> CommandResult:
    """
    Resolve e executa um alias; o código de saída é o da toolchain.

    Raises:
        AliasResolutionError: Se o alias não puder ser resolvido
            (nenhum processo é iniciado).
        CommandLaunchError / CommandCancelledError: Vindas do executor.
    """
    tokens = policy.resolver().resolve(alias) + list(extra_args)
    invocation = build_invocation(policy, tokens, environment=environment)
    return executor.execute(invocation.argv, env=invocation.env, cwd=cwd)
