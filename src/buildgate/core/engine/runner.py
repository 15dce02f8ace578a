# src/buildgate/core/engine/runner.py
"""
CI Pipeline Runner.

Executa a sequência fixa de estágios da política, um processo por estágio,
estritamente em sequência. A primeira falha encerra a run.

Máquina de estados (ver `core.pipeline.types`):
    - PENDING → RUNNING(0) no início
    - RUNNING(i) → RUNNING(i+1) se o estágio i termina com sucesso
    - RUNNING(i) → STAGE_FAILED(i) se o estágio i sai com erro, viola um
      lint `deny`, não pode ser iniciado ou é cancelado (terminal)
    - RUNNING(último) → SUCCEEDED (terminal)

Ajustes:
- Todos os estágios têm seus aliases resolvidos antes do primeiro processo;
  um alias inválido falha o estágio correspondente sem iniciar nada.
- Exceções do executor são convertidas em ErrorPayload (sem stack trace
  cru para o operador) e atribuídas ao estágio em curso.
- Nenhum estágio é re-tentado automaticamente.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from buildgate.core.errors import (
    ALIAS_CYCLE,
    ALIAS_DEPTH_EXCEEDED,
    ALIAS_UNKNOWN,
    RUNNER_EXECUTION_ERROR,
    ErrorPayload,
    stage_cancelled,
    stage_exit_failure,
    stage_launch_failure,
    stage_lint_denied,
)
from buildgate.core.exceptions import (
    AliasDepthExceededError,
    AliasResolutionError,
    BuildGateException,
    CommandCancelledError,
    CommandLaunchError,
    CyclicAliasError,
)
from buildgate.core.lints import scan_diagnostics
from buildgate.core.pipeline.context import RunContext
from buildgate.core.pipeline.environment import RunEnvironment
from buildgate.core.pipeline.stage import CommandExecutor, PipelineStage
from buildgate.core.pipeline.types import (
    CommandResult,
    PipelineOutcome,
    PipelineResult,
    PipelineState,
    StageOutcome,
    StageStatus,
)
from buildgate.core.policy import BuildPolicy
from buildgate.core.traceability import manifest as mf

from .invocation import Invocation, build_invocation, stage_tokens
from .planner import plan_stages


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ms(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds() * 1000))


class PipelineRunner:
    """Runner canônico do pipeline de CI (sequencial, fail-fast)."""

    def __init__(
        self,
        *,
        policy: BuildPolicy,
        executor: CommandExecutor,
        ctx: RunContext,
        environment: Optional[RunEnvironment] = None,
        manifest: Optional[mf.BuildManifest] = None,
        cwd: Optional[Path] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.policy = policy
        self.executor = executor
        self.ctx = ctx
        self.environment = environment if environment is not None else policy.environment
        self.manifest = manifest
        self.cwd = cwd
        self.clock = clock

        self.state: PipelineState = PipelineState.PENDING
        self.current: Optional[int] = None

    # ------------------------------------------------------------------
    # Transições
    # ------------------------------------------------------------------

    def _transition(self, state: PipelineState, index: Optional[int]) -> None:
        self.state = state
        self.current = index
        self.ctx.log(
            stage=self._stage_label(index),
            level="DEBUG",
            message=f"state -> {state.value}" + (f"({index})" if index is not None else ""),
        )

    def _stage_label(self, index: Optional[int]) -> str:
        return "pipeline" if index is None else f"#{index}"

    # ------------------------------------------------------------------
    # Erros -> ErrorPayload
    # ------------------------------------------------------------------

    def _resolution_error(self, stage: PipelineStage, exc: AliasResolutionError) -> ErrorPayload:
        if isinstance(exc, CyclicAliasError):
            code = ALIAS_CYCLE
        elif isinstance(exc, AliasDepthExceededError):
            code = ALIAS_DEPTH_EXCEEDED
        else:
            code = ALIAS_UNKNOWN
        details = dict(exc.details)
        details["stage"] = stage.name
        return ErrorPayload(type=code, message=exc.message, details=details, hint=exc.hint)

    def _exception_to_error(self, stage: PipelineStage, argv: Sequence[str], exc: Exception) -> ErrorPayload:
        if isinstance(exc, CommandLaunchError):
            return stage_launch_failure(
                stage=stage.name,
                argv=list(argv),
                reason=str(exc.details.get("reason", exc.message)),
            )
        if isinstance(exc, BuildGateException):
            return ErrorPayload(
                type=exc.__class__.__name__,
                message=exc.message,
                details={"stage": stage.name, **exc.details},
                hint=exc.hint,
            )
        return ErrorPayload(
            type=RUNNER_EXECUTION_ERROR,
            message=str(exc) or "Erro inesperado durante execução do estágio",
            details={"stage": stage.name, "exception_class": exc.__class__.__name__},
            hint="Verifique o log da run e o executor configurado",
        )

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------

    def _prepare(
        self, stages: Sequence[PipelineStage]
    ) -> Tuple[List[Invocation], Optional[StageOutcome]]:
        invocations: List[Invocation] = []
        for stage in stages:
            try:
                tokens = stage_tokens(self.policy, stage)
            except AliasResolutionError as e:
                error = self._resolution_error(stage, e)
                return invocations, StageOutcome(
                    name=stage.name,
                    ordinal=stage.ordinal,
                    argv=(),
                    status=StageStatus.FAILED,
                    error=error,
                )
            invocations.append(build_invocation(self.policy, tokens, environment=self.environment))
        return invocations, None

    def _record_failure(self, outcome: StageOutcome, ts: datetime) -> None:
        if self.manifest is not None and outcome.error is not None:
            mf.stage_failed(
                self.manifest,
                stage=outcome.name,
                ordinal=outcome.ordinal,
                ts=ts,
                status=outcome.status.value,
                error=outcome.error.to_dict(),
                returncode=outcome.returncode,
                warnings=outcome.warnings,
            )

    def _run_stage(self, stage: PipelineStage, invocation: Invocation) -> StageOutcome:
        argv = invocation.argv
        started = self.clock()
        self.ctx.log(stage=stage.name, level="INFO", message="stage started", argv=list(argv))
        if self.manifest is not None:
            mf.stage_started(self.manifest, stage=stage.name, ordinal=stage.ordinal, argv=list(argv), ts=started)

        try:
            result: CommandResult = self.executor.execute(argv, env=invocation.env, cwd=self.cwd)
        except CommandCancelledError:
            finished = self.clock()
            outcome = StageOutcome(
                name=stage.name,
                ordinal=stage.ordinal,
                argv=argv,
                status=StageStatus.CANCELLED,
                duration_ms=_ms(started, finished),
                error=stage_cancelled(stage=stage.name, argv=list(argv)),
            )
            self._record_failure(outcome, finished)
            return outcome
        except Exception as e:
            finished = self.clock()
            outcome = StageOutcome(
                name=stage.name,
                ordinal=stage.ordinal,
                argv=argv,
                status=StageStatus.FAILED,
                duration_ms=_ms(started, finished),
                error=self._exception_to_error(stage, argv, e),
            )
            self._record_failure(outcome, finished)
            return outcome

        finished = self.clock()
        violations = tuple(scan_diagnostics(result.stdout + "\n" + result.stderr, self.policy.lints))
        denied = [v.lint for v in violations if v.fatal]

        for v in violations:
            if not v.fatal:
                self.ctx.add_warning(stage=stage.name, message=f"{v.lint}: {v.message}")

        error: Optional[ErrorPayload] = None
        if not result.ok:
            error = stage_exit_failure(stage=stage.name, argv=list(argv), returncode=result.returncode)
        elif denied:
            error = stage_lint_denied(stage=stage.name, lints=denied)

        outcome = StageOutcome(
            name=stage.name,
            ordinal=stage.ordinal,
            argv=argv,
            status=StageStatus.SUCCESS if error is None else StageStatus.FAILED,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=_ms(started, finished),
            violations=violations,
            error=error,
        )

        if error is None:
            self.ctx.log(stage=stage.name, level="INFO", message="stage finished", returncode=result.returncode)
            if self.manifest is not None:
                mf.stage_finished(
                    self.manifest,
                    stage=stage.name,
                    ts=finished,
                    returncode=result.returncode,
                    warnings=outcome.warnings,
                )
        else:
            self._record_failure(outcome, finished)
        return outcome

    def _exit_info(self, outcome: StageOutcome) -> Dict[str, object]:
        reason = {
            StageStatus.CANCELLED: "cancelled",
        }.get(outcome.status, "failed")
        info: Dict[str, object] = {"reason": reason, "returncode": outcome.returncode}
        if outcome.error is not None:
            info["error"] = outcome.error.to_dict()
        return info

    def _finish(self, outcome: PipelineOutcome, log: List[StageOutcome]) -> PipelineResult:
        if self.manifest is not None:
            mf.record_outcome(
                self.manifest,
                ts=self.clock(),
                outcome={
                    "succeeded": outcome.succeeded,
                    "stage": outcome.stage_name,
                    "reason": outcome.exit_info.get("reason"),
                },
            )
        self.ctx.log(
            stage="pipeline",
            level="INFO" if outcome.succeeded else "ERROR",
            message=str(outcome),
        )
        return PipelineResult(outcome=outcome, state=self.state, stage_log=tuple(log))

    def run(self, stages: Optional[Sequence[PipelineStage]] = None) -> PipelineResult:
        """
        Executa os estágios em ordem e devolve o resultado agregado.

        Sem `stages`, usa os estágios da política.
        Estágios explícitos são validados e ordenados por ordinal.

        Raises:
            DuplicateStageError: Se houver nome ou ordinal repetido
                (nenhum processo é iniciado).
        """
        if self.state is not PipelineState.PENDING:
            raise RuntimeError("PipelineRunner.run() can only be called once")

        ordered = plan_stages(stages) if stages is not None else list(self.policy.stages)
        log: List[StageOutcome] = []

        for message in self.policy.lints.conflicts:
            self.ctx.add_warning(stage="policy", message=message)

        invocations, unresolved = self._prepare(ordered)
        if unresolved is not None:
            index = len(invocations)
            self._transition(PipelineState.STAGE_FAILED, index)
            self._record_failure(unresolved, self.clock())
            log.append(unresolved)
            info = {"reason": "resolution", "returncode": None}
            if unresolved.error is not None:
                info["error"] = unresolved.error.to_dict()
            return self._finish(PipelineOutcome.failed(unresolved.name, info), log)

        for index, (stage, invocation) in enumerate(zip(ordered, invocations)):
            self._transition(PipelineState.RUNNING, index)
            outcome = self._run_stage(stage, invocation)
            log.append(outcome)
            if outcome.status is not StageStatus.SUCCESS:
                self._transition(PipelineState.STAGE_FAILED, index)
                return self._finish(PipelineOutcome.failed(stage.name, self._exit_info(outcome)), log)

        self._transition(PipelineState.SUCCEEDED, None)
        return self._finish(PipelineOutcome.success(), log)
