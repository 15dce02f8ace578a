# src/buildgate/core/engine/executor.py
"""
Executor de processos externos baseado em `subprocess`.

Cada estágio (ou invocação de alias) roda em um processo próprio. O
ambiente do processo é o ambiente atual acrescido das variáveis da
invocação (`RUSTFLAGS`, `RUST_BACKTRACE`, `CARGO_TERM_COLOR`).

Cancelamento:
    Um `KeyboardInterrupt` durante a espera termina o processo em curso
    (SIGTERM, depois SIGKILL após o período de graça) e é convertido em
    `CommandCancelledError`. Nenhum resultado parcial é devolvido.

A saída capturada é decodificada como UTF-8; bytes inválidos viram U+FFFD.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from buildgate.core.exceptions import CommandCancelledError, CommandLaunchError
from buildgate.core.pipeline.types import CommandResult


TERMINATE_GRACE_SECONDS = 10


class SubprocessExecutor:
    """Implementação padrão de `CommandExecutor`.

    Com `capture=False` a saída do processo vai direto ao terminal
    (usado por `buildgate run`).
    """

    def __init__(self, *, capture: bool = True):
        self.capture = capture

    def execute(
        self,
        argv: Sequence[str],
        *,
        env: Mapping[str, str],
        cwd: Optional[Path] = None,
    ) -> CommandResult:
        full_env = dict(os.environ)
        full_env.update(env)
        pipe = subprocess.PIPE if self.capture else None

        try:
            proc = subprocess.Popen(
                list(argv),
                cwd=str(cwd) if cwd is not None else None,
                env=full_env,
                stdout=pipe,
                stderr=pipe,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise CommandLaunchError(
                message=f"Falha ao iniciar '{argv[0]}': {e}",
                details={"argv": list(argv), "reason": str(e)},
                hint="Verifique se a toolchain está instalada e presente no PATH.",
            ) from e

        try:
            stdout, stderr = proc.communicate()
        except KeyboardInterrupt as e:
            proc.terminate()
            try:
                proc.wait(timeout=TERMINATE_GRACE_SECONDS)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
            raise CommandCancelledError(
                message=f"Processo '{argv[0]}' interrompido",
                details={"argv": list(argv), "reason": "cancelled"},
            ) from e

        return CommandResult(
            returncode=proc.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )
