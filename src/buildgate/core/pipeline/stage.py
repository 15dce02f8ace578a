# src/buildgate/core/pipeline/stage.py
"""
Contrato de estágio do pipeline e de executor de comandos.

Um estágio é uma etapa nomeada e ordenada da run de CI, mapeada 1:1 para
uma invocação da toolchain: via `alias` (expandido pelo resolver) ou via
`args` explícitos.

O `CommandExecutor` é o protocolo que separa o runner do mecanismo de
execução de processos; testes injetam executores falsos e o CLI usa
`SubprocessExecutor`.

Invariantes:
    - Estágios são imutáveis após a carga da configuração
    - Exatamente um entre `alias` e `args` é declarado
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from buildgate.core.config.errors import MalformedPipelineError

from .types import CommandResult


@dataclass(frozen=True)
class PipelineStage:
    """Estágio declarado: nome, posição e comando."""

    name: str
    ordinal: int
    alias: Optional[str] = None
    args: Tuple[str, ...] = ()

    @classmethod
    def from_config(cls, raw: Any, *, ordinal: int) -> "PipelineStage":
        if not isinstance(raw, Mapping):
            raise MalformedPipelineError(f"Estágio #{ordinal} deve ser dict, recebido: {raw!r}")

        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            raise MalformedPipelineError(f"Estágio #{ordinal} sem nome")

        alias = raw.get("alias")
        args = raw.get("args")
        if (alias is None) == (args is None):
            raise MalformedPipelineError(
                f"Estágio '{name}' deve declarar exatamente um entre 'alias' e 'args'"
            )
        if alias is not None and (not isinstance(alias, str) or not alias.strip()):
            raise MalformedPipelineError(f"Estágio '{name}': alias inválido")
        if args is not None:
            if isinstance(args, str):
                args = args.split()
            if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
                raise MalformedPipelineError(f"Estágio '{name}': args deve ser lista de strings")

        explicit = raw.get("ordinal", ordinal)
        if not isinstance(explicit, int) or isinstance(explicit, bool):
            raise MalformedPipelineError(f"Estágio '{name}': ordinal deve ser inteiro")

        return cls(
            name=name.strip(),
            ordinal=explicit,
            alias=alias,
            args=tuple(args or ()),
        )


@runtime_checkable
class CommandExecutor(Protocol):
    """Executa um processo externo e devolve seu `CommandResult`.

    Deve levantar `CommandLaunchError` quando o processo não puder ser
    iniciado e `CommandCancelledError` quando for interrompido.
    """

    def execute(
        self,
        argv: Sequence[str],
        *,
        env: Mapping[str, str],
        cwd: Optional[Path] = None,
    ) -> CommandResult:
        ...
