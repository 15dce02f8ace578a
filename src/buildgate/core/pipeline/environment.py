# src/buildgate/core/pipeline/environment.py
"""
Contrato de ambiente da run.

Duas flags de processo afetam apenas a verbosidade do diagnóstico, nunca o
resultado do pipeline:

    - backtrace   → `RUST_BACKTRACE` (ex.: `full`)
    - force_color → `CARGO_TERM_COLOR=always`

`force_color` é tri-estado: True força cor, False desliga o forçamento
(ex.: operador com `CARGO_TERM_COLOR=never`) e None não decide nada.

As flags são lidas uma única vez e passadas explicitamente ao runner como
`RunEnvironment`, permitindo que testes injetem combinações arbitrárias.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from buildgate.core.config.errors import ConfigurationError


BACKTRACE_VAR = "RUST_BACKTRACE"
COLOR_VAR = "CARGO_TERM_COLOR"
RUSTFLAGS_VAR = "RUSTFLAGS"


def _color_from(value: Optional[str]) -> Optional[bool]:
    if not value:
        return None
    return value.strip().lower() == "always"


@dataclass(frozen=True)
class RunEnvironment:
    """Flags de diagnóstico aplicadas a todo processo do pipeline."""

    backtrace: Optional[str] = None
    force_color: Optional[bool] = None

    @classmethod
    def from_config(cls, raw: Optional[Mapping[str, Any]]) -> "RunEnvironment":
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ConfigurationError("pipeline.environment deve ser dict")
        backtrace = raw.get("backtrace")
        return cls(
            backtrace=str(backtrace) if backtrace is not None else None,
            force_color=bool(raw["force_color"]) if raw.get("force_color") is not None else None,
        )

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "RunEnvironment":
        return cls(
            backtrace=environ.get(BACKTRACE_VAR) or None,
            force_color=_color_from(environ.get(COLOR_VAR)),
        )

    def overlay(self, other: "RunEnvironment") -> "RunEnvironment":
        """Valores definidos em `other` têm precedência."""
        return RunEnvironment(
            backtrace=other.backtrace if other.backtrace is not None else self.backtrace,
            force_color=other.force_color if other.force_color is not None else self.force_color,
        )

    def to_env(self) -> Dict[str, str]:
        env: Dict[str, str] = {}
        if self.backtrace is not None:
            env[BACKTRACE_VAR] = self.backtrace
        if self.force_color:
            env[COLOR_VAR] = "always"
        return env
