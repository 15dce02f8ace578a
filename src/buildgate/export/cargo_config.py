"""
src/buildgate/export/cargo_config.py

Renderização da política efetiva no formato `.cargo/config.toml`.

Regras:
- Derivado EXCLUSIVAMENTE do BuildPolicy (não acessa filesystem).
- Mesma política => mesmo texto (ordem de declaração preservada).
- O diretório de vendor é emitido como configurado (relativo ao workspace).

Seções emitidas:
[alias]
[source.<source_name>]   (apenas com vendoring ativo; o redirecionamento
                         de crates-io fica no alias `__vendored`)
[build]                  (apenas com lints declarados)
"""

from __future__ import annotations

import json
import re
from typing import List, Sequence

from buildgate.core.aliases.table import AliasRef, Literal, Token
from buildgate.core.policy import BuildPolicy


_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def _key(name: str) -> str:
    return name if _BARE_KEY.match(name) else _string(name)


def _string(value: str) -> str:
    # JSON string escaping is a valid TOML basic string
    return json.dumps(value, ensure_ascii=False)


def _array(values: Sequence[str]) -> str:
    return "[" + ", ".join(_string(v) for v in values) + "]"


def _token_text(token: Token) -> str:
    if isinstance(token, Literal):
        return token.value
    if isinstance(token, AliasRef):
        return token.name
    return token


def render_cargo_config(policy: BuildPolicy) -> str:
    """Gera o conteúdo de `.cargo/config.toml` a partir da política."""
    lines: List[str] = []

    lines.append("[alias]")
    for alias in policy.aliases.list():
        lines.append(f"{_key(alias.name)} = {_array([_token_text(t) for t in alias.tokens])}")
    lines.append("")

    if policy.vendor.enabled:
        lines.append(f"[source.{_key(policy.vendor.source_name)}]")
        lines.append(f"directory = {_string(policy.vendor.path)}")
        lines.append("")

    pairs = policy.lints.to_flag_pairs()
    if pairs:
        lines.append("[build]")
        lines.append("rustflags = [")
        for flag, name in pairs:
            lines.append(f"    {_string(flag)}, {_string(name)},")
        lines.append("]")
        lines.append("")

    return "\n".join(lines)
