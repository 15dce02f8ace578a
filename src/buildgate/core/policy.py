# src/buildgate/core/policy.py
"""
Modelo tipado da política de build.

`load_policy` transforma a configuração resolvida (dict) em um
`BuildPolicy` imutável, validando todas as seções e aplicando o Vendor
Source Switch. Qualquer falha aqui é um `ConfigurationError`, fatal antes
de qualquer estágio ou subprocesso.

Seções reconhecidas:
    - toolchain : binário invocado (ex.: cargo)
    - vendor    : política de vendoring offline
    - aliases   : tabela de aliases (o reservado `__vendored` é gerado)
    - lints     : regras warn/deny
    - pipeline  : triggers, environment, stages
    - doctor    : comandos de diagnóstico da toolchain
    - resolver  : limites da expansão de aliases
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from buildgate.core.aliases import AliasResolver, AliasTable
from buildgate.core.aliases.resolver import DEFAULT_MAX_DEPTH
from buildgate.core.config.errors import ConfigurationError, MalformedPipelineError
from buildgate.core.config.hashing import compute_config_hash
from buildgate.core.engine.planner import plan_stages
from buildgate.core.lints import LintPolicySet
from buildgate.core.pipeline.environment import RunEnvironment
from buildgate.core.pipeline.stage import PipelineStage
from buildgate.core.pipeline.triggers import TriggerPolicy
from buildgate.core.vendor import VendorOverride, VendorPolicy, apply_vendor_policy, vendored_alias


@dataclass(frozen=True)
class BuildPolicy:
    """Política efetiva, somente leitura durante uma invocação."""

    toolchain: str
    vendor: VendorPolicy
    vendor_override: Optional[VendorOverride]
    aliases: AliasTable
    lints: LintPolicySet
    stages: Tuple[PipelineStage, ...]
    triggers: TriggerPolicy
    environment: RunEnvironment
    doctor: Tuple[Tuple[str, ...], ...]
    max_depth: int
    config_hash: str

    def resolver(self) -> AliasResolver:
        return AliasResolver(self.aliases, max_depth=self.max_depth)


def _section(config: Mapping[str, Any], key: str, expected: type) -> Any:
    value = config.get(key)
    if value is not None and not isinstance(value, expected):
        raise ConfigurationError(
            f"Seção '{key}' deve ser {expected.__name__}, recebido: {type(value).__name__}"
        )
    return value


def _load_stages(raw_pipeline: Optional[Mapping[str, Any]], aliases: AliasTable) -> Tuple[PipelineStage, ...]:
    raw_stages = (raw_pipeline or {}).get("stages") or []
    if not isinstance(raw_stages, list):
        raise MalformedPipelineError("pipeline.stages deve ser lista")

    stages = [PipelineStage.from_config(raw, ordinal=i) for i, raw in enumerate(raw_stages)]
    for stage in stages:
        if stage.alias is not None and stage.alias not in aliases:
            raise MalformedPipelineError(
                f"Estágio '{stage.name}' referencia alias inexistente: {stage.alias}"
            )
    return tuple(plan_stages(stages))


def _load_doctor(raw: Any) -> Tuple[Tuple[str, ...], ...]:
    if raw is None:
        return ()
    commands = []
    for entry in raw:
        if isinstance(entry, str):
            entry = entry.split()
        if not isinstance(entry, list) or not entry or not all(isinstance(t, str) for t in entry):
            raise ConfigurationError(f"Comando de doctor inválido: {entry!r}")
        commands.append(tuple(entry))
    return tuple(commands)


def load_policy(
    config: Dict[str, Any],
    *,
    base_dir: Optional[Path] = None,
    verify_vendor: bool = True,
) -> BuildPolicy:
    """
    Constrói o `BuildPolicy` a partir da configuração resolvida.

    Args:
        config: Configuração efetiva (saída de `load_config`).
        base_dir: Raiz do workspace para caminhos relativos.
        verify_vendor: Quando False, o diretório de vendor não é
            inspecionado (usado apenas para renderizar configuração).

    Raises:
        ConfigurationError: Qualquer violação estrutural ou de vendoring.
    """
    toolchain = config.get("toolchain", "cargo")
    if not isinstance(toolchain, str) or not toolchain.strip():
        raise ConfigurationError("toolchain deve ser string não vazia")

    vendor = VendorPolicy.from_config(_section(config, "vendor", dict))
    if verify_vendor:
        override = apply_vendor_policy(vendor, base_dir=base_dir)
    elif vendor.enabled:
        override = VendorOverride(
            directory=Path(vendor.path),
            replaces=vendor.replaces,
            source_name=vendor.source_name,
        )
    else:
        override = None

    aliases = AliasTable.from_mapping(
        _section(config, "aliases", dict),
        reserved=[vendored_alias(override)],
    )

    lints = LintPolicySet.from_config(_section(config, "lints", list))

    raw_pipeline = _section(config, "pipeline", dict)
    stages = _load_stages(raw_pipeline, aliases)
    triggers = TriggerPolicy.from_config((raw_pipeline or {}).get("triggers"))
    environment = RunEnvironment.from_config((raw_pipeline or {}).get("environment"))

    resolver_cfg = _section(config, "resolver", dict) or {}
    max_depth = resolver_cfg.get("max_depth", DEFAULT_MAX_DEPTH)
    if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth < 1:
        raise ConfigurationError("resolver.max_depth deve ser inteiro >= 1")

    return BuildPolicy(
        toolchain=toolchain,
        vendor=vendor,
        vendor_override=override,
        aliases=aliases,
        lints=lints,
        stages=stages,
        triggers=triggers,
        environment=environment,
        doctor=_load_doctor(_section(config, "doctor", list)),
        max_depth=max_depth,
        config_hash=compute_config_hash(config),
    )
