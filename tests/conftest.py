# tests/conftest.py
"""
Fixtures compartilhados para testes do BuildGate.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas da política de build
- contexto de execução controlado (RunContext)
- um executor falso, que registra invocações sem criar processos

O objetivo destas fixtures é permitir testes do core
(config, aliases, lints, pipeline, engine e traceability) sem depender de:
- uma toolchain instalada
- variáveis de ambiente do operador
- rede

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - O executor falso implementa `CommandExecutor` via duck typing
    - Respostas do executor são roteadas pelo argv (sem lógica de domínio)

Invariantes:
    - Nenhuma fixture inicia subprocessos
    - Vendoring vem desabilitado; testes de vendor usam `tmp_path`
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def policy_defaults_yaml() -> str:
    """
    YAML de política base semelhante ao uso real do projeto.

    Usado por:
        - Testes do loader (defaults + local)
        - Testes de deep-merge sobre a política
    """
    return """
toolchain: cargo
vendor:
  enabled: false
  path: vendor
aliases:
  v-check: "__vendored check"
  fmt-check: "fmt --all -- --check"
lints:
  - {name: "clippy::unwrap_used", severity: deny}
  - {name: let_underscore_drop, severity: warn}
pipeline:
  environment:
    backtrace: full
    force_color: true
"""


@pytest.fixture
def policy_local_yaml() -> str:
    """
    YAML de override local.

    Decisões arquiteturais:
        - Listas substituem por inteiro (a lista de lints é trocada)
        - Dicts são mesclados por chave (o alias novo convive com os antigos)
    """
    return """
aliases:
  doc-all: "doc --workspace"
lints:
  - {name: "clippy::unwrap_used", severity: warn}
pipeline:
  environment:
    backtrace: "1"
"""


@pytest.fixture
def policy_config() -> Dict:
    """
    Configuração resolvida mínima (dict), sem vendoring.

    Estágios A, B e C usam aliases simples para que o argv de cada um
    seja identificável no executor falso.
    """
    return {
        "toolchain": "cargo",
        "vendor": {"enabled": False, "path": "vendor"},
        "aliases": {
            "a": "check --workspace",
            "b": "clippy --workspace",
            "c": "test --workspace",
        },
        "lints": [
            {"name": "clippy::wildcard_dependencies", "severity": "deny"},
            {"name": "clippy::unwrap_used", "severity": "deny"},
            {"name": "clippy::negative_feature_names", "severity": "warn"},
        ],
        "pipeline": {
            "environment": {"backtrace": "full", "force_color": True},
            "stages": [
                {"name": "A", "alias": "a"},
                {"name": "B", "alias": "b"},
                {"name": "C", "alias": "c"},
            ],
        },
    }


# =====================================================
# Pipeline fixtures
# =====================================================

@pytest.fixture
def run_ctx():
    """Contexto de execução isolado para uma run de teste."""
    from buildgate.core.pipeline.context import RunContext

    return RunContext(
        run_id="run-test",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        policy_hash="hash-test",
    )


class FakeExecutor:
    """
    Executor falso: registra cada invocação e devolve respostas roteadas.

    `responses` mapeia o segundo token do argv (o subcomando da toolchain)
    para um `CommandResult` ou para uma exceção a ser levantada.
    Subcomandos sem rota terminam com sucesso e saída vazia.
    """

    def __init__(self, responses: Optional[Dict[str, object]] = None):
        self.responses = dict(responses or {})
        self.calls: List[Tuple[Tuple[str, ...], Dict[str, str]]] = []

    def execute(self, argv: Sequence[str], *, env, cwd=None):
        from buildgate.core.pipeline.types import CommandResult

        self.calls.append((tuple(argv), dict(env)))
        key = argv[1] if len(argv) > 1 else argv[0]
        response = self.responses.get(key)
        if isinstance(response, BaseException):
            raise response
        if response is None:
            return CommandResult(returncode=0)
        return response

    @property
    def subcommands(self) -> List[str]:
        return [argv[1] for argv, _ in self.calls]


@pytest.fixture
def fake_executor() -> Callable[..., FakeExecutor]:
    """Fábrica de `FakeExecutor` (uma instância nova por chamada)."""
    return FakeExecutor
