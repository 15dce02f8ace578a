# src/buildgate/core/config/errors.py
"""
Exceções canônicas da camada de configuração do BuildGate.

Este módulo define a hierarquia oficial de exceções levantadas durante o
carregamento, a validação estrutural e a materialização da política de
build (aliases, vendoring, lints e pipeline).

Todas as falhas aqui descritas são **fatais em tempo de carga**: ocorrem
antes de qualquer estágio do pipeline ser executado e antes de qualquer
subprocesso ser criado.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais nunca são silenciados
    - Mensagens nomeiam o item inválido (arquivo, caminho, alias, regra)

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigurationError`
    - Nenhuma exceção aqui representa falha de execução de estágio

Limites explícitos:
    - Não executa pipeline
    - Não realiza fallback ou recovery
"""

from __future__ import annotations

from typing import List


class ConfigurationError(Exception):
    """
    Exceção base para erros de configuração do BuildGate.

    Esta hierarquia permite:
        - captura genérica de erros de configuração
        - distinção clara entre falhas de carga e falhas de execução
    """


class DefaultsNotFoundError(ConfigurationError):
    """
    Exceção levantada quando o arquivo de política base (defaults)
    não é encontrado no caminho especificado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório
        - Não existe política implícita quando ele está ausente
    """


class UnsupportedConfigFormatError(ConfigurationError):
    """
    Exceção levantada quando o formato do arquivo de configuração
    não é suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigurationError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigurationError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"vendor": {"enabled": true}}
        - override: {"vendor": "off"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class VendorPathNotFoundError(ConfigurationError):
    """
    Exceção levantada quando o vendoring está habilitado e o diretório
    de vendor não existe ou não é legível.

    Decisões arquiteturais:
        - O vendoring nunca é desabilitado silenciosamente
        - O caminho ausente é nomeado na mensagem e exposto em `path`
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Diretório de vendor não encontrado ou ilegível: {path}")
        self.path = path


class MissingVendoredDependencyError(ConfigurationError):
    """
    Exceção levantada quando uma dependência exigida não possui
    subdiretório correspondente no diretório de vendor.

    A verificação ocorre antes de qualquer compilação, garantindo que
    a resolução offline nunca recorra à rede.
    """

    def __init__(self, path: str, missing: List[str]) -> None:
        joined = ", ".join(missing)
        super().__init__(f"Dependências ausentes em '{path}': {joined}")
        self.path = path
        self.missing = list(missing)


class MalformedAliasTableError(ConfigurationError):
    """
    Exceção levantada quando a tabela de aliases é estruturalmente inválida.

    Exemplos:
        - nome de alias vazio ou não textual
        - definição que não é string nem lista
        - alias reservado definido manualmente
    """


class MalformedLintRuleError(ConfigurationError):
    """
    Exceção levantada quando uma regra de lint é inválida
    (nome ausente ou severidade desconhecida).
    """


class MalformedPipelineError(ConfigurationError):
    """
    Exceção levantada quando a declaração do pipeline de CI é inválida.

    Exemplos:
        - estágios com nomes ou ordinais duplicados
        - estágio sem `alias` nem `args`
        - gatilho com tipo de evento desconhecido
    """
