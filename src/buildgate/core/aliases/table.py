# src/buildgate/core/aliases/table.py
"""
Tabela de aliases de comando.

Este módulo define a representação estrutural dos aliases: um arena de
definições indexado por nome, onde cada definição é uma sequência ordenada
de tokens. Um token pode ser:

    - texto simples: expandido se nomear outro alias, literal caso contrário
    - `Literal`: nunca expandido, mesmo que colida com um nome de alias
    - `AliasRef`: referência explícita; precisa existir na tabela

Formatos aceitos na configuração (os mesmos do arquivo nativo da toolchain):
    - string: separada em tokens por espaço em branco
        v-check: "__vendored check"
    - lista: cada elemento é um token (espaços preservados)
        - "--config"
        - "source.crates-io.replace-with = \"vendored-sources\""

Marcadores explícitos na configuração:
    - prefixo `\\` em um token → `Literal` (o prefixo é removido)
    - `{literal: "..."}` em listas → `Literal`
    - `{alias: "..."}` em listas → `AliasRef`

Invariantes:
    - Cada nome de alias é único na tabela
    - Nomes reservados (ex.: `__vendored`) só entram via `reserved`
    - A ordem de declaração é preservada

Limites explícitos:
    - Não expande aliases (ver `resolver`)
    - Não detecta ciclos; ciclos são erro de resolução, não de carga
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from buildgate.core.config.errors import MalformedAliasTableError


RESERVED_VENDORED_ALIAS = "__vendored"
LITERAL_PREFIX = "\\"


@dataclass(frozen=True)
class Literal:
    """Token que nunca é expandido."""

    value: str


@dataclass(frozen=True)
class AliasRef:
    """Referência explícita a outro alias."""

    name: str


Token = Union[str, Literal, AliasRef]


@dataclass(frozen=True)
class Alias:
    """Definição imutável de um alias: nome → tokens ordenados."""

    name: str
    tokens: Tuple[Token, ...] = ()


def _parse_token(alias_name: str, raw: Any) -> Token:
    if isinstance(raw, str):
        if raw.startswith(LITERAL_PREFIX) and len(raw) > 1:
            return Literal(raw[len(LITERAL_PREFIX):])
        return raw
    if isinstance(raw, dict) and len(raw) == 1:
        (kind, value), = raw.items()
        if kind == "literal" and isinstance(value, str):
            return Literal(value)
        if kind == "alias" and isinstance(value, str) and value.strip():
            return AliasRef(value)
    raise MalformedAliasTableError(
        f"Token inválido no alias '{alias_name}': {raw!r}"
    )


def parse_alias(name: Any, definition: Any) -> Alias:
    """
    Converte uma definição declarativa em `Alias`.

    Raises:
        MalformedAliasTableError: Se o nome ou a definição forem inválidos.
    """
    if not isinstance(name, str) or not name.strip():
        raise MalformedAliasTableError("Nome de alias deve ser string não vazia")

    if isinstance(definition, str):
        tokens: List[Token] = [_parse_token(name, t) for t in definition.split()]
    elif isinstance(definition, list):
        tokens = [_parse_token(name, t) for t in definition]
    else:
        raise MalformedAliasTableError(
            f"Alias '{name}' deve ser string ou lista, recebido: {type(definition).__name__}"
        )

    return Alias(name=name, tokens=tuple(tokens))


@dataclass
class AliasTable:
    """
    Arena de definições de alias indexada por nome.

    Segue o mesmo desenho do registro de estágios: validação de unicidade
    no momento do registro e ordem de declaração preservada separadamente.
    """

    reserved: Tuple[str, ...] = (RESERVED_VENDORED_ALIAS,)
    _aliases: Dict[str, Alias] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, alias: Alias, *, allow_reserved: bool = False) -> None:
        if alias.name in self.reserved and not allow_reserved:
            raise MalformedAliasTableError(
                f"Alias '{alias.name}' é reservado e não pode ser declarado na configuração"
            )
        if alias.name in self._aliases:
            raise MalformedAliasTableError(f"Alias duplicado: {alias.name}")
        self._aliases[alias.name] = alias
        self._order.append(alias.name)

    def get(self, name: str) -> Alias:
        return self._aliases[name]

    def names(self) -> List[str]:
        return list(self._order)

    def list(self) -> List[Alias]:
        return [self._aliases[n] for n in self._order]

    def __contains__(self, name: object) -> bool:
        return name in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)

    @classmethod
    def from_mapping(
        cls,
        raw: Optional[Mapping[str, Any]],
        *,
        reserved: Iterable[Alias] = (),
    ) -> "AliasTable":
        """
        Constrói a tabela a partir da seção `aliases` da configuração.

        Aliases reservados (gerados internamente, ex.: pelo Vendor Source
        Switch) são registrados antes dos declarados.

        Raises:
            MalformedAliasTableError: Se a seção ou alguma definição for inválida.
        """
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise MalformedAliasTableError(
                f"Seção 'aliases' deve ser dict, recebido: {type(raw).__name__}"
            )

        table = cls()
        for alias in reserved:
            table.add(alias, allow_reserved=True)
        for name, definition in raw.items():
            table.add(parse_alias(name, definition))
        return table
