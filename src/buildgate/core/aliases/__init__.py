# src/buildgate/core/aliases/__init__.py
"""
Aliases de comando do BuildGate.

Componentes:
    - table    → arena de definições (parse, unicidade, nomes reservados)
    - resolver → expansão em profundidade com detecção de ciclos
"""

from .resolver import DEFAULT_MAX_DEPTH, AliasResolver
from .table import (
    RESERVED_VENDORED_ALIAS,
    Alias,
    AliasRef,
    AliasTable,
    Literal,
    parse_alias,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "RESERVED_VENDORED_ALIAS",
    "Alias",
    "AliasRef",
    "AliasResolver",
    "AliasTable",
    "Literal",
    "parse_alias",
]
