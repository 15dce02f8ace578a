# src/buildgate/core/aliases/resolver.py
"""
Resolvedor de aliases (expansão em profundidade).

A tabela de aliases é tratada como um grafo dirigido entre nomes de alias.
A expansão percorre esse grafo em profundidade a partir do alias invocado,
substituindo cada referência pelos tokens resolvidos do alias referenciado,
no mesmo lugar e preservando a ordem.

Decisões arquiteturais:
    - Pilha explícita em vez de recursão: a profundidade é limitada por
      `max_depth` e o caminho atual é sempre inspecionável
    - O conjunto de visitados contém apenas o caminho atual, então um mesmo
      alias pode aparecer em ramos distintos (diamante) sem ser ciclo
    - Ciclos são detectados no momento da resolução e reportados com o
      caminho completo

Invariantes:
    - O resultado é a concatenação plana, em ordem, dos tokens literais
    - Nenhum token é duplicado ou perdido
    - A resolução sempre termina (ciclo ou limite de profundidade → erro)

Limites explícitos:
    - Não executa comandos
    - Não aplica flags de lint ou de ambiente
"""

from __future__ import annotations

from typing import List, Tuple

from buildgate.core.exceptions import (
    AliasDepthExceededError,
    CyclicAliasError,
    UnknownAliasError,
)

from .table import AliasRef, AliasTable, Literal


DEFAULT_MAX_DEPTH = 32


class AliasResolver:
    """Expande aliases de uma `AliasTable` em tokens finais."""

    def __init__(self, table: AliasTable, *, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError("max_depth must be >= 1")
        self.table = table
        self.max_depth = max_depth

    def _unknown(self, name: str, *, referenced_by: str | None = None) -> UnknownAliasError:
        details = {"alias": referenced_by or name, "name": name}
        return UnknownAliasError(
            message=f"Alias desconhecido: {name}",
            details=details,
            hint=f"Declare '{name}' na seção 'aliases' da política ou corrija a referência.",
        )

    def resolve(self, name: str) -> List[str]:
        """
        Resolve `name` em sua sequência final de tokens.

        Raises:
            UnknownAliasError: Se `name` (ou um `AliasRef`) não existir.
            CyclicAliasError: Se a expansão revisitar um alias do caminho atual.
            AliasDepthExceededError: Se o caminho exceder `max_depth`.
        """
        if name not in self.table:
            raise self._unknown(name)

        out: List[str] = []
        # (alias, índice do próximo token)
        stack: List[Tuple[str, int]] = [(name, 0)]
        on_path = {name}

        while stack:
            current, idx = stack[-1]
            tokens = self.table.get(current).tokens

            if idx >= len(tokens):
                stack.pop()
                on_path.discard(current)
                continue

            stack[-1] = (current, idx + 1)
            token = tokens[idx]

            if isinstance(token, Literal):
                out.append(token.value)
                continue

            if isinstance(token, AliasRef):
                if token.name not in self.table:
                    raise self._unknown(token.name, referenced_by=current)
                target = token.name
            elif token in self.table:
                target = token
            else:
                out.append(token)
                continue

            path = [frame[0] for frame in stack]
            if target in on_path:
                raise CyclicAliasError(
                    message=f"Ciclo de aliases detectado: {' -> '.join(path + [target])}",
                    details={"alias": name, "path": path + [target]},
                    hint="Remova a referência circular ou marque o token como literal.",
                )
            if len(stack) >= self.max_depth:
                raise AliasDepthExceededError(
                    message=f"Expansão de '{name}' excedeu profundidade máxima ({self.max_depth})",
                    details={"alias": name, "path": path + [target], "max_depth": self.max_depth},
                    hint="Reduza o aninhamento de aliases ou aumente resolver.max_depth.",
                )

            stack.append((target, 0))
            on_path.add(target)

        return out
