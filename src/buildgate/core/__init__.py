# src/buildgate/core/__init__.py
"""
Core do BuildGate.

Implementação canônica, independente de CLI, das regras de build:
configuração resolvida, vendoring, aliases, lints e execução do pipeline.

Princípios fundamentais:
    - Nenhuma decisão silenciosa: toda falha é tipada e atribuída
    - A política é imutável durante uma invocação
    - Subprocessos só são iniciados depois que toda a política é válida
"""
