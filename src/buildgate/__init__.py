# src/buildgate/__init__.py
"""
BuildGate — política de build reprodutível para workspaces Cargo.

Este pacote raiz define o namespace público do BuildGate: vendoring
offline, expansão de aliases, política de lints e um pipeline de CI
sequencial e fail-fast.

Arquitetura em alto nível:
    - core.config       → carregamento, merge e hashing da política
    - core.vendor       → Vendor Source Switch (fontes offline)
    - core.aliases      → tabela e resolução de aliases
    - core.lints        → severidades warn/deny e leitura de diagnósticos
    - core.pipeline     → tipos, contexto e estágios do pipeline
    - core.engine       → planejamento, invocação e execução
    - core.traceability → Manifest e Event Log
    - export / report   → config nativa da toolchain e resumo Markdown
"""

__version__ = "0.1.0"
