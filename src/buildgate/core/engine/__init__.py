# src/buildgate/core/engine/__init__.py
"""
Engine do BuildGate.

Componentes principais:
    - planner    → validação e ordenação dos estágios por ordinal
    - invocation → montagem de (argv, env) a partir da política
    - executor   → execução de processos externos via subprocess
    - runner     → máquina de estados do pipeline (sequencial, fail-fast)

Planejamento e execução são responsabilidades separadas: nenhum estágio é
executado mais de uma vez por run e nenhum é re-tentado.
"""
