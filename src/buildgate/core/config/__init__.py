# src/buildgate/core/config/__init__.py

"""
Camada de configuração do BuildGate.

Este pacote carrega, mescla e identifica a política de build declarada em
YAML/JSON.

Responsabilidades do pacote:
    - Carregamento de arquivos de política (defaults + overrides locais)
    - Resolução da configuração final via deep-merge determinístico
    - Validação estrutural básica (tipo raiz, formato)
    - Geração de hash canônico para rastreabilidade
    - Hierarquia de `ConfigurationError`

Limites explícitos:
    - Não constrói o modelo tipado da política (ver `core.policy`)
    - Não executa pipeline
"""

from .errors import ConfigurationError
from .hashing import compute_config_hash
from .loader import DEFAULT_POLICY_PATH, load_config
from .merge import deep_merge

__all__ = [
    "ConfigurationError",
    "DEFAULT_POLICY_PATH",
    "compute_config_hash",
    "deep_merge",
    "load_config",
]
