# src/actionflow/core/config/__init__.py
"""
Camada de configuração do ActionFlow.

Responsabilidades do pacote:
    - Carregar arquivos YAML/JSON (defaults + overrides locais)
    - Resolver a configuração final via deep-merge determinístico
    - Ler os settings do engine (`EngineSettings`)

As definições declarativas de actions ficam em
`actionflow.core.config.actions` (importado à parte, pois depende do
registry).
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidActionDefinitionError,
    InvalidConfigRootTypeError,
    InvalidSettingError,
    UnsupportedConfigFormatError,
)
from .loader import load_config, parse_config_text
from .merge import deep_merge
from .settings import DEFAULT_PREFIX, EngineSettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidActionDefinitionError",
    "InvalidConfigRootTypeError",
    "InvalidSettingError",
    "UnsupportedConfigFormatError",
    "load_config",
    "parse_config_text",
    "deep_merge",
    "DEFAULT_PREFIX",
    "EngineSettings",
]
