# src/actionflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do ActionFlow.

Todas representam violações explícitas detectadas ANTES de qualquer
execução de action (carregamento de arquivos, merge, leitura de settings
e de definições declarativas de actions).

Invariantes:
    - Todas herdam de `ConfigError`
    - Nenhuma é levantada durante `run`
"""


class ConfigError(Exception):
    """Exceção base para erros de configuração do ActionFlow."""


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de configuração base (defaults) não existe.

    O arquivo de defaults é obrigatório; não há inferência nem criação
    automática.
    """


class UnsupportedConfigFormatError(ConfigError):
    """Extensão de arquivo não suportada (aceitos: .yaml, .yml, .json)."""


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz da configuração não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"telemetry": {"prefix": ["app", "action"]}}
        - override: {"telemetry": "off"}
    """


class InvalidSettingError(ConfigError):
    """Uma chave conhecida de settings tem tipo ou valor inválido."""


class InvalidActionDefinitionError(ConfigError):
    """Definição declarativa de action malformada ou com referência desconhecida."""
