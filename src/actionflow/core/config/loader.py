# src/actionflow/core/config/loader.py
"""
Loader de configuração do ActionFlow.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional; ignorado se não existir)

Formatos: YAML (.yaml, .yml) via PyYAML e JSON (.json).

A configuração resultante alimenta:
    - `EngineSettings.from_config` (prefixo de telemetria, exposição de
      mensagens de exceção)
    - `action_set_from_config` (definições declarativas de actions)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

PathLike = Union[str, Path]

_YAML_SUFFIXES = {".yaml", ".yml"}


def _ensure_root(data: Any, origin: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__} ({origin})"
        )
    return data


def parse_config_text(text: str, *, fmt: str = "yaml") -> Dict[str, Any]:
    """Interpreta conteúdo de configuração já em memória ("yaml" ou "json")."""
    fmt = fmt.lower()
    if fmt in {"yaml", "yml"}:
        data = yaml.safe_load(text)
    elif fmt == "json":
        data = json.loads(text) if text.strip() else None
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {fmt}")
    return _ensure_root(data, f"<{fmt}>")


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de defaults não encontrado: {path}")

    suffix = path.suffix.lower()
    if suffix in _YAML_SUFFIXES:
        fmt = "yaml"
    elif suffix == ".json":
        fmt = "json"
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    return parse_config_text(path.read_text(encoding="utf-8"), fmt=fmt)


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva.

    Raises:
        DefaultsNotFoundError: defaults ausente.
        UnsupportedConfigFormatError: extensão não suportada.
        InvalidConfigRootTypeError: raiz não é um dicionário.
        ConfigTypeConflictError: conflito estrutural no merge.
    """
    effective = _load_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective
