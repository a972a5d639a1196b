# src/actionflow/core/config/merge.py
"""
Deep-merge determinístico de configuração.

Política (v1):
    - dict + dict → merge recursivo por chave
    - list        → sobrescrita total
    - escalar     → sobrescrita direta
    - tipos diferentes → `ConfigTypeConflictError` com o caminho da chave

Nenhum input é mutado.
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


def _merge_at(path: Tuple[str, ...], base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = deepcopy(base)

    for key, new in override.items():
        if key not in result:
            result[key] = deepcopy(new)
            continue

        old = result[key]
        where = ".".join(path + (str(key),))

        if isinstance(old, dict) and isinstance(new, dict):
            result[key] = _merge_at(path + (str(key),), old, new)
        elif isinstance(new, list):
            result[key] = deepcopy(new)
        elif old is None or new is None or type(old) is type(new):
            # None em qualquer lado não conflita: limpa ou preenche a chave
            result[key] = deepcopy(new)
        else:
            raise ConfigTypeConflictError(
                f"Conflito de tipo em '{where}': {type(old).__name__} vs {type(new).__name__}"
            )

    return result


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Mescla `override` sobre `base` e devolve um novo dicionário."""
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )
    return _merge_at((), base, override)
