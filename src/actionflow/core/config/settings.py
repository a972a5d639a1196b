# src/actionflow/core/config/settings.py
"""
Settings do engine do ActionFlow.

Chaves reconhecidas na configuração resolvida:

    telemetry:
      prefix: [actionflow, action]        # prefixo dos nomes de evento
    errors:
      expose_exception_messages: false    # mensagem crua em step_exception

Chaves desconhecidas são ignoradas; chaves conhecidas com tipo errado
levantam `InvalidSettingError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Tuple

from .errors import InvalidSettingError

DEFAULT_PREFIX: Tuple[str, ...] = ("actionflow", "action")


def _prefix(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Sequence) or not value:
        raise InvalidSettingError("telemetry.prefix deve ser uma lista não vazia de strings")
    if not all(isinstance(p, str) and p.strip() for p in value):
        raise InvalidSettingError("telemetry.prefix deve conter apenas strings não vazias")
    return tuple(value)


def _section(config: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = config.get(key) or {}
    if not isinstance(section, Mapping):
        raise InvalidSettingError(f"'{key}' deve ser um mapa, recebido: {type(section).__name__}")
    return section


@dataclass(frozen=True)
class EngineSettings:
    """Parâmetros de execução compartilhados por todas as actions de um ActionSet."""

    telemetry_prefix: Tuple[str, ...] = DEFAULT_PREFIX
    expose_exception_messages: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "telemetry_prefix", _prefix(self.telemetry_prefix))
        if not isinstance(self.expose_exception_messages, bool):
            raise InvalidSettingError("errors.expose_exception_messages deve ser booleano")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "EngineSettings":
        if not isinstance(config, Mapping):
            raise InvalidSettingError(f"config deve ser um mapa, recebido: {type(config).__name__}")
        telemetry = _section(config, "telemetry")
        errors = _section(config, "errors")
        return cls(
            telemetry_prefix=telemetry.get("prefix", DEFAULT_PREFIX),
            expose_exception_messages=errors.get("expose_exception_messages", False),
        )
