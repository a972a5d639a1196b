"""
ActionFlow: Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do ActionFlow.

Objetivo:
- Sinalizar erros de declaração (registry, schema) no momento da construção
- Sinalizar violações de contrato de Step dentro do runner, para que a
  fronteira do span as converta em `step_exception`

Regras:
- Exceções carregam dados estruturados em `details`
- Nunca são devolvidas ao chamador de `run`: ou ocorrem antes (build) ou
  são contidas pelo Span Wrapper
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import ErrorPayload


@dataclass(frozen=True)
class ActionFlowException(Exception):
    """Base class para exceções internas do ActionFlow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_payload(cls, payload: ErrorPayload) -> "ActionFlowException":
        return cls(message=payload.message, details=dict(payload.details), hint=payload.hint)

    def to_payload(self) -> ErrorPayload:
        return ErrorPayload(
            type=self.__class__.__name__,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Registry / Declaração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RegistryError(ActionFlowException):
    """Declaração de actions ou Steps inválida."""


@dataclass(frozen=True)
class DuplicateStepError(RegistryError):
    """Dois Steps locais registrados com o mesmo nome."""


@dataclass(frozen=True)
class DuplicateActionError(RegistryError):
    """Duas actions declaradas com o mesmo nome."""


# ---------------------------------------------------------------------------
# Execução
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StepContractError(ActionFlowException):
    """Step devolveu um formato fora do protocolo (cont|halt)."""


# ---------------------------------------------------------------------------
# Parâmetros
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchemaError(ActionFlowException):
    """Schema de validação malformado (tipo desconhecido, spec inválida)."""
