"""
ActionFlow: Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do ActionFlow.
Erros devolvidos por `run` fazem parte do contrato público da biblioteca:
o chamador casa o motivo (`reason`) exato, portanto os códigos abaixo são
estáveis e nunca texto livre.

Taxonomia:
- Erros de resolução: `action_not_found`, `step_not_found`,
  `external_step_not_found`
- Erros de validação: `{"reason": "invalid_params", "validation_record": ...}`
- Erros declarados por Steps: opacos ao engine
- Falhas de Step: `{"reason": "step_exception", "message": <sanitizada>}`

Nenhuma mensagem de exceção crua é exposta por padrão.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Mapping, Optional


# ---------------------------------------------------------------------------
# Catálogo canônico de motivos (v1)
# ---------------------------------------------------------------------------

# Resolução
ACTION_NOT_FOUND = "action_not_found"
STEP_NOT_FOUND = "step_not_found"
EXTERNAL_STEP_NOT_FOUND = "external_step_not_found"

# Validação
INVALID_PARAMS = "invalid_params"

# Falhas contidas na fronteira do span
STEP_EXCEPTION = "step_exception"


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload estruturado de erro para relatórios e telemetria.

    Campos:
    - type: código estável do erro
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Sanitização
# ---------------------------------------------------------------------------

_SAFE_REASON_MESSAGES: Dict[str, str] = {
    "validation_failed": "Validation failed for provided data",
    "database_error": "Database operation failed - data may already exist",
    "api_error": "External service error occurred",
    "payment_gateway_error": "Payment processing error occurred",
    STEP_EXCEPTION: "An error occurred during processing",
}

_DEFAULT_SAFE_MESSAGE = "An error occurred"

# Ordem importa: a primeira classe compatível vence.
_SAFE_EXCEPTION_MESSAGES = (
    ((ValueError, TypeError, KeyError), "Invalid argument provided to service"),
    (RuntimeError, "Service error occurred during processing"),
    (OSError, "File system error occurred"),
)

_UNEXPECTED_EXCEPTION_MESSAGE = "An unexpected error occurred during processing"


def safe_exception_message(exc: BaseException) -> str:
    """Mensagem segura para o operador, derivada apenas da classe da exceção."""
    for classes, message in _SAFE_EXCEPTION_MESSAGES:
        if isinstance(exc, classes):
            return message
    return _UNEXPECTED_EXCEPTION_MESSAGE


def sanitize_error(error: Any) -> Any:
    """Acrescenta `safe_message` a erros em forma de mapa; demais valores passam intactos."""
    if not isinstance(error, Mapping):
        return error
    out = dict(error)
    out["safe_message"] = _SAFE_REASON_MESSAGES.get(out.get("reason"), _DEFAULT_SAFE_MESSAGE)
    return out


def step_exception_error(exc: BaseException, *, expose_message: bool = False) -> Dict[str, Any]:
    """Converte uma falha não tratada no motivo canônico `step_exception`."""
    if expose_message:
        message = str(exc) or safe_exception_message(exc)
    else:
        message = safe_exception_message(exc)
    return {"reason": STEP_EXCEPTION, "message": message}


def _sanitize_assigns(assigns: Mapping[Any, Any]) -> Dict[Any, Any]:
    out = {k: v for k, v in assigns.items() if k != "current_user"}
    user = assigns.get("current_user")
    if isinstance(user, Mapping):
        user_id = user.get("id")
    else:
        user_id = getattr(user, "id", None)
    out["user_id"] = user_id
    return out


def exception_to_error(
    exc: BaseException,
    *,
    step: Any = None,
    action: Any = None,
    ctx: Any = None,
) -> Dict[str, Any]:
    """
    Registro detalhado de uma falha para logs e relatórios.

    O snapshot do contexto nunca carrega o usuário corrente inteiro:
    `current_user` é removido de `assigns` e apenas `user_id` é mantido.
    """
    snapshot = None
    if ctx is not None and hasattr(ctx, "assigns"):
        snapshot = {
            "action": getattr(ctx, "action", None),
            "params": dict(getattr(ctx, "params", {}) or {}),
            "assigns": _sanitize_assigns(ctx.assigns),
        }
    return {
        "reason": STEP_EXCEPTION,
        "step": step,
        "action": action,
        "exception_type": exc.__class__.__name__,
        "safe_message": safe_exception_message(exc),
        "context_snapshot": snapshot,
    }


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def registry_configuration_error(
    *,
    message: str = "Definição de actions inválida",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise a declaração das actions e dos Steps antes de construir o registry.",
) -> ErrorPayload:
    return ErrorPayload(
        type="REGISTRY_CONFIGURATION_ERROR",
        message=message,
        details=details or {},
        hint=hint,
    )


def step_contract_violation(
    *,
    step: Any,
    received: str,
    hint: str = "Ajuste o Step para retornar (cont, ctx) ou (halt, (ok|error, valor)).",
) -> ErrorPayload:
    return ErrorPayload(
        type="STEP_CONTRACT_VIOLATION",
        message="Step retornou formato inválido",
        details={"step": str(step), "received": received},
        hint=hint,
    )
