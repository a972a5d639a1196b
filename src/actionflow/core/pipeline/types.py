# src/actionflow/core/pipeline/types.py
"""
Tipos canônicos do protocolo de Steps do ActionFlow.

Este módulo define os valores que padronizam a comunicação entre Steps,
Pipeline Runner e o ponto de entrada público `run`.

Componentes principais:
    - Signal  → sinal de controle devolvido por um Step (CONTINUE, HALT)
    - Outcome → braço do resultado final (OK, ERROR)
    - cont / halt_ok / halt_error → construtores do retorno de um Step

Protocolo de retorno de um Step (exatamente um dos formatos):
    - (Signal.CONTINUE, novo_ctx)
    - (Signal.HALT, (Outcome.OK, valor))
    - (Signal.HALT, (Outcome.ERROR, motivo))

Invariantes:
    - Os enums herdam de `str`: `Signal.HALT == "halt"` e `Outcome.OK == "ok"`,
      o que permite pattern matching com literais
    - Nenhuma lógica de execução vive neste módulo

Limites explícitos:
    - Não executa Steps
    - Não valida o formato de retorno (responsabilidade do runner)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Tuple


class Signal(str, Enum):
    """Sinal de controle devolvido por um Step."""
    CONTINUE = "cont"
    HALT = "halt"


class Outcome(str, Enum):
    """
    Braços do resultado final de uma action.

    O ponto de entrada público sempre devolve `(Outcome.OK, valor)` ou
    `(Outcome.ERROR, motivo)`; o chamador pode casar os dois braços sem
    tratar exceções.
    """
    OK = "ok"
    ERROR = "error"


ActionResult = Tuple[Outcome, Any]
StepReturn = Tuple[Signal, Any]


def cont(ctx: Any) -> StepReturn:
    return (Signal.CONTINUE, ctx)


def halt_ok(value: Any = None) -> StepReturn:
    return (Signal.HALT, (Outcome.OK, value))


def halt_error(reason: Any) -> StepReturn:
    return (Signal.HALT, (Outcome.ERROR, reason))


def is_outcome(value: Any) -> bool:
    """Indica se `value` já é um par `(ok|error, _)` bem formado."""
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and value[0] in (Outcome.OK, Outcome.ERROR)
    )
