# src/actionflow/core/engine/runner.py
"""
Pipeline Runner: fold com saída antecipada sobre a lista de Steps.

Regras:
    - Steps executam estritamente na ordem de declaração, um por vez
    - `(cont, ctx')`: o próximo Step recebe `ctx'`
    - `(halt, outcome)`: a execução para e `outcome` vira o `result` do
      contexto ACUMULADO até ali; Steps seguintes nunca são invocados
    - lista vazia: o contexto inicial volta intacto (`result` = None)

Qualquer outro formato de retorno, ou um contexto com `action` diferente,
é violação de contrato e levanta `StepContractError`, contida pela
fronteira do span.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from actionflow.core.errors import step_contract_violation
from actionflow.core.exceptions import StepContractError
from actionflow.core.pipeline.context import Context
from actionflow.core.pipeline.step import StepEntry
from actionflow.core.pipeline.types import Outcome, Signal, StepReturn, is_outcome

Resolve = Callable[[StepEntry, Context], StepReturn]


def _violation(entry: StepEntry, received: Any) -> StepContractError:
    payload = step_contract_violation(step=entry.ref, received=repr(received)[:200])
    return StepContractError.from_payload(payload)


def run_pipeline(entries: Sequence[StepEntry], ctx: Context, resolve: Resolve) -> Context:
    acc = ctx
    for entry in entries:
        returned = resolve(entry, acc)

        if not (isinstance(returned, tuple) and len(returned) == 2):
            raise _violation(entry, returned)

        signal, payload = returned
        if signal == Signal.CONTINUE:
            if not isinstance(payload, Context) or payload.action != acc.action:
                raise _violation(entry, returned)
            acc = payload
        elif signal == Signal.HALT:
            if not is_outcome(payload):
                raise _violation(entry, returned)
            return acc.put_result((Outcome(payload[0]), payload[1]))
        else:
            raise _violation(entry, returned)

    return acc
