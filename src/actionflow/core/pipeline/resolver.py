# src/actionflow/core/pipeline/resolver.py
"""
Resolução e invocação de Steps.

Ordem de resolução de uma `StepEntry`:
    1. o nome do Step embutido (`cast_validate_params`) despacha direto
       para o Parameter Caster
    2. `LocalStep` é procurado na tabela do ActionSet dono da action
    3. `ExternalStep` usa o binding construído no registro contra o provedor

Dentro do binding, `(ctx, opts)` tem preferência sobre `(ctx)`. Sem
nenhuma forma disponível, o resultado é sintetizado:
    - `(halt, (error, "step_not_found"))` para Steps locais
    - `(halt, (error, "external_step_not_found"))` quando a resolução
      cruzou a fronteira de um provedor

A tabela de bindings é montada no `build()`; aqui não há introspecção.
"""

from __future__ import annotations

from typing import Mapping

from actionflow.core.errors import EXTERNAL_STEP_NOT_FOUND, STEP_NOT_FOUND
from actionflow.steps.params.cast_validate import cast_validate_params

from .context import Context
from .step import CAST_VALIDATE_PARAMS, ExternalStep, LocalStep, StepBinding, StepEntry, StepRef
from .types import StepReturn, halt_error

_EMPTY = StepBinding()


def invoke_step(entry: StepEntry, ctx: Context, table: Mapping[StepRef, StepBinding]) -> StepReturn:
    ref = entry.ref

    if isinstance(ref, LocalStep) and ref.name == CAST_VALIDATE_PARAMS:
        return cast_validate_params(ctx, entry.options)

    binding = table.get(ref, _EMPTY)
    if binding.with_options is not None:
        return binding.with_options(ctx, entry.options)
    if binding.without_options is not None:
        return binding.without_options(ctx)

    if isinstance(ref, ExternalStep):
        return halt_error(EXTERNAL_STEP_NOT_FOUND)
    return halt_error(STEP_NOT_FOUND)
