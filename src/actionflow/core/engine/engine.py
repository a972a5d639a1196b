# src/actionflow/core/engine/engine.py
"""
Ponto de entrada de execução de actions do ActionFlow.

Fluxo de `run_action(registry, action, params, source)`:
    1. busca a action no registry (`action_not_found` sem invocar Steps)
    2. constrói um Context novo (adaptação de `source` → `assigns`); uma
       falha ao ler `source` vira `step_exception`, sem span
    3. executa o Pipeline Runner dentro do Span Wrapper
    4. normaliza o `result` final em `(ok, valor)` | `(error, motivo)`

Garantias:
    - `run_action` nunca levanta exceção para o chamador
    - cada invocação tem o seu próprio Context; invocações concorrentes
      não compartilham estado mutável
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from actionflow.core.errors import ACTION_NOT_FOUND, INVALID_PARAMS, step_exception_error
from actionflow.core.pipeline.context import Context
from actionflow.core.pipeline.types import ActionResult, Outcome, is_outcome
from actionflow.core.telemetry import MetadataComposer, run_with_span

from .runner import run_pipeline


def adapt_source(source: Any) -> Tuple[Mapping[Any, Any], Optional[Any]]:
    """
    Extrai `assigns` de `source`.

    Returns:
        (assigns, source_original_ou_None)

    - None           → assigns vazio
    - mapa           → usado diretamente como assigns
    - objeto com `.assigns` (mapa) → assigns extraído, objeto preservado
    - qualquer outro → assigns vazio, objeto preservado em `private`
    """
    if source is None:
        return {}, None
    if isinstance(source, Mapping):
        return source, None
    assigns = getattr(source, "assigns", None)
    if isinstance(assigns, Mapping):
        return assigns, source
    return {}, source


def build_context(action: Any, params: Mapping[Any, Any], source: Any) -> Context:
    assigns, original = adapt_source(source)
    private = {"raw_params": dict(params)}
    if original is not None:
        private["source"] = original
    return Context(action=action, assigns=assigns, params=params, private=private)


def normalize_result(result: Any) -> ActionResult:
    if result is None:
        return (Outcome.OK, None)
    if is_outcome(result):
        return (Outcome(result[0]), result[1])
    return (Outcome.OK, result)


def run_action(registry: Any, action: Any, params: Optional[Mapping[Any, Any]] = None, source: Any = None) -> ActionResult:
    descriptor = registry.lookup(action)
    if descriptor is None:
        return (Outcome.ERROR, ACTION_NOT_FOUND)

    if params is None:
        params = {}
    if not isinstance(params, Mapping):
        return (Outcome.ERROR, {"reason": INVALID_PARAMS, "received": type(params).__name__})

    try:
        ctx = build_context(action, params, source)
    except Exception as e:
        # falha ao ler `source` ou `params` do chamador
        return (
            Outcome.ERROR,
            step_exception_error(e, expose_message=registry.settings.expose_exception_messages),
        )

    composer = MetadataComposer(
        owner=registry.owner,
        owner_metadata=registry.metadata,
        action_metadata=descriptor.metadata,
    )

    final = run_with_span(
        ctx,
        lambda c: run_pipeline(descriptor.steps, c, registry.resolve),
        bus=registry.telemetry,
        prefix=registry.settings.telemetry_prefix,
        composer=composer,
        expose_exception_messages=registry.settings.expose_exception_messages,
    )
    return normalize_result(final.result)
