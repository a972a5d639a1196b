# src/actionflow/core/telemetry/span.py
"""
Span Wrapper: fronteira única de contenção de falhas.

Fluxo:
    pre-metadata → start → pipeline → post-metadata → stop → contexto final

Qualquer exceção que escape da execução dos Steps é convertida aqui em
`(error, {"reason": "step_exception", "message": ...})`. Este é o único
ponto do engine em que falhas não controladas são neutralizadas.
"""

from __future__ import annotations

from typing import Callable, Sequence

from actionflow.core.errors import step_exception_error
from actionflow.core.pipeline.context import Context
from actionflow.core.pipeline.types import Outcome

from .bus import TelemetryBus
from .metadata import MetadataComposer


def run_with_span(
    ctx: Context,
    runner: Callable[[Context], Context],
    *,
    bus: TelemetryBus,
    prefix: Sequence[str],
    composer: MetadataComposer,
    expose_exception_messages: bool = False,
) -> Context:
    def body():
        result_ctx = runner(ctx)
        return result_ctx, composer.compose(result_ctx)

    try:
        return bus.span(prefix, composer.compose(ctx), body)
    except Exception as e:
        return ctx.put_result(
            (Outcome.ERROR, step_exception_error(e, expose_message=expose_exception_messages))
        )
