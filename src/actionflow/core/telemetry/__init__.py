# src/actionflow/core/telemetry/__init__.py
"""
Instrumentação de actions do ActionFlow.

API pública exposta:
    - TelemetryBus      → barramento em processo (attach/detach/execute/span)
    - MetadataComposer  → mescla metadata fixa, do owner e da action
    - run_with_span     → Span Wrapper e fronteira de contenção de falhas
    - EventLog          → registro estruturado e serializável dos eventos
    - save_event_log / load_event_log → persistência JSON do Event Log

Decisões arquiteturais:
    - Cada execução de action produz exatamente um span
    - Eventos: start, stop (sucesso ou erro tratado), exception (falha)
    - stop/exception carregam `duration` em microssegundos
"""

from .bus import TelemetryBus, span_events
from .event_log import EventLog, load_event_log, save_event_log
from .metadata import MetadataComposer, safe_metadata
from .span import run_with_span

__all__ = [
    "TelemetryBus",
    "span_events",
    "EventLog",
    "save_event_log",
    "load_event_log",
    "MetadataComposer",
    "safe_metadata",
    "run_with_span",
]
