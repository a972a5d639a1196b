# src/actionflow/__init__.py
"""
ActionFlow: actions como pipelines de Steps sobre um contexto imutável.

Uma action é declarada como uma lista ordenada de Steps. Cada Step recebe
o `Context` e decide entre continuar (`cont`) ou encerrar (`halt`) com um
resultado `ok`/`error`. Toda execução é instrumentada por um span de
telemetria (start, stop, exception) e falhas inesperadas de Steps viram
resultados de erro em vez de exceções.

Arquitetura em alto nível:
    - core.pipeline  → Context, Steps, resolução e registry de actions
    - core.engine    → Pipeline Runner e execução de actions
    - core.telemetry → barramento de eventos, spans e Event Log
    - core.config    → configuração YAML/JSON e actions declarativas
    - steps.params   → Step embutido `cast_validate_params`

Limites explícitos:
    - Não cria processos ou threads: a action roda no chamador
    - Não persiste estado entre execuções
"""

from actionflow.core.pipeline.context import Context
from actionflow.core.pipeline.types import Outcome, Signal, cont, halt_error, halt_ok
from actionflow.core.pipeline.step import CAST_VALIDATE_PARAMS, ExternalStep, LocalStep, StepEntry
from actionflow.core.pipeline.registry import ActionDescriptor, ActionRegistry, ActionSet
from actionflow.core.engine.engine import run_action
from actionflow.core.config.actions import action_set_from_config
from actionflow.core.config.loader import load_config
from actionflow.core.telemetry import EventLog, TelemetryBus
from actionflow.core.config.settings import DEFAULT_PREFIX, EngineSettings
from actionflow.core.exceptions import ActionFlowException, RegistryError, SchemaError, StepContractError
from actionflow.steps.params import ValidationRecord, cast_validate_params

__all__ = [
    "Context",
    "Outcome",
    "Signal",
    "cont",
    "halt_ok",
    "halt_error",
    "CAST_VALIDATE_PARAMS",
    "LocalStep",
    "ExternalStep",
    "StepEntry",
    "ActionSet",
    "ActionRegistry",
    "ActionDescriptor",
    "run_action",
    "action_set_from_config",
    "load_config",
    "TelemetryBus",
    "EventLog",
    "DEFAULT_PREFIX",
    "EngineSettings",
    "ActionFlowException",
    "RegistryError",
    "SchemaError",
    "StepContractError",
    "ValidationRecord",
    "cast_validate_params",
]
