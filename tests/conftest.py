# tests/conftest.py
"""
Fixtures compartilhados para testes do ActionFlow.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações YAML mínimas e determinísticas (defaults + local)
- um barramento de telemetria isolado por teste
- um Event Log anexado a esse barramento
- Steps dummy para testes estruturais

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Cada teste recebe o seu próprio barramento (sem estado global)
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture executa actions
    - Nenhuma fixture realiza I/O
"""

import pytest


# =====================================================
# Config Loader fixtures
# =====================================================

@pytest.fixture
def config_defaults_yaml() -> str:
    """
    YAML de configuração padrão (defaults) semelhante ao uso real.

    Usado por:
        - Testes do loader de config
        - Testes de settings e de actions declarativas
    """
    return """\
owner: accounts
telemetry:
  prefix: [accounts, action]
errors:
  expose_exception_messages: false
actions:
  create_user:
    steps:
      - cast_validate_params:
          schema:
            "name!": string
            age: {type: integer, default: 18}
      - load_user
"""


@pytest.fixture
def config_local_yaml() -> str:
    """YAML de overrides locais: liga a exposição de mensagens de exceção."""
    return """\
errors:
  expose_exception_messages: true
"""


# =====================================================
# Telemetria
# =====================================================

@pytest.fixture
def bus():
    """Barramento de telemetria novo e vazio."""
    from actionflow.core.telemetry import TelemetryBus

    return TelemetryBus()


@pytest.fixture
def event_log(bus):
    """
    Event Log anexado ao prefixo padrão do barramento do teste.

    Returns:
        EventLog: registros de start/stop/exception de `actionflow.action`.
    """
    from actionflow.core.config.settings import DEFAULT_PREFIX
    from actionflow.core.telemetry import EventLog

    log = EventLog()
    log.attach(bus, DEFAULT_PREFIX, handler_id="test-event-log")
    return log


# =====================================================
# Steps dummy
# =====================================================

@pytest.fixture
def calls():
    """Lista compartilhada onde Steps dummy registram a ordem de invocação."""
    return []


@pytest.fixture
def recording_step(calls):
    """
    Fábrica de Steps dummy que registram o próprio nome e continuam.

    Returns:
        callable: `recording_step(name)` → Step `(ctx) -> (cont, ctx)`.
    """
    from actionflow.core.pipeline.types import cont

    def factory(name: str):
        def step(ctx):
            calls.append(name)
            return cont(ctx.assign(name, True))

        step.__name__ = name
        return step

    return factory
