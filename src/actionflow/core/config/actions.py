# src/actionflow/core/config/actions.py
"""
Definições declarativas de actions (YAML/JSON → ActionSet).

Formato esperado na configuração resolvida:

    owner: accounts
    metadata: account_metadata          # chave em `metadata=` (opcional)
    telemetry:
      prefix: [accounts, action]
    actions:
      create_user:
        metadata: tenant_metadata       # chave em `metadata=` (opcional)
        steps:
          - cast_validate_params:
              schema: {"name!": string, age: {type: integer, default: 18}}
          - load_user                   # Step local (chave em `steps=`)
          - provider: billing           # chave em `providers=`
            function: charge
            options: {plan: basic}

Funções Python não são serializáveis; por isso o arquivo referencia Steps
locais, provedores externos e funções de metadata por NOME, e o chamador
fornece os objetos correspondentes.

Invariantes:
    - Toda referência desconhecida levanta `InvalidActionDefinitionError`
      antes de qualquer execução
    - A ordem das actions e dos Steps segue a ordem do arquivo
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from actionflow.core.exceptions import RegistryError
from actionflow.core.pipeline.registry import ActionSet
from actionflow.core.pipeline.step import CAST_VALIDATE_PARAMS, ExternalStep, LocalStep, StepEntry, to_step_entry
from actionflow.core.telemetry.bus import TelemetryBus

from .errors import InvalidActionDefinitionError, InvalidSettingError
from .settings import EngineSettings


def _lookup(table: Mapping[str, Any], key: Any, kind: str, where: str) -> Any:
    if not isinstance(key, str) or key not in table:
        raise InvalidActionDefinitionError(f"{where}: {kind} desconhecido: {key!r}")
    return table[key]


def _options(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidActionDefinitionError(f"{where}: opções devem ser um mapa")
    return value


def _step_entry(
    raw: Any,
    *,
    local: Mapping[str, Any],
    providers: Mapping[str, Any],
    where: str,
) -> StepEntry:
    if isinstance(raw, str):
        name, opts = raw, {}
    elif isinstance(raw, Mapping) and "provider" in raw:
        unknown = set(raw) - {"provider", "function", "options"}
        if unknown:
            raise InvalidActionDefinitionError(f"{where}: chaves não suportadas: {sorted(unknown)}")
        provider = _lookup(providers, raw.get("provider"), "provider", where)
        function = raw.get("function")
        if not isinstance(function, str) or not function.strip():
            raise InvalidActionDefinitionError(f"{where}: 'function' deve ser uma string não vazia")
        return to_step_entry(ExternalStep(provider, function), _options(raw.get("options"), where))
    elif isinstance(raw, Mapping) and len(raw) == 1:
        name, opts = next(iter(raw.items()))
        opts = _options(opts, where)
    else:
        raise InvalidActionDefinitionError(f"{where}: entrada de Step inválida: {raw!r}")

    if name != CAST_VALIDATE_PARAMS:
        _lookup(local, name, "step", where)
    return to_step_entry(LocalStep(name), opts)


def action_set_from_config(
    config: Mapping[str, Any],
    *,
    steps: Optional[Mapping[str, Callable[..., Any]]] = None,
    providers: Optional[Mapping[str, Any]] = None,
    metadata: Optional[Mapping[str, Callable[..., Any]]] = None,
    telemetry: Optional[TelemetryBus] = None,
) -> ActionSet:
    """
    Constrói um `ActionSet` a partir da configuração resolvida.

    Args:
        config: configuração já carregada (ver `load_config`)
        steps: Steps locais disponíveis, por nome
        providers: provedores de Steps externos, por chave
        metadata: funções de metadata disponíveis, por nome
        telemetry: barramento a usar (um novo é criado se omitido)

    Returns:
        ActionSet ainda aberto: o chamador pode declarar mais actions
        antes de `build()`.
    """
    if not isinstance(config, Mapping):
        raise InvalidActionDefinitionError(f"config deve ser um mapa, recebido: {type(config).__name__}")

    local = dict(steps or {})
    providers = dict(providers or {})
    metadata_fns = dict(metadata or {})

    owner = config.get("owner")
    if not isinstance(owner, str) or not owner.strip():
        raise InvalidActionDefinitionError("'owner' deve ser uma string não vazia")

    owner_meta = None
    if config.get("metadata") is not None:
        owner_meta = _lookup(metadata_fns, config["metadata"], "metadata", "owner")

    try:
        settings = EngineSettings.from_config(config)
    except InvalidSettingError as e:
        raise InvalidActionDefinitionError(str(e)) from e

    action_set = ActionSet(owner, metadata=owner_meta, settings=settings, telemetry=telemetry)

    try:
        for name, fn in local.items():
            action_set.register_step(name, fn)

        actions = config.get("actions") or {}
        if not isinstance(actions, Mapping):
            raise InvalidActionDefinitionError("'actions' deve ser um mapa {nome: definição}")

        for action_name, definition in actions.items():
            where = f"action '{action_name}'"
            if not isinstance(definition, Mapping):
                raise InvalidActionDefinitionError(f"{where}: definição deve ser um mapa")
            raw_steps = definition.get("steps")
            if not isinstance(raw_steps, list):
                raise InvalidActionDefinitionError(f"{where}: 'steps' deve ser uma lista")

            entries: List[StepEntry] = [
                _step_entry(raw, local=local, providers=providers, where=f"{where}, step #{i}")
                for i, raw in enumerate(raw_steps)
            ]

            action_meta = None
            if definition.get("metadata") is not None:
                action_meta = _lookup(metadata_fns, definition["metadata"], "metadata", where)

            extra: Dict[str, Any] = {
                k: v for k, v in definition.items() if k not in ("steps", "metadata")
            }
            action_set.action(action_name, entries, metadata=action_meta, **extra)
    except RegistryError as e:
        raise InvalidActionDefinitionError(e.message) from e

    return action_set
