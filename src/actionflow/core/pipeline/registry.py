# src/actionflow/core/pipeline/registry.py
"""
Registro de actions e Steps do ActionFlow.

Este módulo define:
    - ActionSet        → builder explícito, usado na inicialização
    - ActionDescriptor → (nome, lista ordenada de Steps, opções)
    - ActionRegistry   → valor imutável produzido por `ActionSet.build()`

Uso:

    actions = ActionSet("accounts", metadata=account_metadata)

    @actions.step
    def load_user(ctx, opts):
        ...

    actions.action(
        "create_user",
        [
            ("cast_validate_params", {"schema": {"name!": "string"}}),
            "load_user",
            (billing, "charge"),
        ],
        metadata=lambda ctx: {"tenant": ctx.assigns.get("tenant")},
    )

    registry = actions.build()
    registry.run("create_user", {"name": "Ann"}, {"current_user": user})

Decisões arquiteturais:
    - Erros de declaração (nome duplicado, entrada inválida, metadata não
      chamável) são detectados no registro ou no `build()`, nunca em `run`
    - A tabela de bindings (local e externa) é montada no `build()`
    - O registry construído é somente-leitura; não existe estado global

Invariantes:
    - Cada nome de Step local é único no ActionSet
    - Cada nome de action é único no ActionSet
    - A ordem das actions e dos Steps reflete exatamente a declaração
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from actionflow.core.config.settings import EngineSettings
from actionflow.core.engine.engine import run_action
from actionflow.core.errors import registry_configuration_error
from actionflow.core.exceptions import DuplicateActionError, DuplicateStepError, RegistryError
from actionflow.core.telemetry.bus import TelemetryBus
from actionflow.core.telemetry.metadata import MetadataFn

from .context import Context
from .resolver import invoke_step
from .step import CAST_VALIDATE_PARAMS, ExternalStep, LocalStep, StepBinding, StepEntry, StepRef, to_step_entry
from .types import ActionResult, StepReturn


def _check_metadata_fn(fn: Any, where: str) -> Optional[MetadataFn]:
    if fn is not None and not callable(fn):
        raise RegistryError(
            message=f"metadata of {where} must be callable",
            details={"where": where, "received": type(fn).__name__},
        )
    return fn


@dataclass(frozen=True)
class ActionDescriptor:
    """Action declarada: nome, Steps em ordem e opções verbatim."""

    name: Any
    steps: Tuple[StepEntry, ...]
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def metadata(self) -> Optional[MetadataFn]:
        return self.options.get("metadata")


class ActionSet:
    """Builder de actions de um mesmo dono (owner)."""

    def __init__(
        self,
        owner: Any,
        *,
        metadata: Optional[MetadataFn] = None,
        settings: Optional[EngineSettings] = None,
        telemetry: Optional[TelemetryBus] = None,
        telemetry_prefix: Optional[Sequence[str]] = None,
    ) -> None:
        if owner is None or (isinstance(owner, str) and not owner.strip()):
            raise RegistryError(message="owner must be a non-empty identifier")

        settings = settings or EngineSettings()
        if telemetry_prefix is not None:
            settings = EngineSettings(
                telemetry_prefix=tuple(telemetry_prefix),
                expose_exception_messages=settings.expose_exception_messages,
            )

        self.owner = owner
        self.metadata = _check_metadata_fn(metadata, "owner")
        self.settings = settings
        self.telemetry = telemetry if telemetry is not None else TelemetryBus()
        self._steps: Dict[str, StepBinding] = {}
        self._actions: Dict[Any, ActionDescriptor] = {}

    # -----------------------------
    # Steps locais
    # -----------------------------
    def register_step(self, name: str, fn: Any) -> StepBinding:
        if not isinstance(name, str) or not name.strip():
            raise RegistryError(message="step name must be a non-empty string")
        if name == CAST_VALIDATE_PARAMS:
            raise RegistryError(
                message=f"'{CAST_VALIDATE_PARAMS}' is reserved for the built-in step",
                details={"step": name},
            )
        if name in self._steps:
            raise DuplicateStepError(message=f"Duplicate step name: {name}", details={"step": name})

        binding = fn if isinstance(fn, StepBinding) else StepBinding.from_callable(fn)
        if binding.empty:
            raise RegistryError(
                message=f"step '{name}' must accept (ctx) or (ctx, opts)",
                details={"step": name},
            )
        self._steps[name] = binding
        return binding

    def step(self, fn: Optional[Callable[..., StepReturn]] = None, *, name: Optional[str] = None):
        """Decorator: registra a função como Step local (nome = `__name__`)."""

        def decorator(f: Callable[..., StepReturn]) -> Callable[..., StepReturn]:
            self.register_step(name or f.__name__, f)
            return f

        if fn is not None:
            return decorator(fn)
        return decorator

    # -----------------------------
    # Actions
    # -----------------------------
    def action(
        self,
        name: Any,
        steps: Sequence[Any],
        *,
        metadata: Optional[MetadataFn] = None,
        **options: Any,
    ) -> ActionDescriptor:
        if name is None or (isinstance(name, str) and not name.strip()):
            raise RegistryError(message="action name must be a non-empty identifier")
        if name in self._actions:
            raise DuplicateActionError(message=f"Duplicate action name: {name}", details={"action": name})
        if isinstance(steps, (str, bytes)) or not isinstance(steps, Sequence):
            raise RegistryError(
                message=f"steps of action '{name}' must be a sequence",
                details={"action": name},
            )

        entries: List[StepEntry] = []
        for i, spec in enumerate(steps):
            try:
                entries.append(to_step_entry(spec))
            except ValueError as e:
                raise RegistryError.from_payload(
                    registry_configuration_error(
                        message=f"invalid step #{i} in action '{name}': {e}",
                        details={"action": name, "index": i},
                    )
                ) from e

        opts = dict(options)
        if metadata is not None:
            opts["metadata"] = _check_metadata_fn(metadata, f"action '{name}'")

        descriptor = ActionDescriptor(name=name, steps=tuple(entries), options=MappingProxyType(opts))
        self._actions[name] = descriptor
        return descriptor

    # -----------------------------
    # Build
    # -----------------------------
    def _bind_external(self, ref: ExternalStep) -> StepBinding:
        fn = getattr(ref.provider, ref.function, None)
        return StepBinding.from_callable(fn)

    def build(self) -> "ActionRegistry":
        table: Dict[StepRef, StepBinding] = {LocalStep(n): b for n, b in self._steps.items()}

        for descriptor in self._actions.values():
            for entry in descriptor.steps:
                ref = entry.ref
                if not isinstance(ref, ExternalStep):
                    continue
                try:
                    if ref in table:
                        continue
                    table[ref] = self._bind_external(ref)
                except TypeError as e:
                    raise RegistryError.from_payload(
                        registry_configuration_error(
                            message=f"external step provider of '{ref.function}' must be hashable",
                            details={"action": descriptor.name, "function": ref.function},
                        )
                    ) from e

        return ActionRegistry(
            owner=self.owner,
            metadata=self.metadata,
            settings=self.settings,
            telemetry=self.telemetry,
            _actions=MappingProxyType(dict(self._actions)),
            _bindings=MappingProxyType(table),
        )


@dataclass(frozen=True)
class ActionRegistry:
    """Conjunto imutável de actions prontas para execução."""

    owner: Any
    metadata: Optional[MetadataFn]
    settings: EngineSettings
    telemetry: TelemetryBus
    _actions: Mapping[Any, ActionDescriptor] = field(repr=False)
    _bindings: Mapping[StepRef, StepBinding] = field(repr=False)

    def actions(self) -> List[Any]:
        return list(self._actions)

    def lookup(self, name: Any) -> Optional[ActionDescriptor]:
        try:
            return self._actions.get(name)
        except TypeError:
            # nome não hashable nunca corresponde a uma action
            return None

    def describe(self, name: Any) -> ActionDescriptor:
        descriptor = self.lookup(name)
        if descriptor is None:
            raise KeyError(name)
        return descriptor

    def resolve(self, entry: StepEntry, ctx: Context) -> StepReturn:
        return invoke_step(entry, ctx, self._bindings)

    def run(self, action: Any, params: Optional[Mapping[Any, Any]] = None, source: Any = None) -> ActionResult:
        """
        Executa a action e devolve `(ok, valor)` ou `(error, motivo)`.

        Nunca levanta exceção: falhas de Steps são convertidas em
        `{"reason": "step_exception", ...}` pela fronteira do span.
        """
        return run_action(self, action, params, source)
