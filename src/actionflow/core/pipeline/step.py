# src/actionflow/core/pipeline/step.py
"""
Contrato canônico de Step do ActionFlow.

Um Step é a menor unidade executável de uma action: uma função que recebe
o `Context` (e, opcionalmente, as opções declaradas para ele) e devolve
`(cont, ctx)` ou `(halt, (ok|error, valor))`.

Este módulo define:
    - LocalStep / ExternalStep → identificador de Step (variante marcada)
    - StepEntry                → par (identificador, opções) de uma action
    - StepBinding              → as duas formas de chamada aceitas,
      resolvidas UMA vez no registro

Princípios fundamentais:
    - A aridade é decidida no registro, nunca por introspecção em runtime
    - A forma `(ctx, opts)` tem preferência sobre `(ctx)`
    - Opções são repassadas ao Step exatamente como declaradas

Limites explícitos:
    - Não executa Steps
    - Não resolve nomes (responsabilidade do resolver)
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from .context import Context
from .types import StepReturn


CAST_VALIDATE_PARAMS = "cast_validate_params"


@dataclass(frozen=True)
class LocalStep:
    """Step pertencente ao mesmo ActionSet da action em execução."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ExternalStep:
    """Step exposto por outro provedor de capacidades (`provider.function`)."""
    provider: Any
    function: str

    def __str__(self) -> str:
        owner = getattr(self.provider, "__name__", None) or self.provider.__class__.__name__
        return f"{owner}.{self.function}"


StepRef = Union[LocalStep, ExternalStep]


@dataclass(frozen=True)
class StepEntry:
    """Entrada de uma action: identificador do Step + opções verbatim."""
    ref: StepRef
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StepBinding:
    """
    Formas de chamada de um Step, em ordem de preferência.

    - with_options: chamável `(ctx, opts)`
    - without_options: chamável `(ctx)`, que ignora as opções

    Um binding vazio (ambos None) representa um Step não encontrado.
    """

    with_options: Optional[Callable[[Context, Mapping[str, Any]], StepReturn]] = None
    without_options: Optional[Callable[[Context], StepReturn]] = None

    @property
    def empty(self) -> bool:
        return self.with_options is None and self.without_options is None

    @classmethod
    def from_callable(cls, fn: Any) -> "StepBinding":
        """Inspeciona a assinatura de `fn` no registro e produz o binding."""
        if not callable(fn):
            return cls()
        try:
            sig = inspect.signature(fn)
        except (TypeError, ValueError):
            # built-ins sem assinatura: assume a forma de um argumento
            return cls(without_options=fn)

        positional = 0
        varargs = False
        for p in sig.parameters.values():
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
                positional += 1
            elif p.kind == p.VAR_POSITIONAL:
                varargs = True

        required = sum(
            1
            for p in sig.parameters.values()
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
        )

        accepts_two = varargs or (positional >= 2 and required <= 2)
        accepts_one = required <= 1 and (positional >= 1 or varargs)
        return cls(
            with_options=fn if accepts_two else None,
            without_options=fn if accepts_one else None,
        )


def to_step_entry(spec: Any, options: Optional[Mapping[str, Any]] = None) -> StepEntry:
    """
    Normaliza as formas curtas de declaração em `StepEntry`.

    Formas aceitas:
        - "nome"                       → LocalStep
        - LocalStep / ExternalStep     → como estão
        - (provider, "funcao")         → ExternalStep
        - (ref, {opcoes})              → ref com opções
        - StepEntry                    → como está
    """
    if isinstance(spec, StepEntry):
        if options:
            raise ValueError("options given twice for the same step entry")
        return spec

    if isinstance(spec, tuple) and len(spec) == 2 and isinstance(spec[1], Mapping) and options is None:
        return to_step_entry(spec[0], spec[1])

    opts = MappingProxyType(dict(options or {}))
    if isinstance(spec, (LocalStep, ExternalStep)):
        return StepEntry(ref=spec, options=opts)
    if isinstance(spec, str):
        if not spec.strip():
            raise ValueError("step name must be a non-empty string")
        return StepEntry(ref=LocalStep(spec), options=opts)
    if isinstance(spec, tuple) and len(spec) == 2 and isinstance(spec[1], str):
        return StepEntry(ref=ExternalStep(provider=spec[0], function=spec[1]), options=opts)

    raise ValueError(f"invalid step declaration: {spec!r}")
