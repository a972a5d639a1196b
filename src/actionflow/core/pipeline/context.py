# src/actionflow/core/pipeline/context.py
"""
Contexto de execução de uma action.

Este módulo define o `Context`, o valor canônico que atravessa o pipeline
de Steps de uma action no ActionFlow.

O Context atua como o único meio permitido de:
    - expor os dados ambientes do chamador (`assigns`)
    - transportar os parâmetros da chamada (`params`)
    - guardar estado interno do pipeline (`private`)
    - carregar o resultado final (`result`)

Princípios fundamentais:
    - Imutabilidade por Step: um Step nunca altera o contexto recebido,
      ele devolve um novo contexto via helpers (`assign`, `put_params`, ...)
    - Isolamento por invocação: cada `run` constrói o seu próprio Context
    - Ausência de estado global compartilhado

Invariantes:
    - `action` é definido na construção e nunca muda
    - `params` é substituído por inteiro, nunca mesclado pelo mecanismo
    - `private` nunca tem chaves removidas pelo mecanismo
    - Os mapas internos são somente-leitura (`MappingProxyType`)

Limites explícitos:
    - Não executa Steps
    - Não decide políticas de execução
    - Não valida semântica de parâmetros
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple, Union


def _frozen(mapping: Optional[Mapping[Any, Any]]) -> MappingProxyType:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Context:
    """
    Valor imutável passado de Step em Step durante a execução de uma action.

    Campos:
        - action: identificador simbólico da action em execução
        - assigns: dados ambientes (ex.: usuário autenticado) e dados
          publicados por Steps para Steps posteriores
        - params: parâmetros da chamada; começam como a entrada bruta e
          podem ser substituídos por uma versão validada
        - private: registro interno do pipeline (ex.: `raw_params`,
          `validation_record`, `source`)
        - result: resultado final, `None` até que um Step o defina

    Decisões arquiteturais:
        - A imutabilidade é garantida pelo dataclass frozen e pelos mapas
          somente-leitura, de modo que mutação acidental é erro em runtime
        - Todo helper devolve uma NOVA instância; o contexto anterior
          permanece intacto (sem vazamento para Steps anteriores)
    """

    action: Any = None
    assigns: Mapping[Any, Any] = field(default_factory=dict)
    params: Mapping[Any, Any] = field(default_factory=dict)
    private: Mapping[Any, Any] = field(default_factory=dict)
    result: Any = None

    def __post_init__(self) -> None:
        for name in ("assigns", "params", "private"):
            value = getattr(self, name)
            if value is None:
                value = {}
            if not isinstance(value, Mapping):
                raise TypeError(f"Context.{name} must be a mapping, got {type(value).__name__}")
            object.__setattr__(self, name, _frozen(value))

    # -----------------------------
    # Assigns
    # -----------------------------
    def assign(self, key: Any, value: Any) -> "Context":
        assigns = dict(self.assigns)
        assigns[key] = value
        return dataclasses.replace(self, assigns=assigns)

    def assign_many(self, values: Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]]]) -> "Context":
        """Mescla vários valores em `assigns` (mapa ou sequência de pares)."""
        assigns = dict(self.assigns)
        assigns.update(dict(values))
        return dataclasses.replace(self, assigns=assigns)

    # -----------------------------
    # Private
    # -----------------------------
    def get_private(self, key: Any, default: Any = None) -> Any:
        return self.private.get(key, default)

    def put_private(self, key: Any, value: Any) -> "Context":
        private = dict(self.private)
        private[key] = value
        return dataclasses.replace(self, private=private)

    # -----------------------------
    # Params & result
    # -----------------------------
    def put_params(self, params: Mapping[Any, Any]) -> "Context":
        if not isinstance(params, Mapping):
            raise TypeError(f"params must be a mapping, got {type(params).__name__}")
        return dataclasses.replace(self, params=params)

    def put_result(self, result: Any) -> "Context":
        return dataclasses.replace(self, result=result)
