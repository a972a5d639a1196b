"""Registro de validação (ValidationRecord).

O registro acumula, para uma chamada de `cast_validate_params`:
  - a entrada bruta (`raw`)
  - os valores convertidos e defaults aplicados (`changes`)
  - os erros por campo (`errors`)
  - os tipos declarados (`types`) e os campos obrigatórios (`required`)

É imutável: cada validador devolve um NOVO registro, o que permite
encadear regras na função `validate` de um Step:

    def validate(record, ctx):
        return (
            record
            .validate_format("email", r"@")
            .validate_length("name", min=2)
        )

Validadores só avaliam campos presentes em `changes` e que ainda não têm
erro, evitando mensagens redundantes sobre um valor já inválido.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    meta: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message, "meta": dict(self.meta)}


@dataclass(frozen=True)
class ValidationRecord:
    raw: Mapping[str, Any] = field(default_factory=dict)
    changes: Mapping[str, Any] = field(default_factory=dict)
    errors: Tuple[FieldError, ...] = ()
    types: Mapping[str, str] = field(default_factory=dict)
    required: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("raw", "changes", "types"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name) or {})))
        object.__setattr__(self, "errors", tuple(self.errors))
        object.__setattr__(self, "required", tuple(self.required))

    # -----------------------------
    # Leitura
    # -----------------------------
    @property
    def valid(self) -> bool:
        return not self.errors

    def get(self, name: str, default: Any = None) -> Any:
        return self.changes.get(name, default)

    def to_params(self) -> Dict[str, Any]:
        return dict(self.changes)

    def errors_on(self, name: str) -> List[str]:
        return [e.message for e in self.errors if e.field == name]

    def has_error(self, name: str) -> bool:
        return any(e.field == name for e in self.errors)

    def traverse_errors(self) -> Dict[str, List[str]]:
        """Mensagens agrupadas por campo, na ordem em que foram registradas."""
        out: Dict[str, List[str]] = {}
        for e in self.errors:
            out.setdefault(e.field, []).append(e.message)
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "changes": dict(self.changes),
            "errors": [e.to_dict() for e in self.errors],
        }

    # -----------------------------
    # Escrita
    # -----------------------------
    def add_error(self, name: str, message: str, **meta: Any) -> "ValidationRecord":
        return dataclasses.replace(self, errors=self.errors + (FieldError(name, message, meta),))

    def put_change(self, name: str, value: Any) -> "ValidationRecord":
        changes = dict(self.changes)
        changes[name] = value
        return dataclasses.replace(self, changes=changes)

    def _checkable(self, name: str) -> bool:
        return name in self.changes and not self.has_error(name)

    # -----------------------------
    # Validadores
    # -----------------------------
    def validate_required(self, *names: str, message: str = "can't be blank") -> "ValidationRecord":
        record = self
        for name in names:
            if name not in record.changes and not record.has_error(name):
                record = record.add_error(name, message, validation="required")
        return record

    def validate_format(self, name: str, pattern: Any, message: str = "has invalid format") -> "ValidationRecord":
        if not self._checkable(name):
            return self
        value = self.changes[name]
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        if not isinstance(value, str) or regex.search(value) is None:
            return self.add_error(name, message, validation="format")
        return self

    def validate_length(
        self,
        name: str,
        *,
        min: Optional[int] = None,
        max: Optional[int] = None,
        is_: Optional[int] = None,
    ) -> "ValidationRecord":
        if not self._checkable(name):
            return self
        value = self.changes[name]
        try:
            length = len(value)
        except TypeError:
            return self.add_error(name, "is invalid", validation="length")

        unit = "character(s)" if isinstance(value, str) else "item(s)"
        if is_ is not None and length != is_:
            return self.add_error(name, f"should be {is_} {unit}", validation="length", kind="is", count=is_)
        if min is not None and length < min:
            return self.add_error(name, f"should be at least {min} {unit}", validation="length", kind="min", count=min)
        if max is not None and length > max:
            return self.add_error(name, f"should be at most {max} {unit}", validation="length", kind="max", count=max)
        return self

    def validate_number(self, name: str, **bounds: Any) -> "ValidationRecord":
        """Limites aceitos: greater_than, greater_than_or_equal_to, less_than,
        less_than_or_equal_to, equal_to."""
        checks: Dict[str, Tuple[Callable[[Any, Any], bool], str]] = {
            "greater_than": (lambda v, n: v > n, "must be greater than {}"),
            "greater_than_or_equal_to": (lambda v, n: v >= n, "must be greater than or equal to {}"),
            "less_than": (lambda v, n: v < n, "must be less than {}"),
            "less_than_or_equal_to": (lambda v, n: v <= n, "must be less than or equal to {}"),
            "equal_to": (lambda v, n: v == n, "must be equal to {}"),
        }
        unknown = set(bounds) - set(checks)
        if unknown:
            raise ValueError(f"unknown number bounds: {sorted(unknown)}")
        if not self._checkable(name):
            return self

        value = self.changes[name]
        for kind, number in bounds.items():
            test, template = checks[kind]
            if not test(value, number):
                return self.add_error(name, template.format(number), validation="number", kind=kind, number=number)
        return self

    def validate_inclusion(self, name: str, values: Iterable[Any], message: str = "is invalid") -> "ValidationRecord":
        if not self._checkable(name):
            return self
        allowed = list(values)
        if self.changes[name] not in allowed:
            return self.add_error(name, message, validation="inclusion", enum=allowed)
        return self

    def validate_change(self, name: str, validator: Callable[[str, Any], Iterable[Any]]) -> "ValidationRecord":
        """`validator(name, value)` devolve mensagens ou pares `(campo, mensagem)`."""
        if not self._checkable(name):
            return self
        record = self
        for item in validator(name, self.changes[name]) or ():
            if isinstance(item, tuple):
                target, message = item
            else:
                target, message = name, item
            record = record.add_error(target, message, validation="custom")
        return record
