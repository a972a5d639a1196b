"""Schema de validação de parâmetros.

Formato aceito (mapa nome → spec):

    {
        "name!": "string",                          # obrigatório, tipo nu
        "age": {"type": "integer", "default": 18},  # opcional com default
        "tags": {"type": "list", "of": "string"},
        "slug": {"type": "string", "cast": slugify},
        "region": [("field", "string"), ("default", "US")],
    }

- O sufixo `!` no nome marca o campo como obrigatório e é removido para
  formar a chave canônica.
- `field` é sinônimo de `type` na spec do campo.
- Tipos podem ser nomes ("integer") ou classes Python (`int`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple

from actionflow.core.exceptions import SchemaError

from .coercion import canonical_type

REQUIRED_MARKER = "!"


class _NoDefault:
    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT = _NoDefault()

_SPEC_KEYS = {"type", "field", "default", "cast", "of"}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: str
    required: bool = False
    default: Any = NO_DEFAULT
    cast: Optional[Callable[[Any], Any]] = None
    of: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


def _split_marker(key: Any) -> Tuple[str, bool]:
    if not isinstance(key, str) or not key.strip(REQUIRED_MARKER).strip():
        raise SchemaError(message=f"Invalid field name: {key!r}", details={"field": repr(key)})
    if key.endswith(REQUIRED_MARKER):
        return key[: -len(REQUIRED_MARKER)], True
    return key, False


def _as_spec_mapping(name: str, raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        spec = dict(raw)
    elif isinstance(raw, (list, tuple)) and all(isinstance(p, (list, tuple)) and len(p) == 2 for p in raw):
        spec = dict(raw)
    else:
        # tipo nu
        return {"type": raw}

    unknown = set(spec) - _SPEC_KEYS
    if unknown:
        raise SchemaError(
            message=f"Unknown keys in spec of field '{name}'",
            details={"field": name, "unknown": sorted(str(k) for k in unknown)},
        )
    if "type" in spec and "field" in spec:
        raise SchemaError(
            message=f"Field '{name}' declares both 'type' and 'field'",
            details={"field": name},
        )
    if "field" in spec:
        spec["type"] = spec.pop("field")
    if "type" not in spec:
        raise SchemaError(message=f"Field '{name}' has no type", details={"field": name})
    return spec


def parse_field(key: Any, raw: Any) -> FieldSpec:
    name, required = _split_marker(key)
    spec = _as_spec_mapping(name, raw)

    type_name = canonical_type(spec["type"])
    of = spec.get("of")
    if of is not None:
        if type_name != "list":
            raise SchemaError(
                message=f"'of' is only valid for list fields ('{name}')",
                details={"field": name, "type": type_name},
            )
        of = canonical_type(of)
        if of == "list":
            raise SchemaError(message=f"Nested lists are not supported ('{name}')", details={"field": name})

    cast = spec.get("cast")
    if cast is not None and not callable(cast):
        raise SchemaError(message=f"'cast' of field '{name}' must be callable", details={"field": name})

    return FieldSpec(
        name=name,
        type=type_name,
        required=required,
        default=spec.get("default", NO_DEFAULT),
        cast=cast,
        of=of,
    )


def parse_schema(schema: Any) -> Tuple[FieldSpec, ...]:
    """Converte o schema declarado em specs de campo (ordem de declaração)."""
    if not isinstance(schema, Mapping):
        raise SchemaError(
            message="Schema must be a mapping of field name to type or spec",
            details={"received": type(schema).__name__},
        )

    fields = []
    seen = set()
    for key, raw in schema.items():
        f = parse_field(key, raw)
        if f.name in seen:
            raise SchemaError(message=f"Duplicate field: {f.name}", details={"field": f.name})
        seen.add(f.name)
        fields.append(f)
    return tuple(fields)
