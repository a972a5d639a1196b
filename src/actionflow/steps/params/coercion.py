"""Coerções de tipo por campo usadas pelo Step `cast_validate_params`.

Regras (v1):
  - valores em branco (None, string vazia ou só espaços) são tratados
    como ausentes ANTES da coerção; nenhuma função daqui os recebe
  - strings numéricas e booleanas são convertidas de forma leniente
    ("25" → 25, "true" → True)
  - falha de coerção é um resultado (`ok=False`), nunca uma exceção
  - valores já convertidos passam intactos (re-cast é idempotente)

Tipos canônicos:
  string, integer, float, decimal, boolean, date, datetime, time,
  map, list, any
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from actionflow.core.exceptions import SchemaError


# -----------------------------
# Helpers: blank
# -----------------------------

def is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str) and v.strip() == "":
        return True
    return False


# -----------------------------
# Helpers: coercions
# -----------------------------

def _coerce_string(v: Any) -> Optional[str]:
    if isinstance(v, str):
        return v
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float, Decimal)):
        return str(v)
    return None


_MAX_INT_DIGITS = 4300


def _coerce_int(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        # bool nunca é aceito como inteiro
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, Decimal):
        if v.is_finite() and v == v.to_integral_value():
            return int(v)
        return None
    if not isinstance(v, str):
        return None
    s = v.strip()
    if s.startswith(("+", "-")):
        sign = s[0]
        digits = s[1:]
    else:
        sign = ""
        digits = s
    if not (digits.isascii() and digits.isdigit()) or len(digits) > _MAX_INT_DIGITS:
        return None
    try:
        return int(f"{sign}{digits}")
    except ValueError:
        # acima do limite de dígitos de int()
        return None


def _coerce_float(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float, Decimal)):
        try:
            f = float(v)
        except OverflowError:
            return None
        return f if math.isfinite(f) else None
    if not isinstance(v, str) or "_" in v:
        return None
    try:
        f = float(v.strip())
    except ValueError:
        return None
    return f if math.isfinite(f) else None


def _coerce_decimal(v: Any) -> Optional[Decimal]:
    if isinstance(v, bool):
        return None
    if isinstance(v, Decimal):
        return v if v.is_finite() else None
    if isinstance(v, int):
        return Decimal(v)
    if isinstance(v, float):
        # Decimal(str(0.1)) == Decimal("0.1")
        d = Decimal(str(v))
        return d if d.is_finite() else None
    if not isinstance(v, str) or "_" in v:
        return None
    try:
        d = Decimal(v.strip())
    except InvalidOperation:
        return None
    return d if d.is_finite() else None


_TRUE = {"true", "1"}
_FALSE = {"false", "0"}


def _coerce_bool(v: Any) -> Optional[bool]:
    if isinstance(v, bool):
        return v
    if not isinstance(v, str):
        return None
    s = v.strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None


def _coerce_date(v: Any) -> Optional[date]:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if not isinstance(v, str):
        return None
    try:
        return date.fromisoformat(v.strip())
    except ValueError:
        return None


def _coerce_datetime(v: Any) -> Optional[datetime]:
    if isinstance(v, datetime):
        return v
    if not isinstance(v, str):
        return None
    s = v.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def _coerce_time(v: Any) -> Optional[time]:
    if isinstance(v, time):
        return v
    if not isinstance(v, str):
        return None
    try:
        return time.fromisoformat(v.strip())
    except ValueError:
        return None


def _coerce_map(v: Any) -> Optional[Dict[Any, Any]]:
    if isinstance(v, Mapping):
        return dict(v)
    return None


def _coerce_any(v: Any) -> Any:
    return v


_COERCERS: Dict[str, Callable[[Any], Any]] = {
    "string": _coerce_string,
    "integer": _coerce_int,
    "float": _coerce_float,
    "decimal": _coerce_decimal,
    "boolean": _coerce_bool,
    "date": _coerce_date,
    "datetime": _coerce_datetime,
    "time": _coerce_time,
    "map": _coerce_map,
    "any": _coerce_any,
}

CANONICAL_TYPES = tuple(_COERCERS) + ("list",)

_ALIASES: Dict[Any, str] = {
    "str": "string",
    "int": "integer",
    "bool": "boolean",
    "dict": "map",
    str: "string",
    int: "integer",
    float: "float",
    Decimal: "decimal",
    bool: "boolean",
    date: "date",
    datetime: "datetime",
    time: "time",
    dict: "map",
    list: "list",
}


def canonical_type(tag: Any) -> str:
    """Normaliza uma tag de tipo (nome ou classe Python) para o nome canônico."""
    try:
        name = _ALIASES.get(tag, tag)
    except TypeError:
        # tag não hashable (ex.: lista) nunca é um tipo válido
        name = None
    if isinstance(name, str):
        name = name.strip().lower()
        name = _ALIASES.get(name, name)
        if name in CANONICAL_TYPES:
            return name
    raise SchemaError(
        message=f"Unknown field type: {tag!r}",
        details={"type": repr(tag), "supported": list(CANONICAL_TYPES)},
        hint="Use um dos tipos suportados ou declare uma função `cast` no campo.",
    )


def coerce_value(type_name: str, v: Any, of: Optional[str] = None) -> Tuple[bool, Any]:
    """Converte `v` para `type_name`.

    Returns:
      (ok, new_value)
    """
    if type_name == "list":
        if not isinstance(v, (list, tuple)):
            return False, None
        if of is None:
            return True, list(v)
        out = []
        for item in v:
            if is_blank(item):
                return False, None
            ok, nv = coerce_value(of, item)
            if not ok:
                return False, None
            out.append(nv)
        return True, out

    nv = _COERCERS[type_name](v)
    if nv is None:
        return False, None
    return True, nv
