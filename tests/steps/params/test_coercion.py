# tests/steps/params/test_coercion.py
"""
Testes das coerções por tipo do Parameter Caster.

Regras verificadas:
- strings numéricas e booleanas são convertidas de forma leniente
- falha de coerção é resultado `(False, None)`, nunca exceção
- valores já convertidos passam intactos
- tags de tipo aceitam nomes, aliases e classes Python
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

try:
    from actionflow.core.exceptions import SchemaError
    from actionflow.steps.params.coercion import canonical_type, coerce_value, is_blank
except Exception as e:  # noqa: BLE001
    coerce_value = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing coercion module. Implement:\n"
            "- src/actionflow/steps/params/coercion.py (coerce_value, canonical_type)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.mark.parametrize("value", [None, "", "   ", "\n"])
def test_blank_values(value):
    _require_imports()
    assert is_blank(value)


@pytest.mark.parametrize("value", [0, False, [], {}, "x"])
def test_non_blank_values(value):
    _require_imports()
    assert not is_blank(value)


@pytest.mark.parametrize(
    "type_name, raw, expected",
    [
        ("string", "Ann", "Ann"),
        ("string", 25, "25"),
        ("integer", "25", 25),
        ("integer", " -3 ", -3),
        ("integer", 7, 7),
        ("integer", Decimal("4"), 4),
        ("float", "2.5", 2.5),
        ("float", 3, 3.0),
        ("decimal", "19.90", Decimal("19.90")),
        ("decimal", 0.1, Decimal("0.1")),
        ("boolean", "true", True),
        ("boolean", "0", False),
        ("boolean", True, True),
        ("date", "2026-01-16", date(2026, 1, 16)),
        ("datetime", "2026-01-16T10:00:00Z", datetime(2026, 1, 16, 10, tzinfo=timezone.utc)),
        ("time", "10:30:00", time(10, 30)),
        ("map", {"a": 1}, {"a": 1}),
        ("list", ("a", "b"), ["a", "b"]),
        ("any", object, object),
    ],
)
def test_successful_coercions(type_name, raw, expected):
    _require_imports()
    assert coerce_value(type_name, raw) == (True, expected)


@pytest.mark.parametrize(
    "type_name, raw",
    [
        ("integer", "not_a_number"),
        ("integer", "2.5"),
        ("integer", True),
        ("integer", "²"),
        ("integer", "9" * 5000),
        ("float", "abc"),
        ("float", False),
        ("float", "nan"),
        ("float", "inf"),
        ("float", "1_000"),
        ("float", float("nan")),
        ("float", 10**400),
        ("decimal", "NaN"),
        ("decimal", "1_000"),
        ("decimal", float("inf")),
        ("boolean", "yes"),
        ("boolean", 1),
        ("date", "16/01/2026"),
        ("datetime", 12),
        ("time", "25:00"),
        ("map", ["a"]),
        ("list", "abc"),
        ("string", True),
    ],
)
def test_failed_coercions(type_name, raw):
    _require_imports()
    assert coerce_value(type_name, raw) == (False, None)


def test_typed_list_items():
    _require_imports()
    assert coerce_value("list", ["1", "2"], of="integer") == (True, [1, 2])
    assert coerce_value("list", ["1", "x"], of="integer") == (False, None)
    assert coerce_value("list", ["1", None], of="integer") == (False, None)


def test_already_cast_values_are_idempotent():
    _require_imports()
    for type_name, raw in [("integer", "25"), ("date", "2026-01-16"), ("decimal", "1.5")]:
        _, once = coerce_value(type_name, raw)
        assert coerce_value(type_name, once) == (True, once)


@pytest.mark.parametrize(
    "tag, expected",
    [("integer", "integer"), ("int", "integer"), (int, "integer"), ("STR", "string"), (dict, "map"), (list, "list")],
)
def test_canonical_type(tag, expected):
    _require_imports()
    assert canonical_type(tag) == expected


@pytest.mark.parametrize("tag", ["uuid", None, 42, ["integer"]])
def test_unknown_type_raises(tag):
    _require_imports()
    with pytest.raises(SchemaError):
        canonical_type(tag)
