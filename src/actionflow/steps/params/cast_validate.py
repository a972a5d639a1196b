"""Step canônico: cast_validate_params (v1).

Responsabilidades (v1):
  - converter `ctx.params` (entrada bruta) conforme o schema declarado
  - descartar chaves não declaradas
  - exigir campos obrigatórios e aplicar defaults dos opcionais ausentes
  - aplicar a validação customizada `validate(record, ctx)`, quando houver
  - substituir `ctx.params` pelos valores convertidos (nunca mesclar)

Opções do Step:
  - schema (obrigatória): ver `actionflow.steps.params.schema`
  - validate (opcional): `validate(record, ctx) -> ValidationRecord`

Retorno:
  - (cont, ctx') com `params` convertidos, `private["raw_params"]` e
    `private["validation_record"]`
  - (halt, (error, {"reason": "invalid_params", "validation_record": record}))

Schema malformado ou `validate` que não devolve um ValidationRecord são
erros de programação: levantam exceção e viram `step_exception` na
fronteira do span.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Sequence

from actionflow.core.errors import INVALID_PARAMS
from actionflow.core.exceptions import SchemaError, StepContractError
from actionflow.core.pipeline.context import Context
from actionflow.core.pipeline.types import StepReturn, cont, halt_error

from .coercion import coerce_value, is_blank
from .record import FieldError, ValidationRecord
from .schema import FieldSpec, parse_schema


def _cast_field(spec: FieldSpec, value: Any):
    if spec.cast is not None:
        try:
            nv = spec.cast(value)
        except (ValueError, TypeError):
            return False, None
        return nv is not None, nv
    return coerce_value(spec.type, value, spec.of)


def cast_params(raw: Mapping[str, Any], fields: Sequence[FieldSpec]) -> ValidationRecord:
    """Converte `raw` contra as specs, aplicando obrigatórios e defaults."""
    changes: Dict[str, Any] = {}
    errors: List[FieldError] = []

    for spec in fields:
        if spec.name not in raw or is_blank(raw[spec.name]):
            continue
        ok, value = _cast_field(spec, raw[spec.name])
        if ok:
            changes[spec.name] = value
        else:
            errors.append(FieldError(spec.name, "is invalid", {"validation": "cast", "type": spec.type}))

    failed = {e.field for e in errors}
    for spec in fields:
        if spec.name in changes or spec.name in failed:
            continue
        if spec.required:
            errors.append(FieldError(spec.name, "can't be blank", {"validation": "required"}))
        elif spec.has_default:
            # cópia nova a cada invocação
            changes[spec.name] = copy.deepcopy(spec.default)

    return ValidationRecord(
        raw=raw,
        changes=changes,
        errors=tuple(errors),
        types={f.name: f.type for f in fields},
        required=tuple(f.name for f in fields if f.required),
    )


def cast_validate_params(ctx: Context, opts: Mapping[str, Any]) -> StepReturn:
    if "schema" not in opts:
        raise SchemaError(
            message="cast_validate_params requires a 'schema' option",
            details={"action": str(ctx.action)},
            hint="Declare o Step como ('cast_validate_params', {'schema': {...}}).",
        )

    fields = parse_schema(opts["schema"])
    raw = dict(ctx.params)
    record = cast_params(raw, fields)

    validate = opts.get("validate")
    if validate is not None:
        record = validate(record, ctx)
        if not isinstance(record, ValidationRecord):
            raise StepContractError(
                message="validate function must return a ValidationRecord",
                details={"received": type(record).__name__},
                hint="Devolva o registro recebido (ou o resultado dos validadores encadeados).",
            )

    if not record.valid:
        return halt_error({"reason": INVALID_PARAMS, "validation_record": record})

    new_ctx = (
        ctx
        .put_private("raw_params", raw)
        .put_params(record.to_params())
        .put_private("validation_record", record)
    )
    return cont(new_ctx)
