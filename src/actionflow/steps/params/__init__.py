"""Step embutido de conversão e validação de parâmetros."""

from .cast_validate import cast_params, cast_validate_params
from .record import FieldError, ValidationRecord
from .schema import NO_DEFAULT, REQUIRED_MARKER, FieldSpec, parse_schema

__all__ = [
    "cast_params",
    "cast_validate_params",
    "FieldError",
    "ValidationRecord",
    "FieldSpec",
    "NO_DEFAULT",
    "REQUIRED_MARKER",
    "parse_schema",
]
