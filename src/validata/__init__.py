"""validata: declarative validation of nested data.

Values (dicts, lists, tuples, dataclass instances and scalars) are checked
against a schema built from small composable pieces, and every problem found
is returned as a ValidationError carrying the path of the offending element.

Usage:
    from validata import validate
    from validata.helpers import integer, maybe, string

    schema = {
        "name": string(non_empty=True),
        maybe("age"): integer(min=0, cast_from="string"),
        "tags": [string()],
    }

    errors = validate({"name": "", "tags": ["a", 1]}, schema)
    # [ValidationError("Value cannot be empty.", ("name",)),
    #  ValidationError("Expected type: string, got: 1.", ("tags", 1))]
"""

from validata.config import ValidationOptions
from validata.errors import InvalidSchemaError, ValidationError, group_by_path
from validata.pretty import format_schema
from validata.rule import Failure, Rule, rule
from validata.spec import (
    AnyOtherKey,
    ListSpec,
    LiteralSpec,
    OptionalKey,
    Selector,
    Spec,
    StructSpec,
    Thunk,
    TupleSpec,
    Union,
    ValueSpec,
)
from validata.types import CastError, VALID_TYPES, cast, has_type, type_of
from validata.validator import validate, validate_schema

__all__ = [
    # Validation
    "validate",
    "validate_schema",
    "ValidationOptions",
    # Errors
    "ValidationError",
    "InvalidSchemaError",
    "CastError",
    "group_by_path",
    # Rules
    "Rule",
    "Failure",
    "rule",
    # Schema model
    "Spec",
    "ValueSpec",
    "StructSpec",
    "ListSpec",
    "TupleSpec",
    "LiteralSpec",
    "Union",
    "Thunk",
    "Selector",
    "OptionalKey",
    "AnyOtherKey",
    # Types
    "VALID_TYPES",
    "cast",
    "has_type",
    "type_of",
    # Rendering
    "format_schema",
]
