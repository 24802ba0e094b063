"""Meta-schema: the schema that every schema must conform to.

``validate`` checks user schemas against it before validating any data, so
that a malformed schema fails loudly instead of producing confusing errors.
The meta-schema is itself written with the builders and validates itself.
"""

import enum
from decimal import Decimal
from typing import Any

from validata.helpers import (
    any_,
    any_key,
    boolean,
    bytes_,
    class_,
    function,
    lazy,
    list_,
    literal,
    map_,
    null,
    number,
    select,
    string,
    structure,
    symbol,
    tuple_,
)
from validata.rule import Rule
from validata.spec import (
    ListSpec,
    LiteralSpec,
    Selector,
    Spec,
    StructSpec,
    Thunk,
    TupleSpec,
    Union,
    ValueSpec,
)
from validata.types import VALID_TYPES, is_struct


def schema_schema() -> Selector:
    """Return the meta-schema."""
    return select(_schema_for)


def _schema_for(schema: Any) -> Any:
    if isinstance(schema, Spec):
        return _spec_schema()
    if isinstance(schema, Union):
        return structure(Union, {"schemas": list_(lazy(schema_schema), cast_from="tuple")})
    if isinstance(schema, Thunk):
        return structure(Thunk, {"func": function(arity=0)})
    if isinstance(schema, Selector):
        return structure(Selector, {"func": function(arity=1)})
    if isinstance(schema, list):
        return literal([]) if not schema else list_(lazy(schema_schema), max_length=1)
    if isinstance(schema, tuple):
        return list_(lazy(schema_schema), cast_from="tuple")
    if isinstance(schema, dict):
        return _map_schema()
    if is_struct(schema):
        return structure(type(schema), {any_key(): lazy(schema_schema)})
    return _literal_schema(schema)


def _literal_schema(schema: Any) -> Any:
    if schema is None:
        return null()
    if isinstance(schema, bool):
        return boolean()
    if isinstance(schema, enum.Enum):
        return symbol()
    if isinstance(schema, str):
        return string()
    if isinstance(schema, bytes):
        return bytes_()
    if isinstance(schema, (int, float, Decimal)):
        return number()
    return None


# =============================================================================
# Spec nodes
# =============================================================================


def _type_tag() -> Spec:
    return string(in_=list(VALID_TYPES))


def _map_schema() -> Spec:
    return map_({any_key(): lazy(schema_schema)})


def _optional_map_schema() -> Selector:
    return select(lambda schema: null() if schema is None else _map_schema())


def _check_schema() -> Selector:
    def check_for(check: Any) -> Spec:
        if isinstance(check, Rule):
            return structure(
                Rule,
                {"predicate": function(arity=1), "message": any_(), "key": any_()},
            )
        return function(arity=1)

    return select(check_for)


def _cast_source_schema() -> Selector:
    def source_for(source: Any) -> Spec:
        if isinstance(source, tuple):
            return tuple_((_type_tag(), function()))
        return _type_tag()

    return select(source_for)


def _variant_schema() -> Selector:
    def variant_for(variant: Any) -> Spec | None:
        if isinstance(variant, ValueSpec):
            return structure(ValueSpec, {"schema": _optional_map_schema()})
        if isinstance(variant, StructSpec):
            return structure(StructSpec, {"cls": class_(), "schema": _optional_map_schema()})
        if isinstance(variant, ListSpec):
            return structure(ListSpec, {"item_type": lazy(schema_schema)})
        if isinstance(variant, TupleSpec):
            return structure(
                TupleSpec,
                {"elem_types": list_(lazy(schema_schema), cast_from="tuple")},
            )
        if isinstance(variant, LiteralSpec):
            return structure(LiteralSpec, {"value": any_()})
        return None

    return select(variant_for)


def _spec_schema() -> Spec:
    return structure(
        Spec,
        {
            "checks": list_(_check_schema(), cast_from="tuple"),
            "late_checks": list_(_check_schema(), cast_from="tuple"),
            "type": _type_tag(),
            "cast_from": list_(_cast_source_schema(), cast_from="tuple"),
            "nullable": boolean(nullable=True),
            "on_error": string(nullable=True),
            "variant": _variant_schema(),
        },
    )
