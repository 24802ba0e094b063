"""Readable rendering of schemas.

    format_schema({"a": string(min_length=2), maybe("b"): [integer()]})
    # "{'a': string(checks: #1), maybe('b'): [integer()]}"

Checks are rendered as a count since rules have no meaningful textual form.
"""

from typing import Any

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
from validata.types import type_name


def format_schema(schema: Any) -> str:
    """Render a schema (or shortcut) as a single line of text."""
    if isinstance(schema, Spec):
        return _format_spec(schema)
    if isinstance(schema, Union):
        return f"union([{', '.join(format_schema(s) for s in schema.schemas)}])"
    if isinstance(schema, Thunk):
        return f"lazy({_callable_name(schema.func)})"
    if isinstance(schema, Selector):
        return f"select({_callable_name(schema.func)})"
    if isinstance(schema, dict):
        return _format_map(schema)
    if isinstance(schema, list):
        return f"[{', '.join(format_schema(s) for s in schema)}]"
    if isinstance(schema, tuple):
        return _format_tuple(schema)
    return repr(schema)


def _callable_name(func: Any) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


def _format_key(key: Any) -> str:
    if isinstance(key, OptionalKey):
        return f"maybe({key.key!r})"
    if isinstance(key, AnyOtherKey):
        return "any_key()"
    return repr(key)


def _format_map(schema: dict) -> str:
    fields = ", ".join(f"{_format_key(k)}: {format_schema(v)}" for k, v in schema.items())
    return "{" + fields + "}"


def _format_tuple(elems: tuple) -> str:
    if len(elems) == 1:
        return f"({format_schema(elems[0])},)"
    return f"({', '.join(format_schema(e) for e in elems)})"


def _format_cast_source(source: Any) -> str:
    if isinstance(source, tuple):
        return f"({source[0]!r}, {_callable_name(source[1])})"
    return repr(source)


def _options(spec: Spec) -> list[str]:
    options = []
    if spec.checks:
        options.append(f"checks: #{len(spec.checks)}")
    if spec.late_checks:
        options.append(f"late_checks: #{len(spec.late_checks)}")
    if spec.cast_from:
        options.append(f"cast_from: [{', '.join(_format_cast_source(s) for s in spec.cast_from)}]")
    if spec.nullable is not None:
        options.append(f"nullable: {spec.nullable}")
    if spec.on_error is not None:
        options.append(f"on_error: {spec.on_error!r}")
    return options


def _format_spec(spec: Spec) -> str:
    variant = spec.variant
    if isinstance(variant, ValueSpec):
        if variant.schema is None:
            name, args = spec.type, []
        else:
            name, args = "map", [_format_map(variant.schema)]
    elif isinstance(variant, StructSpec):
        name, args = "struct", [type_name(variant.cls)]
        if variant.schema is not None:
            args.append(_format_map(variant.schema))
    elif isinstance(variant, ListSpec):
        name, args = "list", [format_schema(variant.item_type)]
    elif isinstance(variant, TupleSpec):
        name, args = "tuple", [_format_tuple(variant.elem_types)]
    elif isinstance(variant, LiteralSpec):
        name, args = "literal", [repr(variant.value)]
    else:
        name, args = spec.type, []
    return f"{name}({', '.join(args + _options(spec))})"
