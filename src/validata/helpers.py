"""Builder functions for validata schemas.

These helpers populate ``Spec`` nodes with their defaults and merge the
built-in rules requested through options (``min``, ``max_length``,
``format``, ...) into the node's checks. The validation engine never sees
the options, only the resulting ``checks``.

Common options (all builders):
    checks: list of rules or predicates
    check: a single rule or predicate
    late_checks: rules evaluated only if all other checks passed
    late_check: a single late check
    nullable: None (default), True or False
    cast_from: type tag, (type tag, converter) pair, or a list of those
    on_error: message replacing all errors of the element

Usage:
    from validata import helpers as h

    schema = h.map_({
        "name": h.string(min_length=1),
        h.maybe("age"): h.integer(min=0, cast_from="string"),
        "tags": [h.string()],
    })

Builders whose natural name shadows a Python builtin carry a trailing
underscore (``list_``, ``tuple_``, ``map_``, ``float_``, ``any_``, ``in_``).
"""

import enum
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Callable, Mapping

from validata.errors import InvalidSchemaError, ValidationError
from validata.rule import (
    Rule,
    arity,
    between,
    exact_length,
    match,
    max_length,
    max_value,
    min_length,
    min_value,
    no_duplicate,
    non_empty,
    one_of,
)
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
from validata.types import is_struct, struct_fields, type_of

COMMON_OPTIONS = frozenset(
    {"checks", "check", "late_checks", "late_check", "nullable", "cast_from", "on_error"}
)


# =============================================================================
# Built-in rule table
# =============================================================================


def flag_option(factory: Callable[[], Rule]) -> Callable[[Any], list]:
    return lambda enabled: [factory()] if enabled is True else []


def single_option(factory: Callable[[Any], Rule]) -> Callable[[Any], list]:
    return lambda arg: [factory(arg)]


def spread_option(factory: Callable[..., Rule]) -> Callable[[Any], list]:
    return lambda args: [factory(*args)]


_NUMBER_RULES = MappingProxyType({
    "min": single_option(min_value),
    "max": single_option(max_value),
    "in_": single_option(one_of),
    "between": spread_option(between),
})

_STRING_RULES = MappingProxyType({
    "min_length": single_option(min_length),
    "max_length": single_option(max_length),
    "length": single_option(exact_length),
    "in_": single_option(one_of),
    "non_empty": flag_option(non_empty),
    "format": single_option(match),
})

_LIST_RULES = MappingProxyType({
    "min_length": single_option(min_length),
    "max_length": single_option(max_length),
    "length": single_option(exact_length),
    "in_": single_option(one_of),
    "non_empty": flag_option(non_empty),
    "no_duplicate": flag_option(no_duplicate),
})

_FUNCTION_RULES = MappingProxyType({
    "in_": single_option(one_of),
    "arity": single_option(arity),
})

_DEFAULT_RULES = MappingProxyType({
    "in_": single_option(one_of),
})

# Declared type -> option name -> rule builder. Read-only; consulted once per
# node at construction time.
BUILT_IN_RULES: Mapping[str, Mapping[str, Callable[[Any], list]]] = MappingProxyType({
    "number": _NUMBER_RULES,
    "integer": _NUMBER_RULES,
    "float": _NUMBER_RULES,
    "string": _STRING_RULES,
    "bytes": _STRING_RULES,
    "list": _LIST_RULES,
    "function": _FUNCTION_RULES,
})


def built_in_checks(opts: Mapping[str, Any], table: Mapping[str, Callable[[Any], list]]) -> list:
    """Build the rules requested by options, in table order."""
    checks: list = []
    for key, builder in table.items():
        if key in opts:
            checks.extend(builder(opts[key]))
    return checks


def _rules_for(type_: str) -> Mapping[str, Callable[[Any], list]]:
    return BUILT_IN_RULES.get(type_, _DEFAULT_RULES)


# =============================================================================
# Spec construction
# =============================================================================


def _check_options(opts: Mapping[str, Any], allowed: set | frozenset) -> None:
    unknown = set(opts) - set(COMMON_OPTIONS) - set(allowed)
    if unknown:
        raise TypeError(f"Unknown schema option(s): {', '.join(sorted(unknown))}")


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def normalize_cast_from(cast_from: Any) -> tuple:
    """Normalize cast sources to a tuple of tags and (tag, converter) pairs."""
    if cast_from is None:
        return ()
    if isinstance(cast_from, tuple) and len(cast_from) == 2 and callable(cast_from[1]):
        return (cast_from,)
    entries = cast_from if isinstance(cast_from, (list, tuple)) else [cast_from]
    return tuple(tuple(entry) if isinstance(entry, list) else entry for entry in entries)


def _extract_checks(opts: Mapping[str, Any], table: Mapping[str, Callable[[Any], list]]) -> tuple:
    return tuple(
        _as_list(opts.get("checks"))
        + _as_list(opts.get("check"))
        + built_in_checks(opts, table)
    )


def _extract_late_checks(opts: Mapping[str, Any]) -> tuple:
    return tuple(_as_list(opts.get("late_checks")) + _as_list(opts.get("late_check")))


def build_spec(variant: Any, type_: str, opts: Mapping[str, Any], table: Mapping | None = None) -> Spec:
    table = _rules_for(type_) if table is None else table
    _check_options(opts, set(table))
    return Spec(
        checks=_extract_checks(opts, table),
        late_checks=_extract_late_checks(opts),
        type=type_,
        cast_from=normalize_cast_from(opts.get("cast_from")),
        nullable=opts.get("nullable"),
        on_error=opts.get("on_error"),
        variant=variant,
    )


# =============================================================================
# Builders
# =============================================================================


def value(type: str = "any", schema: dict | None = None, **opts: Any) -> Spec:
    """Any value of the given type; a map when ``schema`` is given.

    Examples:
        validate(2, value(in_=[1, "1"]))
        # [ValidationError("Invalid value: 2. Valid options: [1, '1']", ())]
    """
    return build_spec(ValueSpec(schema=schema), type, opts)


def any_(**opts: Any) -> Spec:
    return value(**opts)


def string(**opts: Any) -> Spec:
    """A string. Options: min_length, max_length, length, in_, non_empty, format."""
    return value(type="string", **opts)


def bytes_(**opts: Any) -> Spec:
    return value(type="bytes", **opts)


def number(**opts: Any) -> Spec:
    """An int, float or Decimal (never a bool). Options: min, max, in_, between."""
    return value(type="number", **opts)


def integer(**opts: Any) -> Spec:
    return value(type="integer", **opts)


def float_(**opts: Any) -> Spec:
    return value(type="float", **opts)


def boolean(**opts: Any) -> Spec:
    return value(type="boolean", **opts)


def symbol(**opts: Any) -> Spec:
    """An enum member."""
    return value(type="symbol", **opts)


def function(**opts: Any) -> Spec:
    """A callable. Options: in_, arity."""
    return value(type="function", **opts)


def class_(**opts: Any) -> Spec:
    return value(type="class", **opts)


def null(**opts: Any) -> Spec:
    return value(type="null", **opts)


def list_(item_type: Any = None, **opts: Any) -> Spec:
    """A list whose items all conform to ``item_type``.

    Options: min_length, max_length, length, in_, non_empty, no_duplicate.

    The ``[item_type]`` shortcut can be used instead when no option is
    needed, and ``[]`` matches any list.
    """
    if item_type is None:
        item_type = value()
    return build_spec(ListSpec(item_type=item_type), "list", opts)


def tuple_(elem_types: tuple | list, **opts: Any) -> Spec:
    """A tuple of exactly ``len(elem_types)`` elements.

    A plain tuple of schemas can be used as a shortcut.
    """
    return build_spec(TupleSpec(elem_types=tuple(elem_types)), "tuple", opts)


def map_(schema: dict, **opts: Any) -> Spec:
    """A map with the given schema.

    All keys are required unless wrapped with ``maybe``; unlisted keys are
    rejected unless an ``any_key()`` entry gives their schema. A plain dict
    can be used as a shortcut.
    """
    return value(type="map", schema=dict(schema), **opts)


def structure(cls_or_instance: Any, schema: dict | None = None, **opts: Any) -> Spec:
    """A dataclass instance.

    Either pass an instance whose field values are schemas:

        structure(User(name=string(), age=number()))

    or a class, optionally with a field schema:

        structure(User, {"name": string(), "age": number()})
        structure(date)   # opaque: only the class is checked
    """
    if is_struct(cls_or_instance):
        cls = type(cls_or_instance)
        schema = struct_fields(cls_or_instance)
    else:
        cls = cls_or_instance
    variant = StructSpec(cls=cls, schema=dict(schema) if schema is not None else None)
    return build_spec(variant, "struct", opts, _DEFAULT_RULES)


def literal(literal_value: Any, **opts: Any) -> Spec:
    """A constant; values must be equal to it.

    Strings, bytes, numbers, booleans, enum members and None can be used
    directly as shortcuts.
    """
    return build_spec(LiteralSpec(value=literal_value), type_of(literal_value), opts)


def union(schemas: list) -> Union:
    """The union of several schemas.

    If no schema matches, the errors of the only schema whose type matches
    the value are returned, or a generic error otherwise.
    """
    return Union(schemas=Union.flatten(schemas))


def any_key() -> AnyOtherKey:
    return AnyOtherKey()


def maybe(key: Any) -> OptionalKey:
    return OptionalKey(key=key)


def lazy(func: Callable[[], Any]) -> Thunk:
    return Thunk(func=func)


def select(func: Callable[[Any], Any]) -> Selector:
    return Selector(func=func)


def opaque_struct_type(
    cls: type,
    user_opts: Mapping[str, Any],
    converter: Callable[[Any, str], Any] | None = None,
    shortcut_rules: Mapping[str, Callable[[Any], list]] | None = None,
    base_checks: list | None = None,
) -> Spec:
    """Build a helper for an opaque class (dates, times, ...).

    Args:
        cls: The class values must be instances of
        user_opts: Options given by the user
        converter: ``converter(value, source_type)`` used for every plain
            type tag listed in ``cast_from``
        shortcut_rules: Option name -> rule builder (see ``built_in_checks``)
        base_checks: Rules that always apply, evaluated before all others
    """
    shortcut_rules = shortcut_rules or {}
    opts = dict(user_opts)
    _check_options(opts, set(shortcut_rules) | {"in_"})

    cast_from = []
    for entry in normalize_cast_from(opts.get("cast_from")):
        if converter is None or isinstance(entry, tuple):
            cast_from.append(entry)
        else:
            cast_from.append((entry, lambda v, source=entry: converter(v, source)))

    checks = list(base_checks or []) + built_in_checks(opts, shortcut_rules) + _as_list(opts.get("checks"))
    variant = StructSpec(cls=cls, schema=None)
    table = {"in_": _DEFAULT_RULES["in_"]}
    spec_opts = {k: v for k, v in opts.items() if k not in shortcut_rules}
    spec_opts.update(checks=checks, cast_from=cast_from)
    return build_spec(variant, "struct", spec_opts, table)


# =============================================================================
# Shortcuts
# =============================================================================

_LITERAL_TYPES = (str, bytes, int, float, bool, Decimal, enum.Enum)


def from_shortcut(schema: Any) -> Spec | Union | Thunk | Selector:
    """Normalize a schema shortcut into a canonical schema element.

    - ``[]`` -> list of anything; ``[x]`` -> list of ``x``
    - ``(a, b)`` -> fixed tuple
    - ``dict`` -> map
    - dataclass instance -> struct with its fields as schemas
    - str, bytes, numbers, booleans, enum members, None -> literal

    Raises:
        InvalidSchemaError: For values that are not schemas
    """
    if isinstance(schema, (Spec, Union, Thunk, Selector)):
        return schema
    if isinstance(schema, list):
        if len(schema) == 0:
            return list_(value())
        if len(schema) == 1:
            return list_(schema[0])
    elif isinstance(schema, tuple):
        return tuple_(schema)
    elif isinstance(schema, dict):
        return map_(schema)
    elif is_struct(schema):
        return structure(schema)
    elif schema is None or isinstance(schema, _LITERAL_TYPES):
        return literal(schema)

    raise InvalidSchemaError([ValidationError(f"Unsupported schema element: {schema!r}")])
