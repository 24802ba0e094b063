"""Validation engine.

Validates arbitrary nested values (dicts, lists, tuples, dataclass
instances, scalars) against a schema and returns the list of errors found,
rather than raising on the first failure.

Usage:
    from validata import validate
    from validata.helpers import string, integer, maybe

    errors = validate(
        {"name": "Ada", "age": "thirty"},
        {"name": string(), maybe("age"): integer(cast_from="string")},
    )
    # [ValidationError("Cannot be cast to integer.", ("age",))]

Evaluation order of a node: nullability, type check and cast, checks,
variant sub-validation (map fields, list items, tuple elements, literal),
then late checks when nothing else failed. The order is deterministic: two
runs over the same inputs return the same errors in the same order.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterable

from validata.config import ValidationOptions
from validata.context import Context
from validata.errors import (
    InvalidSchemaError,
    ValidationError,
    evaluate_messages,
    group_by_path,
    invalid_type_error,
)
from validata.helpers import from_shortcut
from validata.rule import evaluate
from validata.schema_validator import schema_schema
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
from validata.types import CastError, cast, cast_with, has_type, is_struct, struct_fields, type_name

logger = logging.getLogger(__name__)

NULL_MESSAGE = "Value cannot be null."
NO_SCHEMA_MESSAGE = "Value does not match any of the possible schemas."


def validate(
    value: Any,
    schema: Any,
    *,
    check_schema: bool | None = None,
    stop_early: bool | None = None,
    group_errors: bool | None = None,
    options: ValidationOptions | None = None,
) -> list[ValidationError]:
    """Validate a value against a schema.

    Args:
        value: The value to validate
        schema: A schema element (``Spec``, ``Union``, ``Thunk``,
            ``Selector``) or a shortcut
        check_schema: Validate the schema itself first (default True)
        stop_early: Return as soon as errors are found at each level
            (default False)
        group_errors: Merge errors sharing the same path (default True)
        options: ValidationOptions supplying defaults for the flags above

    Returns:
        List of errors with rendered messages; empty if the value is valid.

    Raises:
        InvalidSchemaError: If ``check_schema`` is on and the schema is
            malformed
    """
    options = (options or ValidationOptions()).merge(
        check_schema=check_schema,
        stop_early=stop_early,
        group_errors=group_errors,
    )

    if options.check_schema:
        schema_errors = validate_schema(schema)
        if schema_errors:
            raise InvalidSchemaError(schema_errors)

    errors = evaluate_messages(_do_validate(value, schema, Context(stop_early=options.stop_early)))
    if options.group_errors:
        errors = group_by_path(errors)
    return errors


def validate_schema(schema: Any) -> list[ValidationError]:
    """Validate a schema against the meta-schema.

    Returns:
        List of errors (ungrouped, rendered); empty if the schema is valid.
    """
    return evaluate_messages(_do_validate(schema, schema_schema(), Context()))


# =============================================================================
# Dispatch
# =============================================================================


def _do_validate(value: Any, schema: Any, ctx: Context) -> list[ValidationError]:
    if isinstance(schema, Spec):
        return _validate_spec(value, schema, ctx)
    if isinstance(schema, Thunk):
        return _do_validate(value, schema.func(), ctx)
    if isinstance(schema, Selector):
        return _validate_select(value, schema, ctx)
    if isinstance(schema, Union):
        return _validate_union(value, schema, ctx)
    return _do_validate(value, from_shortcut(schema), ctx)


def _collect_errors(
    items: Iterable[Any],
    stop_early: bool,
    produce: Callable[[Any], list[ValidationError]],
) -> list[ValidationError]:
    """Concatenate the errors produced for each item.

    With ``stop_early``, stops at the first item producing errors.
    """
    errors: list[ValidationError] = []
    for item in items:
        new_errors = produce(item)
        errors.extend(new_errors)
        if stop_early and new_errors:
            break
    return errors


def _run_checks(checks: Iterable[Any], value: Any, ctx: Context) -> list[ValidationError]:
    return _collect_errors(checks, ctx.stop_early, lambda check: evaluate(check, value, ctx.path))


# =============================================================================
# Spec nodes
# =============================================================================


def _validate_spec(value: Any, spec: Spec, ctx: Context) -> list[ValidationError]:
    errors = _validate_spec_node(value, spec, ctx)
    if errors and spec.on_error is not None:
        return [ValidationError.new(spec.on_error, ctx)]
    return errors


def _validate_spec_node(value: Any, spec: Spec, ctx: Context) -> list[ValidationError]:
    if value is None:
        if spec.nullable is True:
            return []
        if spec.nullable is False:
            return [ValidationError.new(NULL_MESSAGE, ctx)]
        if ctx.is_optional_field:
            return []

    value, errors = _check_type_and_cast(value, spec, ctx)
    if errors:
        return errors

    errors = _structural_errors(value, spec, ctx)
    if errors:
        return errors

    check_errors = _run_checks(spec.checks, value, ctx)
    if check_errors and ctx.stop_early:
        return check_errors

    errors = check_errors + _validate_variant(value, spec.variant, ctx)
    if errors:
        return errors

    return _run_checks(spec.late_checks, value, ctx)


def _expected_type(spec: Spec) -> str:
    if isinstance(spec.variant, StructSpec):
        return type_name(spec.variant.cls)
    return spec.type


def _cast_source(entry: Any) -> tuple[str, Callable[[Any], Any] | None]:
    if isinstance(entry, tuple):
        return entry[0], entry[1]
    return entry, None


def _check_type_and_cast(value: Any, spec: Spec, ctx: Context) -> tuple[Any, list[ValidationError]]:
    """Check the value type, casting it from the first matching source.

    Returns:
        The (possibly cast) value and the errors found.
    """
    if has_type(value, spec.type):
        return value, []

    for entry in spec.cast_from:
        source_type, converter = _cast_source(entry)
        if not has_type(value, source_type):
            continue
        try:
            if converter is None:
                return cast(value, source_type, spec.type), []
            return cast_with(value, spec.type, converter), []
        except CastError:
            return value, [ValidationError.new(str(CastError(_expected_type(spec))), ctx)]

    if isinstance(spec.variant, LiteralSpec):
        return value, []
    return value, [invalid_type_error(_expected_type(spec), value, ctx)]


def _structural_errors(value: Any, spec: Spec, ctx: Context) -> list[ValidationError]:
    """Errors preventing the variant from being inspected at all."""
    variant = spec.variant

    if isinstance(variant, StructSpec):
        if not is_struct(value):
            return [invalid_type_error(type_name(variant.cls), value, ctx)]
        if type(value) is not variant.cls:
            return [
                ValidationError.new(
                    (
                        "Expected struct of type: %{expected}, got struct of type: %{actual}.",
                        {"expected": type_name(variant.cls), "actual": type_name(type(value))},
                    ),
                    ctx,
                )
            ]
    elif isinstance(variant, ListSpec):
        if not isinstance(value, list):
            return [invalid_type_error("list", value, ctx)]
    elif isinstance(variant, TupleSpec):
        if not isinstance(value, tuple):
            return [invalid_type_error("tuple", value, ctx)]
        if len(value) != len(variant.elem_types):
            return [
                ValidationError.new(
                    (
                        "Invalid tuple size (expected: %{expected_size}, received: %{actual_size}).",
                        {"expected_size": len(variant.elem_types), "actual_size": len(value)},
                    ),
                    ctx,
                )
            ]
    elif isinstance(variant, ValueSpec) and variant.schema is not None:
        if not isinstance(value, Mapping):
            return [invalid_type_error("map", value, ctx)]
    return []


def _validate_variant(value: Any, variant: Any, ctx: Context) -> list[ValidationError]:
    if isinstance(variant, ValueSpec):
        if variant.schema is None:
            return []
        return _validate_map(value, variant.schema, ctx)

    if isinstance(variant, StructSpec):
        if variant.schema is None:
            return []
        return _validate_map(struct_fields(value), variant.schema, ctx)

    if isinstance(variant, ListSpec):
        return _collect_errors(
            enumerate(value),
            ctx.stop_early,
            lambda item: _do_validate(item[1], variant.item_type, ctx.add_to_path(item[0])),
        )

    if isinstance(variant, TupleSpec):
        return _collect_errors(
            enumerate(zip(value, variant.elem_types)),
            ctx.stop_early,
            lambda item: _do_validate(item[1][0], item[1][1], ctx.add_to_path(item[0])),
        )

    if isinstance(variant, LiteralSpec):
        return _validate_literal(value, variant, ctx)

    return []


def _strictly_equal(left: Any, right: Any) -> bool:
    # True == 1 in Python; booleans only equal booleans here.
    return left == right and isinstance(left, bool) == isinstance(right, bool)


def _validate_literal(value: Any, variant: LiteralSpec, ctx: Context) -> list[ValidationError]:
    if _strictly_equal(value, variant.value):
        return []
    return [
        ValidationError.new(
            (
                "Expected literal value %{expected}, got: %{value}.",
                {"expected": repr(variant.value), "value": repr(value)},
            ),
            ctx,
        )
    ]


# =============================================================================
# Maps
# =============================================================================


def _schema_keys(schema: dict) -> list:
    return [
        key.key if isinstance(key, OptionalKey) else key
        for key in schema
        if not isinstance(key, AnyOtherKey)
    ]


def _unexpected_keys(mapping: Mapping, schema: dict) -> list:
    known = _schema_keys(schema)
    return [key for key in mapping if key not in known]


def _unexpected_fields_error(mapping: Mapping, schema: dict, ctx: Context) -> list[ValidationError]:
    if any(isinstance(key, AnyOtherKey) for key in schema):
        return []
    unexpected = _unexpected_keys(mapping, schema)
    if not unexpected:
        return []
    return [
        ValidationError.new(
            ("Unexpected fields: %{fields}.", {"fields": repr(unexpected)}),
            ctx,
        )
    ]


def _field_type(field_schema: Any) -> str | None:
    """Type shown next to a missing field, if it is known statically."""
    if isinstance(field_schema, (Thunk, Selector, Union)):
        return None
    return from_shortcut(field_schema).type


def _missing_fields_error(mapping: Mapping, schema: dict, ctx: Context) -> list[ValidationError]:
    missing = []
    for key, field_schema in schema.items():
        if isinstance(key, (OptionalKey, AnyOtherKey)) or key in mapping:
            continue
        field_type = _field_type(field_schema)
        missing.append(repr(key) if field_type is None else f"{key!r} ({field_type})")

    if not missing:
        return []
    return [
        ValidationError.new(
            ("Missing required fields: %{fields}.", {"fields": ", ".join(missing)}),
            ctx,
        )
    ]


def _validate_field(mapping: Mapping, key: Any, field_schema: Any, ctx: Context, optional: bool) -> list[ValidationError]:
    if key not in mapping:
        return []
    return _do_validate(mapping[key], field_schema, ctx.add_to_path(key).as_optional(optional))


def _field_errors(mapping: Mapping, schema: dict, ctx: Context) -> list[ValidationError]:
    def entry_errors(entry: tuple[Any, Any]) -> list[ValidationError]:
        key, field_schema = entry
        if isinstance(key, AnyOtherKey):
            return _collect_errors(
                _unexpected_keys(mapping, schema),
                ctx.stop_early,
                lambda other_key: _validate_field(mapping, other_key, field_schema, ctx, optional=True),
            )
        if isinstance(key, OptionalKey):
            return _validate_field(mapping, key.key, field_schema, ctx, optional=True)
        return _validate_field(mapping, key, field_schema, ctx, optional=False)

    return _collect_errors(schema.items(), ctx.stop_early, entry_errors)


def _validate_map(mapping: Mapping, schema: dict, ctx: Context) -> list[ValidationError]:
    """Validate the fields of a map against a map-schema.

    Errors come in this order: unexpected fields, missing required fields,
    then the errors of each field in schema declaration order.
    """
    stages = (_unexpected_fields_error, _missing_fields_error, _field_errors)
    return _collect_errors(stages, ctx.stop_early, lambda stage: stage(mapping, schema, ctx))


# =============================================================================
# Selectors and unions
# =============================================================================


def _validate_select(value: Any, selector: Selector, ctx: Context) -> list[ValidationError]:
    """Validate a value against the schema its selector picks.

    A selector returning None, or raising while inspecting the value (e.g.
    a KeyError on a missing discriminant), means no schema applies.
    """
    try:
        schema = selector.func(value)
    except Exception:
        logger.debug("Selector raised for %r at %r", value, ctx.path, exc_info=True)
        schema = None
    if schema is None:
        logger.debug("No schema selected for %r at %r", value, ctx.path)
        return [ValidationError.new(NO_SCHEMA_MESSAGE, ctx)]
    return _do_validate(value, schema, ctx)


def _primary_specs(schema: Any) -> list[Spec | None]:
    """The Specs a union member resolves to; None stands for a selector.

    A member that resolves to a union contributes each of its members.
    """
    while isinstance(schema, Thunk):
        schema = schema.func()
    if isinstance(schema, Selector):
        return [None]
    schema = from_shortcut(schema)
    if isinstance(schema, Union):
        return [spec for member in Union.flatten(schema.schemas) for spec in _primary_specs(member)]
    return [schema]


def _primary_types(schema: Any) -> list[str]:
    return ["any" if spec is None else spec.type for spec in _primary_specs(schema)]


def _spec_matches_type(value: Any, spec: Spec | None) -> bool:
    if spec is None:
        return True
    if has_type(value, spec.type):
        return True
    return any(has_type(value, _cast_source(entry)[0]) for entry in spec.cast_from)


def _matches_type(value: Any, schema: Any) -> bool:
    return any(_spec_matches_type(value, spec) for spec in _primary_specs(schema))


def _validate_union(value: Any, union: Union, ctx: Context) -> list[ValidationError]:
    """Validate a value against the members of a union.

    The value is valid if it matches any member. Otherwise, when exactly
    one member has a matching type, that member's errors are returned; in
    every other case a single generic error lists the possible types.
    """
    members = Union.flatten(union.schemas)
    failures = []
    for member in members:
        errors = _do_validate(value, member, ctx)
        if not errors:
            return []
        failures.append((member, errors))

    matching = [errors for member, errors in failures if _matches_type(value, member)]
    if len(matching) == 1:
        return matching[0]

    possible_types = [type_ for member in members for type_ in _primary_types(member)]
    return [
        ValidationError.new(
            (
                "The value does not match any schema in the union. Possible types: %{types}.",
                {"types": repr(possible_types)},
            ),
            ctx,
        )
    ]
