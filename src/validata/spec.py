"""Schema model for validata.

A schema node is a ``Spec``: a common envelope (checks, late checks, declared
type, cast sources, nullability, error override) wrapped around exactly one
variant:

- ValueSpec: a scalar, or a map when ``schema`` is set
- StructSpec: a dataclass instance of a given class, optionally with fields
- ListSpec: a list whose items all match ``item_type``
- TupleSpec: a tuple of fixed arity matching ``elem_types`` position-wise
- LiteralSpec: a value strictly equal to ``value``

Besides ``Spec``, a schema position accepts a ``Union`` of schemas, a
``Thunk`` (zero-argument function returning a schema, used for recursive
schemas), a ``Selector`` (one-argument function choosing a schema from the
value, or returning None when nothing matches), and the shortcuts handled by
``validata.helpers.from_shortcut``.

All classes are frozen dataclasses, so schemas can be shared freely.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Union as TypingUnion

CastSource = TypingUnion[str, tuple[str, Callable[[Any], Any]]]


# =============================================================================
# Map keys
# =============================================================================


@dataclass(frozen=True)
class OptionalKey:
    """A map key whose absence is not an error."""

    key: Any


@dataclass(frozen=True)
class AnyOtherKey:
    """Map key supplying the schema of every key not listed in the map."""


# =============================================================================
# Variants
# =============================================================================


@dataclass(frozen=True)
class ValueSpec:
    """A simple value, or a map when ``schema`` is set."""

    schema: dict | None = None


@dataclass(frozen=True)
class StructSpec:
    """A dataclass instance of class ``cls``.

    When ``schema`` is None the struct is opaque and only its class is
    checked.
    """

    cls: type
    schema: dict | None = None


@dataclass(frozen=True)
class ListSpec:
    """A list of elements, each conforming to ``item_type``."""

    item_type: Any = None


@dataclass(frozen=True)
class TupleSpec:
    """A tuple with exactly ``len(elem_types)`` elements."""

    elem_types: tuple = ()


@dataclass(frozen=True)
class LiteralSpec:
    """A literal constant; values must be strictly equal to it."""

    value: Any = None


Variant = TypingUnion[ValueSpec, StructSpec, ListSpec, TupleSpec, LiteralSpec]


# =============================================================================
# Schema node
# =============================================================================


@dataclass(frozen=True)
class Spec:
    """A schema node.

    Attributes:
        checks: Rules evaluated on the value, in order
        late_checks: Rules evaluated only if everything else passed
        type: Expected type tag ("any" matches everything)
        cast_from: Source types (or (type, converter) pairs) converted
            to ``type`` before validation
        nullable: None defers to the surrounding context, True accepts
            None unconditionally, False rejects it
        on_error: Message replacing every error of this node and its
            descendants
        variant: The variant payload
    """

    checks: tuple = ()
    late_checks: tuple = ()
    type: str = "any"
    cast_from: tuple[CastSource, ...] = ()
    nullable: bool | None = None
    on_error: str | None = None
    variant: Variant = field(default_factory=ValueSpec)


# =============================================================================
# Unions and selectors
# =============================================================================


@dataclass(frozen=True)
class Union:
    """A union of schemas; values must match at least one of them."""

    schemas: tuple = ()

    @staticmethod
    def flatten(schemas) -> tuple:
        """Flatten nested unions and drop duplicates (structural equality)."""
        result: list = []
        for schema in schemas:
            members = Union.flatten(schema.schemas) if isinstance(schema, Union) else (schema,)
            for member in members:
                if member not in result:
                    result.append(member)
        return tuple(result)


@dataclass(frozen=True)
class Thunk:
    """A schema computed on demand by calling ``func()``.

    Enables recursive schemas:

        def tree():
            return {"value": number(), maybe("children"): [Thunk(tree)]}
    """

    func: Callable[[], Any]


@dataclass(frozen=True)
class Selector:
    """A schema chosen from the value by calling ``func(value)``.

    ``func`` returns None when no schema applies to the value.
    """

    func: Callable[[Any], Any]
