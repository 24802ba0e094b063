"""Error model for validata.

Validation errors are immutable records carrying a path (keys and indices
leading to the offending element) and a message. A message is a string, a
list of strings once errors are grouped, or a ``(template, bindings)`` pair
until it is rendered.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from validata.interpolation import from_template

Template = tuple[str, dict[str, Any]]
Message = Union[str, list[str], Template]
PathElement = Any


@dataclass(frozen=True)
class ValidationError:
    """A single validation error.

    Attributes:
        message: Human-readable message, a list of messages, or a template pair
        path: Keys and indices locating the element within the validated value
    """

    message: Message
    path: tuple[PathElement, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))

    @classmethod
    def new(cls, message: Message, path: Any = ()) -> "ValidationError":
        """Create an error from a message and a path (sequence or Context)."""
        return cls(message=message, path=tuple(getattr(path, "path", path)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": list(self.path),
            "message": render_message(self.message),
        }

    def __str__(self) -> str:
        message = render_message(self.message)
        if isinstance(message, list):
            message = "; ".join(message)
        if not self.path:
            return message
        location = "".join(
            f"[{p}]" if isinstance(p, int) else f".{p}" for p in self.path
        ).lstrip(".")
        return f"{location}: {message}"


class InvalidSchemaError(Exception):
    """Raised when a schema does not conform to the meta-schema.

    This is the only error ``validate`` raises on purpose: a malformed
    schema is a programming error, not a property of the validated data.

    Attributes:
        errors: Errors reported by the meta-schema
    """

    def __init__(self, errors: list[ValidationError]):
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"Invalid schema: {details}" if details else "Invalid schema")


# =============================================================================
# Message helpers
# =============================================================================


def render_message(message: Message) -> str | list[str]:
    """Render a message (or each message of a list) to plain strings."""
    if isinstance(message, tuple):
        template, bindings = message
        return from_template(template, bindings)
    if isinstance(message, list):
        return [render_message(m) for m in message]
    return message


def evaluate_messages(errors: list[ValidationError]) -> list[ValidationError]:
    """Replace template messages with their rendered strings."""
    return [
        error
        if isinstance(error.message, str)
        else ValidationError(render_message(error.message), error.path)
        for error in errors
    ]


def invalid_type_error(expected_type: str, value: Any, path: Any) -> ValidationError:
    return ValidationError.new(
        (
            "Expected type: %{expected_type}, got: %{value}.",
            {"expected_type": expected_type, "value": repr(value)},
        ),
        path,
    )


def group_by_path(errors: list[ValidationError]) -> list[ValidationError]:
    """Merge errors sharing an identical path.

    Groups keep the order in which their path first appeared. A group with
    a single message keeps it as a scalar; larger groups carry the list of
    messages in their original order.
    """
    groups: dict[tuple, list[Message]] = {}
    for error in errors:
        groups.setdefault(error.path, []).append(error.message)

    return [
        ValidationError(messages[0] if len(messages) == 1 else messages, path)
        for path, messages in groups.items()
    ]
