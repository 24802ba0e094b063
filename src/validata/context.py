"""Per-frame validation context."""

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class Context:
    """Immutable context threaded through the recursive validation.

    Attributes:
        path: Keys and indices leading to the current element
        is_optional_field: True when the current element is the value of an
            optional key or of an "any other key" entry
        stop_early: Return as soon as errors are found
    """

    path: tuple[Any, ...] = field(default_factory=tuple)
    is_optional_field: bool = False
    stop_early: bool = False

    def add_to_path(self, element: Any) -> "Context":
        return replace(self, path=self.path + (element,), is_optional_field=False)

    def as_optional(self, optional: bool = True) -> "Context":
        return replace(self, is_optional_field=optional)
