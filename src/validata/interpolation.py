"""Message template interpolation.

Templates use ``%{name}`` placeholders:

    from_template("Must be between %{min_value} and %{max_value}.",
                  {"min_value": 1, "max_value": 5})
    # -> "Must be between 1 and 5."
"""

import re
from typing import Any


class MessageInterpolator:
    """Interpolates bindings into message templates.

    Supports:
    - %{name} - Replaced with str() of the binding
    - Unknown names are left as the raw key name
    """

    # Pattern: %{name}
    PATTERN = re.compile(r"%\{(?P<name>\w+)\}")

    def interpolate(self, template: str, bindings: dict[str, Any] | None = None) -> str:
        """Interpolate bindings into a message template.

        Args:
            template: Message template with %{name} placeholders
            bindings: Dict of name -> value

        Returns:
            Message with placeholders replaced
        """
        bindings = bindings or {}

        def replace(match: re.Match) -> str:
            name = match.group("name")
            if name not in bindings:
                return name
            return self._format_value(bindings[name])

        return self.PATTERN.sub(replace, template)

    def _format_value(self, value: Any) -> str:
        if value is None:
            return "None"
        return str(value)


_default_interpolator = MessageInterpolator()


def from_template(template: str, bindings: dict[str, Any] | None = None) -> str:
    """Render a template with the default interpolator."""
    return _default_interpolator.interpolate(template, bindings)
