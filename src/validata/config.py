"""Validation options."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {raw!r}")


@dataclass(frozen=True)
class ValidationOptions:
    """Options for a top-level ``validate`` call.

    Attributes:
        check_schema: Validate the schema against the meta-schema first
        stop_early: Return as soon as errors are found at each level
        group_errors: Merge errors sharing the same path
    """

    check_schema: bool = True
    stop_early: bool = False
    group_errors: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationOptions:
        """Create options from a dict with snake_case or camelCase keys."""
        defaults = cls()
        return cls(
            check_schema=bool(data.get("check_schema", data.get("checkSchema", defaults.check_schema))),
            stop_early=bool(data.get("stop_early", data.get("stopEarly", defaults.stop_early))),
            group_errors=bool(data.get("group_errors", data.get("groupErrors", defaults.group_errors))),
        )

    @classmethod
    def from_env(cls) -> ValidationOptions:
        """Create options from environment variables.

        Reads VALIDATA_CHECK_SCHEMA, VALIDATA_STOP_EARLY and
        VALIDATA_GROUP_ERRORS; unset variables keep their defaults.
        """
        defaults = cls()
        return cls(
            check_schema=_env_flag("VALIDATA_CHECK_SCHEMA", defaults.check_schema),
            stop_early=_env_flag("VALIDATA_STOP_EARLY", defaults.stop_early),
            group_errors=_env_flag("VALIDATA_GROUP_ERRORS", defaults.group_errors),
        )

    def merge(self, **overrides: bool | None) -> ValidationOptions:
        """Return a copy with the non-None overrides applied."""
        values = {
            "check_schema": self.check_schema,
            "stop_early": self.stop_early,
            "group_errors": self.group_errors,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ValidationOptions(**values)
