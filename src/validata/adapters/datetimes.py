"""Schema for timezone-aware ``datetime.datetime`` values."""

import datetime as dt
from typing import Any

from validata.helpers import opaque_struct_type, single_option, spread_option
from validata.rule import Rule, built_in
from validata.spec import Spec


def is_aware(value: dt.datetime) -> bool:
    return value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None


def datetime_(**opts: Any) -> Spec:
    """A timezone-aware ``datetime.datetime``.

    Naive datetimes are rejected; use ``naive_datetime`` for those.

    Options:
        after: Minimum acceptable datetime (included)
        before: Maximum acceptable datetime (included)
        between: ``[min, max]`` range of acceptable datetimes
        cast_from: "string" (ISO 8601 with an offset) or "integer" (Unix
            timestamp in seconds, converted to a UTC datetime)

    Raises:
        ValueError: If a bound is naive
    """
    return opaque_struct_type(
        dt.datetime,
        opts,
        converter=_convert,
        shortcut_rules={
            "after": single_option(after_datetime),
            "before": single_option(before_datetime),
            "between": spread_option(between_datetimes),
        },
        base_checks=[timezone_aware()],
    )


def timezone_aware() -> Rule:
    return built_in(
        ("timezone_aware",),
        is_aware,
        "The datetime should be timezone-aware.",
    )


def _check_bound(bound: dt.datetime) -> dt.datetime:
    if not is_aware(bound):
        raise ValueError(f"Datetime bound must be timezone-aware: {bound}")
    return bound


# Naive values are reported by timezone_aware; bounds do not apply to them.
def after_datetime(bound: dt.datetime) -> Rule:
    bound = _check_bound(bound)
    return built_in(
        ("after_datetime", bound),
        lambda value: not is_aware(value) or value >= bound,
        f"The datetime should be later than {bound}.",
    )


def before_datetime(bound: dt.datetime) -> Rule:
    bound = _check_bound(bound)
    return built_in(
        ("before_datetime", bound),
        lambda value: not is_aware(value) or value <= bound,
        f"The datetime should be earlier than {bound}.",
    )


def between_datetimes(start: dt.datetime, end: dt.datetime) -> Rule:
    start, end = _check_bound(start), _check_bound(end)
    return built_in(
        ("between_datetimes", start, end),
        lambda value: not is_aware(value) or start <= value <= end,
        f"The datetime should be comprised between {start} and {end}.",
    )


def _convert(value: Any, source_type: str) -> dt.datetime:
    if source_type == "string":
        converted = dt.datetime.fromisoformat(value)
        if not is_aware(converted):
            raise ValueError(f"No UTC offset in {value!r}")
        return converted
    if source_type == "integer":
        return dt.datetime.fromtimestamp(value, tz=dt.timezone.utc)
    raise ValueError(f"Cannot convert {source_type} to datetime")
