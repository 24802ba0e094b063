"""Schema for naive ``datetime.datetime`` values (no timezone)."""

import datetime as dt
from typing import Any

from validata.adapters.datetimes import is_aware
from validata.helpers import opaque_struct_type, single_option, spread_option
from validata.rule import Rule, built_in
from validata.spec import Spec


def naive_datetime(**opts: Any) -> Spec:
    """A naive ``datetime.datetime``.

    Options:
        after: Minimum acceptable datetime (included)
        before: Maximum acceptable datetime (included)
        between: ``[min, max]`` range of acceptable datetimes
        cast_from: "string" (ISO 8601 without offset) or "integer" (seconds
            since 1970-01-01 00:00:00)

    Raises:
        ValueError: If a bound is timezone-aware
    """
    return opaque_struct_type(
        dt.datetime,
        opts,
        converter=_convert,
        shortcut_rules={
            "after": single_option(after_naive_datetime),
            "before": single_option(before_naive_datetime),
            "between": spread_option(between_naive_datetimes),
        },
        base_checks=[timezone_naive()],
    )


def timezone_naive() -> Rule:
    return built_in(
        ("timezone_naive",),
        lambda value: not is_aware(value),
        "The naive datetime should not have a timezone.",
    )


def _check_bound(bound: dt.datetime) -> dt.datetime:
    if is_aware(bound):
        raise ValueError(f"Naive datetime bound must not have a timezone: {bound}")
    return bound


def after_naive_datetime(bound: dt.datetime) -> Rule:
    bound = _check_bound(bound)
    return built_in(
        ("after_naive_datetime", bound),
        lambda value: is_aware(value) or value >= bound,
        f"The naive datetime should be later than {bound}.",
    )


def before_naive_datetime(bound: dt.datetime) -> Rule:
    bound = _check_bound(bound)
    return built_in(
        ("before_naive_datetime", bound),
        lambda value: is_aware(value) or value <= bound,
        f"The naive datetime should be earlier than {bound}.",
    )


def between_naive_datetimes(start: dt.datetime, end: dt.datetime) -> Rule:
    start, end = _check_bound(start), _check_bound(end)
    return built_in(
        ("between_naive_datetimes", start, end),
        lambda value: is_aware(value) or start <= value <= end,
        f"The naive datetime should be comprised between {start} and {end}.",
    )


def _convert(value: Any, source_type: str) -> dt.datetime:
    if source_type == "string":
        converted = dt.datetime.fromisoformat(value)
        if is_aware(converted):
            raise ValueError(f"Unexpected UTC offset in {value!r}")
        return converted
    if source_type == "integer":
        return dt.datetime(1970, 1, 1) + dt.timedelta(seconds=value)
    raise ValueError(f"Cannot convert {source_type} to naive datetime")
