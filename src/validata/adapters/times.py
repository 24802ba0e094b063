"""Schema for ``datetime.time`` values."""

import datetime as dt
from typing import Any

from validata.helpers import opaque_struct_type, single_option, spread_option
from validata.rule import Rule, built_in
from validata.spec import Spec


def time(**opts: Any) -> Spec:
    """A ``datetime.time``.

    Options:
        after: Minimum acceptable time (included)
        before: Maximum acceptable time (included)
        between: ``[start, end]`` range; when ``start`` is not before
            ``end`` the range wraps around midnight
        cast_from: "string" (ISO 8601) or "integer" (seconds after midnight)
    """
    return opaque_struct_type(
        dt.time,
        opts,
        converter=_convert,
        shortcut_rules={
            "after": single_option(after_time),
            "before": single_option(before_time),
            "between": spread_option(between_times),
        },
    )


def after_time(bound: dt.time) -> Rule:
    return built_in(
        ("after_time", bound),
        lambda value: value >= bound,
        f"The time should be later than {bound}.",
    )


def before_time(bound: dt.time) -> Rule:
    return built_in(
        ("before_time", bound),
        lambda value: value <= bound,
        f"The time should be earlier than {bound}.",
    )


def between_times(start: dt.time, end: dt.time) -> Rule:
    def predicate(value: dt.time) -> bool:
        if start < end:
            return start <= value <= end
        return value >= start or value <= end

    return built_in(
        ("between_times", start, end),
        predicate,
        f"The time should be comprised between {start} and {end}.",
    )


def _seconds_to_time(seconds: int) -> dt.time:
    if not 0 <= seconds < 86400:
        raise ValueError(f"{seconds} is not within a day")
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return dt.time(hours, minutes, secs)


def _convert(value: Any, source_type: str) -> dt.time:
    if source_type == "string":
        return dt.time.fromisoformat(value)
    if source_type == "integer":
        return _seconds_to_time(value)
    raise ValueError(f"Cannot convert {source_type} to time")
