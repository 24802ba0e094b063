"""Schema for ``datetime.date`` values."""

import datetime as dt
from typing import Any

from validata.helpers import opaque_struct_type, single_option, spread_option
from validata.rule import Rule, built_in
from validata.spec import Spec


def date(**opts: Any) -> Spec:
    """A ``datetime.date`` (a datetime is rejected).

    Options:
        after: Minimum acceptable date (included)
        before: Maximum acceptable date (included)
        between: ``[min, max]`` range of acceptable dates
        cast_from: "string" (ISO 8601) or "integer" (proleptic Gregorian
            ordinal, as ``date.fromordinal``)

    Examples:
        validate("2015-01-23", date(cast_from="string"))
        # []
    """
    return opaque_struct_type(
        dt.date,
        opts,
        converter=_convert,
        shortcut_rules={
            "after": single_option(after_date),
            "before": single_option(before_date),
            "between": spread_option(between_dates),
        },
    )


def after_date(bound: dt.date) -> Rule:
    return built_in(
        ("after_date", bound),
        lambda value: value >= bound,
        f"The date should be later than {bound}.",
    )


def before_date(bound: dt.date) -> Rule:
    return built_in(
        ("before_date", bound),
        lambda value: value <= bound,
        f"The date should be earlier than {bound}.",
    )


def between_dates(start: dt.date, end: dt.date) -> Rule:
    return built_in(
        ("between_dates", start, end),
        lambda value: start <= value <= end,
        f"The date should be comprised between {start} and {end}.",
    )


def _convert(value: Any, source_type: str) -> dt.date:
    if source_type == "string":
        return dt.date.fromisoformat(value)
    if source_type == "integer":
        return dt.date.fromordinal(value)
    raise ValueError(f"Cannot convert {source_type} to date")
