"""Schemas for the standard library date and time types.

Each helper builds an opaque struct schema: values must be instances of the
exact class, can be cast from strings (ISO 8601) or integers, and accept the
``after``, ``before`` and ``between`` shortcut options (bounds included).
``datetime_`` only accepts timezone-aware values and ``naive_datetime`` only
naive ones.
"""

from validata.adapters.dates import date
from validata.adapters.datetimes import datetime_
from validata.adapters.naive_datetimes import naive_datetime
from validata.adapters.times import time

__all__ = ["date", "datetime_", "naive_datetime", "time"]
