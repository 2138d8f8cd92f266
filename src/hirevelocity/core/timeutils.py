"""Timestamp normalization helpers."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Callable

import pendulum
from pendulum.parsing.exceptions import ParserError

SECONDS_PER_DAY = 86_400
SECONDS_PER_HOUR = 3_600

NowProvider = Callable[[], pendulum.DateTime]


def to_datetime(value: Any) -> pendulum.DateTime | None:
    """Coerce ATS timestamps to timezone-aware pendulum datetimes.

    Naive values are taken as UTC. Unparseable strings yield ``None`` so the
    owning record drops out of the analysis instead of failing it.
    """
    if value is None or value == "":
        return None
    if isinstance(value, pendulum.DateTime):
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value)
    if isinstance(value, date):
        return pendulum.datetime(value.year, value.month, value.day)
    try:
        parsed = pendulum.parse(str(value))
    except (ValueError, ParserError):
        return None
    if isinstance(parsed, pendulum.DateTime):
        return parsed
    if isinstance(parsed, pendulum.Date):
        return pendulum.datetime(parsed.year, parsed.month, parsed.day)
    return None


def days_between(start: Any, end: Any) -> int | None:
    """Whole days from ``start`` to ``end``, truncated toward zero."""
    start_dt = to_datetime(start)
    end_dt = to_datetime(end)
    if start_dt is None or end_dt is None:
        return None
    return math.trunc((end_dt.timestamp() - start_dt.timestamp()) / SECONDS_PER_DAY)


def hours_between(start: Any, end: Any) -> float | None:
    start_dt = to_datetime(start)
    end_dt = to_datetime(end)
    if start_dt is None or end_dt is None:
        return None
    return (end_dt.timestamp() - start_dt.timestamp()) / SECONDS_PER_HOUR


def upper_median(values: list[float]) -> float | None:
    """Element at index ``n // 2`` of the sorted values, as the dashboard reports it."""
    if not values:
        return None
    ordered = sorted(values)
    return ordered[len(ordered) // 2]
