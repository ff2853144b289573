"""Evaluation windows: Monday-anchored weeks or calendar months.

Windows are half-open on calendar dates, ``[start, end)``: a record dated
exactly on ``end`` belongs to the next window. Nothing here reads the clock;
every reference date is passed in by the caller.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from django.utils import timezone

WEEK = "week"
MONTH = "month"
GRANULARITIES = (WEEK, MONTH)

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class EvaluationWindow:
    start: date
    end: date  # exclusive
    granularity: str = WEEK

    def __contains__(self, day: date) -> bool:
        return self.start <= day < self.end

    @property
    def last_day(self) -> date:
        return self.end - timedelta(days=1)

    @property
    def label(self) -> str:
        if self.granularity == MONTH:
            return f"{self.start:%m/%Y}"
        return f"{self.start:%d/%m}"

    @property
    def period(self) -> str:
        return period_key(self.start)


def _as_date(value) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


def _check_granularity(granularity: str) -> None:
    if granularity not in GRANULARITIES:
        raise ValueError(f"Granularidade desconhecida: {granularity!r}")


def week_start(day: date) -> date:
    """Monday on or before ``day``."""
    day = _as_date(day)
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    return _as_date(day).replace(day=1)


def _next_month_start(day: date) -> date:
    return (month_start(day) + timedelta(days=32)).replace(day=1)


def window_for(day: date, granularity: str = WEEK) -> EvaluationWindow:
    """The natural period containing ``day``."""
    _check_granularity(granularity)
    if granularity == WEEK:
        start = week_start(day)
        return EvaluationWindow(start, start + timedelta(days=7), WEEK)
    start = month_start(day)
    return EvaluationWindow(start, _next_month_start(start), MONTH)


def bucket_periods(range_start: date, range_end: date, granularity: str = WEEK) -> list[EvaluationWindow]:
    """Partition ``[range_start, range_end]`` into contiguous windows.

    The first window starts at the beginning of the period holding
    ``range_start`` and the last one ends after the period holding
    ``range_end``. An inverted range gives an empty list.
    """
    _check_granularity(granularity)
    range_start, range_end = _as_date(range_start), _as_date(range_end)
    if range_start > range_end:
        return []

    windows = []
    window = window_for(range_start, granularity)
    while window.start <= range_end:
        windows.append(window)
        window = window_for(window.end, granularity)
    return windows


def span_of(windows: list[EvaluationWindow]) -> EvaluationWindow | None:
    """Single window covering a contiguous run of windows."""
    if not windows:
        return None
    return EvaluationWindow(windows[0].start, windows[-1].end, windows[0].granularity)


# ------------------------------------------------------------------
# "YYYY-MM" period keys
# ------------------------------------------------------------------

def period_key(day: date) -> str:
    day = _as_date(day)
    return f"{day.year:04d}-{day.month:02d}"


def parse_period(period: str) -> date:
    """First day of a ``YYYY-MM`` period."""
    match = _PERIOD_RE.match(period or "")
    # neighbouring months must stay inside date.min..date.max
    if not match or not 1 < int(match.group(1)) < 9999 or not 1 <= int(match.group(2)) <= 12:
        raise ValueError(f"Periodo invalido: {period!r} (formato esperado YYYY-MM)")
    return date(int(match.group(1)), int(match.group(2)), 1)


def month_window(period: str) -> EvaluationWindow:
    return window_for(parse_period(period), MONTH)


def previous_period(period: str) -> str:
    return period_key(parse_period(period) - timedelta(days=1))


def next_period(period: str) -> str:
    return period_key(_next_month_start(parse_period(period)))


def iter_months(first_period: str, last_period: str) -> Iterator[str]:
    """Every period from ``first_period`` to ``last_period``, both included."""
    current = parse_period(first_period)
    last = parse_period(last_period)
    while current <= last:
        yield period_key(current)
        current = _next_month_start(current)


def lookback_range(today: date, days: int) -> tuple[date, date]:
    """The dashboard's "last N days" range ending on ``today``."""
    today = _as_date(today)
    return today - timedelta(days=days), today
