"""Reduce raw activity and sale records into per-window totals.

Records may be mappings (``QuerySet.values()`` rows, decoded JSON) or
objects exposing the same attribute names. A record whose date cannot be
read, or whose numbers are not valid, is skipped and counted; it never
aborts the batch.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from decimal import Decimal

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from performance.periods import EvaluationWindow
from performance.scoring import compute_attainment, round_half_up

logger = logging.getLogger(__name__)

APPROVED_STATUS = "aprovado"

ACTIVITY_COUNTERS = ("calls", "messages", "quotes_sent", "quotes_closed", "follow_ups")
SNAPSHOT_COUNTERS = ACTIVITY_COUNTERS + ("sales_count", "approved_revenue", "submitted_sales")


@dataclass(frozen=True)
class AggregateSnapshot:
    calls: int = 0
    messages: int = 0
    quotes_sent: int = 0
    quotes_closed: int = 0
    follow_ups: int = 0
    sales_count: int = 0
    approved_revenue: Decimal = Decimal("0")
    submitted_sales: int = 0
    skipped_records: int = 0
    attainment: int | None = None

    def __add__(self, other):
        """Counter-wise sum. ``skipped_records`` is a per-batch count and
        ``attainment`` depends on a goal, so neither carries over."""
        if not isinstance(other, AggregateSnapshot):
            return NotImplemented
        summed = {
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(self)
            if f.name not in ("attainment", "skipped_records")
        }
        return AggregateSnapshot(**summed)

    def __radd__(self, other):
        # lets sum() start from its default 0
        if other == 0:
            return AggregateSnapshot() + self
        return NotImplemented

    @property
    def conversion_rate(self) -> int:
        """Closed quotes as a whole percentage of quotes sent."""
        if self.quotes_sent <= 0:
            return 0
        return round_half_up(Decimal(self.quotes_closed) * 100 / Decimal(self.quotes_sent))

    def with_goal(self, goal) -> AggregateSnapshot:
        return replace(self, attainment=compute_attainment(self.approved_revenue, goal))

    def counters(self) -> dict:
        return {name: getattr(self, name) for name in SNAPSHOT_COUNTERS}


@dataclass(frozen=True)
class _ActivityRow:
    day: date
    counts: tuple[int, ...]


@dataclass(frozen=True)
class _SaleRow:
    day: date
    approved: bool
    value: Decimal


def _field(record, name):
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _to_day(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_datetime(text)
            if parsed is None:
                return parse_date(text)
        except ValueError:
            return None
        return _to_day(parsed)
    return None


def _to_count(value) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError("boolean is not a counter")
    number = Decimal(str(value))
    if number != number.to_integral_value() or number < 0:
        raise ValueError(f"invalid counter {value!r}")
    return int(number)


def _to_money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    number = Decimal(str(value))
    if not number.is_finite() or number < 0:
        raise ValueError(f"invalid amount {value!r}")
    return number


def _parse_activities(activities: Iterable) -> tuple[list[_ActivityRow], int]:
    rows, skipped = [], 0
    for record in activities:
        day = _to_day(_field(record, "date"))
        try:
            counts = tuple(_to_count(_field(record, name)) for name in ACTIVITY_COUNTERS)
        except (ArithmeticError, TypeError, ValueError):
            counts = None
        if day is None or counts is None:
            skipped += 1
            logger.debug("Skipping malformed activity record: %r", record)
            continue
        rows.append(_ActivityRow(day, counts))
    return rows, skipped


def _parse_sales(sales: Iterable) -> tuple[list[_SaleRow], int]:
    rows, skipped = [], 0
    for record in sales:
        day = _to_day(_field(record, "created_at"))
        approved = str(_field(record, "status") or "") == APPROVED_STATUS
        try:
            value = _to_money(_field(record, "value")) if approved else Decimal("0")
        except (ArithmeticError, TypeError, ValueError):
            value = None
        if day is None or value is None:
            skipped += 1
            logger.debug("Skipping malformed sale record: %r", record)
            continue
        rows.append(_SaleRow(day, approved, value))
    return rows, skipped


def _reduce(
    activity_rows: list[_ActivityRow],
    sale_rows: list[_SaleRow],
    window: EvaluationWindow,
    skipped: int = 0,
) -> AggregateSnapshot:
    totals = [0] * len(ACTIVITY_COUNTERS)
    for row in activity_rows:
        if row.day in window:
            totals = [a + b for a, b in zip(totals, row.counts)]

    sales_count, submitted, revenue = 0, 0, Decimal("0")
    for row in sale_rows:
        if row.day not in window:
            continue
        submitted += 1
        if row.approved:
            sales_count += 1
            revenue += row.value

    return AggregateSnapshot(
        **dict(zip(ACTIVITY_COUNTERS, totals)),
        sales_count=sales_count,
        approved_revenue=revenue,
        submitted_sales=submitted,
        skipped_records=skipped,
    )


def _warn_skipped(skipped: int, window: EvaluationWindow) -> None:
    if skipped:
        logger.warning(
            "Aggregation %s..%s skipped %d malformed record(s)",
            window.start,
            window.end,
            skipped,
        )


def aggregate(activities: Iterable, sales: Iterable, window: EvaluationWindow, goal=None) -> AggregateSnapshot:
    """Totals of the records falling inside ``window``.

    ``skipped_records`` counts the malformed records of the whole batch.
    When ``goal`` is given the snapshot also carries the attainment.
    """
    activity_rows, skipped_activities = _parse_activities(activities)
    sale_rows, skipped_sales = _parse_sales(sales)
    skipped = skipped_activities + skipped_sales
    _warn_skipped(skipped, window)

    snapshot = _reduce(activity_rows, sale_rows, window, skipped)
    if goal is not None:
        snapshot = snapshot.with_goal(goal)
    return snapshot


def aggregate_series(
    activities: Iterable,
    sales: Iterable,
    windows: list[EvaluationWindow],
    goal=None,
) -> list[AggregateSnapshot]:
    """One snapshot per window, parsing the records only once.

    Malformed records belong to no window, so every snapshot of the series
    reports ``skipped_records == 0``; use :func:`aggregate` over the span
    for the batch count.
    """
    activity_rows, _ = _parse_activities(activities)
    sale_rows, _ = _parse_sales(sales)
    series = []
    for window in windows:
        snapshot = _reduce(activity_rows, sale_rows, window)
        if goal is not None:
            snapshot = snapshot.with_goal(goal)
        series.append(snapshot)
    return series
