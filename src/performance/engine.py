"""Performance evolution engine for one seller.

Pipeline: record store -> period bucketer -> aggregator -> attainment ->
{tier resolver, risk flag escalator}. Only ``close_period`` writes: it
freezes a month into ``PeriodEvaluation`` and advances the streak.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from performance.aggregation import AggregateSnapshot, aggregate, aggregate_series
from performance.periods import (
    WEEK,
    bucket_periods,
    iter_months,
    month_window,
    next_period,
    parse_period,
    period_key,
    span_of,
)
from performance.scoring import (
    BRONZE_THRESHOLD,
    motivational_phrase,
    resolve_risk_flag,
    resolve_tier,
)
from performance.streaks import StreakTracker

logger = logging.getLogger(__name__)


class PerformanceEngine:
    """Compute evolution series, monthly scorecards and closed-month history.

    ``records`` is the record store adapter (``crm.services`` by default):
    anything exposing ``list_activities``, ``list_sales``,
    ``get_goal_profile`` and ``first_record_date``.
    """

    def __init__(self, user_id, records=None) -> None:
        if records is None:
            from crm import services as records
        self.user_id = user_id
        self.records = records
        self.streaks = StreakTracker(user_id)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def evolution(self, range_start: date, range_end: date, granularity: str = WEEK) -> dict:
        """Time-bucketed activity/revenue series plus the scorecard of the range.

        The range is widened to whole windows, so ``totals`` always equals
        the sum of ``windows``.
        """
        goal = self._goal()
        windows = bucket_periods(range_start, range_end, granularity)
        span = span_of(windows)

        if span is None:
            series, totals = [], AggregateSnapshot().with_goal(goal)
        else:
            activities = self.records.list_activities(self.user_id, span.start, span.end)
            sales = self.records.list_sales(self.user_id, span.start, span.end)
            series = aggregate_series(activities, sales, windows)
            totals = aggregate(activities, sales, span, goal=goal)

        consecutive_below = self.streaks.consecutive_below_for(period_key(range_end))
        return {
            "range_start": span.start if span else range_start,
            "range_end": span.last_day if span else range_end,
            "granularity": granularity,
            "windows": [
                {
                    "label": window.label,
                    "start": window.start,
                    "end": window.last_day,
                    **snapshot.counters(),
                }
                for window, snapshot in zip(windows, series)
            ],
            "totals": totals.counters(),
            "conversion_rate": totals.conversion_rate,
            "skipped_records": totals.skipped_records,
            **self._scorecard(totals.attainment, consecutive_below, goal),
        }

    def monthly_summary(self, period: str) -> dict:
        """Scorecard of one calendar month (open or closed)."""
        goal = self._goal()
        snapshot = self._month_snapshot(period, goal)
        consecutive_below = self.streaks.consecutive_below_for(period)
        return {
            "period": period,
            "totals": snapshot.counters(),
            "conversion_rate": snapshot.conversion_rate,
            "skipped_records": snapshot.skipped_records,
            **self._scorecard(snapshot.attainment, consecutive_below, goal),
        }

    def close_period(self, period: str):
        """Freeze ``period`` and every earlier unclosed month, oldest first.

        Returns the ``PeriodEvaluation`` of ``period``. Closing an already
        closed month returns the stored evaluation untouched.
        """
        from performance.models import PeriodEvaluation

        parse_period(period)  # validates the key
        for pending in self._pending_periods(period):
            self._close_one(pending)
        return PeriodEvaluation.objects.filter(user_id=self.user_id, period=period).first()

    def history(self, limit: int = 12):
        from performance.models import PeriodEvaluation

        return list(
            PeriodEvaluation.objects.filter(user_id=self.user_id).order_by("-period")[:limit]
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _goal(self) -> Decimal:
        profile = self.records.get_goal_profile(self.user_id) or {}
        return profile.get("monthly_revenue_goal") or Decimal("0")

    def _month_snapshot(self, period: str, goal) -> AggregateSnapshot:
        window = month_window(period)
        activities = self.records.list_activities(self.user_id, window.start, window.end)
        sales = self.records.list_sales(self.user_id, window.start, window.end)
        return aggregate(activities, sales, window, goal=goal)

    def _scorecard(self, attainment, consecutive_below: int, goal) -> dict:
        attainment = attainment or 0
        tier = resolve_tier(attainment)
        flag = resolve_risk_flag(attainment, consecutive_below)
        return {
            "goal": goal,
            "attainment": attainment,
            "tier": tier.as_dict() if tier else None,
            "phrase": motivational_phrase(attainment),
            "risk_flag": flag.value if flag else None,
            "risk_flag_label": flag.label if flag else None,
            "consecutive_below": consecutive_below,
        }

    def _pending_periods(self, period: str) -> list[str]:
        last = self.streaks.last_period()
        if last and last >= period:
            return []
        if last:
            first = next_period(last)
        else:
            first_day = self.records.first_record_date(self.user_id)
            first = period_key(first_day) if first_day else period
            first = min(first, period)
        return list(iter_months(first, period))

    def _close_one(self, period: str):
        from performance.models import PeriodEvaluation

        goal = self._goal()
        with transaction.atomic():
            streak = self.streaks.lock()
            if streak.last_period and period <= streak.last_period:
                logger.debug("Period %s already closed for user=%s", period, self.user_id)
                return PeriodEvaluation.objects.filter(user_id=self.user_id, period=period).first()

            snapshot = self._month_snapshot(period, goal)
            attainment = snapshot.attainment or 0
            consecutive_below = self.streaks.consecutive_below_for(period)
            tier = resolve_tier(attainment)
            flag = resolve_risk_flag(attainment, consecutive_below)
            counters = snapshot.counters()

            evaluation, _ = PeriodEvaluation.objects.update_or_create(
                user_id=self.user_id,
                period=period,
                defaults={
                    "approved_revenue": snapshot.approved_revenue,
                    "revenue_goal": goal,
                    "sales_count": snapshot.sales_count,
                    "submitted_sales": snapshot.submitted_sales,
                    "counters": {
                        name: value
                        for name, value in counters.items()
                        if name not in ("approved_revenue", "sales_count", "submitted_sales")
                    },
                    "attainment": attainment,
                    "tier": tier.tier.value if tier else "",
                    "risk_flag": flag.value if flag else "",
                    "consecutive_below_before": consecutive_below,
                    "below_threshold": attainment < BRONZE_THRESHOLD,
                    "is_final": True,
                    "computed_at": timezone.now(),
                },
            )
            self.streaks.record(period, attainment)

        logger.info(
            "Closed period %s for user=%s: %s%% tier=%s flag=%s",
            period,
            self.user_id,
            attainment,
            evaluation.tier or "-",
            evaluation.risk_flag or "-",
        )
        return evaluation
