"""Tracking of consecutive closed months below the Bronze threshold.

The counter is advanced once per closed month, in month order, by
``PerformanceEngine.close_period``. It only describes the months *before*
the next unclosed one; asking about any other month falls back to the
value frozen on that month's ``PeriodEvaluation``.
"""
from __future__ import annotations

import logging

from django.db import transaction

from performance.periods import next_period, previous_period
from performance.scoring import BRONZE_THRESHOLD

logger = logging.getLogger(__name__)


def next_streak(current: int, attainment: int) -> int:
    """Streak after closing a month with ``attainment``."""
    if attainment < BRONZE_THRESHOLD:
        return max(current, 0) + 1
    return 0


class StreakTracker:
    """Read and advance the underperformance streak of one seller."""

    def __init__(self, user_id) -> None:
        self.user_id = user_id

    def current(self):
        from performance.models import UnderperformanceStreak

        return UnderperformanceStreak.objects.filter(user_id=self.user_id).first()

    def last_period(self) -> str:
        streak = self.current()
        return streak.last_period if streak else ""

    def consecutive_below_for(self, period: str) -> int:
        """Closed sub-Bronze months immediately preceding ``period``."""
        from performance.models import PeriodEvaluation

        streak = self.current()
        if streak and streak.last_period == previous_period(period):
            return streak.consecutive_below

        frozen = (
            PeriodEvaluation.objects.filter(user_id=self.user_id, period=period)
            .values_list("consecutive_below_before", flat=True)
            .first()
        )
        if frozen is not None:
            return frozen

        # Months between the last close and ``period`` are still open.
        return 0

    def lock(self):
        """Row-lock the seller's streak for the current transaction."""
        from performance.models import UnderperformanceStreak

        streak, _ = UnderperformanceStreak.objects.select_for_update().get_or_create(
            user_id=self.user_id,
        )
        return streak

    def record(self, period: str, attainment: int):
        """Apply one closed month. Re-recording a closed month is a no-op."""
        with transaction.atomic():
            streak = self.lock()
            if streak.last_period and period <= streak.last_period:
                logger.debug(
                    "Streak for user=%s already covers %s (last=%s)",
                    self.user_id,
                    period,
                    streak.last_period,
                )
                return streak

            current = streak.consecutive_below
            if streak.last_period and period != next_period(streak.last_period):
                logger.warning(
                    "Streak gap for user=%s: last=%s, closing %s; restarting count",
                    self.user_id,
                    streak.last_period,
                    period,
                )
                current = 0

            streak.consecutive_below = next_streak(current, attainment)
            streak.last_period = period
            streak.save(update_fields=["consecutive_below", "last_period", "updated_at"])
            return streak
