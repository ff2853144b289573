"""Celery tasks for the performance module."""
from __future__ import annotations

import logging

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def close_seller_period(self, *, user_id: str, period: str):
    """Freeze ``period`` (and earlier unclosed months) for a single seller."""
    try:
        from performance.engine import PerformanceEngine

        evaluation = PerformanceEngine(user_id=user_id).close_period(period)
        logger.info(
            "Closed performance period for user=%s period=%s (%s%%)",
            user_id,
            period,
            evaluation.attainment if evaluation else "-",
        )
        return str(evaluation.pk) if evaluation else None
    except Exception as exc:
        logger.exception("close_seller_period failed: %s", exc)
        raise self.retry(exc=exc)


@shared_task
def close_month_evaluations(today=None):
    """
    Scheduled daily (Celery Beat). Only runs logic on the 1st of each month.
    Queue the close of the previous month for every active seller.
    """
    from accounts.models import User
    from performance.periods import period_key, previous_period

    today = today or timezone.localdate()
    if today.day != 1:
        logger.debug("close_month_evaluations: skipping (today is day %d)", today.day)
        return 0

    period = previous_period(period_key(today))
    seller_ids = User.objects.filter(
        role=User.Role.SALES,
        is_active=True,
    ).values_list("id", flat=True)

    queued = 0
    for user_id in seller_ids:
        try:
            close_seller_period.delay(user_id=str(user_id), period=period)
            queued += 1
        except Exception as exc:
            logger.warning("Could not queue period close user=%s: %s", user_id, exc)

    logger.info("Queued period close for %d sellers (period=%s)", queued, period)
    return queued
