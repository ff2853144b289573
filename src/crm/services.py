"""Record store adapter: reads and writes of activities, sales and goals."""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Min
from django.utils import timezone

from crm.models import ActivityRecord, GoalProfile, SaleRecord

logger = logging.getLogger("vendas")

ACTIVITY_FIELDS = ("calls", "messages", "quotes_sent", "quotes_closed", "follow_ups")


class PeriodClosedError(ValueError):
    """The month holding this record has already been evaluated."""


class SaleAlreadyDecidedError(ValueError):
    """The sale was already approved or declined."""


def _period_is_closed(user_id, day: date) -> bool:
    from performance.models import PeriodEvaluation
    from performance.periods import period_key

    return PeriodEvaluation.objects.filter(
        user_id=user_id,
        period=period_key(day),
        is_final=True,
    ).exists()


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

@transaction.atomic
def submit_daily_activity(user, day: date, **counters) -> tuple[ActivityRecord, bool]:
    """Create or overwrite the activity counters of ``user`` for ``day``.

    Returns
    -------
    (ActivityRecord, created)

    Raises
    ------
    PeriodClosedError
        If the month of ``day`` has already been closed for this user.
    ValueError
        On unknown or negative counters.
    """
    unknown = set(counters) - set(ACTIVITY_FIELDS)
    if unknown:
        raise ValueError(f"Contadores desconhecidos: {', '.join(sorted(unknown))}")
    values = {name: int(counters.get(name) or 0) for name in ACTIVITY_FIELDS}
    if any(v < 0 for v in values.values()):
        raise ValueError("Os contadores de atividade nao podem ser negativos.")

    if _period_is_closed(user.pk, day):
        raise PeriodClosedError(
            f"O periodo {day:%m/%Y} ja foi fechado; a atividade nao pode ser alterada."
        )

    record, created = ActivityRecord.objects.update_or_create(
        user=user,
        date=day,
        defaults=values,
    )
    logger.info(
        "Activity %s for user=%s on %s (%s)",
        record.pk,
        user.pk,
        day,
        "created" if created else "overwritten",
    )
    return record, created


def create_sale(user, *, client_name: str = "", value=None, status=SaleRecord.Status.UNDER_REVIEW) -> SaleRecord:
    if status not in SaleRecord.OPEN_STATUSES:
        raise ValueError("Uma venda nova precisa estar em analise ou pendente.")
    sale = SaleRecord.objects.create(
        user=user,
        client_name=client_name,
        value=Decimal(str(value)) if value is not None else None,
        status=status,
    )
    logger.info("Sale %s submitted by user=%s", sale.pk, user.pk)
    return sale


@transaction.atomic
def decide_sale(sale: SaleRecord, *, approved: bool, value=None, note: str = "", actor=None) -> SaleRecord:
    """Approve or decline an open sale. A sale is decided exactly once.

    Raises
    ------
    SaleAlreadyDecidedError
        If the sale is already approved or declined.
    ValueError
        If an approval has no valid value.
    """
    sale = SaleRecord.objects.select_for_update().get(pk=sale.pk)
    if not sale.is_open:
        raise SaleAlreadyDecidedError(
            f"A venda ja foi {sale.get_status_display().lower()}."
        )

    if value is not None:
        sale.value = Decimal(str(value))
    if approved:
        if sale.value is None or sale.value < 0:
            raise ValueError("Informe um valor valido para aprovar a venda.")
        sale.status = SaleRecord.Status.APPROVED
    else:
        sale.status = SaleRecord.Status.DECLINED

    sale.decided_at = timezone.now()
    sale.decided_by = actor
    sale.decision_note = note
    sale.save(update_fields=["value", "status", "decided_at", "decided_by", "decision_note", "updated_at"])
    logger.info(
        "Sale %s %s by %s",
        sale.pk,
        sale.status,
        getattr(actor, "pk", None),
    )
    return sale


def set_monthly_goal(user, amount) -> GoalProfile:
    amount = Decimal(str(amount))
    if amount < 0:
        raise ValueError("A meta mensal nao pode ser negativa.")
    profile, _ = GoalProfile.objects.update_or_create(
        user=user,
        defaults={"monthly_revenue_goal": amount},
    )
    return profile


# ---------------------------------------------------------------------------
# Reads consumed by the performance engine. Ranges are [start, end).
# ---------------------------------------------------------------------------

def list_activities(user_id, range_start: date, range_end: date) -> list[dict]:
    return list(
        ActivityRecord.objects.filter(
            user_id=user_id,
            date__gte=range_start,
            date__lt=range_end,
        )
        .order_by("date")
        .values("date", *ACTIVITY_FIELDS)
    )


def list_sales(user_id, range_start: date, range_end: date) -> list[dict]:
    return list(
        SaleRecord.objects.filter(
            user_id=user_id,
            created_at__date__gte=range_start,
            created_at__date__lt=range_end,
        )
        .order_by("created_at")
        .values("created_at", "value", "status")
    )


def get_goal_profile(user_id) -> dict:
    goal = (
        GoalProfile.objects.filter(user_id=user_id)
        .values_list("monthly_revenue_goal", flat=True)
        .first()
    )
    if goal is None:
        goal = Decimal(str(settings.DEFAULT_MONTHLY_REVENUE_GOAL))
    return {"monthly_revenue_goal": goal}


def first_record_date(user_id) -> date | None:
    """Earliest activity or sale date of ``user_id``."""
    first_activity = ActivityRecord.objects.filter(user_id=user_id).aggregate(first=Min("date"))["first"]
    first_sale = SaleRecord.objects.filter(user_id=user_id).aggregate(first=Min("created_at"))["first"]
    if first_sale is not None:
        first_sale = timezone.localtime(first_sale).date()
    candidates = [d for d in (first_activity, first_sale) if d is not None]
    return min(candidates) if candidates else None
