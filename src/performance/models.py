"""Persisted evaluation history: closed months and underperformance streaks."""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel
from performance.scoring import RiskFlag, Tier


class PeriodEvaluation(TimeStampedModel):
    """Frozen result of one closed month for one seller."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="period_evaluations",
        verbose_name="vendedor",
    )
    period = models.CharField("periodo (YYYY-MM)", max_length=7)

    approved_revenue = models.DecimalField(
        "faturamento aprovado",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
    )
    revenue_goal = models.DecimalField(
        "meta de faturamento",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
    )
    sales_count = models.PositiveIntegerField("vendas aprovadas", default=0)
    submitted_sales = models.PositiveIntegerField("vendas enviadas", default=0)
    counters = models.JSONField("contadores de atividade", default=dict)

    attainment = models.PositiveIntegerField("% da meta", default=0)
    tier = models.CharField("patente", max_length=20, choices=Tier.choices, blank=True)
    risk_flag = models.CharField("flag de risco", max_length=20, choices=RiskFlag.choices, blank=True)
    consecutive_below_before = models.PositiveSmallIntegerField(
        "meses abaixo antes do periodo",
        default=0,
    )
    below_threshold = models.BooleanField("abaixo do bronze", default=False)

    is_final = models.BooleanField("fechado", default=True)
    computed_at = models.DateTimeField("calculado em", null=True, blank=True)

    class Meta:
        verbose_name = "avaliacao mensal"
        verbose_name_plural = "avaliacoes mensais"
        ordering = ["-period"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "period"],
                name="uniq_period_evaluation_user",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user} — {self.period} ({self.attainment}%)"


class UnderperformanceStreak(TimeStampedModel):
    """Consecutive closed months below the Bronze threshold, per seller."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="underperformance_streak",
        verbose_name="vendedor",
    )
    consecutive_below = models.PositiveSmallIntegerField("meses consecutivos abaixo", default=0)
    last_period = models.CharField("ultimo periodo fechado", max_length=7, blank=True)

    class Meta:
        verbose_name = "sequencia abaixo da meta"
        verbose_name_plural = "sequencias abaixo da meta"

    def __str__(self) -> str:
        return f"{self.user} — {self.consecutive_below} ({self.last_period or '-'})"
