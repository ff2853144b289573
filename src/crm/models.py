"""Raw sales-force records: daily activity, sales and revenue goals."""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class ActivityRecord(TimeStampedModel):
    """Daily activity counters for one seller.

    At most one record per (user, date): a new submission for the same day
    overwrites the counters (see ``crm.services.submit_daily_activity``).
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="activity_records",
        verbose_name="vendedor",
    )
    date = models.DateField("data")
    calls = models.PositiveIntegerField("ligacoes", default=0)
    messages = models.PositiveIntegerField("mensagens", default=0)
    quotes_sent = models.PositiveIntegerField("cotacoes enviadas", default=0)
    quotes_closed = models.PositiveIntegerField("cotacoes fechadas", default=0)
    follow_ups = models.PositiveIntegerField("follow-ups", default=0)

    class Meta:
        verbose_name = "atividade diaria"
        verbose_name_plural = "atividades diarias"
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "date"],
                name="uniq_activity_user_date",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user} — {self.date:%d/%m/%Y}"


class SaleRecord(TimeStampedModel):
    """A sale submitted by a seller, approved or declined exactly once."""

    class Status(models.TextChoices):
        UNDER_REVIEW = "em_analise", "Em analise"
        PENDING = "pendente", "Pendente"
        APPROVED = "aprovado", "Aprovado"
        DECLINED = "recusado", "Recusado"

    OPEN_STATUSES = (Status.UNDER_REVIEW, Status.PENDING)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sale_records",
        verbose_name="vendedor",
    )
    client_name = models.CharField("cliente", max_length=200, blank=True)
    value = models.DecimalField(
        "valor",
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.UNDER_REVIEW,
        db_index=True,
    )
    # Overrides the auto_now_add stamp: the sale date is business data.
    created_at = models.DateTimeField("criado em", default=timezone.now, db_index=True)
    decided_at = models.DateTimeField("decidido em", null=True, blank=True)
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sale_decisions",
        verbose_name="decidido por",
    )
    decision_note = models.TextField("observacao", blank=True)

    class Meta:
        verbose_name = "venda"
        verbose_name_plural = "vendas"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="crm_sale_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.client_name or 'Venda'} ({self.get_status_display()})"

    @property
    def is_open(self) -> bool:
        return self.status in self.OPEN_STATUSES


class GoalProfile(TimeStampedModel):
    """Monthly revenue goal of one seller, set by administrators."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="goal_profile",
        verbose_name="vendedor",
    )
    monthly_revenue_goal = models.DecimalField(
        "meta de faturamento mensal",
        max_digits=14,
        decimal_places=2,
        default=Decimal("75000"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        verbose_name = "meta do vendedor"
        verbose_name_plural = "metas dos vendedores"

    def __str__(self) -> str:
        return f"{self.user} — {self.monthly_revenue_goal}"
