import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PeriodEvaluation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                ("period", models.CharField(max_length=7, verbose_name="periodo (YYYY-MM)")),
                (
                    "approved_revenue",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14, verbose_name="faturamento aprovado"),
                ),
                (
                    "revenue_goal",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14, verbose_name="meta de faturamento"),
                ),
                ("sales_count", models.PositiveIntegerField(default=0, verbose_name="vendas aprovadas")),
                ("submitted_sales", models.PositiveIntegerField(default=0, verbose_name="vendas enviadas")),
                ("counters", models.JSONField(default=dict, verbose_name="contadores de atividade")),
                ("attainment", models.PositiveIntegerField(default=0, verbose_name="% da meta")),
                (
                    "tier",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("diamante", "Diamante"),
                            ("platina", "Platina"),
                            ("ouro", "Ouro"),
                            ("prata", "Prata"),
                            ("bronze", "Bronze"),
                        ],
                        max_length=20,
                        verbose_name="patente",
                    ),
                ),
                (
                    "risk_flag",
                    models.CharField(
                        blank=True,
                        choices=[("amarelo", "Atenção"), ("laranja", "Alerta"), ("vermelho", "Crítico")],
                        max_length=20,
                        verbose_name="flag de risco",
                    ),
                ),
                (
                    "consecutive_below_before",
                    models.PositiveSmallIntegerField(default=0, verbose_name="meses abaixo antes do periodo"),
                ),
                ("below_threshold", models.BooleanField(default=False, verbose_name="abaixo do bronze")),
                ("is_final", models.BooleanField(default=True, verbose_name="fechado")),
                ("computed_at", models.DateTimeField(blank=True, null=True, verbose_name="calculado em")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="period_evaluations",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="vendedor",
                    ),
                ),
            ],
            options={
                "verbose_name": "avaliacao mensal",
                "verbose_name_plural": "avaliacoes mensais",
                "ordering": ["-period"],
            },
        ),
        migrations.AddConstraint(
            model_name="periodevaluation",
            constraint=models.UniqueConstraint(fields=("user", "period"), name="uniq_period_evaluation_user"),
        ),
        migrations.CreateModel(
            name="UnderperformanceStreak",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                ("consecutive_below", models.PositiveSmallIntegerField(default=0, verbose_name="meses consecutivos abaixo")),
                ("last_period", models.CharField(blank=True, max_length=7, verbose_name="ultimo periodo fechado")),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="underperformance_streak",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="vendedor",
                    ),
                ),
            ],
            options={
                "verbose_name": "sequencia abaixo da meta",
                "verbose_name_plural": "sequencias abaixo da meta",
            },
        ),
    ]
