import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ActivityRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                ("date", models.DateField(verbose_name="data")),
                ("calls", models.PositiveIntegerField(default=0, verbose_name="ligacoes")),
                ("messages", models.PositiveIntegerField(default=0, verbose_name="mensagens")),
                ("quotes_sent", models.PositiveIntegerField(default=0, verbose_name="cotacoes enviadas")),
                ("quotes_closed", models.PositiveIntegerField(default=0, verbose_name="cotacoes fechadas")),
                ("follow_ups", models.PositiveIntegerField(default=0, verbose_name="follow-ups")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="activity_records",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="vendedor",
                    ),
                ),
            ],
            options={
                "verbose_name": "atividade diaria",
                "verbose_name_plural": "atividades diarias",
                "ordering": ["-date"],
            },
        ),
        migrations.AddConstraint(
            model_name="activityrecord",
            constraint=models.UniqueConstraint(fields=("user", "date"), name="uniq_activity_user_date"),
        ),
        migrations.CreateModel(
            name="SaleRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                ("client_name", models.CharField(blank=True, max_length=200, verbose_name="cliente")),
                (
                    "value",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=14,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="valor",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("em_analise", "Em analise"),
                            ("pendente", "Pendente"),
                            ("aprovado", "Aprovado"),
                            ("recusado", "Recusado"),
                        ],
                        db_index=True,
                        default="em_analise",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="criado em"),
                ),
                ("decided_at", models.DateTimeField(blank=True, null=True, verbose_name="decidido em")),
                ("decision_note", models.TextField(blank=True, verbose_name="observacao")),
                (
                    "decided_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sale_decisions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="decidido por",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sale_records",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="vendedor",
                    ),
                ),
            ],
            options={
                "verbose_name": "venda",
                "verbose_name_plural": "vendas",
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddIndex(
            model_name="salerecord",
            index=models.Index(fields=["user", "created_at"], name="crm_sale_user_created_idx"),
        ),
        migrations.CreateModel(
            name="GoalProfile",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "monthly_revenue_goal",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("75000"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="meta de faturamento mensal",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="goal_profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="vendedor",
                    ),
                ),
            ],
            options={
                "verbose_name": "meta do vendedor",
                "verbose_name_plural": "metas dos vendedores",
            },
        ),
    ]
