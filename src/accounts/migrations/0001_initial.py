import uuid

import django.utils.timezone
from django.db import migrations, models

import accounts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "email",
                    models.EmailField(
                        error_messages={"unique": "Ja existe um usuario com este e-mail."},
                        max_length=254,
                        unique=True,
                        verbose_name="endereco de e-mail",
                    ),
                ),
                ("first_name", models.CharField(max_length=150, verbose_name="nome")),
                ("last_name", models.CharField(max_length=150, verbose_name="sobrenome")),
                (
                    "role",
                    models.CharField(
                        choices=[("ADMIN", "Administrador"), ("MANAGER", "Gestor"), ("SALES", "Vendedor")],
                        db_index=True,
                        default="SALES",
                        max_length=20,
                        verbose_name="perfil",
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="ativo")),
                ("is_staff", models.BooleanField(default=False, verbose_name="membro da equipe")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="data de cadastro")),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "usuario",
                "verbose_name_plural": "usuarios",
                "ordering": ["last_name", "first_name"],
            },
            managers=[
                ("objects", accounts.models.UserManager()),
            ],
        ),
    ]
