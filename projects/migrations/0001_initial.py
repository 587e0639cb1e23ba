import uuid
from decimal import Decimal

import django.core.validators
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
            name="Project",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("description", models.CharField(max_length=500)),
                ("long_description", models.TextField(blank=True, default="")),
                (
                    "target_amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=15,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("raised_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("category", models.CharField(max_length=100)),
                ("country", models.CharField(max_length=100)),
                (
                    "contract_type",
                    models.CharField(
                        choices=[
                            ("mudarabah", "Mudarabah"),
                            ("musharaka", "Musharaka"),
                            ("conventional_loan", "Conventional loan"),
                        ],
                        max_length=32,
                    ),
                ),
                ("sharia_compliant", models.BooleanField(default=False)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("submitted", "Submitted"),
                            ("approved", "Approved"),
                            ("funding", "Funding"),
                            ("funded", "Funded"),
                            ("closed", "Closed"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=16,
                    ),
                ),
                ("deadline", models.DateTimeField()),
                (
                    "expected_return",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                (
                    "risk_level",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High")],
                        default="medium",
                        max_length=8,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="owned_projects",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status", "created_at"], name="project_status_created_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("target_amount__gt", 0)), name="project_target_positive"),
                    models.CheckConstraint(condition=models.Q(("raised_amount__gte", 0)), name="project_raised_non_negative"),
                    models.CheckConstraint(
                        condition=models.Q(("raised_amount__lte", models.F("target_amount"))),
                        name="project_raised_within_target",
                    ),
                ],
            },
        ),
    ]
