import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("investments", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Contract",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("contract_type", models.CharField(max_length=32)),
                ("terms_json", models.TextField()),
                ("contract_pdf_url", models.CharField(blank=True, default="", max_length=500)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("active", "Active"),
                            ("signed", "Signed"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=16,
                    ),
                ),
                ("investor_signed_at", models.DateTimeField(blank=True, null=True)),
                ("entrepreneur_signed_at", models.DateTimeField(blank=True, null=True)),
                ("admin_signed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "investment",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contract",
                        to="investments.investment",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            ~models.Q(status__in=["signed", "completed"])
                            | models.Q(
                                investor_signed_at__isnull=False,
                                entrepreneur_signed_at__isnull=False,
                                admin_signed_at__isnull=False,
                            )
                        ),
                        name="contract_signed_has_all_signatures",
                    ),
                ],
            },
        ),
    ]
