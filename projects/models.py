import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class Project(models.Model):
    """
    A fundraising project published by an entrepreneur.

    `raised_amount` only ever grows, and only through the funding ledger
    (see projects.ledger); everything else on the row is owner/admin data.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        SUBMITTED = "submitted", "Submitted"
        APPROVED = "approved", "Approved"
        FUNDING = "funding", "Funding"
        FUNDED = "funded", "Funded"
        CLOSED = "closed", "Closed"

    class ContractType(models.TextChoices):
        MUDARABAH = "mudarabah", "Mudarabah"
        MUSHARAKA = "musharaka", "Musharaka"
        CONVENTIONAL_LOAN = "conventional_loan", "Conventional loan"

    class RiskLevel(models.TextChoices):
        LOW = "low", "Low"
        MEDIUM = "medium", "Medium"
        HIGH = "high", "High"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="owned_projects",
    )
    title = models.CharField(max_length=200)
    description = models.CharField(max_length=500)
    long_description = models.TextField(blank=True, default="")

    target_amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    raised_amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    category = models.CharField(max_length=100)
    country = models.CharField(max_length=100)
    contract_type = models.CharField(max_length=32, choices=ContractType.choices)
    sharia_compliant = models.BooleanField(default=False)

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    deadline = models.DateTimeField()
    expected_return = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    risk_level = models.CharField(
        max_length=8,
        choices=RiskLevel.choices,
        default=RiskLevel.MEDIUM,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(target_amount__gt=0),
                name="project_target_positive",
            ),
            models.CheckConstraint(
                condition=Q(raised_amount__gte=0),
                name="project_raised_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(raised_amount__lte=F("target_amount")),
                name="project_raised_within_target",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="project_status_created_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def remaining_amount(self) -> Decimal:
        return self.target_amount - self.raised_amount

    @property
    def funding_percentage(self) -> Decimal:
        if not self.target_amount:
            return Decimal("0")
        return (self.raised_amount * 100 / self.target_amount).quantize(Decimal("0.01"))

    @property
    def is_accepting_investments(self) -> bool:
        return self.status == self.Status.FUNDING and timezone.now() < self.deadline


class FundingLedgerEntry(models.Model):
    """
    One row per investment whose amount has been added to its project.
    The unique investment link is what makes applying an amount idempotent.
    """

    SOURCE_PAYMENT = "payment"
    SOURCE_ADMIN = "admin"

    SOURCE_CHOICES = [
        (SOURCE_PAYMENT, "Payment confirmation"),
        (SOURCE_ADMIN, "Admin confirmation"),
    ]

    project = models.ForeignKey(
        Project,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )
    investment = models.OneToOneField(
        "investments.Investment",
        on_delete=models.PROTECT,
        related_name="ledger_entry",
    )
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    source = models.CharField(max_length=16, choices=SOURCE_CHOICES)
    applied_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        verbose_name_plural = "funding ledger entries"
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name="ledger_amount_positive"),
        ]

    def __str__(self):
        return f"{self.project_id} +{self.amount} ({self.investment_id})"
