import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


class Investment(models.Model):
    """
    An investor's commitment to a project.

    The amount is fixed at creation. `payment_confirmed` means a payment
    reference has been issued; whether the money has reached the project is
    recorded separately by the project's funding ledger entry.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PAYMENT_CONFIRMED = "payment_confirmed", "Payment confirmed"
        CONTRACT_SIGNED = "contract_signed", "Contract signed"
        COMPLETED = "completed", "Completed"

    class PaymentMethod(models.TextChoices):
        MOBILE_MONEY = "mobile_money", "Mobile money"
        BANK_TRANSFER = "bank_transfer", "Bank transfer"
        CARD = "card", "Card"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.PROTECT,
        related_name="investments",
    )
    investor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="investments",
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    status = models.CharField(
        max_length=32,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    payment_reference = models.CharField(max_length=64, unique=True, null=True, blank=True)
    payment_method = models.CharField(
        max_length=32,
        choices=PaymentMethod.choices,
        default=PaymentMethod.MOBILE_MONEY,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name="investment_amount_positive"),
        ]
        indexes = [
            models.Index(fields=["project", "status"], name="investment_project_status_idx"),
            models.Index(fields=["investor", "created_at"], name="investment_investor_idx"),
        ]

    def __str__(self):
        return f"{self.investor} → {self.project} ({self.amount})"

    @property
    def is_funds_applied(self) -> bool:
        return hasattr(self, "ledger_entry")
