import json
import uuid

from django.db import models
from django.db.models import Q

from core.exceptions import InvalidState


class Contract(models.Model):
    """
    The agreement generated for one confirmed investment.

    `terms_json` is a snapshot taken at generation time and never changes
    afterwards. The contract only counts as signed once the investor, the
    entrepreneur and an admin have each signed.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        ACTIVE = "active", "Active"
        SIGNED = "signed", "Signed"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    SIGNATURE_FIELDS = {
        "investor": "investor_signed_at",
        "entrepreneur": "entrepreneur_signed_at",
        "admin": "admin_signed_at",
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    investment = models.OneToOneField(
        "investments.Investment",
        on_delete=models.PROTECT,
        related_name="contract",
    )
    contract_type = models.CharField(max_length=32)
    terms_json = models.TextField()
    contract_pdf_url = models.CharField(max_length=500, blank=True, default="")
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )

    investor_signed_at = models.DateTimeField(null=True, blank=True)
    entrepreneur_signed_at = models.DateTimeField(null=True, blank=True)
    admin_signed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    ~Q(status__in=["signed", "completed"])
                    | Q(
                        investor_signed_at__isnull=False,
                        entrepreneur_signed_at__isnull=False,
                        admin_signed_at__isnull=False,
                    )
                ),
                name="contract_signed_has_all_signatures",
            ),
        ]

    def __str__(self):
        return f"Contract {self.pk} ({self.status})"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_terms_json = instance.__dict__.get("terms_json")
        return instance

    def save(self, *args, **kwargs):
        loaded = getattr(self, "_loaded_terms_json", None)
        if loaded is not None and self.terms_json != loaded:
            raise InvalidState("Contract terms cannot be changed after generation")
        super().save(*args, **kwargs)
        self._loaded_terms_json = self.terms_json

    @property
    def terms(self) -> dict:
        return json.loads(self.terms_json) if self.terms_json else {}

    @property
    def is_fully_signed(self) -> bool:
        return all(getattr(self, field) is not None for field in self.SIGNATURE_FIELDS.values())

    def signed_at(self, signer):
        return getattr(self, self.SIGNATURE_FIELDS[signer])
