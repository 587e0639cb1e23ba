from django.conf import settings
from django.db import models


class DomainActivity(models.Model):
    """
    Append-only log of business-significant actions in the marketplace.
    Every accepted state transition lands here with its before/after status.
    """
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )

    # What happened? (e.g., 'investment.payment_initiated')
    verb = models.CharField(max_length=64, db_index=True)

    # To what? Marketplace entities are keyed by UUID, so a plain label + id
    # is enough and keeps the log independent of content types.
    target_type = models.CharField(max_length=64)
    target_id = models.CharField(max_length=64, db_index=True)

    # Snapshot of context at the time of logging (statuses, amounts, ...)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["target_type", "target_id"], name="activity_target_idx"),
        ]

    def __str__(self):
        return f"{self.verb} {self.target_type}:{self.target_id}"
