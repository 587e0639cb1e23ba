# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Role(models.TextChoices):
        INVESTOR = "investor", "Investor"
        ENTREPRENEUR = "entrepreneur", "Entrepreneur"
        ADMIN = "admin", "Admin"

    class ReviewStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    email = models.EmailField(unique=True)

    role = models.CharField(
        max_length=30,
        choices=Role.choices,
        default=Role.INVESTOR,
    )

    phone = models.CharField(max_length=20, blank=True, null=True)

    # Set by the admin KYC review; AML screening runs out of band
    kyc_status = models.CharField(
        max_length=16,
        choices=ReviewStatus.choices,
        default=ReviewStatus.PENDING,
    )
    aml_status = models.CharField(
        max_length=16,
        choices=ReviewStatus.choices,
        default=ReviewStatus.PENDING,
    )

    kyc_rejection_reason = models.TextField(blank=True, default="")
    kyc_reviewed_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return self.username
