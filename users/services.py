# users/services.py
"""
KYC review by platform admins.

Documents are checked outside the platform; only the decision is recorded
here, through KYC_TRANSITIONS so every decision lands in the activity log.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from core.exceptions import NotFound
from core.policies import MarketplacePolicy, enforce

from .models import User
from .state_machine import KYC_TRANSITIONS

logger = logging.getLogger("predika.kyc")


def get_user(user_id, for_update=False):
    qs = User.objects.all()
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=user_id)
    except (User.DoesNotExist, ValueError, ValidationError):
        raise NotFound("User not found")


def kyc_queue(user):
    """Investors and entrepreneurs still waiting for a decision, oldest first."""
    enforce(MarketplacePolicy.can_review_kyc(user))
    return (
        User.objects.filter(kyc_status=User.ReviewStatus.PENDING, is_superuser=False)
        .exclude(role=User.Role.ADMIN)
        .order_by("date_joined", "id")
    )


def _decide(reviewer, user_id, action, reason=""):
    with transaction.atomic():
        subject = get_user(user_id, for_update=True)
        enforce(MarketplacePolicy.can_review_kyc(reviewer, subject))

        subject.kyc_rejection_reason = reason
        subject.kyc_reviewed_at = timezone.now()
        KYC_TRANSITIONS.apply(
            subject,
            action,
            actor=reviewer,
            extra_fields=["kyc_rejection_reason", "kyc_reviewed_at"],
            metadata={"reason": reason} if reason else None,
        )

    logger.info("KYC %s: user=%s, reviewer=%s", action, subject.pk, reviewer.pk)
    return subject


def approve_kyc(reviewer, user_id):
    return _decide(reviewer, user_id, "approve")


def reject_kyc(reviewer, user_id, reason=""):
    return _decide(reviewer, user_id, "reject", reason=reason)
