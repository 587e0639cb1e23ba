# users/state_machine.py
"""
KYC review:

pending → approved | rejected
approved ⇄ rejected (an admin may revisit a decision)

Repeating the current decision is rejected like any other missing pair.
"""
from core.state_machine import TransitionTable

from .models import User

S = User.ReviewStatus

KYC_TRANSITIONS = TransitionTable(
    "kyc",
    {
        (S.PENDING, "approve"): S.APPROVED,
        (S.PENDING, "reject"): S.REJECTED,
        (S.REJECTED, "approve"): S.APPROVED,
        (S.APPROVED, "reject"): S.REJECTED,
    },
    field="kyc_status",
)
