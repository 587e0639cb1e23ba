# core/policies.py
"""
Centralized marketplace policy layer.

Every mutating operation consults MarketplacePolicy instead of inline role
checks. Capability methods return a Verdict; services call `enforce()` to
turn a refusal into Unauthenticated (no identity) or Forbidden (identity
present, insufficient rights).
"""
from enum import Enum
from typing import NamedTuple

from .exceptions import Forbidden, Unauthenticated

ROLE_INVESTOR = "investor"
ROLE_ENTREPRENEUR = "entrepreneur"
ROLE_ADMIN = "admin"

SIGNER_INVESTOR = "investor"
SIGNER_ENTREPRENEUR = "entrepreneur"
SIGNER_ADMIN = "admin"
SIGNER_ROLES = (SIGNER_INVESTOR, SIGNER_ENTREPRENEUR, SIGNER_ADMIN)


class Decision(str, Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


class Verdict(NamedTuple):
    decision: Decision
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOWED


ALLOW = Verdict(Decision.ALLOWED)
UNAUTHENTICATED = Verdict(Decision.UNAUTHENTICATED, "Authentication required")


def deny(reason: str) -> Verdict:
    return Verdict(Decision.FORBIDDEN, reason)


def enforce(verdict: Verdict) -> None:
    if verdict.decision is Decision.UNAUTHENTICATED:
        raise Unauthenticated(verdict.reason)
    if verdict.decision is Decision.FORBIDDEN:
        raise Forbidden(verdict.reason)


def _authenticated(user) -> bool:
    return bool(user) and getattr(user, "is_authenticated", False)


class MarketplacePolicy:
    """
    Stateless predicates plus one capability check per action.
    """

    # ─────────────────────────────────────────────────────────────
    # Predicates
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def is_admin(user) -> bool:
        if not _authenticated(user):
            return False
        return user.is_superuser or user.role == ROLE_ADMIN

    @staticmethod
    def is_entrepreneur(user) -> bool:
        return _authenticated(user) and user.role == ROLE_ENTREPRENEUR

    @staticmethod
    def is_owner(user, project) -> bool:
        if not _authenticated(user) or project is None:
            return False
        return project.owner_id == user.id

    @staticmethod
    def is_investor(user, investment) -> bool:
        if not _authenticated(user) or investment is None:
            return False
        return investment.investor_id == user.id

    @staticmethod
    def is_party(user, investment) -> bool:
        """Investor, project owner or admin of an investment."""
        return (
            MarketplacePolicy.is_investor(user, investment)
            or MarketplacePolicy.is_owner(user, investment.project)
            or MarketplacePolicy.is_admin(user)
        )

    # ─────────────────────────────────────────────────────────────
    # KYC review
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_review_kyc(user, subject=None) -> Verdict:
        """Read the pending queue (no subject) or decide on `subject`."""
        if not _authenticated(user):
            return UNAUTHENTICATED
        if not MarketplacePolicy.is_admin(user):
            return deny("Only admins can review KYC")
        if subject is not None and subject.pk == user.pk:
            return deny("Admins cannot review their own KYC")
        return ALLOW

    # ─────────────────────────────────────────────────────────────
    # Projects
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_create_project(user) -> Verdict:
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_entrepreneur(user) or MarketplacePolicy.is_admin(user):
            return ALLOW
        return deny("Only entrepreneurs can create projects")

    @staticmethod
    def can_edit_project(user, project) -> Verdict:
        """Owner or admin; covers update and submit."""
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_owner(user, project) or MarketplacePolicy.is_admin(user):
            return ALLOW
        return deny("Not authorized to modify this project")

    @staticmethod
    def can_review_project(user, project) -> Verdict:
        """Approve, reject, launch, close."""
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_admin(user):
            return ALLOW
        return deny("Only admins can review projects")

    @staticmethod
    def can_view_project_investments(user, project) -> Verdict:
        return MarketplacePolicy.can_edit_project(user, project)

    # ─────────────────────────────────────────────────────────────
    # Investments
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_invest(user, project) -> Verdict:
        if not _authenticated(user):
            return UNAUTHENTICATED
        if user.role != ROLE_INVESTOR:
            return deny("Only investors can invest in projects")
        if MarketplacePolicy.is_owner(user, project):
            return deny("Project owners cannot invest in their own project")
        return ALLOW

    @staticmethod
    def can_view_investment(user, investment) -> Verdict:
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_party(user, investment):
            return ALLOW
        return deny("Not authorized to view this investment")

    @staticmethod
    def can_pay(user, investment) -> Verdict:
        """Initiate or confirm payment of an investment."""
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_investor(user, investment) or MarketplacePolicy.is_admin(user):
            return ALLOW
        return deny("Not authorized to pay for this investment")

    @staticmethod
    def can_admin_confirm_payment(user, investment) -> Verdict:
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_admin(user):
            return ALLOW
        return deny("Only admins can confirm payments manually")

    # ─────────────────────────────────────────────────────────────
    # Contracts
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_generate_contract(user, investment) -> Verdict:
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_party(user, investment):
            return ALLOW
        return deny("Not authorized to generate a contract for this investment")

    @staticmethod
    def can_view_contract(user, contract) -> Verdict:
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_party(user, contract.investment):
            return ALLOW
        return deny("Not authorized to view this contract")

    @staticmethod
    def can_sign_as(user, contract, signer: str) -> Verdict:
        """
        Each signer role has its own predicate; an admin cannot sign on
        behalf of the investor or the entrepreneur.
        """
        if not _authenticated(user):
            return UNAUTHENTICATED

        investment = contract.investment
        if signer == SIGNER_INVESTOR:
            if MarketplacePolicy.is_investor(user, investment):
                return ALLOW
            return deny("Not authorized to sign as investor")

        if signer == SIGNER_ENTREPRENEUR:
            if MarketplacePolicy.is_owner(user, investment.project):
                return ALLOW
            return deny("Not authorized to sign as entrepreneur")

        if signer == SIGNER_ADMIN:
            if MarketplacePolicy.is_admin(user):
                return ALLOW
            return deny("Not authorized to sign as admin")

        return deny(f"Unknown signer role: {signer}")

    @staticmethod
    def can_manage_contract(user, contract) -> Verdict:
        """Complete or cancel."""
        if not _authenticated(user):
            return UNAUTHENTICATED
        if MarketplacePolicy.is_admin(user):
            return ALLOW
        return deny("Only admins can complete or cancel contracts")
