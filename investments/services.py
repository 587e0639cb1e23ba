# investments/services.py
"""
Investment creation and the two payment flows.

Investor flow:   create → initiate_payment (gateway) → confirm_payment (ledger)
Admin flow:      create → admin_confirm_payment (status + ledger in one go)

Capacity: an investment holds part of the project's remaining amount from
the moment it is created until its amount reaches the ledger. Pending
investments let go of that hold once INVESTMENT_RESERVATION_MINUTES have
passed; such an investment must find room again before payment.
"""
from datetime import timedelta
from decimal import Decimal
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone

from core.constants import ACTIVITY_INVESTMENT_CREATED, ACTIVITY_PAYMENT_CONFIRMED
from core.exceptions import DomainValidationError, InvalidState, NotFound, UpstreamFailure
from core.policies import MarketplacePolicy, enforce
from core.services import ActivityService
from projects.ledger import apply_investment_amount
from projects.models import FundingLedgerEntry, Project
from projects.services import get_project

from .models import Investment
from .payments import PaymentGatewayError, get_payment_gateway
from .state_machine import INVESTMENT_TRANSITIONS

logger = logging.getLogger("predika.investments")


# ─────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────

def get_investment(investment_id, for_update=False):
    qs = Investment.objects.select_related("project", "project__owner", "investor")
    if for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(pk=investment_id)
    except (Investment.DoesNotExist, ValueError, ValidationError):
        raise NotFound("Investment not found")


def view_investment(user, investment_id):
    investment = get_investment(investment_id)
    enforce(MarketplacePolicy.can_view_investment(user, investment))
    return investment


def list_investments(user, project_id=None):
    """
    The caller's own investments, or every investment of a project for its
    owner / an admin.
    """
    if project_id is not None:
        project = get_project(project_id)
        enforce(MarketplacePolicy.can_view_project_investments(user, project))
        qs = Investment.objects.filter(project=project)
    else:
        qs = Investment.objects.filter(investor=user)
    return qs.select_related("project", "investor").order_by("-created_at")


# ─────────────────────────────────────────────────────────────
# Capacity
# ─────────────────────────────────────────────────────────────

def reservation_cutoff():
    """Pending investments created before this instant no longer hold capacity."""
    minutes = settings.INVESTMENT_RESERVATION_MINUTES
    if not minutes:
        return None
    return timezone.now() - timedelta(minutes=minutes)


def is_reservation_expired(investment) -> bool:
    cutoff = reservation_cutoff()
    return (
        cutoff is not None
        and investment.status == Investment.Status.PENDING
        and investment.created_at < cutoff
    )


def reserved_amount(project, exclude=None) -> Decimal:
    """Sum of live investments whose amount has not reached the ledger yet."""
    cutoff = reservation_cutoff()
    pending = Q(status=Investment.Status.PENDING)
    if cutoff is not None:
        pending &= Q(created_at__gte=cutoff)

    qs = Investment.objects.filter(project=project, ledger_entry__isnull=True).filter(
        pending | Q(status=Investment.Status.PAYMENT_CONFIRMED)
    )
    if exclude is not None:
        qs = qs.exclude(pk=exclude.pk)

    total = qs.aggregate(total=Sum("amount"))["total"]
    return total if total is not None else Decimal("0.00")


def available_amount(project, exclude=None) -> Decimal:
    return max(project.remaining_amount - reserved_amount(project, exclude=exclude), Decimal("0.00"))


def _check_capacity(project, amount, exclude=None):
    """Caller holds the project row lock."""
    available = available_amount(project, exclude=exclude)
    if amount > available:
        raise DomainValidationError(
            f"Investment exceeds project target. "
            f"Maximum allowed: {available} {settings.MARKETPLACE_CURRENCY}"
        )


# ─────────────────────────────────────────────────────────────
# Operations
# ─────────────────────────────────────────────────────────────

def create_investment(user, project_id, amount, payment_method=Investment.PaymentMethod.MOBILE_MONEY):
    amount = Decimal(amount)

    with transaction.atomic():
        project = get_project(project_id, for_update=True)
        enforce(MarketplacePolicy.can_invest(user, project))

        if project.status != Project.Status.FUNDING:
            raise InvalidState("Project is not currently accepting investments")
        if timezone.now() >= project.deadline:
            raise InvalidState("Project funding deadline has passed")
        if amount <= 0:
            raise DomainValidationError("Investment amount must be positive")

        _check_capacity(project, amount)

        investment = Investment.objects.create(
            project=project,
            investor=user,
            amount=amount,
            payment_method=payment_method,
            status=Investment.Status.PENDING,
        )

        ActivityService.log_activity(
            actor=user,
            verb=ACTIVITY_INVESTMENT_CREATED,
            target=investment,
            metadata={"project_id": str(project.pk), "amount": str(amount)},
        )

    logger.info(
        "Investment created: id=%s, project=%s, investor=%s, amount=%s",
        investment.pk, project.pk, user.pk, amount,
    )
    return investment


def _ensure_room_after_expiry(investment):
    """
    An expired pending investment only proceeds if the project still has
    room for it; takes the project lock for the check.
    """
    if not is_reservation_expired(investment):
        return
    project = get_project(investment.project_id, for_update=True)
    _check_capacity(project, investment.amount, exclude=investment)


def initiate_payment(user, investment_id, payment_method=None):
    """
    Hand the investment to the payment gateway and move it to
    payment_confirmed with the issued reference.

    Nothing is written before the gateway answers; a gateway error leaves
    the investment pending.
    """
    investment = get_investment(investment_id)
    enforce(MarketplacePolicy.can_pay(user, investment))
    INVESTMENT_TRANSITIONS.require(investment, "initiate_payment")

    with transaction.atomic():
        _ensure_room_after_expiry(investment)

    method = payment_method or investment.payment_method
    gateway = get_payment_gateway()
    try:
        result = gateway.process_payment(investment.pk, investment.amount, method)
    except PaymentGatewayError as exc:
        logger.error("Payment gateway failure: investment=%s, error=%s", investment.pk, exc)
        raise UpstreamFailure(f"Payment provider error: {exc}")

    if not result.success:
        logger.warning("Payment declined: investment=%s, message=%s", investment.pk, result.message)
        raise UpstreamFailure(result.message or "Payment was declined")

    with transaction.atomic():
        investment = get_investment(investment_id, for_update=True)
        INVESTMENT_TRANSITIONS.require(investment, "initiate_payment")
        _ensure_room_after_expiry(investment)

        investment.payment_reference = result.payment_reference
        investment.payment_method = method
        INVESTMENT_TRANSITIONS.apply(
            investment,
            "initiate_payment",
            actor=user,
            extra_fields=["payment_reference", "payment_method"],
            metadata={"payment_reference": result.payment_reference},
        )

    logger.info("Payment initiated: investment=%s, reference=%s", investment.pk, result.payment_reference)
    return investment, result


def confirm_payment(user, investment_id, payment_reference=None):
    """
    Verify the reference with the gateway and add the amount to the project.

    Idempotent: a second confirmation returns applied=False and leaves the
    project untouched.
    """
    investment = get_investment(investment_id)
    enforce(MarketplacePolicy.can_pay(user, investment))
    INVESTMENT_TRANSITIONS.require(investment, "confirm_payment")

    reference = payment_reference or investment.payment_reference
    if reference != investment.payment_reference:
        raise DomainValidationError("Payment reference does not match this investment")

    gateway = get_payment_gateway()
    try:
        verified = gateway.verify_payment(reference)
    except PaymentGatewayError as exc:
        logger.error("Payment verification failure: investment=%s, error=%s", investment.pk, exc)
        raise UpstreamFailure(f"Payment provider error: {exc}")

    if not verified:
        raise DomainValidationError("Payment could not be verified")

    with transaction.atomic():
        investment = get_investment(investment_id, for_update=True)
        INVESTMENT_TRANSITIONS.require(investment, "confirm_payment")
        _, applied = apply_investment_amount(
            investment, source=FundingLedgerEntry.SOURCE_PAYMENT, actor=user
        )
        if applied:
            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_PAYMENT_CONFIRMED,
                target=investment,
                metadata={"payment_reference": reference, "source": FundingLedgerEntry.SOURCE_PAYMENT},
            )

    logger.info("Payment confirmed: investment=%s, applied=%s", investment.pk, applied)
    return investment, applied


def admin_confirm_payment(user, investment_id, payment_reference=None):
    """
    Manual reconciliation by an admin.

    A pending investment is moved to payment_confirmed (keeping the given
    reference, or issuing one); then its amount is applied to the project
    unless that already happened.
    """
    investment = get_investment(investment_id)
    enforce(MarketplacePolicy.can_admin_confirm_payment(user, investment))

    with transaction.atomic():
        investment = get_investment(investment_id, for_update=True)

        if (
            payment_reference
            and investment.payment_reference
            and payment_reference != investment.payment_reference
        ):
            raise InvalidState("Investment already carries a different payment reference")

        can_confirm, _ = INVESTMENT_TRANSITIONS.can_apply(investment, "admin_confirm")
        if can_confirm:
            reference = (
                payment_reference
                or investment.payment_reference
                or get_payment_gateway().generate_reference()
            )
            taken = (
                Investment.objects.filter(payment_reference=reference)
                .exclude(pk=investment.pk)
                .exists()
            )
            if taken:
                raise DomainValidationError("Payment reference is already used by another investment")

            investment.payment_reference = reference
            INVESTMENT_TRANSITIONS.apply(
                investment,
                "admin_confirm",
                actor=user,
                extra_fields=["payment_reference"],
                metadata={"payment_reference": reference},
            )

        if investment.is_funds_applied:
            logger.info("Admin confirmation on already funded investment: %s", investment.pk)
            return investment, False

        INVESTMENT_TRANSITIONS.require(investment, "confirm_payment")
        _, applied = apply_investment_amount(
            investment, source=FundingLedgerEntry.SOURCE_ADMIN, actor=user
        )
        if applied:
            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_PAYMENT_CONFIRMED,
                target=investment,
                metadata={
                    "payment_reference": investment.payment_reference,
                    "source": FundingLedgerEntry.SOURCE_ADMIN,
                },
            )

    logger.info("Admin confirmed payment: investment=%s, admin=%s, applied=%s", investment.pk, user.pk, applied)
    return investment, applied
