# contracts/services.py
import logging
import uuid

from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from django.db import transaction
from django.utils import timezone

from core.constants import ACTIVITY_CONTRACT_GENERATED, ACTIVITY_CONTRACT_SIGNATURE
from core.exceptions import DomainValidationError, InvalidState, NotFound, UpstreamFailure
from core.policies import SIGNER_ROLES, MarketplacePolicy, enforce
from core.services import ActivityService
from investments.services import get_investment
from investments.state_machine import INVESTMENT_TRANSITIONS

from .emails import send_contract_generated_email, send_contract_signed_email
from .models import Contract
from .pdf_generator import generate_contract_pdf
from .state_machine import CONTRACT_TRANSITIONS
from .tasks import send_contract_generated_email_task, send_contract_signed_email_task
from .terms import build_terms, serialize_terms

logger = logging.getLogger("predika.contracts")


def _notify(task, fallback, contract_id):
    """Queue the e-mail; send inline when the broker is unavailable."""
    try:
        task.delay(str(contract_id))
    except Exception as e:
        logger.warning("Could not queue %s for contract %s: %s", task.name, contract_id, e)
        contract = Contract.objects.select_related(
            "investment__investor", "investment__project__owner"
        ).get(pk=contract_id)
        fallback(contract)


# ─────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────

def get_contract(contract_id, for_update=False):
    qs = Contract.objects.select_related(
        "investment", "investment__project", "investment__project__owner", "investment__investor"
    )
    if for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(pk=contract_id)
    except (Contract.DoesNotExist, ValueError, ValidationError):
        raise NotFound("Contract not found")


def view_contract(user, contract_id):
    contract = get_contract(contract_id)
    enforce(MarketplacePolicy.can_view_contract(user, contract))
    return contract


def get_contract_by_investment(user, investment_id):
    investment = get_investment(investment_id)
    enforce(MarketplacePolicy.can_view_investment(user, investment))
    contract = Contract.objects.filter(investment=investment).first()
    if contract is None:
        raise NotFound("Contract not found")
    return get_contract(contract.pk)


def download_contract(user, contract_id):
    """Storage URL of the rendered document (relative for local media)."""
    contract = view_contract(user, contract_id)
    if not contract.contract_pdf_url:
        raise NotFound("Contract document not available")
    return contract, default_storage.url(contract.contract_pdf_url)


# ─────────────────────────────────────────────────────────────
# Lifecycle
# ─────────────────────────────────────────────────────────────

def generate_contract(user, investment_id):
    """
    Create the single contract of a paid investment.

    Terms are snapshotted and the document rendered before the row is
    written. If anything fails before the transaction commits, the stored
    document is deleted and no contract is left behind.
    """
    pdf_path = None
    try:
        with transaction.atomic():
            investment = get_investment(investment_id, for_update=True)
            enforce(MarketplacePolicy.can_generate_contract(user, investment))

            if Contract.objects.filter(investment=investment).exists():
                raise InvalidState("Contract already exists for this investment")

            INVESTMENT_TRANSITIONS.require(investment, "generate_contract")
            if not investment.is_funds_applied:
                raise InvalidState("Investment payment has not been applied to the project yet")

            terms = build_terms(investment)
            contract_id = uuid.uuid4()

            try:
                pdf_path = generate_contract_pdf(contract_id, terms)
            except Exception as e:
                logger.exception("Contract PDF generation failed for investment %s", investment.pk)
                raise UpstreamFailure(f"Contract document could not be generated: {e}")

            contract = Contract(
                id=contract_id,
                investment=investment,
                contract_type=investment.project.contract_type,
                terms_json=serialize_terms(terms),
                contract_pdf_url=pdf_path,
                status=Contract.Status.DRAFT,
            )
            contract.save(force_insert=True)
            CONTRACT_TRANSITIONS.apply(contract, "activate", actor=user)

            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_CONTRACT_GENERATED,
                target=contract,
                metadata={"investment_id": str(investment.pk), "contract_type": contract.contract_type},
            )
            transaction.on_commit(
                lambda: _notify(send_contract_generated_email_task, send_contract_generated_email, contract_id)
            )
    except Exception:
        if pdf_path is not None:
            logger.warning("Removing contract document after rollback: %s", pdf_path)
            default_storage.delete(pdf_path)
        raise

    logger.info("Contract generated: %s for investment %s", contract.pk, investment.pk)
    return contract


def sign_contract(user, contract_id, signer):
    """
    Record `signer`'s signature. Signing again with the same role is a
    no-op. Once all three parties have signed the contract moves to signed
    and the investment to contract_signed.

    Returns (contract, newly_signed).
    """
    if signer not in SIGNER_ROLES:
        raise DomainValidationError(f"signer must be one of: {', '.join(SIGNER_ROLES)}")

    with transaction.atomic():
        contract = get_contract(contract_id, for_update=True)
        enforce(MarketplacePolicy.can_sign_as(user, contract, signer))
        CONTRACT_TRANSITIONS.require(contract, "add_signature")

        field = Contract.SIGNATURE_FIELDS[signer]
        newly_signed = getattr(contract, field) is None
        if newly_signed:
            setattr(contract, field, timezone.now())
            contract.save(update_fields=[field, "updated_at"])
            ActivityService.log_activity(
                actor=user,
                verb=ACTIVITY_CONTRACT_SIGNATURE,
                target=contract,
                metadata={"signer": signer},
            )
            logger.info("Contract %s signed by %s (user=%s)", contract.pk, signer, user.pk)
        else:
            logger.info("Contract %s already signed by %s; nothing to do", contract.pk, signer)

        can_close, _ = CONTRACT_TRANSITIONS.can_apply(contract, "sign")
        if contract.is_fully_signed and can_close:
            CONTRACT_TRANSITIONS.apply(contract, "sign", actor=user)

            investment = get_investment(contract.investment_id, for_update=True)
            INVESTMENT_TRANSITIONS.apply(investment, "sign_contract", actor=user)
            contract.investment = investment

            transaction.on_commit(
                lambda: _notify(send_contract_signed_email_task, send_contract_signed_email, contract.pk)
            )

    return contract, newly_signed


def complete_contract(user, contract_id):
    with transaction.atomic():
        contract = get_contract(contract_id, for_update=True)
        enforce(MarketplacePolicy.can_manage_contract(user, contract))
        CONTRACT_TRANSITIONS.apply(contract, "complete", actor=user)

        investment = get_investment(contract.investment_id, for_update=True)
        INVESTMENT_TRANSITIONS.apply(investment, "complete", actor=user)
        contract.investment = investment

    logger.info("Contract completed: %s", contract.pk)
    return contract


def cancel_contract(user, contract_id):
    """The investment keeps its applied funds; no new contract can be generated for it."""
    with transaction.atomic():
        contract = get_contract(contract_id, for_update=True)
        enforce(MarketplacePolicy.can_manage_contract(user, contract))
        CONTRACT_TRANSITIONS.apply(contract, "cancel", actor=user)

    logger.info("Contract cancelled: %s", contract.pk)
    return contract
