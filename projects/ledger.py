# projects/ledger.py
"""
Project funding ledger.

The only code path that changes Project.raised_amount. Both the investor
confirmation flow and the admin reconciliation flow go through
`apply_investment_amount`, which is safe to call any number of times for the
same investment: the unique FundingLedgerEntry row decides who applies it.
"""
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F, Sum
from django.utils import timezone

from core.constants import ACTIVITY_PROJECT_FUNDS_APPLIED
from core.exceptions import InvalidState
from core.services import ActivityService

from .models import FundingLedgerEntry, Project
from .state_machine import PROJECT_TRANSITIONS

logger = logging.getLogger("predika.ledger")


def apply_investment_amount(investment, source=FundingLedgerEntry.SOURCE_PAYMENT, actor=None):
    """
    Add the investment's amount to its project exactly once.

    Returns (entry, applied). `applied` is False when an earlier call
    already recorded this investment; the project is left untouched then.
    Flips the project to funded when the target is reached.
    """
    with transaction.atomic():
        project = Project.objects.select_for_update().get(pk=investment.project_id)

        existing = FundingLedgerEntry.objects.filter(investment_id=investment.pk).first()
        if existing is not None:
            logger.info(
                "Ledger entry already present: investment=%s, project=%s",
                investment.pk, project.pk,
            )
            return existing, False

        if project.raised_amount + investment.amount > project.target_amount:
            logger.warning(
                "Refusing to exceed target: project=%s, raised=%s, amount=%s, target=%s",
                project.pk, project.raised_amount, investment.amount, project.target_amount,
            )
            raise InvalidState(
                f"Applying {investment.amount} would exceed the project target. "
                f"Remaining: {project.remaining_amount}"
            )

        try:
            with transaction.atomic():
                entry = FundingLedgerEntry.objects.create(
                    project=project,
                    investment=investment,
                    amount=investment.amount,
                    source=source,
                    applied_by=actor if getattr(actor, "is_authenticated", False) else None,
                )
        except IntegrityError:
            # Lost the race against a concurrent confirmation of the same investment
            logger.info("Concurrent ledger entry detected: investment=%s", investment.pk)
            return FundingLedgerEntry.objects.get(investment_id=investment.pk), False

        Project.objects.filter(pk=project.pk).update(
            raised_amount=F("raised_amount") + investment.amount,
            updated_at=timezone.now(),
        )
        project.refresh_from_db(fields=["raised_amount", "updated_at"])

        ActivityService.log_activity(
            actor=actor,
            verb=ACTIVITY_PROJECT_FUNDS_APPLIED,
            target=project,
            metadata={
                "investment_id": str(investment.pk),
                "amount": str(investment.amount),
                "raised_amount": str(project.raised_amount),
                "source": source,
            },
        )
        logger.info(
            "Funds applied: project=%s, investment=%s, amount=%s, raised=%s/%s",
            project.pk, investment.pk, investment.amount,
            project.raised_amount, project.target_amount,
        )

        can_fund, _ = PROJECT_TRANSITIONS.can_apply(project, "fund")
        if project.raised_amount >= project.target_amount and can_fund:
            PROJECT_TRANSITIONS.apply(project, "fund", actor=actor)

        return entry, True


def ledger_total(project) -> Decimal:
    """Sum of all ledger entries; always equals project.raised_amount."""
    total = project.ledger_entries.aggregate(total=Sum("amount"))["total"]
    return total if total is not None else Decimal("0.00")
