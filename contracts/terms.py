# contracts/terms.py
"""
Snapshot of the agreed terms, taken once when a contract is generated.
Amounts are kept as strings so the JSON round-trips without float drift.
"""
from datetime import timedelta
import json

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from projects.models import Project

TERM_DAYS = 365
DEFAULT_PROFIT_SHARE = "50"

STANDARD_CONDITIONS = [
    "Investor retains ownership rights to their investment portion",
    "Entrepreneur commits to monthly progress reports",
    "Fund disbursement subject to project milestones",
]


def _party(user):
    return {"id": str(user.pk), "email": user.email, "name": user.get_full_name() or user.username}


def _type_specific_terms(project):
    expected = str(project.expected_return) if project.expected_return is not None else None
    contract_type = project.contract_type

    if contract_type == Project.ContractType.MUDARABAH:
        return {
            "profit_share": expected or DEFAULT_PROFIT_SHARE,
            "capital_loss_borne_by": "investor",
            "management": "entrepreneur",
        }
    if contract_type == Project.ContractType.MUSHARAKA:
        return {
            "profit_share": expected or DEFAULT_PROFIT_SHARE,
            "loss_sharing": "proportional",
            "management": "joint",
        }
    return {
        "interest_rate": expected,
        "repayment": "principal_plus_interest",
    }


def build_terms(investment, start_date=None):
    project = investment.project
    start = start_date or timezone.localdate()
    end = start + timedelta(days=TERM_DAYS)

    terms = {
        "project_id": str(project.pk),
        "project_title": project.title,
        "investment_id": str(investment.pk),
        "investor": _party(investment.investor),
        "entrepreneur": _party(project.owner),
        "investment_amount": str(investment.amount),
        "currency": settings.MARKETPLACE_CURRENCY,
        "contract_type": project.contract_type,
        "sharia_compliant": project.sharia_compliant,
        "expected_return": str(project.expected_return) if project.expected_return is not None else None,
        "duration_months": settings.CONTRACT_DURATION_MONTHS,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "conditions": list(STANDARD_CONDITIONS),
    }
    terms.update(_type_specific_terms(project))
    return terms


def serialize_terms(terms) -> str:
    return json.dumps(terms, sort_keys=True, cls=DjangoJSONEncoder)
