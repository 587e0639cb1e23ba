# contracts/tasks.py

from celery import shared_task

from .models import Contract
from .emails import send_contract_generated_email, send_contract_signed_email


def _load(contract_id):
    return (
        Contract.objects
        .select_related("investment__investor", "investment__project__owner")
        .filter(pk=contract_id)
        .first()
    )


@shared_task
def send_contract_generated_email_task(contract_id):
    """
    Async wrapper for the "contract ready" notification.
    """
    contract = _load(contract_id)
    if contract is None:
        return
    send_contract_generated_email(contract, request=None)


@shared_task
def send_contract_signed_email_task(contract_id):
    contract = _load(contract_id)
    if contract is None:
        return
    send_contract_signed_email(contract, request=None)
