# contracts/emails.py
from django.core.mail import send_mail
from django.conf import settings
from django.urls import reverse


def build_contract_url(request, contract):
    path = reverse("contract-detail", args=[contract.id])
    if request is not None:
        return request.build_absolute_uri(path)
    return path


def _party_emails(contract):
    investment = contract.investment
    emails = [investment.investor.email, investment.project.owner.email]
    return [email for email in emails if email]


def send_contract_generated_email(contract, request=None):
    """
    Tell investor and entrepreneur that the contract is ready to sign.
    """
    recipients = _party_emails(contract)
    if not recipients:
        return

    project = contract.investment.project
    subject = f"Contract ready to sign: {project.title}"
    message = (
        f"Hello,\n\n"
        f"The {contract.get_status_display().lower()} contract for the investment of "
        f"{contract.investment.amount} {settings.MARKETPLACE_CURRENCY} in "
        f"\"{project.title}\" has been generated.\n\n"
        f"Review and sign it here:\n"
        f"{build_contract_url(request, contract)}\n\n"
        f"Thank you,\n"
        f"Predika"
    )

    send_mail(
        subject=subject,
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=recipients,
        fail_silently=True,
    )


def send_contract_signed_email(contract, request=None):
    recipients = _party_emails(contract)
    if not recipients:
        return

    project = contract.investment.project
    message = (
        f"Hello,\n\n"
        f"All parties have signed the contract for \"{project.title}\".\n"
        f"The contract is now binding.\n\n"
        f"{build_contract_url(request, contract)}\n\n"
        f"Thank you,\n"
        f"Predika"
    )

    send_mail(
        subject=f"Contract signed: {project.title}",
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=recipients,
        fail_silently=True,
    )
