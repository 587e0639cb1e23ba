# investments/payments.py
"""
Payment gateway adapter.

MockPaymentGateway simulates a local payment provider (mobile money, bank
transfer, card): every positive amount is accepted and any reference with the
PAY- prefix verifies. A real provider plugs in through
settings.PAYMENT_GATEWAY["BACKEND"] with the same three methods.
"""
from dataclasses import dataclass
from decimal import Decimal
import logging
import secrets
import string
import time

from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

logger = logging.getLogger("predika.payments")

REFERENCE_PREFIX = "PAY-"
_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


class PaymentGatewayError(Exception):
    """The provider could not be reached or answered with an error."""


class PaymentGatewayTimeout(PaymentGatewayError):
    pass


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    payment_reference: str
    message: str
    redirect_url: str = ""


class MockPaymentGateway:
    def __init__(self, delay_seconds: float = 0, timeout_seconds: float = 10):
        self.delay_seconds = delay_seconds
        self.timeout_seconds = timeout_seconds

    def _simulate_latency(self, operation: str) -> None:
        if self.delay_seconds <= 0:
            return
        time.sleep(min(self.delay_seconds, self.timeout_seconds))
        if self.delay_seconds > self.timeout_seconds:
            raise PaymentGatewayTimeout(
                f"Payment provider timed out after {self.timeout_seconds}s during {operation}"
            )

    def generate_reference(self) -> str:
        """PAY-YYYYMMDD-XXXXXX, e.g. PAY-20250211-ABC123."""
        date_str = timezone.now().strftime("%Y%m%d")
        random_str = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(6))
        return f"{REFERENCE_PREFIX}{date_str}-{random_str}"

    def process_payment(self, investment_id, amount: Decimal, method: str = "") -> PaymentResult:
        self._simulate_latency("process_payment")

        if amount is None or Decimal(amount) <= 0:
            return PaymentResult(
                success=False,
                payment_reference="",
                message="Invalid payment amount",
            )

        reference = self.generate_reference()
        logger.info("Mock payment accepted: investment=%s, amount=%s, method=%s", investment_id, amount, method)
        return PaymentResult(
            success=True,
            payment_reference=reference,
            message=f"Payment of {amount} {settings.MARKETPLACE_CURRENCY} initiated successfully",
            redirect_url=f"/investment/{investment_id}/confirm?ref={reference}",
        )

    def verify_payment(self, payment_reference: str) -> bool:
        self._simulate_latency("verify_payment")
        return bool(payment_reference) and payment_reference.startswith(REFERENCE_PREFIX)


def get_payment_gateway():
    config = settings.PAYMENT_GATEWAY
    gateway_class = import_string(config["BACKEND"])
    return gateway_class(
        delay_seconds=config.get("DELAY_SECONDS", 0),
        timeout_seconds=config.get("TIMEOUT_SECONDS", 10),
    )
