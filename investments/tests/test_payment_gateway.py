import re
import uuid
from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from investments.payments import (
    MockPaymentGateway,
    PaymentGatewayTimeout,
    get_payment_gateway,
)

REFERENCE_RE = re.compile(r"^PAY-\d{8}-[A-Z0-9]{6}$")


class MockPaymentGatewayTest(SimpleTestCase):
    def setUp(self):
        self.gateway = MockPaymentGateway()

    def test_reference_format(self):
        reference = self.gateway.generate_reference()
        self.assertRegex(reference, REFERENCE_RE)

    def test_references_are_random(self):
        references = {self.gateway.generate_reference() for _ in range(20)}
        self.assertGreater(len(references), 1)

    def test_process_payment_success(self):
        investment_id = uuid.uuid4()
        result = self.gateway.process_payment(investment_id, Decimal("5000.00"), "mobile_money")

        self.assertTrue(result.success)
        self.assertRegex(result.payment_reference, REFERENCE_RE)
        self.assertEqual(
            result.redirect_url,
            f"/investment/{investment_id}/confirm?ref={result.payment_reference}",
        )
        self.assertIn("FCFA", result.message)

    def test_non_positive_amount_fails(self):
        result = self.gateway.process_payment(uuid.uuid4(), Decimal("0"))
        self.assertFalse(result.success)
        self.assertEqual(result.payment_reference, "")

    def test_verify_payment(self):
        self.assertTrue(self.gateway.verify_payment("PAY-20250211-ABC123"))
        self.assertFalse(self.gateway.verify_payment("BANK-42"))
        self.assertFalse(self.gateway.verify_payment(""))

    def test_latency_beyond_timeout_raises(self):
        slow = MockPaymentGateway(delay_seconds=0.05, timeout_seconds=0.01)
        with self.assertRaises(PaymentGatewayTimeout):
            slow.process_payment(uuid.uuid4(), Decimal("10.00"))

    @override_settings(PAYMENT_GATEWAY={
        "BACKEND": "investments.tests.gateways.DecliningGateway",
        "DELAY_SECONDS": 0,
        "TIMEOUT_SECONDS": 3,
    })
    def test_backend_comes_from_settings(self):
        gateway = get_payment_gateway()
        self.assertEqual(type(gateway).__name__, "DecliningGateway")
        self.assertEqual(gateway.timeout_seconds, 3)
