# Gateway doubles loaded through settings.PAYMENT_GATEWAY["BACKEND"]
from investments.payments import MockPaymentGateway, PaymentGatewayError, PaymentResult


class UnreachableGateway(MockPaymentGateway):
    def process_payment(self, investment_id, amount, method=""):
        raise PaymentGatewayError("connection refused")

    def verify_payment(self, payment_reference):
        raise PaymentGatewayError("connection refused")


class DecliningGateway(MockPaymentGateway):
    def process_payment(self, investment_id, amount, method=""):
        return PaymentResult(success=False, payment_reference="", message="Insufficient balance")

    def verify_payment(self, payment_reference):
        return False
