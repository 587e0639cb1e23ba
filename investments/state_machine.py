# investments/state_machine.py
"""
Investment lifecycle (forward only):

pending → payment_confirmed → contract_signed → completed

Both the investor payment flow and the admin reconciliation flow leave
`pending`; the later moves are driven by the investment's contract.
"""
from core.state_machine import TransitionTable

from .models import Investment

S = Investment.Status

INVESTMENT_TRANSITIONS = TransitionTable(
    "investment",
    {
        (S.PENDING, "initiate_payment"): S.PAYMENT_CONFIRMED,
        (S.PENDING, "admin_confirm"): S.PAYMENT_CONFIRMED,
        # Applying the paid amount to the project keeps the status
        (S.PAYMENT_CONFIRMED, "confirm_payment"): S.PAYMENT_CONFIRMED,
        (S.PAYMENT_CONFIRMED, "generate_contract"): S.PAYMENT_CONFIRMED,
        (S.PAYMENT_CONFIRMED, "sign_contract"): S.CONTRACT_SIGNED,
        (S.CONTRACT_SIGNED, "complete"): S.COMPLETED,
    },
)
