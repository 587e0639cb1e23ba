# contracts/state_machine.py
"""
Contract lifecycle:

draft → active → signed → completed
draft / active → cancelled

`add_signature` records one party's signature and keeps the status; the
move to `signed` happens once all three parties have signed.
"""
from core.state_machine import TransitionTable

from .models import Contract

S = Contract.Status

CONTRACT_TRANSITIONS = TransitionTable(
    "contract",
    {
        (S.DRAFT, "activate"): S.ACTIVE,
        (S.ACTIVE, "add_signature"): S.ACTIVE,
        (S.SIGNED, "add_signature"): S.SIGNED,
        (S.ACTIVE, "sign"): S.SIGNED,
        (S.SIGNED, "complete"): S.COMPLETED,
        (S.DRAFT, "cancel"): S.CANCELLED,
        (S.ACTIVE, "cancel"): S.CANCELLED,
    },
)
