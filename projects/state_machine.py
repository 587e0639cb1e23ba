# projects/state_machine.py
"""
Project lifecycle:

draft → submitted → approved → funding → funded → closed
          └→ draft (rejected, back for rework)

`fund` is never called by a handler directly; the funding ledger fires it
when the raised amount reaches the target.
"""
from core.state_machine import TransitionTable

from .models import Project

S = Project.Status

PROJECT_TRANSITIONS = TransitionTable(
    "project",
    {
        (S.DRAFT, "submit"): S.SUBMITTED,
        (S.SUBMITTED, "approve"): S.APPROVED,
        (S.SUBMITTED, "reject"): S.DRAFT,
        (S.APPROVED, "launch"): S.FUNDING,
        (S.FUNDING, "fund"): S.FUNDED,
        (S.FUNDED, "close"): S.CLOSED,
    },
)
