from django.test import TestCase

from contracts.models import Contract
from contracts.state_machine import CONTRACT_TRANSITIONS
from core.exceptions import InvalidState
from core.models import DomainActivity
from core.services import ActivityService
from investments.models import Investment
from investments.state_machine import INVESTMENT_TRANSITIONS
from projects.models import Project
from projects.state_machine import PROJECT_TRANSITIONS
from users.models import User
from users.state_machine import KYC_TRANSITIONS

from .utils import make_project, make_user


class TransitionTableTest(TestCase):
    def setUp(self):
        self.owner = make_user("owner", role="entrepreneur")
        self.admin = make_user("admin", role="admin")
        self.project = make_project(self.owner, status=Project.Status.DRAFT)

    def test_legal_transition_persists_and_is_audited(self):
        new_status = PROJECT_TRANSITIONS.apply(self.project, "submit", actor=self.owner)

        self.assertEqual(new_status, Project.Status.SUBMITTED)
        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.Status.SUBMITTED)

        activity = ActivityService.history_for(self.project).get(verb="project.submit")
        self.assertEqual(activity.actor, self.owner)
        self.assertEqual(activity.metadata["from"], "draft")
        self.assertEqual(activity.metadata["to"], "submitted")

    def test_illegal_transition_is_rejected_without_side_effects(self):
        with self.assertRaises(InvalidState):
            PROJECT_TRANSITIONS.apply(self.project, "launch", actor=self.admin)

        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.Status.DRAFT)
        self.assertFalse(DomainActivity.objects.exists())

    def test_unknown_action_is_rejected(self):
        can, reason = PROJECT_TRANSITIONS.can_apply(self.project, "teleport")
        self.assertFalse(can)
        self.assertIn("draft", reason)

    def test_full_project_lifecycle(self):
        for action in ("submit", "approve", "launch", "fund", "close"):
            PROJECT_TRANSITIONS.apply(self.project, action, actor=self.admin)
        self.assertEqual(self.project.status, Project.Status.CLOSED)
        self.assertTrue(PROJECT_TRANSITIONS.is_terminal(Project.Status.CLOSED))

    def test_reject_returns_to_draft(self):
        PROJECT_TRANSITIONS.apply(self.project, "submit", actor=self.owner)
        PROJECT_TRANSITIONS.apply(self.project, "reject", actor=self.admin)
        self.assertEqual(self.project.status, Project.Status.DRAFT)

    def test_require_keeps_status(self):
        investment = Investment(
            project=self.project,
            investor=self.admin,
            amount=10,
            status=Investment.Status.PAYMENT_CONFIRMED,
        )
        INVESTMENT_TRANSITIONS.require(investment, "confirm_payment")
        self.assertEqual(investment.status, Investment.Status.PAYMENT_CONFIRMED)

        investment.status = Investment.Status.PENDING
        with self.assertRaises(InvalidState):
            INVESTMENT_TRANSITIONS.require(investment, "confirm_payment")


class TableShapeTest(TestCase):
    def test_investment_only_moves_forward(self):
        S = Investment.Status
        order = [S.PENDING, S.PAYMENT_CONFIRMED, S.CONTRACT_SIGNED, S.COMPLETED]
        for (source, _action), target in INVESTMENT_TRANSITIONS.transitions.items():
            self.assertGreaterEqual(order.index(target), order.index(source))
        self.assertTrue(INVESTMENT_TRANSITIONS.is_terminal(S.COMPLETED))

    def test_contract_terminal_states(self):
        self.assertTrue(CONTRACT_TRANSITIONS.is_terminal(Contract.Status.COMPLETED))
        self.assertTrue(CONTRACT_TRANSITIONS.is_terminal(Contract.Status.CANCELLED))
        self.assertIn("cancel", CONTRACT_TRANSITIONS.allowed_actions(Contract.Status.ACTIVE))
        self.assertNotIn("cancel", CONTRACT_TRANSITIONS.allowed_actions(Contract.Status.SIGNED))

    def test_contract_states_cover_choices(self):
        self.assertEqual(set(CONTRACT_TRANSITIONS.states()), set(Contract.Status.values))

    def test_kyc_table_drives_kyc_status(self):
        self.assertEqual(KYC_TRANSITIONS.field, "kyc_status")
        self.assertEqual(set(KYC_TRANSITIONS.states()), set(User.ReviewStatus.values))

        user = make_user("moussa")
        ok, reason = KYC_TRANSITIONS.can_apply(user, "approve")
        self.assertTrue(ok)
        user.kyc_status = User.ReviewStatus.APPROVED
        ok, reason = KYC_TRANSITIONS.can_apply(user, "approve")
        self.assertFalse(ok)
        self.assertIn("'approved'", reason)
