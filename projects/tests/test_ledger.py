from decimal import Decimal
from unittest import mock

from django.test import TestCase

from core.exceptions import InvalidState
from core.models import DomainActivity
from core.tests.utils import MarketplaceFixtureMixin
from investments.models import Investment
from projects.ledger import apply_investment_amount, ledger_total
from projects.models import FundingLedgerEntry, Project


class FundingLedgerTest(MarketplaceFixtureMixin, TestCase):
    def _investment(self, amount, investor=None):
        return Investment.objects.create(
            project=self.project,
            investor=investor or self.investor,
            amount=Decimal(amount),
            status=Investment.Status.PAYMENT_CONFIRMED,
        )

    def test_apply_adds_amount_once(self):
        investment = self._investment("250000.00")

        entry, applied = apply_investment_amount(investment, actor=self.investor)
        self.assertTrue(applied)
        self.assertEqual(entry.amount, Decimal("250000.00"))

        again, applied_again = apply_investment_amount(investment, actor=self.admin)
        self.assertFalse(applied_again)
        self.assertEqual(again.pk, entry.pk)

        self.project.refresh_from_db()
        self.assertEqual(self.project.raised_amount, Decimal("250000.00"))
        self.assertEqual(FundingLedgerEntry.objects.filter(investment=investment).count(), 1)

    def test_refuses_to_exceed_target(self):
        self.project.raised_amount = Decimal("900000.00")
        self.project.save()
        investment = self._investment("200000.00")

        with self.assertRaises(InvalidState):
            apply_investment_amount(investment)

        self.project.refresh_from_db()
        self.assertEqual(self.project.raised_amount, Decimal("900000.00"))
        self.assertFalse(FundingLedgerEntry.objects.exists())

    def test_exact_target_flips_to_funded_once(self):
        first = self._investment("600000.00")
        second = self._investment("400000.00", investor=self.other_investor)

        apply_investment_amount(first)
        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.Status.FUNDING)

        apply_investment_amount(second)
        apply_investment_amount(second)
        self.project.refresh_from_db()
        self.assertEqual(self.project.raised_amount, Decimal("1000000.00"))
        self.assertEqual(self.project.status, Project.Status.FUNDED)
        self.assertEqual(DomainActivity.objects.filter(verb="project.fund").count(), 1)

    def test_raised_matches_ledger_total(self):
        for amount in ("100000.10", "250000.25", "49999.65"):
            apply_investment_amount(self._investment(amount))

        self.project.refresh_from_db()
        self.assertEqual(self.project.raised_amount, Decimal("400000.00"))
        self.assertEqual(ledger_total(self.project), self.project.raised_amount)

    def test_concurrent_entry_is_not_applied_twice(self):
        investment = self._investment("300000.00")
        # Another confirmation recorded the entry after our existence check ran
        existing = FundingLedgerEntry.objects.create(
            project=self.project,
            investment=investment,
            amount=investment.amount,
            source=FundingLedgerEntry.SOURCE_ADMIN,
        )

        with mock.patch.object(FundingLedgerEntry.objects, "filter") as filter_mock:
            filter_mock.return_value.first.return_value = None
            entry, applied = apply_investment_amount(investment)

        self.assertFalse(applied)
        self.assertEqual(entry.pk, existing.pk)
        self.project.refresh_from_db()
        self.assertEqual(self.project.raised_amount, Decimal("0.00"))
