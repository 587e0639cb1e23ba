import os
import shutil
import tempfile
from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.core.cache import cache
from django.core.files.storage import default_storage
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from contracts import services
from contracts.models import Contract
from core.exceptions import DomainValidationError, Forbidden, InvalidState, NotFound, UpstreamFailure
from core.services import ActivityService
from core.tests.utils import MarketplaceFixtureMixin
from investments import services as investment_services
from investments.models import Investment
from projects.models import Project


class ContractTestBase(MarketplaceFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        # Temporary MEDIA_ROOT so reportlab output goes to a temp dir
        self.temp_media = tempfile.mkdtemp(prefix="test_media_")
        media_override = override_settings(MEDIA_ROOT=self.temp_media)
        media_override.enable()
        self.addCleanup(media_override.disable)
        self.addCleanup(shutil.rmtree, self.temp_media, ignore_errors=True)

        self.investment = investment_services.create_investment(
            self.investor, self.project.id, Decimal("600000.00")
        )
        investment_services.admin_confirm_payment(self.admin, self.investment.id)

    def _sign_all(self, contract):
        services.sign_contract(self.investor, contract.id, "investor")
        services.sign_contract(self.entrepreneur, contract.id, "entrepreneur")
        contract, _ = services.sign_contract(self.admin, contract.id, "admin")
        return contract


class GenerateContractTest(ContractTestBase):
    def test_generate_snapshots_terms_and_activates(self):
        contract = services.generate_contract(self.investor, self.investment.id)

        self.assertEqual(contract.status, Contract.Status.ACTIVE)
        self.assertEqual(contract.contract_type, "mudarabah")
        self.assertTrue(contract.contract_pdf_url.startswith("contracts/"))
        self.assertTrue(default_storage.exists(contract.contract_pdf_url))

        terms = contract.terms
        self.assertEqual(terms["project_title"], self.project.title)
        self.assertEqual(terms["investor"]["email"], self.investor.email)
        self.assertEqual(terms["entrepreneur"]["email"], self.entrepreneur.email)
        self.assertEqual(terms["investment_amount"], "600000.00")
        self.assertEqual(terms["profit_share"], "12.00")
        self.assertEqual(terms["capital_loss_borne_by"], "investor")
        self.assertEqual(terms["duration_months"], 12)
        self.assertEqual(len(terms["conditions"]), 3)

        start = date.fromisoformat(terms["start_date"])
        end = date.fromisoformat(terms["end_date"])
        self.assertEqual(end - start, timedelta(days=365))

    def test_conventional_loan_terms(self):
        Project.objects.filter(pk=self.project.pk).update(contract_type="conventional_loan")

        contract = services.generate_contract(self.admin, self.investment.id)
        self.assertEqual(contract.terms["interest_rate"], "12.00")
        self.assertNotIn("profit_share", contract.terms)

    def test_second_generation_is_invalid_state(self):
        services.generate_contract(self.investor, self.investment.id)

        with self.assertRaises(InvalidState):
            services.generate_contract(self.entrepreneur, self.investment.id)
        self.assertEqual(Contract.objects.filter(investment=self.investment).count(), 1)

    def test_requires_applied_payment(self):
        pending = investment_services.create_investment(
            self.other_investor, self.project.id, Decimal("1000.00")
        )
        with self.assertRaises(InvalidState):
            services.generate_contract(self.other_investor, pending.id)

    def test_outsider_cannot_generate(self):
        with self.assertRaises(Forbidden):
            services.generate_contract(self.outsider, self.investment.id)

    def test_pdf_failure_leaves_no_contract(self):
        with mock.patch("contracts.services.generate_contract_pdf", side_effect=OSError("disk full")):
            with self.assertRaises(UpstreamFailure):
                services.generate_contract(self.investor, self.investment.id)

        self.assertFalse(Contract.objects.exists())

    def test_failure_after_rendering_removes_document(self):
        with mock.patch.object(ActivityService, "log_activity", side_effect=RuntimeError("audit store down")):
            with self.assertRaises(RuntimeError):
                services.generate_contract(self.investor, self.investment.id)

        self.assertFalse(Contract.objects.exists())
        # The document was written before the failure; only its directory remains
        self.assertEqual(os.listdir(os.path.join(self.temp_media, "contracts")), [])

    def test_malformed_contract_id_is_not_found(self):
        with self.assertRaises(NotFound):
            services.get_contract("not-a-uuid")

    def test_terms_cannot_change(self):
        contract = services.generate_contract(self.investor, self.investment.id)
        contract = Contract.objects.get(pk=contract.pk)

        contract.terms_json = "{}"
        with self.assertRaises(InvalidState):
            contract.save()

    def test_parties_are_notified(self):
        with mock.patch("contracts.services.send_contract_generated_email_task.delay") as delay:
            with self.captureOnCommitCallbacks(execute=True):
                contract = services.generate_contract(self.investor, self.investment.id)
        delay.assert_called_once_with(str(contract.pk))

    def test_notification_falls_back_to_sync_send(self):
        with mock.patch(
            "contracts.services.send_contract_generated_email_task.delay",
            side_effect=ConnectionError("broker down"),
        ):
            with self.captureOnCommitCallbacks(execute=True):
                services.generate_contract(self.investor, self.investment.id)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(
            set(mail.outbox[0].to), {self.investor.email, self.entrepreneur.email}
        )


class SignContractTest(ContractTestBase):
    def setUp(self):
        super().setUp()
        self.contract = services.generate_contract(self.investor, self.investment.id)

    def test_signed_only_when_all_three_sign(self):
        contract, newly = services.sign_contract(self.investor, self.contract.id, "investor")
        self.assertTrue(newly)
        self.assertIsNotNone(contract.investor_signed_at)
        self.assertEqual(contract.status, Contract.Status.ACTIVE)

        contract, _ = services.sign_contract(self.entrepreneur, self.contract.id, "entrepreneur")
        self.assertEqual(contract.status, Contract.Status.ACTIVE)
        self.assertFalse(contract.is_fully_signed)

        contract, _ = services.sign_contract(self.admin, self.contract.id, "admin")
        self.assertEqual(contract.status, Contract.Status.SIGNED)
        self.assertTrue(contract.is_fully_signed)

        self.investment.refresh_from_db()
        self.assertEqual(self.investment.status, Investment.Status.CONTRACT_SIGNED)

    def test_signing_twice_is_a_noop(self):
        first, _ = services.sign_contract(self.investor, self.contract.id, "investor")
        again, newly = services.sign_contract(self.investor, self.contract.id, "investor")

        self.assertFalse(newly)
        self.assertEqual(again.investor_signed_at, first.investor_signed_at)

        contract = self._sign_all(self.contract)
        contract, newly = services.sign_contract(self.admin, contract.id, "admin")
        self.assertFalse(newly)
        self.assertEqual(contract.status, Contract.Status.SIGNED)

    def test_admin_cannot_sign_for_investor(self):
        with self.assertRaises(Forbidden):
            services.sign_contract(self.admin, self.contract.id, "investor")
        with self.assertRaises(Forbidden):
            services.sign_contract(self.outsider, self.contract.id, "entrepreneur")

    def test_unknown_signer_role(self):
        with self.assertRaises(DomainValidationError):
            services.sign_contract(self.admin, self.contract.id, "witness")

    def test_cannot_sign_cancelled_contract(self):
        services.cancel_contract(self.admin, self.contract.id)
        with self.assertRaises(InvalidState):
            services.sign_contract(self.investor, self.contract.id, "investor")

    def test_complete_after_signing(self):
        with self.assertRaises(InvalidState):
            services.complete_contract(self.admin, self.contract.id)

        self._sign_all(self.contract)
        with self.assertRaises(Forbidden):
            services.complete_contract(self.investor, self.contract.id)

        contract = services.complete_contract(self.admin, self.contract.id)
        self.assertEqual(contract.status, Contract.Status.COMPLETED)
        self.investment.refresh_from_db()
        self.assertEqual(self.investment.status, Investment.Status.COMPLETED)

    def test_cannot_cancel_signed_contract(self):
        self._sign_all(self.contract)
        with self.assertRaises(InvalidState):
            services.cancel_contract(self.admin, self.contract.id)

    def test_fully_signed_notification(self):
        services.sign_contract(self.investor, self.contract.id, "investor")
        services.sign_contract(self.entrepreneur, self.contract.id, "entrepreneur")
        with mock.patch("contracts.services.send_contract_signed_email_task.delay") as delay:
            with self.captureOnCommitCallbacks(execute=True):
                services.sign_contract(self.admin, self.contract.id, "admin")
        delay.assert_called_once_with(str(self.contract.pk))


class ContractAPITest(ContractTestBase):
    def setUp(self):
        super().setUp()
        cache.clear()
        self.client = APIClient()

    def _generate(self):
        self.client.force_authenticate(self.investor)
        response = self.client.post(
            reverse("contract-generate"), {"investment_id": str(self.investment.id)}, format="json"
        )
        self.assertEqual(response.status_code, 201, response.data)
        return response.data["contract"]

    def test_generate_twice_is_409(self):
        self._generate()
        response = self.client.post(
            reverse("contract-generate"), {"investment_id": str(self.investment.id)}, format="json"
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error_code"], "invalid_state")

    def test_sign_endpoint(self):
        contract = self._generate()
        url = reverse("contract-sign", args=[contract["id"]])

        response = self.client.post(url, {"signer": "investor"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(response.data["contract"]["investor_signed_at"])

        response = self.client.post(url, {"signer": "entrepreneur"}, format="json")
        self.assertEqual(response.status_code, 403)

        response = self.client.post(url, {"signer": "notary"}, format="json")
        self.assertEqual(response.status_code, 400)

        self.client.force_authenticate(None)
        response = self.client.post(url, {"signer": "investor"}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_detail_and_by_investment(self):
        contract = self._generate()

        response = self.client.get(reverse("contract-detail", args=[contract["id"]]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["contract"]["status"], "active")

        response = self.client.get(reverse("contract-by-investment", args=[self.investment.id]))
        self.assertEqual(response.data["contract"]["id"], contract["id"])

        self.client.force_authenticate(self.outsider)
        response = self.client.get(reverse("contract-detail", args=[contract["id"]]))
        self.assertEqual(response.status_code, 403)

    def test_by_investment_without_contract_is_404(self):
        self.client.force_authenticate(self.investor)
        response = self.client.get(reverse("contract-by-investment", args=[self.investment.id]))
        self.assertEqual(response.status_code, 404)

    def test_download_returns_absolute_url(self):
        contract = self._generate()

        response = self.client.get(reverse("contract-download", args=[contract["id"]]))
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["pdf_url"].startswith("http://testserver/media/contracts/"))

        self.client.force_authenticate(self.outsider)
        response = self.client.get(reverse("contract-download", args=[contract["id"]]))
        self.assertEqual(response.status_code, 403)

    def test_cancel_is_admin_only(self):
        contract = self._generate()
        url = reverse("contract-cancel", args=[contract["id"]])

        self.assertEqual(self.client.post(url).status_code, 403)

        self.client.force_authenticate(self.admin)
        response = self.client.post(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["contract"]["status"], "cancelled")
