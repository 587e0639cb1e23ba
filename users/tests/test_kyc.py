from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from core.exceptions import Forbidden, InvalidState, NotFound
from core.services import ActivityService
from core.tests.utils import make_user
from users import services
from users.models import User


class KYCReviewServiceTest(TestCase):
    def setUp(self):
        self.admin = make_user("admin", role=User.Role.ADMIN)
        self.investor = make_user("moussa")
        self.entrepreneur = make_user("awa", role=User.Role.ENTREPRENEUR)

    def test_approve_records_decision_and_activity(self):
        user = services.approve_kyc(self.admin, self.investor.id)

        self.assertEqual(user.kyc_status, User.ReviewStatus.APPROVED)
        self.assertIsNotNone(user.kyc_reviewed_at)
        self.investor.refresh_from_db()
        self.assertEqual(self.investor.kyc_status, User.ReviewStatus.APPROVED)

        activity = ActivityService.history_for(self.investor).get()
        self.assertEqual(activity.verb, "kyc.approve")
        self.assertEqual(activity.actor, self.admin)

    def test_reject_keeps_reason(self):
        user = services.reject_kyc(self.admin, self.investor.id, "ID document expired")

        self.assertEqual(user.kyc_status, User.ReviewStatus.REJECTED)
        self.assertEqual(user.kyc_rejection_reason, "ID document expired")
        activity = ActivityService.history_for(self.investor).get()
        self.assertEqual(activity.metadata["reason"], "ID document expired")

    def test_decision_can_be_revisited_but_not_repeated(self):
        services.reject_kyc(self.admin, self.investor.id, "blurry scan")
        user = services.approve_kyc(self.admin, self.investor.id)
        self.assertEqual(user.kyc_rejection_reason, "")

        with self.assertRaises(InvalidState):
            services.approve_kyc(self.admin, self.investor.id)

    def test_only_admins_review_and_not_themselves(self):
        with self.assertRaises(Forbidden):
            services.approve_kyc(self.entrepreneur, self.investor.id)
        with self.assertRaises(Forbidden):
            services.approve_kyc(self.admin, self.admin.id)
        with self.assertRaises(Forbidden):
            services.kyc_queue(self.investor)

        self.investor.refresh_from_db()
        self.assertEqual(self.investor.kyc_status, User.ReviewStatus.PENDING)

    def test_unknown_user(self):
        with self.assertRaises(NotFound):
            services.approve_kyc(self.admin, 999999)

    def test_queue_lists_pending_participants_only(self):
        services.approve_kyc(self.admin, self.entrepreneur.id)

        queue = list(services.kyc_queue(self.admin))
        self.assertEqual(queue, [self.investor])


class KYCAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user("admin", role=User.Role.ADMIN)
        self.investor = make_user("moussa")
        self.other = make_user("fatou")

    def test_own_status(self):
        self.client.force_authenticate(self.investor)
        response = self.client.get(reverse("kyc-status"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["kyc_status"], "pending")
        self.assertEqual(response.data["aml_status"], "pending")

        self.client.force_authenticate(None)
        self.assertEqual(self.client.get(reverse("kyc-status")).status_code, 401)

    def test_queue_is_admin_only(self):
        self.client.force_authenticate(self.investor)
        self.assertEqual(self.client.get(reverse("kyc-queue")).status_code, 403)

        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("kyc-queue"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(
            {u["username"] for u in response.data["results"]}, {"moussa", "fatou"}
        )

    def test_approve_and_reject(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post(reverse("kyc-approve", args=[self.investor.id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["kyc_status"], "approved")

        response = self.client.post(reverse("kyc-approve", args=[self.investor.id]))
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error_code"], "invalid_state")

        response = self.client.post(
            reverse("kyc-reject", args=[self.other.id]), {"reason": "Name mismatch"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["kyc_status"], "rejected")

        self.client.force_authenticate(self.other)
        response = self.client.get(reverse("kyc-status"))
        self.assertEqual(response.data["kyc_rejection_reason"], "Name mismatch")

    def test_non_admin_cannot_decide(self):
        self.client.force_authenticate(self.investor)
        response = self.client.post(reverse("kyc-approve", args=[self.other.id]))
        self.assertEqual(response.status_code, 403)

    def test_unknown_user_is_404(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("kyc-reject", args=[999999]), {}, format="json")
        self.assertEqual(response.status_code, 404)
