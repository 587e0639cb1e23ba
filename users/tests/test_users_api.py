from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from core.tests.utils import make_user


class UserAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user("admin", role="admin")
        self.investor = make_user("moussa")
        self.other = make_user("fatou")

    def test_users_only_see_themselves(self):
        self.client.force_authenticate(self.investor)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([u["username"] for u in response.data], ["moussa"])

        response = self.client.get(reverse("user-detail", args=[self.other.id]))
        self.assertEqual(response.status_code, 404)

    def test_admin_sees_everyone(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(len(response.data), 3)

    def test_update_profile_keeps_role(self):
        self.client.force_authenticate(self.investor)
        response = self.client.patch(
            reverse("user-me"), {"phone": "+221770000000", "role": "admin"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["phone"], "+221770000000")
        self.assertEqual(response.data["role"], "investor")

    def test_superuser_counts_as_admin(self):
        root = make_user("root", is_superuser=True, is_staff=True)
        self.client.force_authenticate(root)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(len(response.data), 4)
