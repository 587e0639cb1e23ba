from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

User = get_user_model()

PASSWORD = "S3cure-pass-2024"


class AuthAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def _signup(self, **overrides):
        payload = {
            "username": "awa",
            "email": "awa@example.com",
            "password": PASSWORD,
            "role": "entrepreneur",
        }
        payload.update(overrides)
        return self.client.post(reverse("signup"), payload, format="json")

    def test_signup_returns_tokens(self):
        response = self._signup()

        self.assertEqual(response.status_code, 201, response.data)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["role"], "entrepreneur")
        self.assertTrue(User.objects.get(username="awa").check_password(PASSWORD))

    def test_signup_defaults_to_investor(self):
        response = self._signup(role="")
        self.assertEqual(response.status_code, 400)

        payload = {"username": "moussa", "email": "moussa@example.com", "password": PASSWORD}
        response = self.client.post(reverse("signup"), payload, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["user"]["role"], "investor")

    def test_cannot_self_register_as_admin(self):
        response = self._signup(role="admin")
        self.assertEqual(response.status_code, 400)
        self.assertIn("role", response.data["errors"])
        self.assertFalse(User.objects.filter(username="awa").exists())

    def test_duplicate_email_rejected(self):
        self._signup()
        response = self._signup(username="awa2", email="AWA@example.com")
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.data["errors"])

    def test_login_by_email(self):
        self._signup()
        response = self.client.post(
            reverse("login"), {"email": "awa@example.com", "password": PASSWORD}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get(reverse("auth-me"))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["username"], "awa")

    def test_login_wrong_password(self):
        self._signup()
        response = self.client.post(
            reverse("login"), {"email": "awa@example.com", "password": "wrong-password"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])

    def test_refresh_token(self):
        refresh = self._signup().data["refresh"]
        response = self.client.post(reverse("jwt-refresh"), {"refresh": refresh}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)

    def test_me_requires_authentication(self):
        response = self.client.get(reverse("auth-me"))
        self.assertEqual(response.status_code, 401)
