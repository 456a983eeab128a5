from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from common.testing import make_user
from suppliers.models import SupplierProfile
from users.identity import IdentityProvider


class StaticIdentityProvider(IdentityProvider):
    """Trusts `token-<auth_id>` credentials."""

    def verify(self, credential):
        if credential.startswith("token-"):
            return credential[len("token-"):]
        return None


class AuthSmokeTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_and_token(self):
        r = self.client.post("/api/auth/register/", {
            "email": "Test@Example.com",
            "password": "pass1234",
            "name": "Test",
        }, format="json")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["role"], "BUYER")
        self.assertIsNone(r.data["supplier_profile"])

        r = self.client.post("/api/token/", {"username": "test@example.com", "password": "pass1234"}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertIn("access", r.data)
        self.assertIn("refresh", r.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['access']}")
        r = self.client.get("/api/auth/me/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["email"], "test@example.com")
        self.assertEqual(r.data["name"], "Test")

    def test_supplier_registration_creates_pending_profile(self):
        r = self.client.post("/api/auth/register/", {
            "email": "roaster@example.com",
            "password": "pass1234",
            "role": "SUPPLIER",
            "businessName": "Najd Roasters",
            "businessNameAr": "محامص نجد",
            "iban": "SA0380000000608010167519",
        }, format="json")
        self.assertEqual(r.status_code, 201, r.data)
        profile = SupplierProfile.objects.get(user__email="roaster@example.com")
        self.assertEqual(profile.status, SupplierProfile.Status.PENDING)
        self.assertEqual(r.data["supplier_profile"]["business_name"], "Najd Roasters")

    def test_cannot_register_as_admin(self):
        r = self.client.post("/api/auth/register/", {
            "email": "boss@example.com", "password": "pass1234", "role": "ADMIN",
        }, format="json")
        self.assertEqual(r.status_code, 400)

    def test_duplicate_email(self):
        make_user(email="taken@example.com")
        r = self.client.post("/api/auth/register/", {"email": "TAKEN@example.com", "password": "pass1234"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "VALIDATION")

    def test_bad_token_is_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
        r = self.client.get("/api/auth/me/")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.data["code"], "UNAUTHORIZED")

    def test_anonymous_me_is_401(self):
        r = self.client.get("/api/auth/me/")
        self.assertEqual(r.status_code, 401)

    @override_settings(MARKETPLACE={"IDENTITY_PROVIDER": "users.tests.StaticIdentityProvider"})
    def test_identity_provider_is_pluggable(self):
        user = make_user()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer token-{user.auth_id}")
        r = self.client.get("/api/auth/me/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["id"], user.pk)

        self.client.credentials(HTTP_AUTHORIZATION="Bearer token-nobody")
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 401)


class AddressTests(TestCase):
    def test_addresses_are_per_user(self):
        c = APIClient()
        owner = make_user()
        c.force_authenticate(owner)
        r = c.post("/api/addresses/", {"city": "Jeddah", "street": "Tahlia St"}, format="json")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(len(c.get("/api/addresses/").data), 1)

        c.force_authenticate(make_user())
        self.assertEqual(c.get("/api/addresses/").data, [])
