from unittest import mock

from django.test import override_settings
from rest_framework.test import APITestCase

from apps.api.fixtures import PASSWORD, make_admin, make_agent, make_user

from .models import SalesAgent, User

ONBOARD_URL = "/api/sales-agents/onboard/"


class AuthApiTests(APITestCase):
    def setUp(self):
        self.user = make_user(email="clerk@example.com", role=User.ROLE_ACCOUNTANT, name="Clerk")

    def test_login_sets_session(self):
        resp = self.client.post("/api/auth/login/", {"email": "clerk@example.com", "password": PASSWORD}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data["success"])
        self.assertEqual(resp.data["user"]["role"], "accountant")

        status_resp = self.client.get("/api/auth/status/")
        self.assertTrue(status_resp.data["authenticated"])
        self.assertEqual(status_resp.data["user"]["email"], "clerk@example.com")

    def test_login_ignores_email_case(self):
        resp = self.client.post("/api/auth/login/", {"email": "Clerk@Example.COM", "password": PASSWORD}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["user"]["email"], "clerk@example.com")

    def test_login_rejects_bad_password(self):
        resp = self.client.post("/api/auth/login/", {"email": "clerk@example.com", "password": "nope"}, format="json")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.data, {"error": "Invalid email or password"})

    def test_login_requires_fields(self):
        resp = self.client.post("/api/auth/login/", {"email": "clerk@example.com"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("password", resp.data["errors"])

    def test_logout_clears_session(self):
        self.client.login(username="clerk@example.com", password=PASSWORD)
        self.client.post("/api/auth/logout/")
        self.assertFalse(self.client.get("/api/auth/status/").data["authenticated"])

    def test_jwt_token_grants_api_access(self):
        resp = self.client.post("/api/auth/token/", {"email": "clerk@example.com", "password": PASSWORD}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")
        self.assertEqual(self.client.get("/api/products/").status_code, 200)

    def test_users_list_is_admin_only(self):
        self.client.force_authenticate(self.user)
        self.assertEqual(self.client.get("/api/auth/users/").status_code, 403)

        self.client.force_authenticate(make_admin())
        resp = self.client.get("/api/auth/users/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([u["name"] for u in resp.data], ["Admin", "Clerk"])


class OnboardingTests(APITestCase):
    def setUp(self):
        self.admin = make_admin()
        self.client.force_authenticate(self.admin)

    def test_custom_flags_become_permission_map(self):
        payload = {
            "name": "Sara",
            "email": "Sara@Example.com",
            "password": "longenough",
            "agent_type": "B2B",
            "commission_rate": "3.5",
            "access_level": "custom",
            "sales_view": True,
            "sales_add": True,
            "customers_view": True,
        }
        resp = self.client.post(ONBOARD_URL, payload, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["email"], "sara@example.com")

        user = User.objects.get(email="sara@example.com")
        self.assertEqual(user.role, User.ROLE_AGENT)
        self.assertEqual(user.access_level, "custom")
        self.assertIs(user.permissions["sales"]["add"], True)
        self.assertIs(user.permissions["sales"]["delete"], False)
        self.assertIs(user.permissions["reports"]["view"], False)
        self.assertEqual(resp.data["permissions"], user.permissions)
        self.assertTrue(user.check_password("longenough"))
        self.assertEqual(user.agent_profile.agent_type, "B2B")

    def test_onboarded_agent_signs_in_with_address_as_given(self):
        payload = {"name": "Ali", "email": "Ali@Example.com", "password": "secret99"}
        self.assertEqual(self.client.post(ONBOARD_URL, payload, format="json").status_code, 201)

        self.client.force_authenticate(None)
        credentials = {"email": "Ali@Example.com", "password": "secret99"}
        resp = self.client.post("/api/auth/login/", credentials, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["user"]["email"], "ali@example.com")
        self.assertEqual(self.client.post("/api/auth/token/", credentials, format="json").status_code, 200)

    def test_non_custom_level_stores_empty_map(self):
        resp = self.client.post(
            ONBOARD_URL,
            {"name": "Omar", "email": "omar@example.com", "access_level": "full", "sales_delete": True},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(User.objects.get(email="omar@example.com").permissions, {})

    @override_settings(AGENT_TEMP_PASSWORD="temp-pass-1")
    def test_missing_password_uses_temporary_password(self):
        resp = self.client.post(ONBOARD_URL, {"name": "Bilal", "email": "bilal@example.com"}, format="json")
        self.assertEqual(resp.status_code, 201)
        user = User.objects.get(email="bilal@example.com")
        self.assertTrue(user.check_password("temp-pass-1"))
        self.assertEqual(user.access_level, "view")

    def test_short_password_rejected(self):
        resp = self.client.post(
            ONBOARD_URL, {"name": "Short", "email": "short@example.com", "password": "123"}, format="json"
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("password", resp.data["errors"])
        self.assertFalse(User.objects.filter(email="short@example.com").exists())

    def test_duplicate_email_conflicts_without_partial_rows(self):
        make_user(email="taken@example.com")
        agents_before = SalesAgent.objects.count()
        resp = self.client.post(ONBOARD_URL, {"name": "Dup", "email": "TAKEN@example.com"}, format="json")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data, {"error": "A user with this email already exists"})
        self.assertEqual(User.objects.filter(email__iexact="taken@example.com").count(), 1)
        self.assertEqual(SalesAgent.objects.count(), agents_before)

    def test_profile_failure_rolls_back_user(self):
        with mock.patch.object(SalesAgent.objects, "create", side_effect=RuntimeError("disk full")):
            with self.assertLogs("apps.api.exceptions", level="ERROR"):
                resp = self.client.post(ONBOARD_URL, {"name": "Ghost", "email": "ghost@example.com"}, format="json")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.data, {"error": "Internal server error"})
        self.assertFalse(User.objects.filter(email="ghost@example.com").exists())

    def test_onboarding_is_admin_only(self):
        agent = make_agent(access_level="full")
        self.client.force_authenticate(agent.user)
        resp = self.client.post(ONBOARD_URL, {"name": "X", "email": "x@example.com"}, format="json")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data, {"error": "Permission denied"})


class SalesAgentApiTests(APITestCase):
    def setUp(self):
        self.b2b = make_agent(email="b2b@example.com", name="Bea", agent_type="B2B")
        self.both = make_agent(email="both@example.com", name="Bo", agent_type="Both")
        self.idle = make_agent(email="idle@example.com", name="Ida", agent_type="B2C", is_active=False)
        self.client.force_authenticate(make_admin())

    def test_list_hides_inactive_and_filters_type(self):
        names = [a["name"] for a in self.client.get("/api/sales-agents/").data]
        self.assertEqual(names, ["Bea", "Bo"])

        names = [a["name"] for a in self.client.get("/api/sales-agents/?type=B2C").data]
        self.assertEqual(names, ["Bo"])

        names = [a["name"] for a in self.client.get("/api/sales-agents/?include_inactive=1").data]
        self.assertEqual(names, ["Bea", "Bo", "Ida"])

    def test_commission_rate_bounds(self):
        resp = self.client.patch(f"/api/sales-agents/{self.b2b.pk}/", {"commission_rate": "150"}, format="json")
        self.assertEqual(resp.status_code, 400)
        resp = self.client.patch(f"/api/sales-agents/{self.b2b.pk}/", {"commission_rate": "7.5"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.b2b.refresh_from_db()
        self.assertEqual(str(self.b2b.commission_rate), "7.50")

    def test_create_links_existing_user_once(self):
        user = make_user(email="new@example.com", name="Nia")
        resp = self.client.post("/api/sales-agents/", {"user_id": user.pk, "agent_type": "B2C"}, format="json")
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post("/api/sales-agents/", {"user_id": user.pk}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_only_agent_accounts_can_get_a_profile(self):
        clerk = make_user(email="clerk@example.com", role=User.ROLE_ACCOUNTANT)
        resp = self.client.post("/api/sales-agents/", {"user_id": clerk.pk}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("user_id", resp.data["errors"])
        self.assertFalse(SalesAgent.objects.filter(user=clerk).exists())

    def test_agents_can_read_but_not_change(self):
        self.client.force_authenticate(self.b2b.user)
        self.assertEqual(self.client.get("/api/sales-agents/").status_code, 200)
        resp = self.client.patch(f"/api/sales-agents/{self.b2b.pk}/", {"commission_rate": "9"}, format="json")
        self.assertEqual(resp.status_code, 403)
