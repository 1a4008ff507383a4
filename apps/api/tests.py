from django.test import SimpleTestCase
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import serializers
from rest_framework.test import APITestCase

from apps.accounts.permissions import PermissionMap, Principal, is_allowed

from .exceptions import Conflict, api_exception_handler
from .fixtures import make_admin


class PermissionMapTests(SimpleTestCase):
    def test_parse_accepts_json_text(self):
        grid = PermissionMap.parse('{"sales": {"view": true, "add": false}}')
        self.assertTrue(grid.allows("sales", "view"))
        self.assertFalse(grid.allows("sales", "add"))

    def test_parse_malformed_denies_everything(self):
        for raw in ("{not json", "[1, 2]", 42, None, ""):
            grid = PermissionMap.parse(raw)
            self.assertEqual(grid.as_dict(), {})
            self.assertFalse(grid.allows("sales", "view"))

    def test_only_literal_true_grants(self):
        grid = PermissionMap.parse({"sales": {"view": "true", "add": 1, "edit": True}, "bogus": {"view": True}})
        self.assertFalse(grid.allows("sales", "view"))
        self.assertFalse(grid.allows("sales", "add"))
        self.assertTrue(grid.allows("sales", "edit"))
        self.assertNotIn("bogus", grid.as_dict())

    def test_from_flags_builds_full_grid(self):
        grid = PermissionMap.from_flags({"sales_view": True, "customers_add": "on"})
        self.assertTrue(grid.allows("sales", "view"))
        self.assertTrue(grid.allows("customers", "add"))
        self.assertFalse(grid.allows("reports", "view"))
        self.assertEqual(set(grid.as_dict()), {"dashboard", "sales", "customers", "products", "reports", "agents"})


class IsAllowedTests(SimpleTestCase):
    def test_admin_allows_everything(self):
        admin = Principal(role="admin")
        self.assertTrue(is_allowed(admin, "agents", "delete"))
        self.assertTrue(is_allowed(admin, "reports", "export"))

    def test_access_levels(self):
        full = Principal(role="agent", access_level="full")
        view = Principal(role="agent", access_level="view")
        edit = Principal(role="agent", access_level="edit")
        self.assertTrue(is_allowed(full, "customers", "delete"))
        self.assertTrue(is_allowed(view, "sales", "view"))
        self.assertFalse(is_allowed(view, "sales", "add"))
        self.assertTrue(is_allowed(edit, "sales", "add"))
        self.assertTrue(is_allowed(edit, "products", "edit"))
        self.assertFalse(is_allowed(edit, "customers", "delete"))

    def test_custom_level_reads_the_map(self):
        principal = Principal(
            role="agent",
            access_level="custom",
            permissions=PermissionMap.parse({"sales": {"view": True, "add": True}}),
        )
        self.assertTrue(is_allowed(principal, "sales", "add"))
        self.assertFalse(is_allowed(principal, "sales", "delete"))
        self.assertFalse(is_allowed(principal, "customers", "view"))

    def test_custom_level_with_malformed_map_denies(self):
        principal = Principal(role="agent", access_level="custom", permissions=PermissionMap.parse("{oops"))
        self.assertFalse(is_allowed(principal, "sales", "view"))

    def test_unknown_level_denies(self):
        self.assertFalse(is_allowed(Principal(role="agent", access_level="superuser"), "sales", "view"))

    def test_role_defaults(self):
        accountant = Principal(role="accountant")
        agent = Principal(role="agent")
        self.assertTrue(is_allowed(accountant, "customers", "view"))
        self.assertTrue(is_allowed(accountant, "sales", "payment"))
        self.assertTrue(is_allowed(accountant, "reports", "export"))
        self.assertFalse(is_allowed(accountant, "sales", "add"))
        self.assertTrue(is_allowed(agent, "sales", "add"))
        self.assertTrue(is_allowed(agent, "customers", "edit"))
        self.assertFalse(is_allowed(agent, "products", "edit"))
        self.assertFalse(is_allowed(agent, "reports", "export"))
        self.assertFalse(is_allowed(Principal(role="guest"), "sales", "view"))

    def test_access_level_ignored_for_accountant(self):
        accountant = Principal(role="accountant", access_level="view")
        self.assertTrue(is_allowed(accountant, "reports", "export"))


class ExceptionHandlerTests(SimpleTestCase):
    def test_validation_error_shape(self):
        response = api_exception_handler(serializers.ValidationError({"name": ["Required"]}), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Required")
        self.assertEqual(response.data["errors"], {"name": ["Required"]})

    def test_conflict_and_protected(self):
        self.assertEqual(api_exception_handler(Conflict("Taken"), {}).data, {"error": "Taken"})
        response = api_exception_handler(ProtectedError("in use", set()), {})
        self.assertEqual(response.status_code, 409)

    def test_http404(self):
        response = api_exception_handler(Http404(), {})
        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.data)

    def test_unexpected_error_is_hidden(self):
        with self.assertLogs("apps.api.exceptions", level="ERROR"):
            response = api_exception_handler(RuntimeError("db password leaked"), {})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"error": "Internal server error"})


class RoutingTests(APITestCase):
    def test_unknown_api_path_returns_json_404(self):
        self.client.force_authenticate(make_admin())
        response = self.client.get("/api/does-not-exist/")
        self.assertEqual(response.status_code, 404)

    def test_unauthenticated_api_request_is_401(self):
        response = self.client.get("/api/customers/")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Authentication credentials were not provided."})

    def test_schema_is_published(self):
        self.client.force_authenticate(make_admin())
        response = self.client.get("/api/schema/")
        self.assertEqual(response.status_code, 200)
