from datetime import datetime, timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework.test import APITestCase

from apps.accounts.models import User
from apps.api.fixtures import make_admin, make_agent, make_customer, make_location, make_product, make_sale, make_user

from .models import Customer


class CustomerApiTests(APITestCase):
    def setUp(self):
        self.admin = make_admin()
        self.agent = make_agent()
        self.province, self.city, self.town = make_location()
        self.client.force_authenticate(self.admin)

    def _payload(self, **overrides):
        data = {
            "full_name": "Hamza Ali",
            "customer_type": "B2C",
            "contact": "03001112223",
            "province_id": self.province.pk,
            "city_id": self.city.pk,
            "town_id": self.town.pk,
        }
        data.update(overrides)
        return data

    def test_create_customer(self):
        resp = self.client.post("/api/customers/", self._payload(), format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["city_name"], "Lahore")
        self.assertEqual(Customer.objects.count(), 1)

    def test_b2b_requires_business_name(self):
        resp = self.client.post("/api/customers/", self._payload(customer_type="B2B"), format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["errors"]["business_name"], ["Business name required for B2B customers"])

        resp = self.client.post(
            "/api/customers/", self._payload(customer_type="B2B", business_name="Ali Traders"), format="json"
        )
        self.assertEqual(resp.status_code, 201)

    def test_partial_update_keeps_b2b_rule(self):
        customer = make_customer(customer_type="B2B")
        resp = self.client.patch(f"/api/customers/{customer.pk}/", {"business_name": ""}, format="json")
        self.assertEqual(resp.status_code, 400)
        resp = self.client.patch(f"/api/customers/{customer.pk}/", {"contact": "0311"}, format="json")
        self.assertEqual(resp.status_code, 200)

    def test_location_hierarchy_is_checked(self):
        _, other_city, other_town = make_location("KPK", "Peshawar", "Hayatabad")
        resp = self.client.post("/api/customers/", self._payload(city_id=other_city.pk), format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("city_id", resp.data["errors"])

        resp = self.client.post("/api/customers/", self._payload(town_id=other_town.pk), format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("town_id", resp.data["errors"])

    def test_unknown_foreign_key_is_validation_error(self):
        resp = self.client.post("/api/customers/", self._payload(town_id=9999), format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("town_id", resp.data["errors"])

    def test_required_fields(self):
        resp = self.client.post("/api/customers/", {"customer_type": "B2C"}, format="json")
        self.assertEqual(resp.status_code, 400)
        for field in ("full_name", "contact", "province_id", "city_id", "town_id"):
            self.assertIn(field, resp.data["errors"])

    def test_list_newest_first_with_type_filter(self):
        older = make_customer(full_name="Older", customer_type="B2B")
        Customer.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=3))
        make_customer(full_name="Newer")
        names = [c["full_name"] for c in self.client.get("/api/customers/").data]
        self.assertEqual(names, ["Newer", "Older"])
        names = [c["full_name"] for c in self.client.get("/api/customers/?customer_type=B2B").data]
        self.assertEqual(names, ["Older"])

    def test_retrieve_includes_sales_and_summary(self):
        customer = make_customer()
        product = make_product(price="100")
        make_sale(customer, product, self.agent, quantity="2")
        make_sale(customer, product, self.agent, quantity="3", payment_type="credit", payment_status="pending")

        resp = self.client.get(f"/api/customers/{customer.pk}/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["customer"]["id"], customer.pk)
        self.assertEqual(len(resp.data["sales"]), 2)
        summary = resp.data["summary"]
        self.assertEqual(summary["total_orders"], 2)
        self.assertEqual(Decimal(summary["total_spent"]), Decimal("500.00"))
        self.assertEqual(Decimal(summary["pending_amount"]), Decimal("300.00"))

    def test_retrieve_without_sales_has_zero_summary(self):
        customer = make_customer()
        summary = self.client.get(f"/api/customers/{customer.pk}/").data["summary"]
        self.assertEqual(summary["total_orders"], 0)
        self.assertEqual(Decimal(summary["total_spent"]), Decimal("0"))

    def test_delete_with_sales_conflicts_for_every_role(self):
        customer = make_customer()
        make_sale(customer, make_product(), self.agent)
        full_agent = make_agent(email="full@example.com", access_level="full")

        for user in (self.admin, full_agent.user):
            self.client.force_authenticate(user)
            resp = self.client.delete(f"/api/customers/{customer.pk}/")
            self.assertEqual(resp.status_code, 409)
            self.assertEqual(resp.data, {"error": "Cannot delete customer with existing sales records"})
        self.assertTrue(Customer.objects.filter(pk=customer.pk).exists())

    def test_delete_without_sales(self):
        customer = make_customer()
        self.assertEqual(self.client.delete(f"/api/customers/{customer.pk}/").status_code, 204)

    def test_permissions_by_role(self):
        customer = make_customer()
        accountant = make_user(email="acc@example.com", role=User.ROLE_ACCOUNTANT)
        viewer = make_agent(email="viewer@example.com", access_level="view")
        custom = make_agent(
            email="custom@example.com", access_level="custom", permissions={"customers": {"view": True}}
        )

        self.client.force_authenticate(accountant)
        self.assertEqual(self.client.get("/api/customers/").status_code, 200)
        self.assertEqual(self.client.post("/api/customers/", self._payload(), format="json").status_code, 403)

        self.client.force_authenticate(self.agent.user)
        self.assertEqual(self.client.post("/api/customers/", self._payload(), format="json").status_code, 201)
        self.assertEqual(self.client.delete(f"/api/customers/{customer.pk}/").status_code, 403)

        self.client.force_authenticate(viewer.user)
        resp = self.client.patch(f"/api/customers/{customer.pk}/", {"contact": "1"}, format="json")
        self.assertEqual(resp.status_code, 403)

        self.client.force_authenticate(custom.user)
        self.assertEqual(self.client.get("/api/customers/").status_code, 200)
        self.assertEqual(self.client.get("/api/sales/").status_code, 403)

    def test_missing_customer_is_404(self):
        resp = self.client.get("/api/customers/9999/")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("error", resp.data)


class DashboardApiTests(APITestCase):
    def setUp(self):
        self.agent = make_agent()
        self.client.force_authenticate(make_admin())

    def test_empty_dashboard_reports_zeros(self):
        resp = self.client.get("/api/dashboard/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["totalRevenue"], Decimal("0"))
        self.assertEqual(resp.data["totalSales"], 0)
        self.assertEqual(resp.data["pendingPayments"], Decimal("0"))
        self.assertEqual(resp.data["paymentTypes"], [])

    def test_today_figures_and_all_time_pending(self):
        customer = make_customer()
        product = make_product(price="100")
        make_sale(customer, product, self.agent, quantity="2", sales_channel="call")
        yesterday = timezone.make_aware(datetime.combine(timezone.localdate() - timedelta(days=1), datetime.min.time()))
        make_sale(
            customer, product, self.agent, quantity="5",
            payment_type="credit", payment_status="pending", created_at=yesterday,
        )

        data = self.client.get("/api/dashboard/").data
        self.assertEqual(data["totalRevenue"], Decimal("200.00"))
        self.assertEqual(data["totalSales"], 1)
        self.assertEqual(data["totalCustomers"], 1)
        self.assertEqual(data["pendingPayments"], Decimal("500.00"))
        self.assertEqual(data["salesChannels"], [{"channel": "call", "count": 1, "revenue": Decimal("200.00")}])
        self.assertEqual(data["paymentTypes"], [{"type": "cash", "amount": Decimal("200.00")}])


class PageRouteTests(APITestCase):
    def test_anonymous_page_redirects_to_login(self):
        resp = self.client.get("/dashboard/")
        self.assertRedirects(resp, "/login/?next=/dashboard/", fetch_redirect_response=False)

    def test_root_shows_login_or_forwards(self):
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "login-form")

        self.client.force_login(make_admin())
        self.assertRedirects(self.client.get("/"), "/dashboard/", fetch_redirect_response=False)

    def test_pages_render_for_signed_in_users(self):
        customer = make_customer()
        self.client.force_login(make_agent().user)
        for path in (
            "/dashboard/",
            "/customers/",
            "/customers/edit/",
            f"/customers/edit/{customer.pk}/",
            "/sales/",
            "/sales/new/",
            "/products/",
            "/reports/",
            "/sales-agents/",
        ):
            self.assertEqual(self.client.get(path).status_code, 200, path)

    def test_unknown_page_redirects_to_login(self):
        self.client.force_login(make_admin())
        resp = self.client.get("/no-such-page/")
        self.assertRedirects(resp, "/login/", fetch_redirect_response=False)
