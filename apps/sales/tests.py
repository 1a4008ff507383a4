from decimal import Decimal

from django.test import SimpleTestCase
from rest_framework.test import APITestCase

from apps.accounts.models import User
from apps.api.fixtures import make_admin, make_agent, make_customer, make_product, make_sale, make_user

from .models import Sale
from .pricing import PricingError, compute_sale_totals


class ComputeSaleTotalsTests(SimpleTestCase):
    def test_reference_example(self):
        totals = compute_sale_totals(10, 85, 5)
        self.assertEqual(totals.subtotal, Decimal("850"))
        self.assertEqual(totals.tax_amount, Decimal("42.5"))
        self.assertEqual(totals.total_price, Decimal("892.5"))

    def test_missing_tax_rate_is_zero(self):
        totals = compute_sale_totals("3", "450.00")
        self.assertEqual(totals.tax_amount, Decimal("0"))
        self.assertEqual(totals.total_price, Decimal("1350.00"))

    def test_exact_until_rounded(self):
        totals = compute_sale_totals("1.5", "0.33", "7.5")
        self.assertEqual(totals.subtotal, Decimal("0.495"))
        rounded = totals.rounded()
        self.assertEqual(rounded.subtotal, Decimal("0.50"))
        self.assertEqual(rounded.tax_amount, Decimal("0.04"))
        self.assertEqual(rounded.total_price, Decimal("0.53"))

    def test_rejects_non_positive_inputs(self):
        for quantity, price, rate in ((0, 10, 0), (-1, 10, 0), (1, 0, 0), (1, 10, -5), ("abc", 10, 0)):
            with self.assertRaises(PricingError):
                compute_sale_totals(quantity, price, rate)


class SaleModelTests(APITestCase):
    def setUp(self):
        self.sale = make_sale(make_customer(), make_product(price="85"), make_agent(), quantity="10", tax_rate=Decimal("5"))

    def test_totals_stored_on_save(self):
        self.assertEqual(self.sale.subtotal, Decimal("850.00"))
        self.assertEqual(self.sale.tax_amount, Decimal("42.50"))
        self.assertEqual(self.sale.total_price, Decimal("892.50"))

    def test_recompute_is_idempotent(self):
        self.sale.save()
        self.sale.save()
        self.sale.refresh_from_db()
        self.assertEqual(self.sale.total_price, Decimal("892.50"))

    def test_stale_total_is_overwritten(self):
        self.sale.total_price = Decimal("1")
        self.sale.save(update_fields=["total_price"])
        self.sale.refresh_from_db()
        self.assertEqual(self.sale.total_price, Decimal("892.50"))


class SaleApiTests(APITestCase):
    def setUp(self):
        self.admin = make_admin()
        self.agent = make_agent()
        self.customer = make_customer()
        self.product = make_product(price="85")
        self.client.force_authenticate(self.admin)

    def _payload(self, **overrides):
        data = {
            "customer_id": self.customer.pk,
            "product_id": self.product.pk,
            "sales_agent_id": self.agent.pk,
            "quantity": "10",
            "price_per_unit": "85",
            "tax_rate": "5",
            "payment_type": "cash",
            "payment_status": "paid",
            "sales_channel": "whatsapp",
        }
        data.update(overrides)
        return data

    def test_create_computes_totals_and_ignores_client_total(self):
        resp = self.client.post("/api/sales/", self._payload(total_price="1.00", subtotal="2.00"), format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["subtotal"], "850.00")
        self.assertEqual(resp.data["tax_amount"], "42.50")
        self.assertEqual(resp.data["total_price"], "892.50")
        self.assertEqual(resp.data["agent_name"], "Agent Smith")
        self.assertEqual(resp.data["city_name"], "Lahore")

    def test_update_recomputes(self):
        sale = make_sale(self.customer, self.product, self.agent, quantity="1")
        resp = self.client.patch(f"/api/sales/{sale.pk}/", {"quantity": "4", "total_price": "9"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["total_price"], "340.00")

    def test_tax_rate_defaults_to_zero(self):
        payload = self._payload()
        payload.pop("tax_rate")
        resp = self.client.post("/api/sales/", payload, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["total_price"], "850.00")

    def test_rejects_bad_numbers(self):
        resp = self.client.post("/api/sales/", self._payload(quantity="0", price_per_unit="-3", tax_rate="-1"), format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(set(resp.data["errors"]), {"quantity", "price_per_unit", "tax_rate"})
        self.assertEqual(Sale.objects.count(), 0)

    def test_total_beyond_column_range_is_rejected(self):
        resp = self.client.post(
            "/api/sales/", self._payload(quantity="99999999.99", price_per_unit="99999999.99"), format="json"
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("total_price", resp.data["errors"])
        self.assertEqual(Sale.objects.count(), 0)
        self.assertEqual(self.client.get("/api/sales/").status_code, 200)

    def test_update_that_overflows_total_is_rejected(self):
        sale = make_sale(self.customer, self.product, self.agent, quantity="1", price="999")
        resp = self.client.patch(f"/api/sales/{sale.pk}/", {"quantity": "99999999.99"}, format="json")
        self.assertEqual(resp.status_code, 400)
        sale.refresh_from_db()
        self.assertEqual(sale.quantity, Decimal("1.00"))

    def test_unknown_references_are_validation_errors(self):
        resp = self.client.post("/api/sales/", self._payload(customer_id=9999, product_id=9999), format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("customer_id", resp.data["errors"])
        self.assertIn("product_id", resp.data["errors"])

    def test_agent_defaults_to_requester_profile(self):
        self.client.force_authenticate(self.agent.user)
        payload = self._payload()
        payload.pop("sales_agent_id")
        resp = self.client.post("/api/sales/", payload, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["sales_agent_id"], self.agent.pk)

    def test_agent_required_without_profile(self):
        payload = self._payload()
        payload.pop("sales_agent_id")
        resp = self.client.post("/api/sales/", payload, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("sales_agent_id", resp.data["errors"])

    def test_payment_status_update(self):
        sale = make_sale(self.customer, self.product, self.agent, payment_type="credit", payment_status="pending")
        accountant = make_user(email="acc@example.com", role=User.ROLE_ACCOUNTANT)

        self.client.force_authenticate(self.agent.user)
        resp = self.client.patch(f"/api/sales/{sale.pk}/payment/", {"payment_status": "paid"}, format="json")
        self.assertEqual(resp.status_code, 403)

        self.client.force_authenticate(accountant)
        resp = self.client.patch(f"/api/sales/{sale.pk}/payment/", {"payment_status": "bogus"}, format="json")
        self.assertEqual(resp.status_code, 400)
        resp = self.client.patch(f"/api/sales/{sale.pk}/payment/", {"payment_status": "paid"}, format="json")
        self.assertEqual(resp.status_code, 200)
        sale.refresh_from_db()
        self.assertEqual(sale.payment_status, "paid")

    def test_accountant_cannot_record_sales(self):
        self.client.force_authenticate(make_user(email="acc@example.com", role=User.ROLE_ACCOUNTANT))
        self.assertEqual(self.client.post("/api/sales/", self._payload(), format="json").status_code, 403)
        self.assertEqual(self.client.get("/api/sales/").status_code, 200)

    def test_list_is_newest_first(self):
        first = make_sale(self.customer, self.product, self.agent)
        second = make_sale(self.customer, self.product, self.agent)
        ids = [s["id"] for s in self.client.get("/api/sales/").data]
        self.assertEqual(ids, [second.pk, first.pk])

    def test_delete_sale(self):
        sale = make_sale(self.customer, self.product, self.agent)
        self.assertEqual(self.client.delete(f"/api/sales/{sale.pk}/").status_code, 204)
        self.assertFalse(Sale.objects.exists())
