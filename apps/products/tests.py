from rest_framework.test import APITestCase

from apps.api.fixtures import make_admin, make_agent, make_customer, make_product, make_sale

from .models import Product


class ProductApiTests(APITestCase):
    def setUp(self):
        self.admin = make_admin()
        self.client.force_authenticate(self.admin)

    def test_create_validates_positive_numbers(self):
        resp = self.client.post(
            "/api/products/",
            {"name": "Flour 5kg Bag", "unit": "bag", "weight_per_unit": "0", "price_per_unit": "450"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("weight_per_unit", resp.data["errors"])

        resp = self.client.post(
            "/api/products/",
            {"name": "  ", "unit": "sack", "weight_per_unit": "5", "price_per_unit": "-1"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(set(resp.data["errors"]), {"name", "unit", "price_per_unit"})

    def test_create_and_list_active_only(self):
        resp = self.client.post(
            "/api/products/",
            {"name": "Flour 5kg Bag", "category": "Premium", "unit": "bag", "weight_per_unit": "5", "price_per_unit": "450"},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        make_product(name="Old Flour", is_active=False)

        names = [p["name"] for p in self.client.get("/api/products/").data]
        self.assertEqual(names, ["Flour 5kg Bag", "Old Flour"])
        names = [p["name"] for p in self.client.get("/api/products/?active=1").data]
        self.assertEqual(names, ["Flour 5kg Bag"])

    def test_toggle_flips_active_flag(self):
        product = make_product()
        resp = self.client.post(f"/api/products/{product.pk}/toggle/")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.data["is_active"])
        self.client.post(f"/api/products/{product.pk}/toggle/")
        product.refresh_from_db()
        self.assertTrue(product.is_active)

    def test_delete_blocked_by_sales(self):
        product = make_product()
        agent = make_agent()
        make_sale(make_customer(), product, agent)
        resp = self.client.delete(f"/api/products/{product.pk}/")
        self.assertEqual(resp.status_code, 409)
        self.assertTrue(Product.objects.filter(pk=product.pk).exists())

        unused = make_product(name="Unused")
        self.assertEqual(self.client.delete(f"/api/products/{unused.pk}/").status_code, 204)

    def test_default_agent_cannot_edit_products(self):
        product = make_product()
        self.client.force_authenticate(make_agent().user)
        self.assertEqual(self.client.get("/api/products/").status_code, 200)
        self.assertEqual(self.client.post(f"/api/products/{product.pk}/toggle/").status_code, 403)
        resp = self.client.patch(f"/api/products/{product.pk}/", {"price_per_unit": "1"}, format="json")
        self.assertEqual(resp.status_code, 403)
