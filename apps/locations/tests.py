from rest_framework.test import APITestCase

from apps.api.fixtures import make_agent, make_location


class LocationApiTests(APITestCase):
    def setUp(self):
        self.punjab, self.lahore, self.gulberg = make_location("Punjab", "Lahore", "Gulberg")
        make_location("Punjab", "Faisalabad", "Jaranwala Road")
        make_location("Punjab", "Lahore", "DHA")
        self.kpk, self.peshawar, _ = make_location("KPK", "Peshawar", "Hayatabad")
        self.client.force_authenticate(make_agent().user)

    def test_provinces_sorted_by_name(self):
        resp = self.client.get("/api/locations/provinces/")
        self.assertEqual([p["name"] for p in resp.data], ["KPK", "Punjab"])

    def test_cities_of_province(self):
        resp = self.client.get(f"/api/locations/cities/{self.punjab.pk}/")
        self.assertEqual([c["name"] for c in resp.data], ["Faisalabad", "Lahore"])
        self.assertEqual(resp.data[0]["province_id"], self.punjab.pk)

    def test_towns_of_city(self):
        resp = self.client.get(f"/api/locations/towns/{self.lahore.pk}/")
        self.assertEqual([t["name"] for t in resp.data], ["DHA", "Gulberg"])

    def test_unknown_parent_gives_empty_list(self):
        self.assertEqual(self.client.get("/api/locations/towns/9999/").data, [])

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get("/api/locations/provinces/").status_code, 401)
