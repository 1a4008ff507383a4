from datetime import date, datetime, time
from decimal import Decimal
from io import BytesIO

from django.db.models import Q
from django.test import SimpleTestCase
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework.exceptions import ValidationError
from rest_framework.test import APITestCase

from apps.accounts.models import User
from apps.api.fixtures import make_admin, make_agent, make_customer, make_location, make_product, make_sale, make_user

from .aggregator import EXPORT_COLUMNS, SalesReport
from .filters import CLAUSES, ReportFilters
from .pdf import build_pdf


def at(day, hour=12):
    return timezone.make_aware(datetime.combine(day, time(hour, 0)))


class ReportFiltersTests(SimpleTestCase):
    def test_absent_filters_add_no_predicate(self):
        filters = ReportFilters.from_query({"region": "", "start_date": ""})
        self.assertTrue(filters.is_empty())
        self.assertEqual(str(filters.as_q()), str(ReportFilters().as_q()))

    def test_invalid_values_raise(self):
        for params in ({"start_date": "yesterday"}, {"sales_channel": "fax"}, {"start_date": "2024-02-01", "end_date": "2024-01-01"}):
            with self.assertRaises(ValidationError):
                ReportFilters.from_query(params)

    def test_each_clause_is_one_predicate(self):
        clauses = {clause.name: clause for clause in CLAUSES}
        self.assertEqual(clauses["region"].to_q("punjab"), Q(customer__province__name__iexact="punjab"))
        self.assertEqual(clauses["start_date"].to_q(date(2024, 1, 1)), Q(created_at__date__gte=date(2024, 1, 1)))
        filters = ReportFilters(region="KPK", sales_channel="call")
        self.assertEqual(
            filters.as_q(), Q(customer__province__name__iexact="KPK") & Q(sales_channel="call")
        )

    def test_parses_dates(self):
        filters = ReportFilters.from_query({"start_date": "2024-01-01", "customer_type": "B2B"})
        self.assertEqual(filters.start_date, date(2024, 1, 1))
        self.assertEqual(filters.customer_type, "B2B")
        self.assertIsNone(filters.end_date)


class PdfBuilderTests(SimpleTestCase):
    def test_builds_valid_pdf_and_paginates(self):
        payload = build_pdf([f"Line {i} (Rs.)" for i in range(120)], title="Report")
        self.assertTrue(payload.startswith(b"%PDF-1.4"))
        self.assertTrue(payload.endswith(b"%%EOF"))
        self.assertIn(b"/Count 3", payload)
        self.assertIn(b"\\(Rs.\\)", payload)

    def test_empty_document_has_one_page(self):
        self.assertIn(b"/Count 1", build_pdf([]))


class SalesReportTests(APITestCase):
    def setUp(self):
        self.agent = make_agent()
        punjab = make_location("Punjab", "Lahore", "Gulberg")
        kpk = make_location("KPK", "Peshawar", "Hayatabad")
        self.lahore_shop = make_customer(full_name="Lahore Shop", customer_type="B2B", location=punjab)
        self.peshawar_home = make_customer(full_name="Peshawar Home", customer_type="B2C", location=kpk)
        self.bag = make_product(name="Flour 10kg Bag", price="850")
        self.kg = make_product(name="Flour Per KG", price="85", unit="kg")
        self.retired = make_product(name="Retired", price="10", is_active=False)

        make_sale(self.lahore_shop, self.bag, self.agent, quantity="2", created_at=at(date(2024, 1, 10)))
        make_sale(
            self.lahore_shop, self.kg, self.agent, quantity="10", payment_type="credit",
            payment_status="pending", sales_channel="call", created_at=at(date(2024, 1, 31), hour=23),
        )
        make_sale(
            self.peshawar_home, self.kg, self.agent, quantity="3", payment_type="bank_transfer",
            sales_channel="website", created_at=at(date(2024, 2, 1), hour=0),
        )
        make_sale(self.peshawar_home, self.retired, self.agent, quantity="1", created_at=at(date(2024, 3, 5)))

    def test_empty_selection_yields_zeros(self):
        report = SalesReport(ReportFilters(region="Sindh"))
        summary = report.summary()
        self.assertEqual(summary["totalRevenue"], Decimal("0"))
        self.assertEqual(summary["totalOrders"], 0)
        self.assertEqual(summary["avgOrderValue"], 0)
        self.assertEqual(summary["activeProducts"], 0)
        for key in ("salesTrend", "paymentMethods", "customerTypes", "regionalPerformance", "topProducts"):
            self.assertEqual(summary[key], [])
        self.assertEqual(report.totals()["credit"], Decimal("0"))

    def test_totals(self):
        totals = SalesReport().totals()
        # 1700 + 850 + 255 + 10
        self.assertEqual(totals["revenue"], Decimal("2815.00"))
        self.assertEqual(totals["orders"], 4)
        self.assertEqual(totals["avg_order_value"], 704)
        self.assertEqual(totals["active_products"], 2)
        self.assertEqual(totals["paid_upfront"], Decimal("1965.00"))
        self.assertEqual(totals["credit"], Decimal("850.00"))

    def test_monthly_trend_sums_to_total(self):
        report = SalesReport()
        trend = report.monthly_trend()
        self.assertEqual([row["month"] for row in trend], ["2024-01", "2024-02", "2024-03"])
        self.assertEqual(sum(row["revenue"] for row in trend), report.totals()["revenue"])
        self.assertEqual(trend[0]["revenue"], Decimal("2550.00"))

    def test_region_is_case_insensitive(self):
        lower = SalesReport(ReportFilters(region="punjab")).totals()
        upper = SalesReport(ReportFilters(region="PUNJAB")).totals()
        self.assertEqual(lower["revenue"], Decimal("2550.00"))
        self.assertEqual(lower, upper)

    def test_date_range_is_inclusive_by_calendar_day(self):
        totals = SalesReport(ReportFilters(start_date=date(2024, 1, 31), end_date=date(2024, 2, 1))).totals()
        self.assertEqual(totals["orders"], 2)
        self.assertEqual(totals["revenue"], Decimal("1105.00"))

    def test_filters_compose(self):
        filters = ReportFilters(start_date=date(2024, 1, 1), region="Punjab", sales_channel="call", customer_type="B2B")
        self.assertEqual(SalesReport(filters).totals()["orders"], 1)
        filters = ReportFilters(region="Punjab", customer_type="B2C")
        self.assertEqual(SalesReport(filters).totals()["orders"], 0)

    def test_breakdowns(self):
        report = SalesReport()
        self.assertEqual(
            report.payment_breakdown(),
            [
                {"type": "bank_transfer", "amount": Decimal("255.00")},
                {"type": "cash", "amount": Decimal("1710.00")},
                {"type": "credit", "amount": Decimal("850.00")},
            ],
        )
        self.assertEqual(
            report.customer_type_breakdown(),
            [{"type": "B2B", "revenue": Decimal("2550.00")}, {"type": "B2C", "revenue": Decimal("265.00")}],
        )
        self.assertEqual(
            report.regional_performance(),
            [
                {"name": "Punjab", "revenue": Decimal("2550.00"), "orders": 2},
                {"name": "KPK", "revenue": Decimal("265.00"), "orders": 2},
            ],
        )

    def test_top_products_limit_and_tie_order(self):
        tie_a = make_product(name="Tie A", price="100")
        tie_b = make_product(name="Tie B", price="100")
        extra = make_product(name="Extra", price="1")
        for product in (tie_b, tie_a, extra):
            make_sale(self.peshawar_home, product, self.agent, quantity="1")

        top = SalesReport().top_products()
        self.assertEqual(len(top), 5)
        self.assertEqual([p["name"] for p in top], ["Flour 10kg Bag", "Flour Per KG", "Tie A", "Tie B", "Retired"])
        self.assertEqual(top[1]["unitsSold"], Decimal("13.00"))

    def test_rows_follow_export_columns(self):
        rows = SalesReport(ReportFilters(region="KPK")).rows()
        self.assertEqual(len(rows), 2)
        self.assertEqual(set(rows[0]), {column.key for column in EXPORT_COLUMNS})
        self.assertEqual(rows[0]["product_name"], "Retired")
        self.assertEqual(rows[0]["region"], "KPK")
        self.assertEqual(rows[0]["agent_name"], "Agent Smith")


class ReportApiTests(APITestCase):
    def setUp(self):
        agent = make_agent(email="seller@example.com")
        customer = make_customer()
        make_sale(customer, make_product(price="100"), agent, quantity="3", tax_rate=Decimal("10"))
        make_sale(customer, make_product(name="Bulk", price="50"), agent, quantity="2", payment_type="credit")
        self.admin = make_admin()
        self.client.force_authenticate(self.admin)

    def test_summary_keys(self):
        resp = self.client.get("/api/reports/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["totalRevenue"], Decimal("430.00"))
        self.assertEqual(resp.data["avgOrderValue"], 215)
        self.assertEqual(len(resp.data["topProducts"]), 2)

    def test_bad_filter_is_400(self):
        resp = self.client.get("/api/reports/?start_date=not-a-date")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("start_date", resp.data["errors"])

    def test_sales_rows_match_export(self):
        rows = self.client.get("/api/reports/sales/?region=punjab").data
        self.assertEqual(len(rows), 2)

        resp = self.client.get("/api/reports/export/excel/?region=punjab")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
        self.assertIn("sales-report.xlsx", resp["Content-Disposition"])

        sheet = load_workbook(BytesIO(resp.content))["Sales Report"]
        header = [cell.value for cell in sheet[1]]
        self.assertEqual(header, [column.header for column in EXPORT_COLUMNS])
        self.assertTrue(sheet["A1"].font.bold)
        self.assertEqual(sheet["A1"].fill.fgColor.rgb, "FFE0E0E0")
        self.assertEqual(sheet.max_row, 3)
        self.assertEqual([sheet.cell(row=r, column=1).value for r in (2, 3)], [row["id"] for row in rows])

    def test_excel_export_strips_control_characters(self):
        make_sale(
            make_customer(full_name="Tab\x07Shop"), make_product(name="Odd"), make_agent(email="ctl@example.com"),
            notes="bad\x01note",
        )
        resp = self.client.get("/api/reports/export/excel/")
        self.assertEqual(resp.status_code, 200)
        sheet = load_workbook(BytesIO(resp.content))["Sales Report"]
        notes_col = [column.key for column in EXPORT_COLUMNS].index("notes") + 1
        name_col = [column.key for column in EXPORT_COLUMNS].index("customer_name") + 1
        self.assertEqual(sheet.cell(row=2, column=notes_col).value, "badnote")
        self.assertEqual(sheet.cell(row=2, column=name_col).value, "TabShop")

    def test_pdf_export(self):
        resp = self.client.get("/api/reports/export/pdf/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))
        self.assertIn(b"Total Sales: 2", resp.content)
        self.assertIn(b"Credit Amount: Rs. 100.00", resp.content)

    def test_export_permissions(self):
        accountant = make_user(email="acc@example.com", role=User.ROLE_ACCOUNTANT)
        default_agent = make_agent(email="plain@example.com")
        full_agent = make_agent(email="full@example.com", access_level="full")
        custom_agent = make_agent(
            email="custom@example.com", access_level="custom", permissions={"reports": {"view": True}}
        )

        for user, expected in (
            (accountant, 200),
            (full_agent.user, 200),
            (default_agent.user, 403),
            (custom_agent.user, 403),
        ):
            self.client.force_authenticate(user)
            self.assertEqual(self.client.get("/api/reports/export/pdf/").status_code, expected, user.email)

        self.client.force_authenticate(custom_agent.user)
        self.assertEqual(self.client.get("/api/reports/").status_code, 200)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get("/api/reports/").status_code, 401)
