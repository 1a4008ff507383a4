"""Sales report aggregation.

`SalesReport` runs every query over one filtered Sale queryset, so the
summary, the row listing and the file exports always describe the same
sales. All money sums fall back to zero on an empty selection.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce, TruncMonth
from django.utils import timezone
from django.utils.functional import cached_property

from apps.sales.models import Sale

from .filters import ReportFilters

ZERO = Decimal("0")
TOP_PRODUCTS_LIMIT = 5


def money_sum(field: str, filter: Optional[Q] = None):
    return Coalesce(
        Sum(field, filter=filter),
        Value(ZERO),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


@dataclass(frozen=True)
class ExportColumn:
    key: str
    header: str
    width: int


EXPORT_COLUMNS = (
    ExportColumn("id", "Sale ID", 10),
    ExportColumn("date", "Date", 14),
    ExportColumn("customer_name", "Customer", 22),
    ExportColumn("customer_type", "Type", 8),
    ExportColumn("city", "City", 15),
    ExportColumn("region", "Region", 12),
    ExportColumn("product_name", "Product", 22),
    ExportColumn("quantity", "Quantity", 10),
    ExportColumn("price_per_unit", "Price/Unit", 12),
    ExportColumn("total_price", "Total", 14),
    ExportColumn("payment_type", "Payment Type", 14),
    ExportColumn("payment_status", "Payment Status", 14),
    ExportColumn("sales_channel", "Channel", 12),
    ExportColumn("agent_name", "Agent", 18),
    ExportColumn("notes", "Notes", 30),
)


class SalesReport:
    def __init__(self, filters: Optional[ReportFilters] = None):
        self.filters = filters or ReportFilters()

    @cached_property
    def queryset(self):
        # Meta ordering is cleared so it never leaks into GROUP BY.
        return Sale.objects.filter(self.filters.as_q()).order_by()

    def totals(self) -> Dict:
        data = self.queryset.aggregate(
            revenue=money_sum("total_price"),
            orders=Count("id"),
            active_products=Count("product", distinct=True, filter=Q(product__is_active=True)),
            paid_upfront=money_sum("total_price", Q(payment_type__in=Sale.UPFRONT_PAYMENT_TYPES)),
            credit=money_sum("total_price", Q(payment_type="credit")),
        )
        orders = data["orders"]
        average = data["revenue"] / orders if orders else ZERO
        data["avg_order_value"] = int(average.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return data

    def pending_total(self) -> Decimal:
        return self.queryset.aggregate(total=money_sum("total_price", Q(payment_status="pending")))["total"]

    def monthly_trend(self) -> List[Dict]:
        rows = (
            self.queryset.annotate(month=TruncMonth("created_at"))
            .values("month")
            .annotate(revenue=money_sum("total_price"))
            .order_by("month")
        )
        return [{"month": row["month"].strftime("%Y-%m"), "revenue": row["revenue"]} for row in rows]

    def payment_breakdown(self) -> List[Dict]:
        rows = self.queryset.values("payment_type").annotate(amount=money_sum("total_price")).order_by("payment_type")
        return [{"type": row["payment_type"], "amount": row["amount"]} for row in rows]

    def customer_type_breakdown(self) -> List[Dict]:
        rows = (
            self.queryset.values("customer__customer_type")
            .annotate(revenue=money_sum("total_price"))
            .order_by("customer__customer_type")
        )
        return [{"type": row["customer__customer_type"], "revenue": row["revenue"]} for row in rows]

    def channel_breakdown(self) -> List[Dict]:
        rows = (
            self.queryset.values("sales_channel")
            .annotate(revenue=money_sum("total_price"), count=Count("id"))
            .order_by("sales_channel")
        )
        return [{"channel": row["sales_channel"], "count": row["count"], "revenue": row["revenue"]} for row in rows]

    def regional_performance(self) -> List[Dict]:
        rows = (
            self.queryset.exclude(customer__province__name__isnull=True)
            .exclude(customer__province__name="")
            .values("customer__province__name")
            .annotate(revenue=money_sum("total_price"), orders=Count("id"))
            .order_by("-revenue", "customer__province__name")
        )
        return [
            {"name": row["customer__province__name"], "revenue": row["revenue"], "orders": row["orders"]}
            for row in rows
        ]

    def top_products(self, limit: int = TOP_PRODUCTS_LIMIT) -> List[Dict]:
        rows = (
            self.queryset.values("product_id", "product__name")
            .annotate(
                units_sold=Coalesce(Sum("quantity"), Value(ZERO), output_field=DecimalField(max_digits=14, decimal_places=2)),
                revenue=money_sum("total_price"),
            )
            .order_by("-revenue", "product_id")[:limit]
        )
        return [
            {"name": row["product__name"], "unitsSold": row["units_sold"], "revenue": row["revenue"]}
            for row in rows
        ]

    def summary(self) -> Dict:
        totals = self.totals()
        return {
            "totalRevenue": totals["revenue"],
            "totalOrders": totals["orders"],
            "avgOrderValue": totals["avg_order_value"],
            "activeProducts": totals["active_products"],
            "salesTrend": self.monthly_trend(),
            "paymentMethods": self.payment_breakdown(),
            "customerTypes": self.customer_type_breakdown(),
            "regionalPerformance": self.regional_performance(),
            "topProducts": self.top_products(),
        }

    def rows(self) -> List[Dict]:
        """The filtered sales, newest first, one dict per EXPORT_COLUMNS entry."""
        sales = self.queryset.select_related(
            "customer__province", "customer__city", "product", "sales_agent__user"
        ).order_by("-created_at", "-id")
        return [
            {
                "id": sale.id,
                "date": timezone.localtime(sale.created_at).date(),
                "customer_name": sale.customer.full_name,
                "customer_type": sale.customer.customer_type,
                "city": sale.customer.city.name if sale.customer.city_id else "",
                "region": sale.customer.province.name if sale.customer.province_id else "",
                "product_name": sale.product.name,
                "quantity": sale.quantity,
                "price_per_unit": sale.price_per_unit,
                "total_price": sale.total_price,
                "payment_type": sale.payment_type,
                "payment_status": sale.payment_status,
                "sales_channel": sale.sales_channel,
                "agent_name": sale.sales_agent.user.name,
                "notes": sale.notes,
            }
            for sale in sales
        ]

    def render(self, writer) -> bytes:
        return writer.render(self)
