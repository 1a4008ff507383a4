from django.db.models import Count, Q
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils import timezone
from django.views.decorators.csrf import ensure_csrf_cookie
from rest_framework import viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.api.exceptions import Conflict
from apps.api.permissions import ResourcePermission, resource_permission
from apps.reports.aggregator import SalesReport, money_sum
from apps.reports.filters import ReportFilters
from apps.sales.serializers import SaleSerializer

from .models import Customer
from .serializers import CustomerSerializer, CustomerSummarySerializer


class CustomerViewSet(viewsets.ModelViewSet):
    serializer_class = CustomerSerializer
    permission_classes = [ResourcePermission]
    permission_resource = "customers"

    def get_queryset(self):
        queryset = Customer.objects.select_related("province", "city", "town")
        customer_type = self.request.query_params.get("customer_type")
        if self.action == "list" and customer_type:
            queryset = queryset.filter(customer_type=customer_type)
        return queryset.order_by("-created_at", "-id")

    def retrieve(self, request, *args, **kwargs):
        customer = self.get_object()
        sales = customer.sales.select_related(
            "product", "sales_agent__user", "customer__province", "customer__city", "customer__town"
        ).order_by("-created_at", "-id")
        totals = customer.sales.order_by().aggregate(
            total_orders=Count("id"),
            total_spent=money_sum("total_price"),
            pending_amount=money_sum("total_price", Q(payment_status="pending")),
        )
        return Response(
            {
                "customer": self.get_serializer(customer).data,
                "sales": SaleSerializer(sales, many=True, context=self.get_serializer_context()).data,
                "summary": CustomerSummarySerializer(totals).data,
            }
        )

    def perform_destroy(self, instance):
        if instance.sales.exists():
            raise Conflict("Cannot delete customer with existing sales records")
        instance.delete()


@api_view(["GET"])
@permission_classes([resource_permission("dashboard", "view")])
def dashboard_data(request):
    today = timezone.localdate()
    todays = SalesReport(ReportFilters(start_date=today, end_date=today))
    totals = todays.totals()
    return Response(
        {
            "totalRevenue": totals["revenue"],
            "totalSales": totals["orders"],
            "totalCustomers": Customer.objects.count(),
            "pendingPayments": SalesReport().pending_total(),
            "paymentTypes": todays.payment_breakdown(),
            "customerTypes": todays.customer_type_breakdown(),
            "salesChannels": todays.channel_breakdown(),
        }
    )


PAGE_TEMPLATES = {
    "dashboard": "pages/dashboard.html",
    "customers": "pages/customers.html",
    "customer_edit": "pages/customer_edit.html",
    "sales": "pages/sales.html",
    "sale_new": "pages/sale_new.html",
    "products": "pages/products.html",
    "reports": "pages/reports.html",
    "sales_agents": "pages/sales_agents.html",
}


@ensure_csrf_cookie
def login_page(request):
    """Sign-in page; `/` lands here too and forwards signed-in users."""
    if request.user.is_authenticated:
        return redirect("page_dashboard")
    return render(request, "pages/login.html")


@ensure_csrf_cookie
def app_page(request, page, customer_id=None):
    return render(
        request,
        PAGE_TEMPLATES[page],
        {"page": page, "customer_id": customer_id, "user": request.user},
    )


def not_found(request, exception=None):
    if request.path.startswith("/api/"):
        return JsonResponse({"error": "Not found."}, status=404)
    return redirect("/login/")
