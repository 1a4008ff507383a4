import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.api.permissions import ResourcePermission

from .models import Sale
from .serializers import PaymentStatusSerializer, SaleSerializer

logger = logging.getLogger(__name__)


class SaleViewSet(viewsets.ModelViewSet):
    """Sales; totals are always recomputed from quantity, price and tax rate."""

    serializer_class = SaleSerializer
    permission_classes = [ResourcePermission]
    permission_resource = "sales"
    permission_actions = {"payment": "payment"}

    def get_queryset(self):
        queryset = Sale.objects.select_related(
            "customer__province",
            "customer__city",
            "customer__town",
            "product",
            "sales_agent__user",
        )
        params = self.request.query_params
        if self.action == "list":
            if params.get("customer_id"):
                queryset = queryset.filter(customer_id=params["customer_id"])
            if params.get("payment_status"):
                queryset = queryset.filter(payment_status=params["payment_status"])
        return queryset.order_by("-created_at", "-id")

    def perform_create(self, serializer):
        sale = serializer.save()
        logger.info("Sale %s recorded: %s x product %s = %s", sale.pk, sale.quantity, sale.product_id, sale.total_price)

    @action(detail=True, methods=["patch"], url_path="payment")
    def payment(self, request, pk=None):
        sale = self.get_object()
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sale.payment_status = serializer.validated_data["payment_status"]
        sale.save(update_fields=["payment_status", "updated_at"])
        return Response(SaleSerializer(sale, context=self.get_serializer_context()).data)
