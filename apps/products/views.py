from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.api.exceptions import Conflict
from apps.api.permissions import ResourcePermission

from .models import Product
from .serializers import ProductSerializer


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [ResourcePermission]
    permission_resource = "products"
    permission_actions = {"toggle": "edit"}

    def get_queryset(self):
        queryset = Product.objects.all()
        if self.action == "list" and self.request.query_params.get("active") in ("1", "true"):
            queryset = queryset.filter(is_active=True)
        return queryset.order_by("name")

    def perform_destroy(self, instance):
        if instance.sales.exists():
            raise Conflict("Cannot delete product with existing sales records")
        instance.delete()

    @action(detail=True, methods=["post"])
    def toggle(self, request, pk=None):
        product = self.get_object()
        product.is_active = not product.is_active
        product.save(update_fields=["is_active", "updated_at"])
        return Response(self.get_serializer(product).data)
