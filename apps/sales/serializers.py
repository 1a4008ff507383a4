from decimal import Decimal

from rest_framework import serializers

from apps.accounts.models import SalesAgent
from apps.crm.models import Customer
from apps.products.models import Product

from .models import Sale
from .pricing import compute_sale_totals


class SaleSerializer(serializers.ModelSerializer):
    customer_id = serializers.PrimaryKeyRelatedField(source="customer", queryset=Customer.objects.all())
    product_id = serializers.PrimaryKeyRelatedField(source="product", queryset=Product.objects.all())
    sales_agent_id = serializers.PrimaryKeyRelatedField(
        source="sales_agent", queryset=SalesAgent.objects.all(), required=False
    )
    customer_name = serializers.CharField(source="customer.full_name", read_only=True)
    customer_type = serializers.CharField(source="customer.customer_type", read_only=True)
    business_name = serializers.CharField(source="customer.business_name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    agent_name = serializers.CharField(source="sales_agent.user.name", read_only=True)
    province_name = serializers.CharField(source="customer.province.name", read_only=True)
    city_name = serializers.CharField(source="customer.city.name", read_only=True)
    town_name = serializers.CharField(source="customer.town.name", read_only=True)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, default=0)

    class Meta:
        model = Sale
        fields = [
            "id",
            "customer_id",
            "product_id",
            "sales_agent_id",
            "customer_name",
            "customer_type",
            "business_name",
            "product_name",
            "agent_name",
            "province_name",
            "city_name",
            "town_name",
            "quantity",
            "price_per_unit",
            "subtotal",
            "tax_rate",
            "tax_amount",
            "total_price",
            "payment_type",
            "payment_status",
            "sales_channel",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["subtotal", "tax_amount", "total_price", "created_at", "updated_at"]

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than 0")
        return value

    def validate_price_per_unit(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price per unit must be greater than 0")
        return value

    def validate_tax_rate(self, value):
        if value is None:
            return 0
        if value < 0:
            raise serializers.ValidationError("Tax rate cannot be negative")
        return value

    def _check_totals(self, attrs):
        def current(name):
            if name in attrs:
                return attrs[name]
            return getattr(self.instance, name, None)

        quantity, price = current("quantity"), current("price_per_unit")
        if quantity is None or price is None:
            return
        totals = compute_sale_totals(quantity, price, current("tax_rate")).rounded()
        field = Sale._meta.get_field("total_price")
        limit = Decimal(10) ** (field.max_digits - field.decimal_places)
        if totals.total_price >= limit or totals.subtotal >= limit:
            raise serializers.ValidationError({"total_price": ["Sale total is too large"]})

    def validate(self, attrs):
        self._check_totals(attrs)
        if self.instance is None and "sales_agent" not in attrs:
            request = self.context.get("request")
            agent = getattr(getattr(request, "user", None), "agent_profile", None) if request else None
            if agent is None:
                raise serializers.ValidationError({"sales_agent_id": ["Sales agent is required"]})
            attrs["sales_agent"] = agent
        return attrs


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=Sale.PAYMENT_STATUS_CHOICES)
