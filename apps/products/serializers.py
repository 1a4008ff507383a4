from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "category",
            "target_customer",
            "unit",
            "weight_per_unit",
            "price_per_unit",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required")
        return value

    def validate_weight_per_unit(self, value):
        if value <= 0:
            raise serializers.ValidationError("Weight per unit must be greater than 0")
        return value

    def validate_price_per_unit(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price per unit must be greater than 0")
        return value
