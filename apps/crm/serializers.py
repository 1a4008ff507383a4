from rest_framework import serializers

from apps.locations.models import City, Province, Town

from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    province_id = serializers.PrimaryKeyRelatedField(source="province", queryset=Province.objects.all())
    city_id = serializers.PrimaryKeyRelatedField(source="city", queryset=City.objects.all())
    town_id = serializers.PrimaryKeyRelatedField(source="town", queryset=Town.objects.all())
    province_name = serializers.CharField(source="province.name", read_only=True)
    city_name = serializers.CharField(source="city.name", read_only=True)
    town_name = serializers.CharField(source="town.name", read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "full_name",
            "customer_type",
            "business_name",
            "contact",
            "whatsapp",
            "email",
            "address",
            "province_id",
            "city_id",
            "town_id",
            "province_name",
            "city_name",
            "town_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_full_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Full name is required")
        return value

    def validate_contact(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Contact is required")
        return value

    def validate(self, attrs):
        def current(name):
            if name in attrs:
                return attrs[name]
            return getattr(self.instance, name, None) if self.instance else None

        errors = {}
        if current("customer_type") == "B2B" and not (current("business_name") or "").strip():
            errors["business_name"] = ["Business name required for B2B customers"]

        province, city, town = current("province"), current("city"), current("town")
        if province and city and city.province_id != province.id:
            errors["city_id"] = ["City does not belong to the selected province"]
        if city and town and town.city_id != city.id:
            errors["town_id"] = ["Town does not belong to the selected city"]

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class CustomerSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
