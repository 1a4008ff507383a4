from rest_framework import serializers

from .models import SalesAgent, User
from .permissions import ACTIONS, RESOURCES


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "access_level", "permissions"]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "role"]


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, value):
        return value.strip().lower()


class SalesAgentSerializer(serializers.ModelSerializer):
    user_id = serializers.PrimaryKeyRelatedField(source="user", queryset=User.objects.filter(role=User.ROLE_AGENT))
    name = serializers.CharField(source="user.name", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    access_level = serializers.CharField(source="user.access_level", read_only=True)

    class Meta:
        model = SalesAgent
        fields = [
            "id",
            "user_id",
            "name",
            "email",
            "access_level",
            "agent_type",
            "commission_rate",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_commission_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError("Commission rate must be between 0 and 100")
        return value

    def validate_user_id(self, user):
        existing = SalesAgent.objects.filter(user=user)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("This user already has a sales agent profile")
        return user


class SalesAgentUpdateSerializer(SalesAgentSerializer):
    user_id = serializers.PrimaryKeyRelatedField(source="user", read_only=True)


def _flag_fields():
    return {
        f"{resource}_{action}": serializers.BooleanField(required=False, default=False)
        for resource in RESOURCES
        for action in ACTIONS
    }


class OnboardAgentSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    agent_type = serializers.ChoiceField(choices=SalesAgent.TYPE_CHOICES, default="Both")
    commission_rate = serializers.DecimalField(max_digits=5, decimal_places=2, default=0, min_value=0, max_value=100)
    access_level = serializers.ChoiceField(choices=User.ACCESS_CHOICES, default="view")

    def get_fields(self):
        fields = super().get_fields()
        fields.update(_flag_fields())
        return fields

    def validate_password(self, value):
        if value and len(value) < 6:
            raise serializers.ValidationError("Password must be at least 6 characters")
        return value

    def validate_email(self, value):
        return value.strip().lower()
