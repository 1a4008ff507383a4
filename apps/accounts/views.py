import logging

from django.contrib.auth import authenticate, login, logout
from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.api.permissions import ResourcePermission, role_required

from .models import SalesAgent, User
from .serializers import (
    LoginSerializer,
    OnboardAgentSerializer,
    SalesAgentSerializer,
    SalesAgentUpdateSerializer,
    UserSerializer,
    UserSummarySerializer,
)
from .services import onboard_agent

logger = logging.getLogger(__name__)

AdminOnly = role_required(User.ROLE_ADMIN)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    email = serializer.validated_data["email"]
    user = authenticate(request, username=email, password=serializer.validated_data["password"])
    if user is None:
        logger.warning("Failed login for %s", email)
        return Response({"error": "Invalid email or password"}, status=status.HTTP_401_UNAUTHORIZED)
    login(request, user)
    return Response({"success": True, "user": UserSerializer(user).data})


@api_view(["POST"])
@permission_classes([AllowAny])
def logout_view(request):
    logout(request)
    return Response({"success": True})


@api_view(["GET"])
@permission_classes([AllowAny])
def status_view(request):
    if request.user and request.user.is_authenticated:
        return Response({"authenticated": True, "user": UserSerializer(request.user).data})
    return Response({"authenticated": False})


@api_view(["GET"])
@permission_classes([AdminOnly])
def users_list(request):
    users = User.objects.order_by("name")
    return Response(UserSummarySerializer(users, many=True).data)


class SalesAgentViewSet(viewsets.ModelViewSet):
    """Sales agents. Reading follows the `agents` grants; changing them is admin work."""

    serializer_class = SalesAgentSerializer
    permission_resource = "agents"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [ResourcePermission()]
        return [AdminOnly()]

    def get_serializer_class(self):
        if self.action in ("update", "partial_update"):
            return SalesAgentUpdateSerializer
        if self.action == "onboard":
            return OnboardAgentSerializer
        return SalesAgentSerializer

    def get_queryset(self):
        queryset = SalesAgent.objects.select_related("user")
        if self.action != "list":
            return queryset
        params = self.request.query_params
        if params.get("include_inactive") not in ("1", "true"):
            queryset = queryset.filter(is_active=True)
        agent_type = params.get("type")
        if agent_type and agent_type != "Both":
            queryset = queryset.filter(agent_type__in=[agent_type, "Both"])
        return queryset.order_by("user__name")

    @action(detail=False, methods=["post"])
    def onboard(self, request):
        serializer = OnboardAgentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        agent = onboard_agent(serializer.validated_data)
        payload = SalesAgentSerializer(agent).data
        payload["permissions"] = agent.user.permissions
        return Response(payload, status=status.HTTP_201_CREATED)
