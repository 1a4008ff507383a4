from django.urls import include, path
from rest_framework.routers import DefaultRouter

from apps.accounts.views import SalesAgentViewSet
from apps.crm.views import CustomerViewSet
from apps.products.views import ProductViewSet
from apps.sales.views import SaleViewSet

router = DefaultRouter()
router.register("customers", CustomerViewSet, basename="customer")
router.register("products", ProductViewSet, basename="product")
router.register("sales", SaleViewSet, basename="sale")
router.register("sales-agents", SalesAgentViewSet, basename="sales-agent")

urlpatterns = [
    path("auth/", include("apps.accounts.urls")),
    path("locations/", include("apps.locations.urls")),
    path("reports/", include("apps.reports.urls")),
    path("dashboard/", include("apps.crm.api_urls")),
    path("", include(router.urls)),
]
