from django.urls import path

from . import views

urlpatterns = [
    path("", views.login_page, name="home"),
    path("login/", views.login_page, name="page_login"),
    path("dashboard/", views.app_page, {"page": "dashboard"}, name="page_dashboard"),
    path("customers/", views.app_page, {"page": "customers"}, name="page_customers"),
    path("customers/edit/", views.app_page, {"page": "customer_edit"}, name="page_customer_new"),
    path("customers/edit/<int:customer_id>/", views.app_page, {"page": "customer_edit"}, name="page_customer_edit"),
    path("sales/", views.app_page, {"page": "sales"}, name="page_sales"),
    path("sales/new/", views.app_page, {"page": "sale_new"}, name="page_sale_new"),
    path("products/", views.app_page, {"page": "products"}, name="page_products"),
    path("reports/", views.app_page, {"page": "reports"}, name="page_reports"),
    path("sales-agents/", views.app_page, {"page": "sales_agents"}, name="page_sales_agents"),
]
