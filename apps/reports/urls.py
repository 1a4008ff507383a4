from django.urls import path

from . import views

urlpatterns = [
    path("", views.summary, name="reports_summary"),
    path("sales/", views.sales_rows, name="reports_sales"),
    path("export/excel/", views.export_excel, name="reports_export_excel"),
    path("export/pdf/", views.export_pdf, name="reports_export_pdf"),
]
