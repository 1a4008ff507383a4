from django.contrib import admin

from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ("id", "customer", "product", "sales_agent", "quantity", "total_price", "payment_type", "payment_status", "created_at")
    list_filter = ("payment_type", "payment_status", "sales_channel")
    search_fields = ("customer__full_name", "customer__business_name", "product__name")
    readonly_fields = ("subtotal", "tax_amount", "total_price", "created_at", "updated_at")
