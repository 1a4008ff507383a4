from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "target_customer", "unit", "weight_per_unit", "price_per_unit", "is_active")
    list_filter = ("target_customer", "unit", "is_active")
    search_fields = ("name", "category")
