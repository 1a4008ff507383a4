from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("full_name", "customer_type", "business_name", "contact", "province", "city", "town", "created_at")
    list_filter = ("customer_type", "province")
    search_fields = ("full_name", "business_name", "contact", "email")
    list_select_related = ("province", "city", "town")
