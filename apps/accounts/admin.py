from django.contrib import admin

from .models import SalesAgent, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "role", "access_level", "is_active", "created_at")
    list_filter = ("role", "access_level", "is_active")
    search_fields = ("name", "email")
    exclude = ("password", "user_permissions", "groups")


@admin.register(SalesAgent)
class SalesAgentAdmin(admin.ModelAdmin):
    list_display = ("user", "agent_type", "commission_rate", "is_active", "created_at")
    list_filter = ("agent_type", "is_active")
    search_fields = ("user__name", "user__email")
