from django.contrib import admin

from .models import City, Province, Town


class CityInline(admin.TabularInline):
    model = City
    extra = 0


@admin.register(Province)
class ProvinceAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)
    inlines = [CityInline]


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    list_display = ("name", "province")
    list_filter = ("province",)
    search_fields = ("name",)


@admin.register(Town)
class TownAdmin(admin.ModelAdmin):
    list_display = ("name", "city")
    list_filter = ("city__province",)
    search_fields = ("name", "city__name")
