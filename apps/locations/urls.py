from django.urls import path

from . import views

urlpatterns = [
    path("provinces/", views.provinces_list, name="location_provinces"),
    path("cities/<int:province_id>/", views.cities_list, name="location_cities"),
    path("towns/<int:city_id>/", views.towns_list, name="location_towns"),
]
