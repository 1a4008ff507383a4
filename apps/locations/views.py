from rest_framework.decorators import api_view
from rest_framework.response import Response

from .models import City, Province, Town
from .serializers import CitySerializer, ProvinceSerializer, TownSerializer


@api_view(["GET"])
def provinces_list(request):
    return Response(ProvinceSerializer(Province.objects.order_by("name"), many=True).data)


@api_view(["GET"])
def cities_list(request, province_id: int):
    cities = City.objects.filter(province_id=province_id).order_by("name")
    return Response(CitySerializer(cities, many=True).data)


@api_view(["GET"])
def towns_list(request, city_id: int):
    towns = Town.objects.filter(city_id=city_id).order_by("name")
    return Response(TownSerializer(towns, many=True).data)
