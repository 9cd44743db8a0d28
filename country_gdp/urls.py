"""
URL configuration for the country_gdp project.

Routes live in `countries.urls`; anything else falls through to the JSON
404 handler below.
"""
from django.http import JsonResponse
from django.urls import include, path

urlpatterns = [
    path("", include("countries.urls")),
]


def custom_404(request, exception):
    return JsonResponse({"error": "Not found"}, status=404)


def custom_500(request):
    return JsonResponse({"error": "Internal server error"}, status=500)


handler404 = "country_gdp.urls.custom_404"
handler500 = "country_gdp.urls.custom_500"
