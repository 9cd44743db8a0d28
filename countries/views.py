import logging
import os

from django.db import DatabaseError
from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from . import services, snapshot, store
from .serializers import CountrySerializer, StatusSerializer
from .utils import ExternalSourceError


logger = logging.getLogger(__name__)


def _internal_error():
    return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST'])
def refresh_countries(request):
    """
    POST /countries/refresh
    Fetch countries and exchange rates, then upsert the cached data and redraw the summary image.
    """
    try:
        result = services.refresh_countries()
    except ExternalSourceError as e:
        return Response(
            {"error": "External data source unavailable", "details": f"Could not fetch data from {e.source}"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    except services.RefreshError:
        return _internal_error()

    return Response(
        {
            "message": "Countries refreshed successfully",
            "last_refreshed_at": result.refreshed_at.isoformat(),
            "total_countries": result.total_countries,
            "processed": result.processed,
            "skipped": result.skipped,
            "snapshot_rendered": result.snapshot_rendered,
            "duration_seconds": result.duration_seconds,
        },
        status=status.HTTP_200_OK,
    )


@api_view(['GET'])
def list_countries(request):
    """
    GET /countries
    Filters:
      - ?region=<region>
      - ?currency=<currency code>
    Sorting:
      - ?sort=gdp_desc; any other value keeps the default id order
    """
    try:
        qs = store.list_countries(
            region=request.query_params.get("region") or None,
            currency=request.query_params.get("currency") or None,
            sort_by_gdp_desc=request.query_params.get("sort") == "gdp_desc",
        )
        data = CountrySerializer(qs, many=True).data
    except DatabaseError:
        logger.exception("Listing countries failed")
        return _internal_error()
    return Response(data)


@api_view(['GET', 'DELETE'])
def country_detail(request, name):
    """
    GET /countries/:name    -> the country, matched case-insensitively
    DELETE /countries/:name -> remove it
    Both answer 404 JSON when no country has that name.
    """
    try:
        if request.method == 'GET':
            country = store.get_by_name(name)
            if country is None:
                return Response({"error": "Country not found"}, status=status.HTTP_404_NOT_FOUND)
            return Response(CountrySerializer(country).data)

        if not store.delete_by_name(name):
            return Response({"error": "Country not found"}, status=status.HTTP_404_NOT_FOUND)
    except DatabaseError:
        logger.exception("Country lookup failed for %r", name)
        return _internal_error()
    return Response({"message": "Country deleted"})


@api_view(['GET'])
def get_status(request):
    """
    GET /status -> { total_countries, last_refreshed_at }
    last_refreshed_at comes from the newest refresh log row, null before the first refresh.
    """
    try:
        payload = {
            "total_countries": store.count_countries(),
            "last_refreshed_at": store.latest_refresh_timestamp(),
        }
    except DatabaseError:
        logger.exception("Status lookup failed")
        return _internal_error()
    return Response(StatusSerializer(payload).data)


@api_view(['GET'])
def get_summary_image(request):
    """
    GET /countries/image
    Serve the summary image from the cache directory, or 404 JSON if no refresh has drawn it yet.
    """
    path = snapshot.get_summary_image_path()
    if not os.path.exists(path):
        return Response(
            {"error": "Summary image not found", "details": "Run POST /countries/refresh first"},
            status=status.HTTP_404_NOT_FOUND,
        )
    return FileResponse(open(path, 'rb'), content_type='image/png')
