"""
Persistence helpers over the Country and RefreshMetadata tables.

Name lookups go through `Country.name_key`, the casefolded copy of the name,
so "canada", "Canada" and "CANADA" all address the same row.
"""
from typing import Any, Dict, Optional

from django.db.models import QuerySet

from . import utils
from .models import Country, RefreshMetadata


MUTABLE_FIELDS = (
    "capital", "region", "population", "currency_code",
    "exchange_rate", "estimated_gdp", "flag_url",
)


def upsert_country(record: Dict[str, Any], refreshed_at) -> Country:
    """Insert a country or overwrite every mutable field of the existing row (last write wins)."""
    name = record["name"]
    defaults = {field: record.get(field) for field in MUTABLE_FIELDS}
    defaults["name"] = name
    defaults["last_refreshed_at"] = refreshed_at
    country, _ = Country.objects.update_or_create(
        name_key=Country.normalize_name(name),
        defaults=defaults,
    )
    return country


def append_refresh_metadata(refreshed_at=None) -> RefreshMetadata:
    return RefreshMetadata.objects.create(refreshed_at=refreshed_at or utils.get_now())


def list_countries(
    region: Optional[str] = None,
    currency: Optional[str] = None,
    sort_by_gdp_desc: bool = False,
) -> QuerySet:
    qs = Country.objects.all()
    if region:
        qs = qs.filter(region__iexact=region)
    if currency:
        qs = qs.filter(currency_code__iexact=currency)
    if sort_by_gdp_desc:
        qs = qs.order_by("-estimated_gdp", "id")
    return qs


def get_by_name(name: str) -> Optional[Country]:
    return Country.objects.filter(name_key=Country.normalize_name(name)).first()


def delete_by_name(name: str) -> bool:
    deleted, _ = Country.objects.filter(name_key=Country.normalize_name(name)).delete()
    return deleted > 0


def count_countries() -> int:
    return Country.objects.count()


def latest_refresh_timestamp():
    latest = RefreshMetadata.objects.order_by("-id").first()
    return latest.refreshed_at if latest else None


def top_countries_by_gdp(limit: int = 5):
    return list(Country.objects.order_by("-estimated_gdp", "id")[:limit])
