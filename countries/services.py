"""
The refresh pass: fetch both upstream sources, derive one record per country,
upsert the records in upstream order, log the pass and redraw the summary image.
"""
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Tuple

from django.db import DatabaseError

from . import snapshot, store, utils
from .serializers import UpstreamCountrySerializer


logger = logging.getLogger(__name__)

# Refreshes in this process run one at a time
_refresh_lock = threading.Lock()


class RefreshError(Exception):
    """A store operation failed partway through a refresh pass."""


@dataclass
class RefreshResult:
    refreshed_at: datetime
    total_countries: int
    processed: int
    skipped: int
    snapshot_rendered: bool
    duration_seconds: float


def derive_country_record(item: Dict[str, Any], rates: Dict[str, Any], rng=None) -> Dict[str, Any]:
    """Join a validated upstream country with the rate table and estimate its GDP."""
    population = item.get("population") or 0
    currencies = item.get("currencies") or []

    currency_code = None
    exchange_rate = None
    if currencies:
        first = currencies[0]
        currency_code = (first.get("code") if isinstance(first, dict) else None) or None
    if currency_code and currency_code in rates:
        try:
            exchange_rate = float(rates[currency_code])
        except (TypeError, ValueError):
            exchange_rate = None
        if exchange_rate is not None and exchange_rate <= 0:
            exchange_rate = None

    return {
        "name": item["name"],
        "capital": item.get("capital"),
        "region": item.get("region"),
        "population": population,
        "currency_code": currency_code,
        "exchange_rate": exchange_rate,
        "estimated_gdp": utils.estimate_gdp(population, exchange_rate, rng),
        "flag_url": item.get("flag"),
    }


def _build_records(countries_data, rates, rng) -> Tuple[List[Dict[str, Any]], int]:
    records, skipped = [], 0
    for item in countries_data:
        serializer = UpstreamCountrySerializer(data=item)
        if not serializer.is_valid():
            skipped += 1
            name = item.get("name") if isinstance(item, dict) else None
            logger.warning("Skipping upstream country %r: %s", name, serializer.errors)
            continue
        records.append(derive_country_record(serializer.validated_data, rates, rng))
    return records, skipped


def refresh_countries(rng=None) -> RefreshResult:
    """
    Run one refresh pass.

    Raises utils.ExternalSourceError before any write when either upstream
    fetch fails, and RefreshError when the store fails; upserts already
    applied by then are kept. A failed snapshot render only shows up as
    snapshot_rendered=False.
    """
    with _refresh_lock:
        start_time = time.monotonic()
        logger.info("Refresh started")

        countries_data = utils.fetch_countries()
        rates = utils.fetch_exchange_rates()

        rng = rng or utils.build_rng()
        records, skipped = _build_records(countries_data, rates, rng)

        now = utils.get_now()
        try:
            for record in records:
                store.upsert_country(record, now)
            metadata = store.append_refresh_metadata(utils.get_now())
            total = store.count_countries()
        except DatabaseError as e:
            logger.exception("Store failure during refresh")
            raise RefreshError(str(e)) from e

        snapshot_rendered = snapshot.render_summary_snapshot_safely()

        duration = round(time.monotonic() - start_time, 2)
        logger.info(
            "Refresh completed: %d countries upserted, %d skipped, %d stored, %.2fs",
            len(records), skipped, total, duration,
        )
        return RefreshResult(
            refreshed_at=metadata.refreshed_at,
            total_countries=total,
            processed=len(records),
            skipped=skipped,
            snapshot_rendered=snapshot_rendered,
            duration_seconds=duration,
        )
