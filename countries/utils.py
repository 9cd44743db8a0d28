import logging
import random
from datetime import datetime, timezone

import requests
from django.conf import settings


MULTIPLIER_MIN = 1000
MULTIPLIER_MAX = 2000

logger = logging.getLogger(__name__)


class ExternalSourceError(Exception):
    """An upstream data source could not be fetched or returned an unusable payload."""

    def __init__(self, source, detail=""):
        self.source = source
        self.detail = detail
        super().__init__(f"Could not fetch data from {source}: {detail}" if detail else f"Could not fetch data from {source}")


def _get_json(url, source):
    try:
        resp = requests.get(url, timeout=settings.UPSTREAM_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("%s request failed: %s", source, e)
        raise ExternalSourceError(source, str(e)) from e


def fetch_countries():
    data = _get_json(settings.COUNTRIES_API_URL, "Countries API")
    if not isinstance(data, list):
        raise ExternalSourceError("Countries API", "expected a list of countries")
    return data


def fetch_exchange_rates():
    data = _get_json(settings.EXCHANGE_RATES_API_URL, "Exchange rates API")
    # API returns 'rates' mapping, units of each currency per 1 USD
    rates = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(rates, dict):
        raise ExternalSourceError("Exchange rates API", "response has no rates table")
    return rates


def build_rng(seed=None):
    """Return the random source for GDP multipliers, pinned by GDP_MULTIPLIER_SEED when set."""
    if seed is None:
        seed = settings.GDP_MULTIPLIER_SEED
    return random.Random(seed)


def make_multiplier(rng=None):
    rng = rng or random
    return MULTIPLIER_MIN + rng.random() * (MULTIPLIER_MAX - MULTIPLIER_MIN)


def estimate_gdp(population, exchange_rate, rng=None):
    """
    Estimated GDP = population * multiplier / exchange_rate, with a fresh
    multiplier in [1000, 2000) per call. Zero when no positive rate is known.
    """
    if not exchange_rate or exchange_rate <= 0:
        return 0.0
    return (population * make_multiplier(rng)) / exchange_rate


def get_now():
    """Return current UTC datetime (aware)."""
    return datetime.now(timezone.utc)
