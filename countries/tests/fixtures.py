import shutil
import tempfile

from django.test import override_settings


TESTLAND = {
    "name": "Testland",
    "capital": "Test City",
    "region": "Africa",
    "population": 1000,
    "flag": "https://flagcdn.com/tst.svg",
    "currencies": [{"code": "TST", "name": "Test dollar", "symbol": "$"}],
}

UPSTREAM_COUNTRIES = [
    TESTLAND,
    {
        "name": "Canada",
        "capital": "Ottawa",
        "region": "Americas",
        "population": 38005238,
        "flag": "https://flagcdn.com/ca.svg",
        "currencies": [{"code": "CAD"}],
    },
    {
        "name": "Nigeria",
        "capital": "Abuja",
        "region": "Africa",
        "population": 206139587,
        "flag": "https://flagcdn.com/ng.svg",
        "currencies": [{"code": "NGN"}],
    },
    {
        "name": "Antarctica",
        "region": "Polar",
        "population": 1000,
        "flag": "https://flagcdn.com/aq.svg",
    },
]

UPSTREAM_RATES = {"USD": 1, "TST": 2, "CAD": 1.36, "NGN": 1600.5}


def use_temp_cache_dir(test_case):
    """Point SUMMARY_CACHE_DIR at a throwaway directory for the duration of a test."""
    cache_dir = tempfile.mkdtemp()
    test_case.addCleanup(shutil.rmtree, cache_dir, True)
    override = override_settings(SUMMARY_CACHE_DIR=cache_dir)
    override.enable()
    test_case.addCleanup(override.disable)
    return cache_dir
