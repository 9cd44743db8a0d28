from datetime import timedelta

from django.test import TestCase

from countries import store, utils
from countries.models import Country


def _record(name, region="Africa", currency="TST", gdp=100.0, **extra):
    record = {
        "name": name,
        "capital": f"{name} City",
        "region": region,
        "population": 1000,
        "currency_code": currency,
        "exchange_rate": 2.0 if currency else None,
        "estimated_gdp": gdp,
        "flag_url": f"https://flagcdn.com/{name.lower()}.svg",
    }
    record.update(extra)
    return record


class UpsertTests(TestCase):
    def test_upsert_inserts_then_overwrites(self):
        first = utils.get_now()
        store.upsert_country(_record("Testland", gdp=10.0), first)
        later = first + timedelta(minutes=5)
        store.upsert_country(_record("Testland", region="Europe", currency=None, gdp=0.0), later)

        self.assertEqual(store.count_countries(), 1)
        country = Country.objects.get()
        self.assertEqual(country.region, "Europe")
        self.assertIsNone(country.currency_code)
        self.assertIsNone(country.exchange_rate)
        self.assertEqual(country.estimated_gdp, 0.0)
        self.assertEqual(country.last_refreshed_at, later)

    def test_accented_spellings_are_separate_countries(self):
        now = utils.get_now()
        store.upsert_country(_record("Réunion"), now)
        store.upsert_country(_record("Reunion"), now)
        self.assertFalse(Country._meta.get_field("name").unique)
        self.assertTrue(Country._meta.get_field("name_key").unique)
        self.assertEqual(store.count_countries(), 2)

    def test_upsert_matches_names_case_insensitively(self):
        now = utils.get_now()
        store.upsert_country(_record("Canada"), now)
        store.upsert_country(_record("CANADA"), now)
        self.assertEqual(store.count_countries(), 1)
        self.assertEqual(Country.objects.get().name, "CANADA")


class LookupTests(TestCase):
    def setUp(self):
        now = utils.get_now()
        store.upsert_country(_record("Canada", region="Americas", currency="CAD", gdp=300.0), now)
        store.upsert_country(_record("Nigeria", region="Africa", currency="NGN", gdp=500.0), now)
        store.upsert_country(_record("Testland", region="Africa", currency="TST", gdp=100.0), now)
        store.upsert_country(_record("Antarctica", region="Polar", currency=None, gdp=0.0), now)

    def test_get_by_name_is_case_insensitive(self):
        for name in ("canada", "Canada", "CANADA"):
            self.assertEqual(store.get_by_name(name).name, "Canada")

    def test_get_by_name_missing(self):
        self.assertIsNone(store.get_by_name("Atlantis"))

    def test_delete_by_name(self):
        self.assertTrue(store.delete_by_name("nigeria"))
        self.assertIsNone(store.get_by_name("Nigeria"))
        self.assertEqual(store.count_countries(), 3)

    def test_delete_missing_leaves_count_unchanged(self):
        self.assertFalse(store.delete_by_name("Atlantis"))
        self.assertEqual(store.count_countries(), 4)

    def test_list_defaults_to_insertion_order(self):
        names = [c.name for c in store.list_countries()]
        self.assertEqual(names, ["Canada", "Nigeria", "Testland", "Antarctica"])

    def test_list_filters(self):
        self.assertEqual({c.name for c in store.list_countries(region="Africa")}, {"Nigeria", "Testland"})
        self.assertEqual([c.name for c in store.list_countries(currency="CAD")], ["Canada"])
        self.assertEqual(
            [c.name for c in store.list_countries(region="Africa", currency="NGN")],
            ["Nigeria"],
        )

    def test_list_sorted_by_gdp(self):
        gdps = [c.estimated_gdp for c in store.list_countries(sort_by_gdp_desc=True)]
        self.assertEqual(gdps, sorted(gdps, reverse=True))

    def test_top_countries_by_gdp(self):
        top = store.top_countries_by_gdp(2)
        self.assertEqual([c.name for c in top], ["Nigeria", "Canada"])


class RefreshMetadataTests(TestCase):
    def test_latest_timestamp_absent_before_refresh(self):
        self.assertIsNone(store.latest_refresh_timestamp())

    def test_latest_timestamp_is_newest_row(self):
        first = utils.get_now()
        store.append_refresh_metadata(first)
        second = first + timedelta(seconds=30)
        store.append_refresh_metadata(second)
        self.assertEqual(store.latest_refresh_timestamp(), second)
